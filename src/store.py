"""Task store: owns the task list, id allocation and every mutation.

Storage order is insertion order and carries no meaning; callers that
render use sorted_tasks() (ascending start date) right before drawing.
Missing ids raise NotFoundError for update, set_completed and remove alike.
"""
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from errors import NotFoundError, ParseError, ValidationError
from models import COLORS, DEFAULT_COLOR, Task, require_date

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'start', 'end', 'color', 'completed')


class TaskStore:
    def __init__(self, records: Optional[Iterable[Mapping[str, Any]]] = None):
        self._tasks: List[Task] = []
        self._next_id: int = 1
        if records:
            self._load_from_records(records)

    # -------------------- loading --------------------
    def _load_from_records(self, records: Iterable[Mapping[str, Any]]) -> None:
        """Lenient load for persisted data: bad dates are kept and render empty."""
        self._tasks, self._next_id = self._build_tasks(records, drop_bad_dates=False, warnings=[])

    def _build_tasks(self, records: Iterable[Any], drop_bad_dates: bool,
                     warnings: List[str]) -> Tuple[List[Task], int]:
        """Build tasks from records without touching the store; returns (tasks, next id)."""
        accepted: List[Task] = []
        pending_ids: List[Optional[int]] = []
        seen_ids = set()
        for index, raw in enumerate(records):
            if not isinstance(raw, Mapping):
                warnings.append(f'Record #{index + 1} is not an object; dropped.')
                continue
            name = str(raw.get('name') or '').strip()
            if not name:
                warnings.append(f'Record #{index + 1} has no name; dropped.')
                continue
            if drop_bad_dates:
                try:
                    require_date(raw.get('start'), 'start date')
                    require_date(raw.get('end'), 'end date')
                except ParseError as exc:
                    warnings.append(f'Task "{name}" dropped: {exc}')
                    continue
            rid = raw.get('id')
            if isinstance(rid, int) and not isinstance(rid, bool) and rid > 0 and rid not in seen_ids:
                seen_ids.add(rid)
                pending_ids.append(rid)
            else:
                pending_ids.append(None)
            accepted.append(Task.from_dict(raw, task_id=0))
        next_id = max(seen_ids) + 1 if seen_ids else 1
        for task, rid in zip(accepted, pending_ids):
            if rid is None:
                rid, next_id = next_id, next_id + 1
            task.id = rid
        for message in warnings:
            logger.warning(message)
        return accepted, next_id

    # -------------------- id management --------------------
    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    # -------------------- queries --------------------
    def all_tasks(self) -> List[Task]:
        return list(self._tasks)

    def sorted_tasks(self) -> List[Task]:
        """Stable ascending start order; unparsable starts go last."""
        return sorted(self._tasks, key=lambda t: (t.start_date is None, t.start_date or date.max))

    def get(self, task_id: int) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(f'Task id {task_id} not found.')

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self):
        return iter(self._tasks)

    # -------------------- task operations --------------------
    def add(self, name: str, start: str, end: str, color: str = DEFAULT_COLOR) -> Task:
        name, start, end, color = _validated(name, start, end, color)
        _check_color(color)
        task = Task(id=self._allocate_id(), name=name, start=start, end=end, color=color)
        self._tasks.append(task)
        return task

    def update(self, task_id: int, **fields: Any) -> Task:
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f'Cannot edit field(s): {", ".join(sorted(unknown))}')
        task = self.get(task_id)
        name, start, end, color = _validated(
            fields.get('name', task.name),
            fields.get('start', task.start),
            fields.get('end', task.end),
            fields.get('color', task.color),
        )
        if color != task.color.lower():
            # a stored color outside the palette is kept (drawn gray) until changed
            _check_color(color)
        task.name, task.start, task.end, task.color = name, start, end, color
        if 'completed' in fields:
            task.completed = bool(fields['completed'])
        return task

    def set_completed(self, task_id: int, completed: bool) -> Task:
        task = self.get(task_id)
        task.completed = bool(completed)
        return task

    def remove(self, task_id: int) -> Task:
        task = self.get(task_id)
        self._tasks.remove(task)
        return task

    def replace_all(self, records: Iterable[Any]) -> List[str]:
        """Replace every task with generated records.

        Records whose dates do not parse (or that lack a name) are dropped;
        the rest of the batch is accepted. Returns the warnings. A batch that
        leaves no usable task raises ValidationError and the store is unchanged.
        """
        warnings: List[str] = []
        tasks, next_id = self._build_tasks(records, drop_bad_dates=True, warnings=warnings)
        if not tasks:
            raise ValidationError('The replacement contained no usable tasks.')
        self._tasks, self._next_id = tasks, next_id
        return warnings

    # -------------------- serialization --------------------
    def to_records(self) -> List[Dict[str, Any]]:
        return [task.to_dict() for task in self._tasks]

    def __str__(self) -> str:
        done = sum(1 for t in self._tasks if t.completed)
        return f'{len(self._tasks)} tasks, {done} completed'


def _validated(name: Any, start: Any, end: Any, color: Any):
    name = str(name or '').strip()
    start = str(start or '').strip()
    end = str(end or '').strip()
    color = str(color or '').strip().lower()
    if not name or not start or not end or not color:
        raise ValidationError('Please fill in all fields (name, start, end, color).')
    try:
        start_d = require_date(start, 'start date')
        end_d = require_date(end, 'end date')
    except ParseError as exc:
        raise ValidationError(str(exc)) from exc
    if start_d > end_d:
        raise ValidationError('The end date must not be before the start date.')
    return name, start, end, color


def _check_color(color: str) -> None:
    if color not in COLORS:
        raise ValidationError(f'Unknown color {color!r}; choose one of: {", ".join(COLORS)}.')
