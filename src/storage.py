"""Persistence backends for the task list.

Both backends expose load() -> list of records and save(tasks) -> bool.
A missing file is the normal first run and loads as an empty list. Saving
is fire-and-forget: a failure is logged and reported through the return
value, and the in-memory store is never rolled back.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from config import Settings
from errors import PersistenceError
from models import Task

logger = logging.getLogger(__name__)

FILE_VERSION = 1

TaskEntry = Dict[str, Any]
TaskLike = Union[Task, TaskEntry]

SAMPLE_TASKS: List[TaskEntry] = [
    {'id': 1, 'name': 'Kick-off meeting', 'start': '2024-07-01', 'end': '2024-07-01',
     'color': 'blue', 'completed': True},
    {'id': 2, 'name': 'Design phase', 'start': '2024-07-02', 'end': '2024-07-10',
     'color': 'green', 'completed': False},
    {'id': 3, 'name': 'Prototype development', 'start': '2024-07-11', 'end': '2024-07-25',
     'color': 'yellow', 'completed': False},
]


def _as_records(tasks: Iterable[TaskLike]) -> List[TaskEntry]:
    return [t.to_dict() if isinstance(t, Task) else dict(t) for t in tasks]


class JsonFileStorage:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[TaskEntry]:
        """Load task records, accepting the legacy bare-list file format.

        Missing file -> empty list. Unreadable or malformed file raises
        PersistenceError.
        """
        if not self.path.exists():
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f'Could not read {self.path}: {exc}') from exc
        # legacy files are a bare list of task records
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get('tasks'), list):
            return data['tasks']
        raise PersistenceError(f'{self.path} does not contain a task list.')

    def save(self, tasks: Iterable[TaskLike]) -> bool:
        """Persist tasks (pretty-printed). Returns False on failure."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump({'version': FILE_VERSION, 'tasks': _as_records(tasks)}, f, indent=4)
        except OSError as exc:
            logger.warning('Saving tasks to %s failed: %s', self.path, exc)
            return False
        return True


class MemoryStorage:
    """No persistence; keeps the last saved list for the session only."""

    def __init__(self, records: Iterable[TaskEntry] = ()):
        self._records: List[TaskEntry] = [dict(r) for r in records]

    def load(self) -> List[TaskEntry]:
        return [dict(r) for r in self._records]

    def save(self, tasks: Iterable[TaskLike]) -> bool:
        self._records = _as_records(tasks)
        return True


def select_storage(settings: Settings):
    if settings.storage == 'none':
        return MemoryStorage()
    return JsonFileStorage(settings.data_file)


def open_storage(settings: Settings) -> Tuple[Any, List[TaskEntry], Optional[str]]:
    """Select a backend and load it; returns (storage, records, warning).

    A task file that cannot be read is left alone: the session falls back
    to memory storage so the first save does not overwrite it.
    """
    storage = select_storage(settings)
    try:
        return storage, storage.load(), None
    except PersistenceError as exc:
        logger.warning('Loading tasks failed: %s', exc)
        return MemoryStorage(), [], (f'{exc} Starting with an empty plan; changes will not be '
                                     f'saved until the file is fixed.')
