"""Data models for the terminal Gantt planner.

Exposes the Task dataclass plus the date parsing helpers every other
module relies on. Dates are stored as ISO strings (YYYY-MM-DD); a task
may hold a malformed date, which parse_date() reports as None.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional
import re

from errors import ParseError

COLORS = ("blue", "green", "yellow", "red")
DEFAULT_COLOR = "blue"
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: Any) -> Optional[date]:
    """Lenient parse: returns None for anything that is not YYYY-MM-DD."""
    if not isinstance(value, str) or not ISO_DATE_RE.match(value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def require_date(value: Any, field_name: str = "date") -> date:
    """Strict parse used at input time."""
    parsed = parse_date(value)
    if parsed is None:
        raise ParseError(f"Invalid {field_name}: {value!r} (expected YYYY-MM-DD)")
    return parsed


def _as_bool(value: Any) -> bool:
    """JSON booleans pass through; the strings "true"/"false" are read as such."""
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes"}
    return bool(value)


@dataclass
class Task:
    """A single scheduled task.

    Fields:
        id: Unique integer id, never changed after assignment.
        name: Display name (non-empty).
        start, end: ISO dates, inclusive on both ends.
        color: One of COLORS; anything else renders gray.
        completed: Check state, independent of the dates.
        dependencies: Ids from generated plans; stored only.
    """
    id: int
    name: str
    start: str
    end: str
    color: str = DEFAULT_COLOR
    completed: bool = False
    dependencies: List[int] = field(default_factory=list)

    @property
    def start_date(self) -> Optional[date]:
        return parse_date(self.start)

    @property
    def end_date(self) -> Optional[date]:
        return parse_date(self.end)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'id': self.id,
            'name': self.name,
            'start': self.start,
            'end': self.end,
            'color': self.color,
            'completed': self.completed,
        }
        if self.dependencies:
            data['dependencies'] = list(self.dependencies)
        return data

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], task_id: int) -> "Task":
        """Build from a JSON record; the caller decides the id."""
        deps = raw.get('dependencies')
        if isinstance(deps, list):
            deps = [d for d in deps if isinstance(d, int) and not isinstance(d, bool)]
        else:
            deps = []
        color = raw.get('color')
        return cls(
            id=task_id,
            name=str(raw.get('name', '')).strip(),
            start=str(raw.get('start') or ''),
            end=str(raw.get('end') or ''),
            color=str(color) if color else DEFAULT_COLOR,
            completed=_as_bool(raw.get('completed', False)),
            dependencies=deps,
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, name={self.name}, start={self.start}, end={self.end})"
