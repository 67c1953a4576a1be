"""To-do list projection: the checklist view derived from the task list."""
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from models import Task


@dataclass(frozen=True)
class TodoItem:
    id: int
    name: str
    completed: bool


def project_todo(tasks: Iterable[Task]) -> List[TodoItem]:
    """Checklist items in the order given (the chart's sort order)."""
    return [TodoItem(t.id, t.name, t.completed) for t in tasks]


def todo_summary(items: Iterable[TodoItem]) -> Tuple[int, int]:
    """Return (completed, total)."""
    items = list(items)
    return sum(1 for i in items if i.completed), len(items)
