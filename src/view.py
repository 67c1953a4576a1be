"""Full recompute of everything the screen shows.

Every mutation is followed by build_view(): sort, timeline, layout and
to-do projection are derived from scratch with no incremental state.
"""
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from layout import ChartLayout, ZoomState, compute_layout
from models import Task
from store import TaskStore
from timeline import Timeline
from todo import TodoItem, project_todo


@dataclass(frozen=True)
class PlannerView:
    tasks: Tuple[Task, ...]
    layout: ChartLayout
    todo: Tuple[TodoItem, ...]
    zoom: ZoomState

    @property
    def timeline(self) -> Optional[Timeline]:
        return self.layout.timeline


def build_view(store: TaskStore, zoom: ZoomState) -> PlannerView:
    ordered: List[Task] = store.sorted_tasks()
    return PlannerView(
        tasks=tuple(replace(t) for t in ordered),
        layout=compute_layout(ordered, zoom),
        todo=tuple(project_todo(ordered)),
        zoom=ZoomState(zoom.pixels_per_day, zoom.fit),
    )
