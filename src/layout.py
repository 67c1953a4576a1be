"""Gantt chart layout: header cells, grid pattern and bar geometry.

compute_layout() is a pure function of the (already sorted) task list and
the zoom state. The result is a plain value object; render.py draws it.

Bars are positioned in percent of the timeline so the same geometry works
for a fixed pixel width and for fit-to-container. A bar whose dates are
unusable is skipped (row kept, bar None) and logged for diagnostics only.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

from errors import ComputationError
from models import COLORS, Task
from timeline import (DAY, MONTH, WEEK, STATUS_EMPTY, STATUS_NO_VALID_DATES,
                      Timeline, compute_timeline, inclusive_days, month_bounds)

logger = logging.getLogger(__name__)

DEFAULT_PIXELS_PER_DAY = 50
ZOOM_STEP = 10
MIN_PIXELS_PER_DAY = 20
ROW_HEIGHT_PX = 48
PLACEHOLDER_WIDTH_PX = 1000
FALLBACK_COLOR = 'gray'

STATUS_OK = 'ok'
STATUS_ERROR = 'error'

PLACEHOLDER_MESSAGES = {
    STATUS_EMPTY: 'No tasks yet. Add one!',
    STATUS_NO_VALID_DATES: 'No valid tasks to display (check the task dates).',
}


# -------------------- zoom state --------------------
@dataclass
class ZoomState:
    """Either fixed scale (pixels_per_day) or fit-to-container.

    Zooming in or out always lands in fixed mode; fit is a manual toggle.
    """
    pixels_per_day: int = DEFAULT_PIXELS_PER_DAY
    fit: bool = False

    def __post_init__(self) -> None:
        self.pixels_per_day = max(MIN_PIXELS_PER_DAY, int(self.pixels_per_day))

    def zoom_in(self) -> None:
        self.fit = False
        self.pixels_per_day += ZOOM_STEP

    def zoom_out(self) -> None:
        self.fit = False
        self.pixels_per_day = max(MIN_PIXELS_PER_DAY, self.pixels_per_day - ZOOM_STEP)

    def toggle_fit(self) -> None:
        self.fit = not self.fit

    def describe(self) -> str:
        return 'fit to width' if self.fit else f'{self.pixels_per_day}px/day'


# -------------------- layout value objects --------------------
@dataclass(frozen=True)
class HeaderCell:
    label: str
    start: date
    end: date


@dataclass(frozen=True)
class TaskBar:
    offset_percent: float
    width_percent: float
    color: str
    completed: bool


@dataclass(frozen=True)
class ChartRow:
    task_id: int
    name: str
    bar: Optional[TaskBar]


@dataclass(frozen=True)
class ChartLayout:
    status: str
    fit: bool
    timeline: Optional[Timeline] = None
    message: str = ''
    header: Tuple[HeaderCell, ...] = ()
    grid_lines: int = 0
    grid_spacing_percent: float = 0.0
    chart_width_px: Optional[int] = PLACEHOLDER_WIDTH_PX
    rows: Tuple[ChartRow, ...] = field(default_factory=tuple)
    row_height_px: int = ROW_HEIGHT_PX

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    @property
    def unit(self) -> str:
        return self.timeline.unit if self.timeline else DAY

    @property
    def chart_height_px(self) -> int:
        return len(self.rows) * self.row_height_px


# -------------------- header --------------------
def _unit_label(unit: str, start: date) -> str:
    if unit == WEEK:
        return f'W{start.isocalendar()[1]:02d}'
    if unit == MONTH:
        return start.strftime("%b '%y")
    return f'{start.day:02d}.{start.month:02d}'


def build_header(timeline: Timeline) -> Tuple[HeaderCell, ...]:
    """One cell per timeline unit, clipped to the timeline bounds."""
    cells: List[HeaderCell] = []
    cursor = timeline.timeline_start
    for _ in range(timeline.total_units):
        if timeline.unit == WEEK:
            end = cursor + timedelta(days=6)
        elif timeline.unit == MONTH:
            end = month_bounds(cursor)[1]
        else:
            end = cursor
        end = min(end, timeline.timeline_end)
        cells.append(HeaderCell(_unit_label(timeline.unit, cursor), cursor, end))
        cursor = end + timedelta(days=1)
    return tuple(cells)


# -------------------- bars --------------------
def bar_geometry(task: Task, timeline: Timeline) -> Optional[TaskBar]:
    """Percent geometry for one task, or None when the bar must be skipped."""
    start, end = task.start_date, task.end_date
    scope = timeline.total_days_in_scope
    if start is None or end is None:
        logger.info('Task "%s" has unparsable dates; bar skipped.', task.name)
        return None
    if start > end:
        logger.info('Task "%s" ends before it starts; bar skipped.', task.name)
        return None
    offset_days = inclusive_days(timeline.timeline_start, start) - 1
    duration_days = inclusive_days(start, end)
    if duration_days <= 0 or offset_days < 0 or scope <= 0:
        logger.info('Task "%s" falls outside the timeline; bar skipped.', task.name)
        return None
    color = task.color if task.color in COLORS else FALLBACK_COLOR
    return TaskBar(
        offset_percent=offset_days / scope * 100,
        width_percent=duration_days / scope * 100,
        color=color,
        completed=task.completed,
    )


# -------------------- layout --------------------
def _placeholder(status: str, fit: bool, tasks: Sequence[Task], message: str,
                 timeline: Optional[Timeline] = None) -> ChartLayout:
    return ChartLayout(
        status=status,
        fit=fit,
        timeline=timeline,
        message=message,
        chart_width_px=None if fit else PLACEHOLDER_WIDTH_PX,
        rows=tuple(ChartRow(t.id, t.name, None) for t in tasks),
    )


def compute_layout(tasks: Sequence[Task], zoom: ZoomState) -> ChartLayout:
    try:
        timeline = compute_timeline(tasks, fit=zoom.fit)
    except ComputationError as exc:
        logger.error('Gantt chart: %s', exc)
        return _placeholder(STATUS_ERROR, zoom.fit, tasks,
                            'Problem computing the date range for the Gantt chart.')
    if not timeline.ok:
        return _placeholder(timeline.status, zoom.fit, tasks,
                            PLACEHOLDER_MESSAGES[timeline.status], timeline)

    rows = tuple(ChartRow(t.id, t.name, bar_geometry(t, timeline)) for t in tasks)
    return ChartLayout(
        status=STATUS_OK,
        fit=zoom.fit,
        timeline=timeline,
        header=build_header(timeline),
        grid_lines=timeline.total_units,
        grid_spacing_percent=100 / timeline.total_units,
        chart_width_px=None if zoom.fit else timeline.total_units * zoom.pixels_per_day,
        rows=rows,
    )
