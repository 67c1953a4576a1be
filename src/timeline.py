"""Timeline calculation: overall span, granularity and unit count.

The calculator looks only at dates. Tasks whose start or end fails to parse
simply do not contribute to the span. In fixed zoom the granularity is
always days; in fit mode it coarsens with the span (weeks above 30 days,
months above 120) and the bounds snap outwards to whole units.
"""
from __future__ import annotations
import calendar
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Tuple

from errors import ComputationError
from models import Task

DAY, WEEK, MONTH = 'day', 'week', 'month'
WEEK_THRESHOLD_DAYS = 30
MONTH_THRESHOLD_DAYS = 120

STATUS_OK = 'ok'
STATUS_EMPTY = 'empty'
STATUS_NO_VALID_DATES = 'no-valid-dates'


@dataclass(frozen=True)
class Timeline:
    status: str
    project_start: Optional[date] = None
    project_end: Optional[date] = None
    project_days: int = 0
    timeline_start: Optional[date] = None
    timeline_end: Optional[date] = None
    unit: str = DAY
    total_units: int = 0
    total_days_in_scope: int = 0

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


def inclusive_days(first: date, last: date) -> int:
    """Days from first to last counting both ends (same day -> 1)."""
    return (last - first).days + 1


def week_bounds(day: date) -> Tuple[date, date]:
    """ISO week (Monday..Sunday) containing day."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def month_bounds(day: date) -> Tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def months_between(first: date, last: date) -> int:
    """Inclusive count of calendar months touched by [first, last]."""
    return (last.year - first.year) * 12 + (last.month - first.month) + 1


def select_unit(project_days: int, fit: bool) -> str:
    if not fit:
        return DAY
    if project_days > MONTH_THRESHOLD_DAYS:
        return MONTH
    if project_days > WEEK_THRESHOLD_DAYS:
        return WEEK
    return DAY


def compute_timeline(tasks: Iterable[Task], fit: bool = False) -> Timeline:
    tasks = list(tasks)
    if not tasks:
        return Timeline(status=STATUS_EMPTY)
    dates = [d for t in tasks for d in (t.start_date, t.end_date) if d is not None]
    if not dates:
        return Timeline(status=STATUS_NO_VALID_DATES)

    project_start, project_end = min(dates), max(dates)
    project_days = inclusive_days(project_start, project_end)
    if project_days <= 0:
        raise ComputationError(f'Invalid project span of {project_days} day(s).')

    unit = select_unit(project_days, fit)
    if unit == WEEK:
        timeline_start = week_bounds(project_start)[0]
        timeline_end = week_bounds(project_end)[1]
    elif unit == MONTH:
        timeline_start = month_bounds(project_start)[0]
        timeline_end = month_bounds(project_end)[1]
    else:
        timeline_start, timeline_end = project_start, project_end

    scope_days = inclusive_days(timeline_start, timeline_end)
    if scope_days <= 0:
        raise ComputationError(f'Invalid timeline span of {scope_days} day(s).')
    if unit == WEEK:
        total_units = math.ceil(scope_days / 7)
    elif unit == MONTH:
        total_units = months_between(timeline_start, timeline_end)
    else:
        total_units = scope_days

    return Timeline(
        status=STATUS_OK,
        project_start=project_start,
        project_end=project_end,
        project_days=project_days,
        timeline_start=timeline_start,
        timeline_end=timeline_end,
        unit=unit,
        total_units=total_units,
        total_days_in_scope=scope_days,
    )
