import unittest
from datetime import date

from models import Task
from timeline import (DAY, MONTH, WEEK, compute_timeline, inclusive_days,
                      month_bounds, months_between, week_bounds)


def _task(tid: int, start: str, end: str) -> Task:
    return Task(id=tid, name=f'Task {tid}', start=start, end=end)


class TestTimelineHelpers(unittest.TestCase):
    def test_inclusive_days_counts_single_day_as_one(self) -> None:
        self.assertEqual(inclusive_days(date(2024, 7, 1), date(2024, 7, 1)), 1)
        self.assertEqual(inclusive_days(date(2024, 7, 1), date(2024, 7, 10)), 10)

    def test_week_bounds_are_iso_monday_to_sunday(self) -> None:
        self.assertEqual(week_bounds(date(2024, 7, 7)), (date(2024, 7, 1), date(2024, 7, 7)))
        self.assertEqual(week_bounds(date(2024, 7, 3)), (date(2024, 7, 1), date(2024, 7, 7)))

    def test_month_bounds_handle_leap_february(self) -> None:
        self.assertEqual(month_bounds(date(2024, 2, 10)), (date(2024, 2, 1), date(2024, 2, 29)))

    def test_months_between_across_year_boundary(self) -> None:
        self.assertEqual(months_between(date(2023, 11, 1), date(2024, 4, 30)), 6)


class TestComputeTimeline(unittest.TestCase):
    def test_empty_task_list_is_an_empty_state(self) -> None:
        timeline = compute_timeline([])
        self.assertEqual(timeline.status, 'empty')
        self.assertFalse(timeline.ok)

    def test_no_parsable_dates_is_distinct_state(self) -> None:
        timeline = compute_timeline([_task(1, 'soon', 'later')])
        self.assertEqual(timeline.status, 'no-valid-dates')

    def test_fixed_mode_day_span(self) -> None:
        timeline = compute_timeline([_task(1, '2024-07-01', '2024-07-01'),
                                     _task(2, '2024-07-02', '2024-07-10')])
        self.assertTrue(timeline.ok)
        self.assertEqual(timeline.unit, DAY)
        self.assertEqual((timeline.timeline_start, timeline.timeline_end),
                         (date(2024, 7, 1), date(2024, 7, 10)))
        self.assertEqual(timeline.total_units, 10)
        self.assertEqual(timeline.total_days_in_scope, 10)

    def test_fixed_mode_stays_daily_for_long_spans(self) -> None:
        timeline = compute_timeline([_task(1, '2024-01-10', '2024-06-07')], fit=False)
        self.assertEqual(timeline.unit, DAY)
        self.assertEqual(timeline.total_units, 150)

    def test_unparsable_dates_are_excluded_from_span(self) -> None:
        timeline = compute_timeline([_task(1, '2024-07-05', 'broken'),
                                     _task(2, '2024-07-02', '2024-07-03')])
        self.assertEqual((timeline.project_start, timeline.project_end),
                         (date(2024, 7, 2), date(2024, 7, 5)))

    def test_fit_mode_thirty_days_is_daily(self) -> None:
        timeline = compute_timeline([_task(1, '2024-07-01', '2024-07-30')], fit=True)
        self.assertEqual(timeline.unit, DAY)
        self.assertEqual(timeline.total_units, 30)

    def test_fit_mode_week_snapping(self) -> None:
        timeline = compute_timeline([_task(1, '2024-07-03', '2024-07-10'),
                                     _task(2, '2024-07-20', '2024-08-08')], fit=True)
        self.assertEqual(timeline.project_days, 37)
        self.assertEqual(timeline.unit, WEEK)
        self.assertEqual(timeline.timeline_start, date(2024, 7, 1))
        self.assertEqual(timeline.timeline_end, date(2024, 8, 11))
        self.assertEqual(timeline.total_days_in_scope, 42)
        self.assertEqual(timeline.total_units, 6)

    def test_fit_mode_threshold_between_week_and_month(self) -> None:
        at_120 = compute_timeline([_task(1, '2024-01-01', '2024-04-29')], fit=True)
        at_121 = compute_timeline([_task(1, '2024-01-01', '2024-04-30')], fit=True)
        self.assertEqual(at_120.project_days, 120)
        self.assertEqual(at_120.unit, WEEK)
        self.assertEqual(at_121.unit, MONTH)

    def test_fit_mode_150_day_span_uses_months(self) -> None:
        timeline = compute_timeline([_task(1, '2024-01-10', '2024-03-01'),
                                     _task(2, '2024-02-15', '2024-06-07')], fit=True)
        self.assertEqual(timeline.project_days, 150)
        self.assertEqual(timeline.unit, MONTH)
        self.assertEqual((timeline.timeline_start, timeline.timeline_end),
                         (date(2024, 1, 1), date(2024, 6, 30)))
        self.assertEqual(timeline.total_units, 6)
        self.assertEqual(timeline.total_days_in_scope, 182)

    def test_bounds_always_cover_every_task(self) -> None:
        tasks = [_task(1, '2023-11-15', '2023-12-01'), _task(2, '2024-03-03', '2024-04-20'),
                 _task(3, '2024-01-09', '2024-01-09')]
        for fit in (False, True):
            timeline = compute_timeline(tasks, fit=fit)
            with self.subTest(fit=fit, unit=timeline.unit):
                self.assertLessEqual(timeline.timeline_start, min(t.start_date for t in tasks))
                self.assertGreaterEqual(timeline.timeline_end, max(t.end_date for t in tasks))


if __name__ == '__main__':
    unittest.main()
