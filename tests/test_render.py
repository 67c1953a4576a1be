import unittest

from layout import ZoomState
from render import ANSI_RE, CLIP_CHAR, render_lines
from store import TaskStore
from view import build_view


def _plain(lines):
    return [ANSI_RE.sub('', line) for line in lines]


def _scenario_a() -> TaskStore:
    store = TaskStore()
    store.add('Kick-off', '2024-07-01', '2024-07-01', 'blue')
    store.add('Design', '2024-07-02', '2024-07-10', 'green')
    return store


class TestRenderLines(unittest.TestCase):
    def test_fixed_zoom_maps_pixels_to_columns(self) -> None:
        lines = _plain(render_lines(build_view(_scenario_a(), ZoomState()), term_width=120))
        kickoff = next(l for l in lines if l.startswith('1. Kick-off'))
        design = next(l for l in lines if l.startswith('2. Design'))
        # 500px chart -> 50 columns; 10% and 90% of it
        self.assertEqual(kickoff.count('█'), 5)
        self.assertEqual(design.count('█'), 45)
        self.assertTrue(any('01.07' in l for l in lines))

    def test_todo_section_lists_tasks_in_order(self) -> None:
        store = _scenario_a()
        store.set_completed(1, True)
        lines = _plain(render_lines(build_view(store, ZoomState()), term_width=120))
        self.assertIn('To-Do (1/2 done)', lines[0])
        self.assertEqual(lines[2], '[x] 1. Kick-off')
        self.assertEqual(lines[3], '[ ] 2. Design')

    def test_completed_bars_use_shaded_blocks(self) -> None:
        store = _scenario_a()
        store.set_completed(2, True)
        lines = _plain(render_lines(build_view(store, ZoomState()), term_width=120))
        design = next(l for l in lines if l.startswith('2. Design'))
        self.assertEqual(design.count('▒'), 45)

    def test_wide_chart_is_clipped_with_hint(self) -> None:
        lines = _plain(render_lines(build_view(_scenario_a(), ZoomState()), term_width=40))
        design = next(l for l in lines if l.startswith('2. Design'))
        self.assertLessEqual(len(design), 40)
        self.assertTrue(design.endswith(CLIP_CHAR))
        self.assertTrue(any('clipped' in l for l in lines))

    def test_fit_mode_uses_terminal_width(self) -> None:
        lines = _plain(render_lines(build_view(_scenario_a(), ZoomState(fit=True)), term_width=80))
        self.assertTrue(all(len(l) <= 80 for l in lines))
        self.assertFalse(any('clipped' in l for l in lines))
        self.assertTrue(any('fit to width' in l for l in lines))

    def test_empty_store_shows_placeholders(self) -> None:
        lines = _plain(render_lines(build_view(TaskStore(), ZoomState()), term_width=80))
        self.assertEqual(sum('No tasks yet' in l for l in lines), 2)

    def test_bad_dates_render_empty_row_message(self) -> None:
        store = TaskStore([{'id': 1, 'name': 'Broken', 'start': 'x', 'end': 'y'}])
        lines = _plain(render_lines(build_view(store, ZoomState()), term_width=80))
        self.assertTrue(any('No valid tasks' in l for l in lines))


if __name__ == '__main__':
    unittest.main()
