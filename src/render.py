"""Terminal rendering of a PlannerView.

Layout geometry arrives in percent; this module only decides how many
terminal columns the chart gets and paints. Fixed zoom maps PX_PER_COLUMN
pixels to one column, fit mode takes whatever width is left after the
label column. Charts wider than the terminal are clipped with a hint.
"""
import re
import shutil
from typing import List, Optional, Sequence, Tuple

from layout import ChartLayout, ChartRow
from theme import (BOLD, DONE_COLOR, EMPTY_COLOR, GRID_COLOR, HEADER_COLOR,
                   ID_COLOR, bar_color, color)
from todo import TodoItem, todo_summary
from view import PlannerView

PX_PER_COLUMN = 10
MIN_LABEL_WIDTH = 10
MAX_LABEL_WIDTH = 28
MIN_CHART_COLS = 20
SEP = " | "
GRID_CHAR = '·'
BAR_CHAR = '█'
DONE_BAR_CHAR = '▒'
CLIP_CHAR = '›'
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

Cell = Tuple[str, str]  # (character, style)


def visible_len(s: str) -> int:
    return len(ANSI_RE.sub('', s))


def _pad(text: str, width: int) -> str:
    if len(text) > width:
        return text[:max(0, width - 1)] + '…' if width > 1 else text[:width]
    return text + ' ' * (width - len(text))


def _paint(cells: Sequence[Cell]) -> str:
    """Join cells, emitting one color span per run of equal style."""
    out: List[str] = []
    run, style = '', None
    for ch, st in cells:
        if st != style and run:
            out.append(color(run, style) if style else run)
            run = ''
        style = st
        run += ch
    if run:
        out.append(color(run, style) if style else run)
    return ''.join(out)


# -------------------- to-do list --------------------
def render_todo(items: Sequence[TodoItem]) -> List[str]:
    done, total = todo_summary(items)
    lines = [color(f'To-Do ({done}/{total} done)', HEADER_COLOR, BOLD),
             color('-' * 40, HEADER_COLOR)]
    if not items:
        lines.append(color('No tasks yet. Add one!', EMPTY_COLOR))
        return lines
    for item in items:
        box = '[x]' if item.completed else '[ ]'
        name = color(item.name, DONE_COLOR) if item.completed else item.name
        lines.append(f'{box} ' + color(f'{item.id}.', ID_COLOR) + f' {name}')
    return lines


# -------------------- gantt chart --------------------
def chart_columns(layout: ChartLayout, term_width: int, label_width: int) -> int:
    if layout.fit or layout.chart_width_px is None:
        return max(MIN_CHART_COLS, term_width - label_width - len(SEP))
    return max(1, layout.chart_width_px // PX_PER_COLUMN)


def _boundaries(layout: ChartLayout, cols: int) -> List[int]:
    """Column index where each unit starts, plus the end column."""
    step = layout.grid_spacing_percent * cols / 100
    return [min(cols, round(i * step)) for i in range(layout.grid_lines)] + [cols]


def _row_cells(row: ChartRow, cols: int, bounds: Sequence[int]) -> List[Cell]:
    cells: List[Cell] = [(' ', '') for _ in range(cols)]
    for b in bounds[:-1]:
        if b < cols:
            cells[b] = (GRID_CHAR, GRID_COLOR)
    bar = row.bar
    if bar is not None:
        first = int(round(bar.offset_percent * cols / 100))
        last = int(round((bar.offset_percent + bar.width_percent) * cols / 100))
        first = min(first, cols - 1)
        last = min(cols, max(last, first + 1))
        ch = DONE_BAR_CHAR if bar.completed else BAR_CHAR
        for i in range(first, last):
            cells[i] = (ch, bar_color(bar.color))
    return cells


def _header_cells(layout: ChartLayout, cols: int, bounds: Sequence[int]) -> List[Cell]:
    cells: List[Cell] = []
    for cell, a, b in zip(layout.header, bounds, bounds[1:]):
        width = b - a
        if width <= 0:
            continue
        cells.extend((ch, HEADER_COLOR) for ch in _pad(cell.label, width)[:width])
    return cells + [(' ', '')] * (cols - len(cells))


def render_gantt(layout: ChartLayout, zoom_label: str, term_width: int) -> List[str]:
    unit = layout.unit if layout.ok else '-'
    lines = [color(f'Gantt chart ({zoom_label}, unit: {unit})', HEADER_COLOR, BOLD)]
    if not layout.ok:
        lines.append(color(layout.message, EMPTY_COLOR))
        return lines

    longest = max((len(f'{r.task_id}. {r.name}') for r in layout.rows), default=0)
    label_width = min(MAX_LABEL_WIDTH, max(MIN_LABEL_WIDTH, longest))
    cols = chart_columns(layout, term_width, label_width)
    bounds = _boundaries(layout, cols)
    room = max(1, term_width - label_width - len(SEP))
    clipped = cols > room
    shown = room - 1 if clipped else cols

    def line(label: str, cells: List[Cell]) -> str:
        body = _paint(cells[:shown])
        if clipped:
            body += color(CLIP_CHAR, GRID_COLOR)
        return label + SEP + body

    lines.append(line(' ' * label_width, _header_cells(layout, cols, bounds)))
    lines.append(color('-' * min(term_width, label_width + len(SEP) + cols), HEADER_COLOR))
    for row in layout.rows:
        label = _pad(f'{row.task_id}. {row.name}', label_width)
        lines.append(line(label, _row_cells(row, cols, bounds)))
    if clipped:
        lines.append(color("Chart clipped; use 'zoom -' or 'fit' to see all of it.", EMPTY_COLOR))
    return lines


def render_lines(view: PlannerView, term_width: Optional[int] = None) -> List[str]:
    if term_width is None:
        term_width = shutil.get_terminal_size((120, 30)).columns
    lines = render_todo(view.todo)
    lines.append('')
    lines.extend(render_gantt(view.layout, view.zoom.describe(), term_width))
    return lines


def display(view: PlannerView) -> None:
    for line in render_lines(view):
        print(line)
