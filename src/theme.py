"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Accent color can be overridden via GANTT_PRIMARY (environment or .env).
- Bar colors mirror the task colors; anything unknown is drawn gray.
"""
from __future__ import annotations
import os, sys

from config import ENV_FILE, read_env_file

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

def _code(part: str) -> str:
    return f"\033[{part}m" if _ENABLE else ''

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    idx = 16 + 36 * to_6(r) + 6 * to_6(g) + to_6(b)
    return f"\033[38;5;{idx}m"

def _from_hex(hex_code: str) -> str:
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)

def _valid_hex(value: str) -> bool:
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)

RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')
STRIKE = _code('9')

# Tailwind-500 shades, matching the task color names
HEX_PRIMARY_DEFAULT = '#476EAE'
HEX_BARS = {
    'blue': '#3B82F6',
    'green': '#22C55E',
    'yellow': '#EAB308',
    'red': '#EF4444',
    'gray': '#6B7280',
}

_override = os.environ.get('GANTT_PRIMARY') or read_env_file(ENV_FILE).get('GANTT_PRIMARY', '')
HEX_PRIMARY = '#' + _override.lstrip('#') if _valid_hex(_override) else HEX_PRIMARY_DEFAULT

PRIMARY = _from_hex(HEX_PRIMARY)
BAR_COLOR = {name: _from_hex(h) for name, h in HEX_BARS.items()}

HEADER_COLOR = PRIMARY
ID_COLOR = PRIMARY + BOLD
GRID_COLOR = DIM
EMPTY_COLOR = DIM + PRIMARY
DONE_COLOR = DIM + STRIKE

def bar_color(name: str) -> str:
    return BAR_COLOR.get(name, BAR_COLOR['gray'])

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET

__all__ = [
    'color','bar_color','RESET','BOLD','DIM','STRIKE','BAR_COLOR','HEADER_COLOR','ID_COLOR',
    'GRID_COLOR','EMPTY_COLOR','DONE_COLOR','HEX_PRIMARY','HEX_BARS','_ENABLE','_USE_TRUECOLOR','_FORCE'
]
