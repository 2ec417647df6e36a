"""Color & style helpers.

Decisions:
- Status dots: gray = unscheduled, amber = due soon, red = overdue,
  green = completed.
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Supports palette overrides via environment or project .env file.
"""
from __future__ import annotations
import os, sys

from config import read_env_file
from status import COMPLETED, DUE_SOON, OVERDUE, UNSCHEDULED

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _fg_truecolor(r: int, g: int, b: int) -> str:
    return f"\033[38;2;{r};{g};{b}m"

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    idx = 16 + 36 * r6 + 6 * g6 + b6
    return f"\033[38;5;{idx}m"

def _from_hex(hex_code: str) -> str:
    """Convert a hex color code to an ANSI escape sequence."""
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return _fg_truecolor(r, g, b)
    return _fg_256(r, g, b)

def _valid_hex(value: str) -> str | None:
    h = value.strip().lstrip('#')
    if len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h):
        return '#' + h
    return None

RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')
UNDERLINE = _code('4')
STRIKE = _code('9')

DEFAULT_PALETTE = {
    'PLANNER_COLOR_PRIMARY': '#2563EB',
    'PLANNER_COLOR_UNSCHEDULED': '#9CA3AF',
    'PLANNER_COLOR_DUE_SOON': '#FACC15',
    'PLANNER_COLOR_OVERDUE': '#EF4444',
    'PLANNER_COLOR_COMPLETED': '#34D399',
    'PLANNER_COLOR_BAR_OPEN': '#93C5FD',
}

# Resolve final hex values (priority: real env var > .env override > default)
_env_file = read_env_file(prefix='PLANNER_COLOR_')
PALETTE: dict[str, str] = {}
for _key, _default in DEFAULT_PALETTE.items():
    PALETTE[_key] = _valid_hex(os.environ.get(_key) or _env_file.get(_key) or '') or _default

PRIMARY = _from_hex(PALETTE['PLANNER_COLOR_PRIMARY'])
C_COMPLETED = _from_hex(PALETTE['PLANNER_COLOR_COMPLETED'])
C_BAR_OPEN = _from_hex(PALETTE['PLANNER_COLOR_BAR_OPEN'])

STATUS_COLOR = {
    UNSCHEDULED: _from_hex(PALETTE['PLANNER_COLOR_UNSCHEDULED']),
    DUE_SOON: _from_hex(PALETTE['PLANNER_COLOR_DUE_SOON']),
    OVERDUE: _from_hex(PALETTE['PLANNER_COLOR_OVERDUE']),
    COMPLETED: C_COMPLETED,
}

HEADER_COLOR = PRIMARY
TODAY_COLOR = PRIMARY + BOLD
ID_COLOR = DIM
EMPTY_COLOR = DIM
BAR_COLOR = {'completed': C_COMPLETED, 'open': C_BAR_OPEN}

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET

__all__ = [
    'color','RESET','BOLD','DIM','UNDERLINE','STRIKE','STATUS_COLOR','HEADER_COLOR','TODAY_COLOR',
    'ID_COLOR','EMPTY_COLOR','BAR_COLOR','PALETTE','_ENABLE','_USE_TRUECOLOR','_FORCE'
]
