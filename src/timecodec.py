"""12-hour / 24-hour time helpers.

The only stored representation is the canonical 24-hour "HH:MM" string
(or "" for "no time"). The 12-hour hour/minute/meridiem triple is purely
an input and display convention.
"""
from __future__ import annotations
import re
from typing import NamedTuple, Optional, Tuple

CANONICAL_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_TYPED_RE = re.compile(r"^\s*(\d{1,2})(?:[:.](\d{1,2}))?\s*([ap])\.?\s*(?:m\.?)?\s*$", re.IGNORECASE)


class Time12(NamedTuple):
    hour: str
    minute: str
    meridiem: str


def _leading_int(text: Optional[str]) -> Optional[int]:
    """Parse leading digits the way a lenient form field would ('7x' -> 7)."""
    m = _LEADING_INT_RE.match(text or '')
    return int(m.group(1)) if m else None


def _split_hhmm(canonical: str) -> Tuple[int, int]:
    parts = canonical.split(':')
    h = _leading_int(parts[0]) or 0
    m = (_leading_int(parts[1]) if len(parts) > 1 else None) or 0
    return h, m


def is_canonical(value: str) -> bool:
    """True for "" or a well-formed 24-hour HH:MM string."""
    if value == '':
        return True
    m = CANONICAL_RE.match(value)
    if not m:
        return False
    return int(m.group(1)) < 24 and int(m.group(2)) < 60


def to_24_hour(hour_text: Optional[str], minute_text: Optional[str], meridiem: str) -> str:
    """Convert a 12-hour input triple to canonical "HH:MM".

    A blank, unparsable or zero hour means "no time set" and yields "".
    An unparsable minute counts as 0.
    """
    h = _leading_int(hour_text)
    if not h:
        return ''
    m = _leading_int(minute_text) or 0
    hours = h % 12
    if (meridiem or '').upper() == 'PM':
        hours += 12
    return f"{hours:02d}:{m:02d}"


def split_24_to_12(canonical: Optional[str]) -> Time12:
    """Inverse of to_24_hour; "" gives blank fields with meridiem AM."""
    if not canonical:
        return Time12('', '', 'AM')
    h, m = _split_hhmm(canonical)
    meridiem = 'AM'
    if h == 0:
        h = 12
    elif h == 12:
        meridiem = 'PM'
    elif h > 12:
        h -= 12
        meridiem = 'PM'
    return Time12(str(h), f"{m:02d}", meridiem)


def format_time_12(canonical: Optional[str]) -> str:
    """Human label "H:MM AM|PM", or "" when no time is set."""
    if not canonical:
        return ''
    hour, minute, meridiem = split_24_to_12(canonical)
    return f"{hour}:{minute} {meridiem}"


def parse_time_to_min(canonical: Optional[str]) -> int:
    """Minutes since midnight, for ordering only. Empty or junk -> 0."""
    if not canonical:
        return 0
    h, m = _split_hhmm(canonical)
    return h * 60 + m


def parse_typed_time(text: str) -> Time12:
    """Parse typed 12-hour text such as "9:30 PM", "9pm" or "12:05a.m.".

    Raises ValueError for anything that is not a valid 12-hour time.
    """
    m = _TYPED_RE.match(text or '')
    if not m:
        raise ValueError(f'Invalid time "{text}"; expected something like 9:30 PM.')
    hour = int(m.group(1))
    minute = int(m.group(2) or 0)
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        raise ValueError(f'Invalid time "{text}"; hour must be 1-12 and minute 0-59.')
    meridiem = 'PM' if m.group(3).lower() == 'p' else 'AM'
    return Time12(str(hour), f"{minute:02d}", meridiem)


__all__ = [
    'Time12', 'is_canonical', 'to_24_hour', 'split_24_to_12',
    'format_time_12', 'parse_time_to_min', 'parse_typed_time',
]
