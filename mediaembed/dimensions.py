"""Dimension argument parsing. Turns user-supplied width/height into bounded ints."""

from __future__ import annotations

import re
from typing import Optional

# Integer syntax accepted by the wiki host: optional sign, no leading zeros
_INT_RE = re.compile(r"^\s*([+-]?)(0|[1-9][0-9]*)\s*$")
_PX_SUFFIX_RE = re.compile(r"px$", re.IGNORECASE)
# Longer digit runs overflow a 64-bit int and count as unparseable
MAX_INT_DIGITS = 18


def is_empty(value: Optional[str]) -> bool:
    """Return True for values the host treats as not supplied ("", "0", None)."""
    return value is None or value == "" or value == "0"


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse a strict integer string. Returns None if it is not one."""
    if value is None:
        return None
    m = _INT_RE.match(value)
    if not m or len(m.group(2)) > MAX_INT_DIGITS:
        return None
    number = int(m.group(2))
    return -number if m.group(1) == "-" else number


def parse_dimension(
    value: Optional[str],
    default: int,
    max_value: Optional[int] = None,
    min_value: int = 0,
) -> int:
    """
    Parse a dimension argument in absolute pixels, optionally suffixed with 'px'.

    Empty input returns ``default`` as is. Unparseable input also returns
    ``default``; parseable input outside [min_value, max_value] is clamped.
    ``max_value`` falls back to ``default`` when not given.
    """
    if is_empty(value):
        return default

    if max_value is None:
        max_value = default

    parsed = parse_int(_PX_SUFFIX_RE.sub("", value.strip()))
    if parsed is None:
        return default

    if parsed < min_value:
        return min_value
    if parsed > max_value:
        return max_value
    return parsed
