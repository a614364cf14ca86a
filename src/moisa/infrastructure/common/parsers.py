"""Parsing utilities for loosely typed request and upstream values."""

from __future__ import annotations

import re

# Optional sign and ASCII digits only; int() alone would also accept
# "2_0" or non-ASCII digits.
_INT_RE = re.compile(r"\s*([+-]?[0-9]+)\s*", re.ASCII)


def parse_int(value: str | None) -> int | None:
    """Parse a decimal integer string.

    Args:
        value: Raw string (query parameter, id segment, JSON field).

    Returns:
        The integer, or None when the value is missing or not a plain
        decimal integer.
    """
    if not value:
        return None
    match = _INT_RE.fullmatch(value)
    if match is None:
        return None
    return int(match.group(1))
