"""Lenient number and memory-unit extraction shared by the format parsers.

Nothing here raises: a missing or unreadable value is returned as None.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional, Pattern, Union

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_MEMORY_RE = re.compile(r"([0-9.]+)\s*(KB|MB|GB|K|M|G)?", re.IGNORECASE)

# Factors to MB; a bare number is already MB
_UNIT_TO_MB = {
    "GB": 1024.0,
    "G": 1024.0,
    "MB": 1.0,
    "M": 1.0,
    "KB": 1 / 1024,
    "K": 1 / 1024,
}


def match_number(text: str, pattern: Union[str, Pattern[str]]) -> Optional[float]:
    """Return the first capture group of ``pattern`` in ``text`` as a float.

    Args:
        text: Fragment to search (e.g. ``"(cost=0.00..4.50 rows=10)"``)
        pattern: Regex with one capture group, e.g. ``r"rows=([0-9.]+)"``.
            String patterns are matched case-insensitively.

    Returns:
        The number, or None when nothing matched or the capture is not numeric.
    """
    if not text:
        return None
    regex = re.compile(pattern, re.IGNORECASE) if isinstance(pattern, str) else pattern
    m = regex.search(text)
    if not m:
        return None
    try:
        return _finite(float(m.group(1)))
    except (TypeError, ValueError):
        return None


def leading_number(text: Any) -> Optional[float]:
    """First number found in a cell such as ``"12.5ms"`` or ``"[3.1,4.0]"``."""
    if text is None:
        return None
    m = _NUMBER_RE.search(str(text))
    return _finite(float(m.group(0))) if m else None


def _finite(number: float) -> Optional[float]:
    # overlong digit runs parse to inf
    return number if math.isfinite(number) else None


def as_number(value: Any, default: float = 0.0) -> float:
    """Coerce a JSON scalar to a finite float, falling back to ``default``.

    NaN, infinities and integers too large for a float count as missing.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except OverflowError:
        return default
    except (TypeError, ValueError):
        number = leading_number(value)
        if number is None:
            return default
    return number if math.isfinite(number) else default


def parse_memory(value: Any) -> Optional[float]:
    """Normalise a memory quantity to MB.

    ``"2GB"`` -> 2048.0, ``"512 KB"`` -> 0.5, ``"64"`` -> 64.0, ``None`` -> None.
    Non-finite quantities are treated as unknown.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            amount = float(value)
        except OverflowError:
            return None
        return amount if math.isfinite(amount) else None
    m = _MEMORY_RE.search(str(value))
    if not m:
        return None
    try:
        amount = float(m.group(1))
    except ValueError:
        return None
    unit = (m.group(2) or "MB").upper()
    mb = amount * _UNIT_TO_MB[unit]
    return mb if math.isfinite(mb) else None
