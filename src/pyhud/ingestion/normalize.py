"""Normalization helpers.

Centralizes defensive parsing of host payload fields and the
clamp-with-fallback policy used by the action handlers.
"""

from __future__ import annotations

import math
from typing import Any


def safe_number(value: Any) -> int | float | None:
    """Parse *value* as a finite number, or return ``None``.

    Integers stay integers. Numeric strings are parsed. Booleans, NaN,
    infinities and everything else are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text or text == "--":
            return None
        try:
            result = float(text)
        except ValueError:
            return None
        if not math.isfinite(result):
            return None
        return int(result) if result.is_integer() and "." not in text else result
    return None


def safe_str(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value)
    return text if text else None


def strict_flag(value: Any) -> bool | None:
    """Keep real booleans only; ``1``/``"true"`` are not flags."""
    return value if isinstance(value, bool) else None


def clamp_with_fallback(
    value: Any,
    fallback: Any,
    *,
    low: float | None = None,
    high: float | None = None,
) -> Any:
    """Clamp a numeric field into ``[low, high]``.

    Missing or non-numeric values are replaced by *fallback*, normally the
    previously stored value.
    """
    parsed = safe_number(value)
    if parsed is None:
        return fallback
    if low is not None and parsed < low:
        return low
    if high is not None and parsed > high:
        return high
    return parsed
