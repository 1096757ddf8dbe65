"""Value policy for the reactive store.

Key validity, cloning and change detection live here so the store itself only
deals with bookkeeping and notification.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

MAX_KEY_LENGTH = 255


def is_valid_key(key: Any) -> bool:
    return isinstance(key, str) and 0 < len(key) <= MAX_KEY_LENGTH


def deep_clone(value: Any) -> Any:
    """Return a structural copy of *value* that shares no mutable state."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return copy.deepcopy(value)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def deep_equal(a: Any, b: Any) -> bool:
    """Structural equality used for change detection.

    Unlike ``==`` this keeps booleans distinct from numbers (``True`` does not
    equal ``1``) and treats a list and a tuple with the same items as equal.
    ``1`` and ``1.0`` compare equal.
    """
    if a is b:
        return True
    if a is None or b is None:
        return False
    if _is_bool(a) != _is_bool(b):
        return False

    if isinstance(a, Mapping) or isinstance(b, Mapping):
        if not (isinstance(a, Mapping) and isinstance(b, Mapping)):
            return False
        if a.keys() != b.keys():
            return False
        return all(deep_equal(a[key], b[key]) for key in a)

    if isinstance(a, (list, tuple)) or isinstance(b, (list, tuple)):
        if not (isinstance(a, (list, tuple)) and isinstance(b, (list, tuple))):
            return False
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b, strict=True))

    return bool(a == b)
