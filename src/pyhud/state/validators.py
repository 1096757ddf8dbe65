"""Reusable validator factories for :class:`pyhud.state.store.ReactiveStore`.

Every validator has the store's ``(new_value, old_value) -> bool`` shape.
Bounds checking of host data happens in the ingestion handlers; these only
guard the store against values of the wrong kind.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from pyhud._constants import HUD_POSITIONS, THEME_NAMES

if TYPE_CHECKING:
    from pyhud.state.store import ReactiveStore, Validator


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def number(value: Any, _old: Any = None) -> bool:
    """Accept any real number (booleans and NaN excluded)."""
    return _is_number(value)


def number_range(minimum: float, maximum: float) -> Validator:
    def _validate(value: Any, _old: Any = None) -> bool:
        return _is_number(value) and minimum <= value <= maximum

    return _validate


def string_max_length(max_length: int) -> Validator:
    def _validate(value: Any, _old: Any = None) -> bool:
        return isinstance(value, str) and len(value) <= max_length

    return _validate


def boolean(value: Any, _old: Any = None) -> bool:
    return isinstance(value, bool)


def one_of(choices: Iterable[Any]) -> Validator:
    """Enum-membership validator."""
    allowed = frozenset(choices)

    def _validate(value: Any, _old: Any = None) -> bool:
        try:
            return value in allowed
        except TypeError:
            # unhashable values are never members
            return False

    return _validate


def mapping(value: Any, _old: Any = None) -> bool:
    return isinstance(value, dict)


theme_name = one_of(THEME_NAMES)
hud_position = one_of(HUD_POSITIONS)
percentage = number_range(0, 100)
opacity = number_range(0, 1)


def register_default_validators(store: ReactiveStore) -> None:
    """Install validators for the overlay's well-known keys."""
    for key in ("currentTheme", "gpsTheme"):
        store.add_validator(key, theme_name)
    store.add_validator("gpsPosition", hud_position)
    store.add_validator("compassHeading", number_range(0, 360))
    store.add_validator("neonIntensity", number_range(0, 2))
    for key in ("cash", "bank"):
        store.add_validator(key, number)
    for key in (
        "menuOpen",
        "settingsMenuOpen",
        "hudVisible",
        "inVehicle",
        "compassVisible",
        "gpsActive",
        "animationsEnabled",
    ):
        store.add_validator(key, boolean)
    for key in ("playerStats", "vehicleStats", "hudState", "settings"):
        store.add_validator(key, mapping)
