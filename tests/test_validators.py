from __future__ import annotations

from pyhud.state import validators
from pyhud.state.store import ReactiveStore


def test_number_rejects_bool_and_nan() -> None:
    assert validators.number(1)
    assert validators.number(2.5)
    assert not validators.number(True)
    assert not validators.number(float("nan"))
    assert not validators.number("1")


def test_number_range_is_inclusive() -> None:
    in_range = validators.number_range(0, 100)

    assert in_range(0, None)
    assert in_range(100, None)
    assert not in_range(100.01, None)
    assert not in_range(-1, None)
    assert not in_range("50", None)


def test_string_max_length() -> None:
    short = validators.string_max_length(3)

    assert short("abc", None)
    assert not short("abcd", None)
    assert not short(123, None)


def test_one_of_handles_unhashable_values() -> None:
    assert validators.theme_name("matrix")
    assert not validators.theme_name("vaporwave")
    assert not validators.theme_name(["matrix"])


def test_default_validators_guard_well_known_keys() -> None:
    store = ReactiveStore()
    store.initialize({"currentTheme": "cyberpunk", "menuOpen": False, "compassHeading": 0})
    validators.register_default_validators(store)

    assert store.set("currentTheme", "synthwave")
    assert not store.set("currentTheme", "neon")
    assert not store.set("menuOpen", 1)
    assert not store.set("compassHeading", 400)
    assert not store.set("gpsPosition", "center")
    assert not store.set("playerStats", [1, 2])
    assert store.set("gpsPosition", "bottom-left")
    assert store.stats().validators_count >= 15
