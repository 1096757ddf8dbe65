from __future__ import annotations

import pytest

from pyhud._breaker import BreakerState, ErrorBreaker


def test_trips_only_when_count_exceeds_threshold() -> None:
    trips: list[int] = []
    breaker = ErrorBreaker(3, lambda: trips.append(1))

    assert [breaker.record() for _ in range(3)] == [False, False, False]
    assert breaker.count == 3
    assert trips == []

    assert breaker.record() is True
    assert trips == [1]
    assert breaker.count == 0
    assert breaker.trips == 1
    assert breaker.state is BreakerState.CLOSED


def test_state_is_open_while_reset_action_runs() -> None:
    seen: list[BreakerState] = []
    breaker: ErrorBreaker | None = None

    def _on_trip() -> None:
        assert breaker is not None
        seen.append(breaker.state)
        # Errors raised while resetting are counted but never re-trip.
        assert breaker.record() is False

    breaker = ErrorBreaker(1, _on_trip)
    breaker.record()
    breaker.record()

    assert seen == [BreakerState.OPEN]
    assert breaker.state is BreakerState.CLOSED
    assert breaker.count == 1


def test_breaker_closes_even_if_reset_action_fails() -> None:
    def _on_trip() -> None:
        raise RuntimeError("reset failed")

    breaker = ErrorBreaker(1, _on_trip)
    breaker.record()
    with pytest.raises(RuntimeError):
        breaker.record()

    assert breaker.state is BreakerState.CLOSED


def test_reset_zeroes_counter_without_tripping() -> None:
    trips: list[int] = []
    breaker = ErrorBreaker(2, lambda: trips.append(1))
    breaker.record()
    breaker.record()
    breaker.reset()
    breaker.record()

    assert breaker.count == 1
    assert trips == []


def test_threshold_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ErrorBreaker(0, lambda: None)
