"""Error-threshold circuit breaker.

Both the store and the pipeline tolerate a bounded number of errors and then
run a reset action instead of crashing. The breaker keeps the counting and the
reset action separate so each can be exercised on its own.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

_logger = logging.getLogger(__name__)


class BreakerState(StrEnum):
    CLOSED = "closed"
    OPEN = "open"


class ErrorBreaker:
    """Counts errors and trips once the count exceeds ``threshold``.

    Tripping moves the breaker to ``OPEN``, runs ``on_trip`` and then closes it
    again with a zero counter. The counter is reset *before* ``on_trip`` runs so
    errors raised while resetting start a fresh count.
    """

    def __init__(self, threshold: int, on_trip: Callable[[], None], *, name: str = "breaker") -> None:
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        self._threshold = threshold
        self._on_trip = on_trip
        self._name = name
        self._count = 0
        self._state = BreakerState.CLOSED
        self._trips = 0

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def count(self) -> int:
        return self._count

    @property
    def state(self) -> BreakerState:
        return self._state

    @property
    def trips(self) -> int:
        """How many times the breaker has tripped since construction."""
        return self._trips

    def record(self) -> bool:
        """Record one error. Returns ``True`` if this error tripped the breaker."""
        if self._state is BreakerState.OPEN:
            # Error raised from inside on_trip; counted but never re-trips.
            self._count += 1
            return False
        self._count += 1
        if self._count <= self._threshold:
            return False
        self.trip()
        return True

    def trip(self) -> None:
        """Open the breaker, run the reset action and close it again."""
        _logger.error("%s: %d errors (threshold %d), resetting", self._name, self._count, self._threshold)
        self._state = BreakerState.OPEN
        self._count = 0
        self._trips += 1
        try:
            self._on_trip()
        finally:
            self._state = BreakerState.CLOSED

    def reset(self) -> None:
        """Zero the counter without running the reset action."""
        self._count = 0
        self._state = BreakerState.CLOSED
