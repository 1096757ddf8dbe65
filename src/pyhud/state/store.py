"""Reactive in-memory state store.

Holds every UI-relevant value of the overlay. Values are cloned on the way in
and on the way out, so neither the pipeline nor the presentation layer can
alias store internals. Writes go through one path: clone, validate, compare,
store, notify.

The store never raises across its public methods. Failures are logged and
reported as ``False``; errors count towards a breaker that resets the store to
empty state once the threshold is exceeded.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from pyhud._breaker import ErrorBreaker
from pyhud.exceptions import InvalidKeyError, ValidationRejectedError
from pyhud.state.policy import deep_clone, deep_equal, is_valid_key

_logger = logging.getLogger(__name__)

WILDCARD = "*"

Listener = Callable[[Any, Any, str], None]
"""Change callback invoked as ``callback(new_value, old_value, key)``."""

Validator = Callable[[Any, Any], bool]
"""Predicate invoked as ``validator(new_value, old_value)``."""

Unsubscribe = Callable[[], None]

_MISSING: Any = object()

_PERFORMANCE_CHECK_EVERY = 1000
_LARGE_STATE_KEYS = 10_000
_HIGH_OPERATION_RATE = 10_000.0


def _noop() -> None:
    return None


@dataclass(frozen=True, slots=True)
class StoreStats:
    keys_count: int
    listeners_count: int
    validators_count: int
    operation_count: int
    error_count: int
    uptime_seconds: float
    operations_per_second: float
    resets: int


class ReactiveStore:
    """Typed key/value container with change notification and validation.

    Usage::

        store = ReactiveStore()
        store.initialize({"theme": "cyberpunk"})
        unsubscribe = store.subscribe("theme", lambda new, old, key: ...)
        store.set("theme", "matrix")
    """

    def __init__(
        self,
        *,
        error_threshold: int = 50,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._state: dict[str, Any] = {}
        # dict used as an insertion-ordered set of callbacks
        self._listeners: dict[str, dict[Listener, None]] = {}
        self._validators: dict[str, Validator] = {}
        self._initialized = False
        self._clock = clock
        self._operation_count = 0
        self._stats_started = clock()
        self._breaker = ErrorBreaker(error_threshold, self._self_heal, name="ReactiveStore")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, defaults: Mapping[str, Any] | None = None, merge: bool = False) -> bool:
        """Seed the store with *defaults* without notifying subscribers.

        A second call is refused unless ``merge`` is true, in which case only
        keys missing from the current state are seeded.
        """
        if self._initialized and not merge:
            _logger.warning("ReactiveStore already initialized")
            return False

        seed = dict(defaults or {})
        try:
            for key in seed:
                if not is_valid_key(key):
                    raise InvalidKeyError(key)
            replace = not (merge and self._initialized)
            staged = {
                key: deep_clone(value) for key, value in seed.items() if replace or key not in self._state
            }
            if replace:
                self._state.clear()
            self._state.update(staged)
        except Exception:
            self._record_error("Failed to initialize state")
            return False

        self._initialized = True
        _logger.debug("State initialized with %d keys", len(seed))
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return a clone of the value for *key*, or *default*."""
        if not is_valid_key(key):
            _logger.warning("Invalid key for get: %r", key)
            return default
        value = self._state.get(key, _MISSING)
        if value is _MISSING:
            return default
        try:
            return deep_clone(value)
        except Exception:
            self._record_error(f"Failed to get state for key: {key}")
            return default

    def has(self, key: str) -> bool:
        return is_valid_key(key) and key in self._state

    def keys(self) -> list[str]:
        return list(self._state)

    def values(self) -> list[Any]:
        return [deep_clone(value) for value in self._state.values()]

    def get_all(self) -> dict[str, Any]:
        """Return a deep-cloned snapshot of the whole state."""
        return {key: deep_clone(value) for key, value in self._state.items()}

    def __contains__(self, key: object) -> bool:
        return is_valid_key(key) and key in self._state

    def __len__(self) -> int:
        return len(self._state)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _prepare(self, key: Any, value: Any) -> tuple[Any, Any]:
        """Clone and validate one write. Returns ``(new_value, old_value)``."""
        if not is_valid_key(key):
            raise InvalidKeyError(key)
        old_value = self._state.get(key, _MISSING)
        cloned = deep_clone(value)
        validator = self._validators.get(key)
        if validator is not None:
            previous = None if old_value is _MISSING else old_value
            if not validator(cloned, previous):
                raise ValidationRejectedError(key)
        return cloned, old_value

    @staticmethod
    def _changed(new_value: Any, old_value: Any) -> bool:
        if old_value is _MISSING:
            return True
        return not deep_equal(new_value, old_value)

    def set(self, key: str, value: Any, silent: bool = False) -> bool:
        """Store a clone of *value* under *key*.

        Returns ``False`` without mutating anything when the key is invalid or
        the key's validator rejects the value. Writing an equal value succeeds
        without notifying.
        """
        try:
            new_value, old_value = self._prepare(key, value)
        except InvalidKeyError:
            self._record_error(f"Invalid key: {key!r}", exc_info=False)
            return False
        except ValidationRejectedError:
            _logger.warning("Validation failed for key: %s", key)
            return False
        except Exception:
            self._record_error(f"Failed to set state for key: {key}")
            return False

        if not self._changed(new_value, old_value):
            return True

        self._state[key] = new_value
        self._count_operation()
        if not silent:
            self._notify(key, new_value, None if old_value is _MISSING else old_value)
        _logger.debug("State updated: %s", key)
        return True

    def update_multiple(self, updates: Mapping[str, Any], silent: bool = False) -> bool:
        """Apply several writes atomically.

        Every pair is validated before anything is written. One rejected pair
        aborts the whole batch. After the batch is applied, one notification
        fires per key whose value actually changed, in the batch's order.
        """
        if not isinstance(updates, Mapping):
            self._record_error("Invalid updates object", exc_info=False)
            return False

        staged: list[tuple[str, Any, Any]] = []
        try:
            for key, value in updates.items():
                new_value, old_value = self._prepare(key, value)
                staged.append((key, new_value, old_value))
        except InvalidKeyError as exc:
            self._record_error(f"Invalid key in batch update: {exc.key!r}", exc_info=False)
            return False
        except ValidationRejectedError as exc:
            _logger.warning("Validation failed for key in batch: %s", exc.key)
            return False
        except Exception:
            self._record_error("Failed batch update")
            return False

        changes = [(key, new, old) for key, new, old in staged if self._changed(new, old)]
        for key, new_value, _old in changes:
            self._state[key] = new_value
        if changes:
            self._count_operation()

        if not silent:
            for key, new_value, old_value in changes:
                self._notify(key, new_value, None if old_value is _MISSING else old_value)

        _logger.debug("Batch update completed: %d keys, %d changed", len(staged), len(changes))
        return True

    def delete(self, key: str, silent: bool = False) -> bool:
        """Remove *key*. Deleting a missing key is a successful no-op."""
        if not is_valid_key(key):
            self._record_error(f"Invalid key for delete: {key!r}", exc_info=False)
            return False
        if key not in self._state:
            return True
        old_value = self._state.pop(key)
        self._count_operation()
        if not silent:
            self._notify(key, None, old_value)
        _logger.debug("State key deleted: %s", key)
        return True

    def clear(self, silent: bool = False) -> None:
        """Drop every key, notifying each key's subscribers unless silenced."""
        old_state = self._state
        self._state = {}
        self._count_operation()
        if not silent:
            for key, old_value in old_state.items():
                self._notify(key, None, old_value)
        _logger.debug("State cleared")

    # ------------------------------------------------------------------
    # Subscriptions and validators
    # ------------------------------------------------------------------

    def subscribe(self, key: str, callback: Listener) -> Unsubscribe:
        """Register *callback* for changes to *key* (``"*"`` for every key).

        Returns a function that removes the registration.
        """
        if not is_valid_key(key) or not callable(callback):
            self._record_error("Invalid subscription parameters", exc_info=False)
            return _noop

        self._listeners.setdefault(key, {})[callback] = None
        _logger.debug("Subscribed to key: %s", key)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key)
            if listeners is not None:
                listeners.pop(callback, None)
                if not listeners:
                    del self._listeners[key]
            _logger.debug("Unsubscribed from key: %s", key)

        return unsubscribe

    def subscribe_all(self, callback: Listener) -> Unsubscribe:
        return self.subscribe(WILDCARD, callback)

    def add_validator(self, key: str, validator: Validator) -> bool:
        """Install *validator* for *key*, replacing any previous one."""
        if not is_valid_key(key) or not callable(validator):
            self._record_error("Invalid validator parameters", exc_info=False)
            return False
        self._validators[key] = validator
        _logger.debug("Validator added for key: %s", key)
        return True

    def remove_validator(self, key: str) -> bool:
        return self._validators.pop(key, None) is not None

    def _notify(self, key: str, new_value: Any, old_value: Any) -> None:
        # Snapshot so callbacks may unsubscribe while being notified.
        for listener_key in (key, WILDCARD):
            listeners = tuple(self._listeners.get(listener_key, ()))
            for callback in listeners:
                try:
                    # Per-callback copies; listeners never hold stored objects.
                    callback(deep_clone(new_value), deep_clone(old_value), key)
                except Exception:
                    self._record_error(f"Listener error for key: {key}")

    # ------------------------------------------------------------------
    # Diagnostics and self-healing
    # ------------------------------------------------------------------

    @property
    def error_count(self) -> int:
        return self._breaker.count

    def stats(self) -> StoreStats:
        uptime = max(self._clock() - self._stats_started, 0.0)
        return StoreStats(
            keys_count=len(self._state),
            listeners_count=sum(len(listeners) for listeners in self._listeners.values()),
            validators_count=len(self._validators),
            operation_count=self._operation_count,
            error_count=self._breaker.count,
            uptime_seconds=uptime,
            operations_per_second=(self._operation_count / uptime) if uptime > 0 else 0.0,
            resets=self._breaker.trips,
        )

    def reset_stats(self) -> None:
        self._operation_count = 0
        self._breaker.reset()
        self._stats_started = self._clock()

    def _count_operation(self) -> None:
        self._operation_count += 1
        if self._operation_count % _PERFORMANCE_CHECK_EVERY == 0:
            self._performance_check()

    def _performance_check(self) -> None:
        stats = self.stats()
        if stats.operations_per_second > _HIGH_OPERATION_RATE:
            _logger.warning("High operation rate detected: %.2f ops/sec", stats.operations_per_second)
        if stats.keys_count > _LARGE_STATE_KEYS:
            _logger.warning("Large state size detected: %d keys", stats.keys_count)

    def _record_error(self, message: str, *, exc_info: bool = True) -> None:
        _logger.error(message, exc_info=exc_info)
        self._breaker.record()

    def _self_heal(self) -> None:
        """Drop all state; subscribers of every dropped key see ``(None, old, key)``.

        Subscriptions and validators survive the reset.
        """
        _logger.error("ReactiveStore: too many errors, resetting to empty state")
        self.clear(silent=False)
