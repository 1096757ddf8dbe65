"""Outbound notification fan-out.

The pipeline announces every handled action under a semantic name
(``hudDataUpdated``, ``moneyUpdated`` ...). Any number of listeners may
subscribe to a name or to every name. Delivery is synchronous, unacknowledged
and without backpressure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

_logger = logging.getLogger(__name__)

ANY_NOTIFICATION = "*"

NotificationListener = Callable[[str, Any], None]
"""Listener invoked as ``listener(name, payload)``."""

ListenerErrorHook = Callable[[str, BaseException], None]


class NotificationBus:
    """Fan-out of named notifications to registered listeners.

    A listener that raises is logged and reported to ``on_listener_error``;
    the remaining listeners still run.
    """

    def __init__(self, *, on_listener_error: ListenerErrorHook | None = None) -> None:
        self._listeners: dict[str, dict[NotificationListener, None]] = {}
        self._on_listener_error = on_listener_error
        self._emitted = 0

    @property
    def emitted_count(self) -> int:
        return self._emitted

    @property
    def listener_count(self) -> int:
        return sum(len(listeners) for listeners in self._listeners.values())

    def set_error_hook(self, hook: ListenerErrorHook | None) -> None:
        self._on_listener_error = hook

    def subscribe(self, name: str, listener: NotificationListener) -> Callable[[], None]:
        """Register *listener* for *name* (``"*"`` for every notification)."""
        self._listeners.setdefault(name, {})[listener] = None

        def unsubscribe() -> None:
            listeners = self._listeners.get(name)
            if listeners is not None:
                listeners.pop(listener, None)
                if not listeners:
                    del self._listeners[name]

        return unsubscribe

    def emit(self, name: str, payload: Any = None) -> int:
        """Deliver *payload* to every listener of *name*. Returns the delivery count."""
        self._emitted += 1
        delivered = 0
        for key in (name, ANY_NOTIFICATION):
            for listener in tuple(self._listeners.get(key, ())):
                try:
                    listener(name, payload)
                except Exception as exc:
                    _logger.error("Notification listener for %s failed", name, exc_info=True)
                    if self._on_listener_error is not None:
                        self._on_listener_error(name, exc)
                else:
                    delivered += 1
        return delivered
