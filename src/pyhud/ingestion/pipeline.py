"""Inbound event pipeline.

Flow for every raw host message:

1. origin check against the trusted-origin allowlist
2. per-action rate limit, counted over the accepted-event history
3. append to the FIFO queue and the bounded history
4. drain: pop events in order and route each to exactly one handler

Failures never escape. A handler fault is counted, reported as an
``eventError`` notification, and the drain continues. Once the fault count
exceeds the configured threshold the pipeline sheds its queue and re-runs its
setup.
"""

from __future__ import annotations

import asyncio
import logging
import traceback
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from pyhud._breaker import ErrorBreaker
from pyhud._host import HostMessage, HostSender, is_trusted_origin
from pyhud._redact import redact_for_log
from pyhud.bus import NotificationBus
from pyhud.config import HudConfig
from pyhud.exceptions import (
    GlobalRuntimeFaultError,
    HandlerFaultError,
    RateLimitedError,
    UntrustedOriginError,
)
from pyhud.ingestion.handlers import HANDLERS, Handler, HandlerContext, handle_unknown
from pyhud.state.events import ActionType, EventSource, InboundEvent, RateLimitRule, _now_ms
from pyhud.state.store import ReactiveStore
from pyhud.theme import ThemeCollaborator

_logger = logging.getLogger(__name__)

EVENT_ERROR = "eventError"

_PERFORMANCE_CHECK_EVERY = 100
_HIGH_EVENT_RATE = 1000.0


@dataclass(frozen=True, slots=True)
class FaultRecord:
    """Diagnostic payload of an ``eventError`` notification."""

    context: str
    message: str
    error_type: str
    data: Any = None
    stack: str | None = None
    timestamp: int = field(default_factory=_now_ms)


@dataclass(frozen=True, slots=True)
class PipelineStats:
    event_count: int
    error_count: int
    queue_length: int
    history_size: int
    is_processing: bool
    is_host_environment: bool
    resource_name: str
    dropped_untrusted: int
    dropped_rate_limited: int
    recoveries: int


class EventPipeline:
    """Admits host messages, queues them and dispatches them to handlers.

    Args:
        store: Store the handlers write to.
        bus: Outbound notification fan-out.
        config: Overlay configuration (rate limits, thresholds, allowlists).
        theme: Optional theme/alert collaborator for visual feedback.
        host: Channel for host-bound requests.
        handlers: Overrides merged over the default action table.
        clock: Millisecond clock used for event timestamps and rate limits.

    """

    def __init__(
        self,
        store: ReactiveStore,
        bus: NotificationBus,
        config: HudConfig | None = None,
        *,
        theme: ThemeCollaborator | None = None,
        host: HostSender | None = None,
        handlers: Mapping[ActionType, Handler] | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._config = config or HudConfig()
        self._store = store
        self._bus = bus
        self._host = host
        self._clock = clock
        self._handlers: dict[ActionType, Handler] = {**HANDLERS, **(handlers or {})}
        self._context = HandlerContext(store=store, emit=self.egress, config=self._config, theme=theme)

        self._queue: deque[InboundEvent] = deque()
        self._history: deque[InboundEvent] = deque(maxlen=self._config.history_size)
        self._draining = False

        self._rate_limits: dict[str, RateLimitRule] = {}
        self._allowed_actions: frozenset[str] = frozenset()
        self._breaker = ErrorBreaker(
            self._config.pipeline_error_threshold,
            self._recover,
            name="EventPipeline",
        )
        self._loop: asyncio.AbstractEventLoop | None = None
        self._previous_loop_handler: Any = None

        self._event_count = 0
        self._dropped_untrusted = 0
        self._dropped_rate_limited = 0
        self._recoveries = 0
        self._last_performance_check = clock()
        self._events_since_check = 0

        self._setup()

    # ------------------------------------------------------------------
    # Setup and recovery
    # ------------------------------------------------------------------

    def _setup(self) -> None:
        """(Re)attach listeners and seed the rate-limit table and allowlist."""
        self._bus.set_error_hook(self._on_listener_error)
        if self._loop is not None:
            self._loop.set_exception_handler(self._on_loop_exception)
        self._rate_limits = dict(self._config.rate_limits)
        self._allowed_actions = frozenset(self._config.allowed_actions)
        _logger.debug(
            "Event pipeline ready: %d rate limits, %d allowed actions",
            len(self._rate_limits),
            len(self._allowed_actions),
        )

    def _recover(self) -> None:
        _logger.warning("Too many errors, attempting recovery (dropping %d queued events)", len(self._queue))
        self._queue.clear()
        self._draining = False
        self._recoveries += 1
        self._setup()
        _logger.info("Error recovery completed")

    def attach(self, loop: asyncio.AbstractEventLoop) -> None:
        """Record unhandled asyncio errors on *loop* as runtime faults."""
        if self._loop is not loop:
            self.detach()
            self._previous_loop_handler = loop.get_exception_handler()
        self._loop = loop
        loop.set_exception_handler(self._on_loop_exception)

    def detach(self) -> None:
        loop = self._loop
        self._loop = None
        if loop is not None:
            loop.set_exception_handler(self._previous_loop_handler)
        self._previous_loop_handler = None

    # ------------------------------------------------------------------
    # Ingress
    # ------------------------------------------------------------------

    @property
    def config(self) -> HudConfig:
        return self._config

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    @property
    def is_draining(self) -> bool:
        return self._draining

    @property
    def error_count(self) -> int:
        return self._breaker.count

    @property
    def history(self) -> tuple[InboundEvent, ...]:
        return tuple(self._history)

    def validate_origin(self, origin: str) -> bool:
        return is_trusted_origin(
            origin,
            host_environment=self._config.host_environment,
            trusted_origins=self._config.trusted_origins,
            dev_origin_markers=self._config.dev_origin_markers,
        )

    def check_rate_limit(self, action: str) -> bool:
        """Whether one more *action* event fits in its trailing window."""
        rule = self._rate_limits.get(action) if action else None
        if rule is None:
            return True
        window_start = self._clock() - rule.window_ms
        recent = sum(1 for event in self._history if event.action_type == action and event.timestamp > window_start)
        return recent < rule.max_events

    def _admit(self, message: HostMessage) -> InboundEvent | None:
        """Build the queued event, raising on untrusted or rate-limited messages."""
        if not self.validate_origin(message.origin):
            raise UntrustedOriginError(message.origin)

        data = message.data
        if not isinstance(data, dict):
            _logger.warning("Invalid message data: %s", redact_for_log(data))
            return None

        payload = dict(data)
        action = payload.pop("action", None)
        event = InboundEvent(
            action_type=action,
            payload=payload,
            timestamp=self._clock(),
            source=EventSource.HOST if self._config.host_environment else EventSource.DEVELOPMENT,
        )
        if not self.check_rate_limit(event.action_type):
            raise RateLimitedError(event.action_type)
        return event

    def ingress(self, message: HostMessage) -> bool:
        """Admit one raw host message. Returns whether it was queued."""
        try:
            try:
                event = self._admit(message)
            except UntrustedOriginError as exc:
                self._dropped_untrusted += 1
                _logger.warning("%s", exc)
                return False
            except RateLimitedError as exc:
                self._dropped_rate_limited += 1
                _logger.warning("%s", exc)
                return False
            if event is None:
                return False

            self._enqueue(event)
            if self._config.auto_drain:
                self.drain()
            return True
        except Exception as exc:
            self.report_runtime_fault("incoming_message", exc, data=message.data)
            return False

    def _enqueue(self, event: InboundEvent) -> None:
        self._queue.append(event)
        self._history.append(event)
        self._event_count += 1
        self._events_since_check += 1
        if self._event_count % _PERFORMANCE_CHECK_EVERY == 0:
            self._performance_check()

    def _performance_check(self) -> None:
        now = self._clock()
        elapsed_ms = now - self._last_performance_check
        if elapsed_ms > 0:
            rate = self._events_since_check / (elapsed_ms / 1000)
            if rate > _HIGH_EVENT_RATE:
                _logger.warning("High event rate detected: %.2f events/sec", rate)
        self._last_performance_check = now
        self._events_since_check = 0

    # ------------------------------------------------------------------
    # Drain and dispatch
    # ------------------------------------------------------------------

    def drain(self) -> int:
        """Dispatch queued events in FIFO order until the queue is empty.

        Calling ``drain`` while a drain is running is a no-op. Returns the
        number of events dispatched by this call.
        """
        if self._draining:
            return 0

        self._draining = True
        processed = 0
        try:
            while self._queue:
                event = self._queue.popleft()
                processed += 1
                self._dispatch(event)
        except Exception as exc:
            self.report_runtime_fault("queue_processing", exc)
        finally:
            self._draining = False
        return processed

    def resolve_handler(self, action: str) -> Handler:
        """Handler for *action*; unknown or non-allowlisted actions get the default arm."""
        action_type = ActionType.parse(action) if action in self._allowed_actions else None
        if action_type is None:
            return handle_unknown
        return self._handlers.get(action_type, handle_unknown)

    def _dispatch(self, event: InboundEvent) -> None:
        handler = self.resolve_handler(event.action_type)
        _logger.debug("Dispatching %s %s", event.action_type, redact_for_log(event.payload))
        try:
            handler(self._context, event)
        except Exception as exc:
            fault = HandlerFaultError(event.action_type, str(exc))
            fault.__cause__ = exc
            self.report_fault(event.action_type or "unknown", fault, data=event.payload)

    # ------------------------------------------------------------------
    # Faults
    # ------------------------------------------------------------------

    def report_fault(self, context: str, error: BaseException, *, data: Any = None) -> FaultRecord:
        """Count a fault, log it and broadcast it as ``eventError``."""
        cause = error.__cause__ or error
        record = FaultRecord(
            context=context,
            message=str(error),
            error_type=type(cause).__name__,
            data=redact_for_log(data),
            stack="".join(traceback.format_exception(cause)) if cause.__traceback__ else None,
            timestamp=self._clock(),
        )
        _logger.error("Event error in %s: %s", context, record.message, exc_info=cause)
        self._bus.emit(EVENT_ERROR, asdict(record))
        self._breaker.record()
        return record

    def report_runtime_fault(self, context: str, error: BaseException, *, data: Any = None) -> FaultRecord:
        """Record an exception that escaped the pipeline's own instrumentation."""
        fault = GlobalRuntimeFaultError(context, str(error))
        fault.__cause__ = error
        return self.report_fault(context, fault, data=data)

    def _on_listener_error(self, name: str, error: BaseException) -> None:
        if name == EVENT_ERROR:
            # Reporting would emit eventError again.
            return
        self.report_runtime_fault("notification_listener", error, data={"notification": name})

    def _on_loop_exception(self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        error = context.get("exception")
        if error is None:
            error = GlobalRuntimeFaultError("unhandled_rejection", str(context.get("message", "")))
        self.report_runtime_fault("unhandled_rejection", error)

    # ------------------------------------------------------------------
    # Egress and diagnostics
    # ------------------------------------------------------------------

    def egress(self, name: str, payload: Any = None) -> int:
        """Broadcast a notification to the presentation layer.

        Handlers forward ``event.payload``, which holds the inbound message
        fields minus ``action``; the action is carried by ``name`` and, for
        ``unknownEvent``, by the ``action_type`` field.
        """
        return self._bus.emit(name, payload)

    def send_to_host(self, action: str, payload: Mapping[str, Any] | None = None) -> None:
        """Best-effort, fire-and-forget request to the host."""
        if self._host is None:
            _logger.warning("No host channel, dropping host request: %s", action)
            return
        self._host.send(action, payload or {})

    def stats(self) -> PipelineStats:
        return PipelineStats(
            event_count=self._event_count,
            error_count=self._breaker.count,
            queue_length=len(self._queue),
            history_size=len(self._history),
            is_processing=self._draining,
            is_host_environment=self._config.host_environment,
            resource_name=self._config.resource_name,
            dropped_untrusted=self._dropped_untrusted,
            dropped_rate_limited=self._dropped_rate_limited,
            recoveries=self._recoveries,
        )
