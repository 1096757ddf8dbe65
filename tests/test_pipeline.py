from __future__ import annotations

import asyncio
from typing import Any

import pytest

from pyhud._constants import DEFAULT_STATE, HOST_ORIGIN
from pyhud._host import HostMessage
from pyhud.bus import NotificationBus
from pyhud.config import HudConfig
from pyhud.ingestion.handlers import HandlerContext
from pyhud.ingestion.pipeline import EventPipeline
from pyhud.state.events import ActionType, InboundEvent, RateLimitRule
from pyhud.state.store import ReactiveStore
from pyhud.state.validators import register_default_validators


class _Clock:
    def __init__(self, start: int = 10_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now


def _build(
    config: HudConfig | None = None,
    *,
    handlers: dict[ActionType, Any] | None = None,
    clock: _Clock | None = None,
) -> tuple[EventPipeline, ReactiveStore, list[tuple[str, Any]]]:
    store = ReactiveStore()
    store.initialize(DEFAULT_STATE)
    register_default_validators(store)
    bus = NotificationBus()
    notifications: list[tuple[str, Any]] = []
    bus.subscribe("*", lambda name, payload: notifications.append((name, payload)))
    pipeline = EventPipeline(
        store,
        bus,
        config or HudConfig(),
        handlers=handlers,
        clock=clock or _Clock(),
    )
    return pipeline, store, notifications


def _msg(data: Any, origin: str = HOST_ORIGIN) -> HostMessage:
    return HostMessage(origin=origin, data=data)


def _names(notifications: list[tuple[str, Any]]) -> list[str]:
    return [name for name, _ in notifications]


def test_updatemoney_end_to_end() -> None:
    pipeline, store, notifications = _build()

    assert pipeline.ingress(_msg({"action": "updatemoney", "cash": 500, "bank": 1200}))

    assert store.get("cash") == 500
    assert store.get("bank") == 1200
    assert notifications == [("moneyUpdated", {"cash": 500, "bank": 1200})]
    assert "action" not in notifications[0][1]


def test_rate_limit_drops_events_over_budget() -> None:
    config = HudConfig(rate_limits={"ping": RateLimitRule(max_events=2, window_ms=1000)})
    clock = _Clock()
    pipeline, _store, notifications = _build(config, clock=clock)

    results = []
    for _ in range(3):
        results.append(pipeline.ingress(_msg({"action": "ping"})))
        clock.now += 100

    assert results == [True, True, False]
    assert _names(notifications) == ["unknownEvent", "unknownEvent"]
    assert pipeline.stats().dropped_rate_limited == 1


def test_rate_limit_window_slides() -> None:
    config = HudConfig(rate_limits={"ping": RateLimitRule(max_events=1, window_ms=1000)})
    clock = _Clock()
    pipeline, _store, _notifications = _build(config, clock=clock)

    assert pipeline.ingress(_msg({"action": "ping"}))
    clock.now += 999
    assert pipeline.ingress(_msg({"action": "ping"})) is False
    clock.now += 1
    assert pipeline.ingress(_msg({"action": "ping"}))


def test_untrusted_origin_is_dropped() -> None:
    pipeline, store, notifications = _build()

    assert pipeline.ingress(_msg({"action": "updatemoney", "cash": 1}, origin="https://evil.example")) is False

    assert store.get("cash") == 0
    assert notifications == []
    assert pipeline.stats().dropped_untrusted == 1


def test_dev_origin_and_host_environment_are_trusted() -> None:
    pipeline, _store, _notifications = _build()
    assert pipeline.ingress(_msg({"action": "open"}, origin="http://localhost:3000"))

    host_pipeline, _store, _notifications = _build(HudConfig(host_environment=True))
    assert host_pipeline.ingress(_msg({"action": "open"}, origin="https://anything.example"))


def test_non_mapping_data_is_dropped() -> None:
    pipeline, _store, notifications = _build()

    assert pipeline.ingress(_msg("hudtick")) is False
    assert pipeline.ingress(_msg(None)) is False
    assert notifications == []
    assert pipeline.error_count == 0


def test_drain_is_fifo() -> None:
    order: list[str] = []

    def _record(_ctx: HandlerContext, event: InboundEvent) -> None:
        order.append(event.payload["name"])

    pipeline, _store, _notifications = _build(
        HudConfig(auto_drain=False),
        handlers={ActionType.OPEN: _record, ActionType.OPEN_SETTINGS: _record},
    )

    pipeline.ingress(_msg({"action": "open", "name": "A"}))
    pipeline.ingress(_msg({"action": "openSettings", "name": "B"}))
    pipeline.ingress(_msg({"action": "open", "name": "C"}))
    assert pipeline.queue_length == 3

    assert pipeline.drain() == 3
    assert order == ["A", "B", "C"]
    assert pipeline.queue_length == 0


def test_ingress_during_drain_is_processed_by_the_running_drain() -> None:
    order: list[str] = []
    pipeline: EventPipeline | None = None

    def _first(_ctx: HandlerContext, event: InboundEvent) -> None:
        order.append("first")
        assert pipeline is not None
        assert pipeline.is_draining
        pipeline.ingress(_msg({"action": "openSettings"}))
        # The nested ingress must not start a second drain loop.
        order.append("after-ingress")

    def _second(_ctx: HandlerContext, _event: InboundEvent) -> None:
        order.append("second")

    pipeline, _store, _notifications = _build(
        handlers={ActionType.OPEN: _first, ActionType.OPEN_SETTINGS: _second},
    )

    assert pipeline.ingress(_msg({"action": "open"}))
    assert order == ["first", "after-ingress", "second"]
    assert not pipeline.is_draining


def test_unknown_and_disallowed_actions_take_default_arm() -> None:
    config = HudConfig(allowed_actions=frozenset({"open"}))
    pipeline, store, notifications = _build(config)

    pipeline.ingress(_msg({"action": "mystery", "x": 1}))
    pipeline.ingress(_msg({"action": "updatemoney", "cash": 5}))
    pipeline.ingress(_msg({}))

    assert _names(notifications) == ["unknownEvent", "unknownEvent", "unknownEvent"]
    assert notifications[0][1]["action_type"] == "mystery"
    assert notifications[0][1]["payload"] == {"x": 1}
    assert store.get("cash") == 0


def test_handler_fault_is_reported_and_queue_continues() -> None:
    def _boom(_ctx: HandlerContext, _event: InboundEvent) -> None:
        raise RuntimeError("handler exploded")

    pipeline, store, notifications = _build(
        HudConfig(auto_drain=False),
        handlers={ActionType.OPEN: _boom},
    )

    pipeline.ingress(_msg({"action": "open"}))
    pipeline.ingress(_msg({"action": "updatemoney", "cash": 7}))
    pipeline.drain()

    assert _names(notifications) == ["eventError", "moneyUpdated"]
    fault = notifications[0][1]
    assert fault["context"] == "open"
    assert fault["error_type"] == "RuntimeError"
    assert "handler exploded" in fault["message"]
    assert pipeline.error_count == 1
    assert store.get("cash") == 7


def test_recovery_after_too_many_faults() -> None:
    def _boom(_ctx: HandlerContext, _event: InboundEvent) -> None:
        raise ValueError("bad payload")

    pipeline, store, notifications = _build(
        HudConfig(auto_drain=False),
        handlers={ActionType.OPEN: _boom},
    )

    for _ in range(60):
        pipeline.ingress(_msg({"action": "open"}))
    pipeline.drain()

    # The 51st fault trips recovery, which sheds the 9 events still queued.
    assert _names(notifications).count("eventError") == 51
    assert pipeline.queue_length == 0
    assert pipeline.error_count == 0
    assert pipeline.stats().recoveries == 1
    assert not pipeline.is_draining

    notifications.clear()
    assert pipeline.ingress(_msg({"action": "updatemoney", "cash": 42}))
    assert pipeline.drain() == 1
    assert store.get("cash") == 42
    assert _names(notifications) == ["moneyUpdated"]


def test_listener_fault_counts_as_runtime_fault() -> None:
    pipeline, _store, notifications = _build()

    def _bad_listener(_name: str, _payload: Any) -> None:
        raise RuntimeError("ui broke")

    unsubscribe = pipeline._bus.subscribe("moneyUpdated", _bad_listener)  # type: ignore[attr-defined]
    pipeline.ingress(_msg({"action": "updatemoney", "cash": 1}))
    unsubscribe()

    assert pipeline.error_count == 1
    errors = [payload for name, payload in notifications if name == "eventError"]
    assert len(errors) == 1
    assert errors[0]["context"] == "notification_listener"


def test_event_error_listener_fault_is_not_recounted() -> None:
    def _boom(_ctx: HandlerContext, _event: InboundEvent) -> None:
        raise RuntimeError("first fault")

    pipeline, _store, _notifications = _build(handlers={ActionType.OPEN: _boom})

    def _bad_error_listener(_name: str, _payload: Any) -> None:
        raise RuntimeError("error listener broke")

    pipeline._bus.subscribe("eventError", _bad_error_listener)  # type: ignore[attr-defined]
    pipeline.ingress(_msg({"action": "open"}))

    assert pipeline.error_count == 1


def test_stats_reflect_activity() -> None:
    pipeline, _store, _notifications = _build(HudConfig(resource_name="my-hud", auto_drain=False))
    pipeline.ingress(_msg({"action": "open"}))

    stats = pipeline.stats()
    assert stats.event_count == 1
    assert stats.queue_length == 1
    assert stats.history_size == 1
    assert stats.resource_name == "my-hud"
    assert stats.is_host_environment is False


@pytest.mark.asyncio
async def test_attached_loop_records_unhandled_errors() -> None:
    pipeline, _store, notifications = _build()
    loop = asyncio.get_running_loop()
    previous = loop.get_exception_handler()

    pipeline.attach(loop)
    try:
        loop.call_exception_handler({"message": "Task exception was never retrieved", "exception": KeyError("k")})
    finally:
        pipeline.detach()

    assert loop.get_exception_handler() is previous
    assert pipeline.error_count == 1
    assert notifications[-1][0] == "eventError"
    assert notifications[-1][1]["context"] == "unhandled_rejection"
    assert notifications[-1][1]["error_type"] == "KeyError"


def test_send_to_host_uses_host_channel() -> None:
    sent: list[tuple[str, Any]] = []

    class _Host:
        def send(self, action: str, payload: Any = None) -> None:
            sent.append((action, payload))

    store = ReactiveStore()
    pipeline = EventPipeline(store, NotificationBus(), HudConfig(), host=_Host())
    pipeline.send_to_host("restartHud")
    pipeline.send_to_host("setNuiFocus", {"focus": True, "cursor": True})

    assert sent == [("restartHud", {}), ("setNuiFocus", {"focus": True, "cursor": True})]

    # Without a host channel the request is dropped with a warning.
    EventPipeline(store, NotificationBus(), HudConfig()).send_to_host("restartHud")
