"""pyhud - Reactive state and event pipeline core for game HUD overlays."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhud")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhud._breaker import BreakerState, ErrorBreaker
from pyhud._host import HostClient, HostMessage
from pyhud.bus import NotificationBus
from pyhud.config import HudConfig
from pyhud.exceptions import (
    GlobalRuntimeFaultError,
    HandlerFaultError,
    HostRequestError,
    HudConfigError,
    HudError,
    InvalidKeyError,
    RateLimitedError,
    UntrustedOriginError,
    ValidationRejectedError,
)
from pyhud.ingestion.pipeline import EventPipeline, FaultRecord, PipelineStats
from pyhud.keyboard import KeyboardShortcuts
from pyhud.overlay import HudOverlay, MenuType
from pyhud.state.events import ActionType, EventSource, InboundEvent, RateLimitRule
from pyhud.state.store import ReactiveStore, StoreStats

__all__ = [
    "__version__",
    "ActionType",
    "BreakerState",
    "ErrorBreaker",
    "EventPipeline",
    "EventSource",
    "FaultRecord",
    "GlobalRuntimeFaultError",
    "HandlerFaultError",
    "HostClient",
    "HostMessage",
    "HostRequestError",
    "HudConfig",
    "HudConfigError",
    "HudError",
    "HudOverlay",
    "InboundEvent",
    "InvalidKeyError",
    "KeyboardShortcuts",
    "MenuType",
    "NotificationBus",
    "PipelineStats",
    "RateLimitRule",
    "RateLimitedError",
    "ReactiveStore",
    "StoreStats",
    "UntrustedOriginError",
    "ValidationRejectedError",
]
