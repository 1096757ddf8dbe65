"""Overlay configuration for pyhud."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pyhud._constants import (
    DEFAULT_RATE_LIMITS,
    DEFAULT_RESOURCE_NAME,
    DEV_ORIGIN_MARKERS,
    HOST_ORIGIN,
)
from pyhud.exceptions import HudConfigError
from pyhud.state.events import ActionType, RateLimitRule


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _all_actions() -> frozenset[str]:
    return frozenset(action.value for action in ActionType)


@dataclasses.dataclass(frozen=True)
class HudConfig:
    """Overlay core configuration.

    Parameters
    ----------
    resource_name : str
        Host resource that receives host-bound requests
        (``https://<resource_name>/<action>``).
    host_environment : bool
        Whether the overlay runs embedded in the host. Inside the host every
        origin is trusted and development shortcuts are disabled.
    trusted_origins : frozenset[str]
        Origins accepted outside the host environment.
    dev_origin_markers : tuple[str, ...]
        Substrings that mark a local-development origin as trusted.
    history_size : int
        Number of accepted events kept for rate-limit accounting.
    pipeline_error_threshold : int
        Faults tolerated before the pipeline sheds its queue and re-runs setup.
    store_error_threshold : int
        Errors tolerated before the store resets itself to empty state.
    rate_limits : Mapping[str, RateLimitRule]
        Per-action limits. Actions without a rule are unlimited.
    allowed_actions : frozenset[str]
        Actions routed to their handler. Anything else takes the unknown arm.
    critical_threshold : float
        Stat value at or below which a critical alert fires.
    stress_critical_threshold : float
        Stress value at or above which a critical alert fires.
    fuel_critical_threshold : float
        Fuel value at or below which a fuel alert fires.
    request_timeout : float
        Seconds before a host-bound request is abandoned.
    auto_drain : bool
        Drain the queue right after each accepted ingress.
    """

    resource_name: str = DEFAULT_RESOURCE_NAME
    host_environment: bool = False
    trusted_origins: frozenset[str] = frozenset({HOST_ORIGIN})
    dev_origin_markers: tuple[str, ...] = DEV_ORIGIN_MARKERS
    history_size: int = 1000
    pipeline_error_threshold: int = 50
    store_error_threshold: int = 50
    rate_limits: Mapping[str, RateLimitRule] = dataclasses.field(
        default_factory=lambda: dict(DEFAULT_RATE_LIMITS)
    )
    allowed_actions: frozenset[str] = dataclasses.field(default_factory=_all_actions)
    critical_threshold: float = 20
    stress_critical_threshold: float = 80
    fuel_critical_threshold: float = 20
    request_timeout: float = 5.0
    auto_drain: bool = True

    def __post_init__(self) -> None:
        if not self.resource_name.strip():
            raise HudConfigError("resource_name must be non-empty")
        if self.history_size <= 0:
            raise HudConfigError(f"history_size must be positive, got {self.history_size}")
        if self.pipeline_error_threshold <= 0:
            raise HudConfigError("pipeline_error_threshold must be positive")
        if self.store_error_threshold <= 0:
            raise HudConfigError("store_error_threshold must be positive")
        if self.request_timeout <= 0:
            raise HudConfigError("request_timeout must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> HudConfig:
        """Create configuration from ``HUD_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        resource = env.get("HUD_RESOURCE_NAME")
        if resource is not None:
            config_kwargs["resource_name"] = resource

        if "host_environment" not in overrides:
            config_kwargs["host_environment"] = _env_bool(env.get("HUD_HOST_ENVIRONMENT"), False)

        if "auto_drain" not in overrides:
            config_kwargs["auto_drain"] = _env_bool(env.get("HUD_AUTO_DRAIN"), True)

        origins_env = env.get("HUD_TRUSTED_ORIGINS")
        if origins_env is not None:
            origins = {item.strip() for item in origins_env.split(",") if item.strip()}
            config_kwargs["trusted_origins"] = frozenset(origins | {HOST_ORIGIN})

        _ENV_INT_MAP = {
            "HUD_HISTORY_SIZE": "history_size",
            "HUD_ERROR_THRESHOLD": "pipeline_error_threshold",
            "HUD_STORE_ERROR_THRESHOLD": "store_error_threshold",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = int(val)
                except ValueError as exc:
                    raise HudConfigError(f"{env_key} must be an integer, got {val!r}") from exc

        timeout_env = env.get("HUD_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise HudConfigError(f"HUD_REQUEST_TIMEOUT must be a number, got {timeout_env!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
