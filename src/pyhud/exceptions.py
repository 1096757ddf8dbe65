"""Custom exception hierarchy for pyhud."""

from __future__ import annotations

from typing import Any


class HudError(Exception):
    """Base exception for all pyhud errors."""


class HudConfigError(HudError):
    """Invalid configuration value."""


class InvalidKeyError(HudError):
    """State key is not a non-empty string shorter than 256 characters."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Invalid state key: {key!r}")


class ValidationRejectedError(HudError):
    """A registered validator refused the new value for a key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Validation failed for key: {key}")


class UntrustedOriginError(HudError):
    """Inbound message came from an origin outside the allowlist."""

    def __init__(self, origin: str) -> None:
        self.origin = origin
        super().__init__(f"Message from untrusted origin: {origin!r}")


class RateLimitedError(HudError):
    """Inbound message exceeded the rate limit configured for its action."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Rate limit exceeded for action: {action}")


class HandlerFaultError(HudError):
    """An action handler raised while processing a queued event.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, action: str, message: str) -> None:
        self.action = action
        super().__init__(f"Handler for {action!r} failed: {message}")


class GlobalRuntimeFaultError(HudError):
    """An exception escaped the pipeline's own instrumentation."""

    def __init__(self, context: str, message: str) -> None:
        self.context = context
        super().__init__(f"Runtime fault in {context}: {message}")


class HostRequestError(HudError):
    """Host-bound request failed (network, non-2xx status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        action: str = "",
    ) -> None:
        self.status_code = status_code
        self.action = action
        super().__init__(message)
