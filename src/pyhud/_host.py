"""Host channel: inbound message envelope and host-bound requests."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from pyhud.config import HudConfig
from pyhud.exceptions import HostRequestError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostMessage:
    """Raw message as delivered by the host's message-passing channel."""

    origin: str
    data: Any


def is_trusted_origin(
    origin: str,
    *,
    host_environment: bool,
    trusted_origins: Iterable[str],
    dev_origin_markers: Iterable[str] = (),
) -> bool:
    """Decide whether a message origin may reach the queue.

    Inside the host environment every origin is trusted. Elsewhere an origin is
    trusted when it contains a local-development marker or is allowlisted.
    """
    if host_environment:
        return True
    if any(marker in origin for marker in dev_origin_markers):
        return True
    return origin in set(trusted_origins)


class HostSender(Protocol):
    """Anything that can fire a request at the host without waiting for it."""

    def send(self, action: str, payload: Mapping[str, Any] | None = None) -> Any: ...


class HostClient:
    """Sends best-effort JSON requests to the host resource.

    ``post`` raises :class:`HostRequestError`; ``send`` schedules ``post`` on
    the running loop and only logs failures.
    """

    def __init__(
        self,
        config: HudConfig,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._http = http_session
        self._external_session = http_session is not None
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def url_for(self, action: str) -> str:
        return f"https://{self._config.resource_name}/{action}"

    async def post(self, action: str, payload: Mapping[str, Any] | None = None) -> None:
        """POST *payload* to the host. The response body is ignored."""
        try:
            body = json.dumps(dict(payload or {}), separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise HostRequestError(f"Payload for {action} is not JSON serializable: {exc}", action=action) from exc
        if self._http is None:
            self._http = aiohttp.ClientSession()
        url = self.url_for(action)
        headers = {"content-type": "application/json; charset=UTF-8"}
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("POST %s", url)

        try:
            async with self._http.post(url, data=body, headers=headers, timeout=timeout) as resp:
                if resp.status >= 400:
                    text = await resp.text()
                    raise HostRequestError(
                        f"HTTP {resp.status} from {action}: {text[:200]}",
                        status_code=resp.status,
                        action=action,
                    )
        except HostRequestError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise HostRequestError(f"Request to {action} failed: {exc}", action=action) from exc

    def send(self, action: str, payload: Mapping[str, Any] | None = None) -> asyncio.Task[None] | None:
        """Fire-and-forget variant of :meth:`post`."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.warning("Cannot send %s to host: no running event loop", action)
            return None

        task = loop.create_task(self._send_quietly(action, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _send_quietly(self, action: str, payload: Mapping[str, Any] | None) -> None:
        try:
            await self.post(action, payload)
        except HostRequestError as exc:
            _logger.warning("Failed to send to host: %s (%s)", action, exc)
        except Exception:
            _logger.exception("Unexpected error sending to host: %s", action)

    async def close(self) -> None:
        """Wait for in-flight sends and close an owned HTTP session."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if not self._external_session and self._http is not None:
            await self._http.close()
        self._http = None
