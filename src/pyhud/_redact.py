"""Log redaction for host payloads.

Game servers attach player identifiers to some messages, either under a
well-known key (``citizenid``, ``license`` ...) or as a prefixed string such as
``"license:1a2b..."`` or ``"discord:1234"``. Both forms are masked before a
payload reaches the logs; long strings and sequences are shortened.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_MASK = "<redacted>"
_MAX_DEPTH = 20

IDENTIFIER_KEYS: frozenset[str] = frozenset(
    {
        "citizenid",
        "license",
        "identifier",
        "identifiers",
        "steam",
        "discord",
        "xbl",
        "live",
        "fivem",
        "ip",
        "endpoint",
        "token",
        "password",
    }
)

IDENTIFIER_PREFIXES: tuple[str, ...] = tuple(
    f"{kind}:" for kind in ("license", "license2", "steam", "discord", "xbl", "live", "fivem", "ip")
)


def _is_identifier_key(key: Any) -> bool:
    return str(key).lower().replace("_", "") in IDENTIFIER_KEYS


def _scrub_text(text: str, max_string: int) -> str:
    if text.lower().startswith(IDENTIFIER_PREFIXES):
        return _MASK
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def redact_for_log(value: Any, *, max_string: int = 512, max_items: int = 50) -> Any:
    """Copy of *value* with player identifiers masked, for log output only."""

    def _walk(item: Any, depth: int) -> Any:
        if depth > _MAX_DEPTH:
            return "<max-depth>"
        if item is None or isinstance(item, (bool, int, float)):
            return item
        if isinstance(item, str):
            return _scrub_text(item, max_string)
        if isinstance(item, Mapping):
            return {
                str(key): _MASK if _is_identifier_key(key) else _walk(child, depth + 1)
                for key, child in item.items()
            }
        if isinstance(item, (list, tuple, set, frozenset)):
            items = list(item)
            walked = [_walk(child, depth + 1) for child in items[:max_items]]
            if len(items) > max_items:
                walked.append(f"<{len(items) - max_items} more>")
            return walked
        return f"<{type(item).__name__}>"

    return _walk(value, 0)
