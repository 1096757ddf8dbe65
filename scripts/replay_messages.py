#!/usr/bin/env python3
"""Replay captured host messages through the event pipeline.

Each line of the input file is one JSON object: either a bare message
(``{"action": "hudtick", ...}``) or an envelope with an explicit origin
(``{"origin": "nui-game-internal", "data": {...}}``). Every notification the
pipeline emits is printed, and optionally the final store snapshot.

Usage
-----
    python scripts/replay_messages.py capture.jsonl
    python scripts/replay_messages.py --state --host-environment capture.jsonl
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pyhud._constants import DEFAULT_STATE, HOST_ORIGIN
from pyhud._host import HostMessage
from pyhud.bus import NotificationBus
from pyhud.config import HudConfig
from pyhud.ingestion.pipeline import EventPipeline
from pyhud.state.store import ReactiveStore
from pyhud.state.validators import register_default_validators


def _to_message(record: Any, default_origin: str) -> HostMessage:
    if isinstance(record, dict) and "data" in record and "action" not in record:
        return HostMessage(origin=str(record.get("origin") or default_origin), data=record["data"])
    return HostMessage(origin=default_origin, data=record)


def _print_notification(name: str, payload: Any, *, json_mode: bool) -> None:
    if json_mode:
        print(json.dumps({"notification": name, "payload": payload}, default=str))
    else:
        print(f"{name:<28} {json.dumps(payload, default=str)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay a JSON-lines capture of host messages.")
    parser.add_argument("capture", help="JSON-lines file with one host message per line")
    parser.add_argument("--origin", default=HOST_ORIGIN, help=f"Origin for bare messages (default: {HOST_ORIGIN})")
    parser.add_argument("--host-environment", action="store_true", help="Trust every origin, disable dev shortcuts")
    parser.add_argument("--state", action="store_true", help="Print the final store snapshot")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = HudConfig.from_env(host_environment=args.host_environment)
    store = ReactiveStore(error_threshold=config.store_error_threshold)
    store.initialize(DEFAULT_STATE)
    register_default_validators(store)
    bus = NotificationBus()
    bus.subscribe("*", lambda name, payload: _print_notification(name, payload, json_mode=args.json_mode))
    pipeline = EventPipeline(store, bus, config)

    accepted = 0
    total = 0
    for line_no, line in enumerate(Path(args.capture).read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        total += 1
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            print(f"line {line_no}: invalid JSON ({exc})", file=sys.stderr)
            continue
        if pipeline.ingress(_to_message(record, args.origin)):
            accepted += 1

    if not config.auto_drain:
        pipeline.drain()

    stats = pipeline.stats()
    print(
        f"\n{accepted}/{total} message(s) accepted, "
        f"{stats.dropped_untrusted} untrusted, {stats.dropped_rate_limited} rate-limited, "
        f"{stats.error_count} error(s), {stats.recoveries} recovery(ies).",
        file=sys.stderr,
    )

    if args.state:
        print(json.dumps(store.get_all(), indent=2, default=str))


if __name__ == "__main__":
    main()
