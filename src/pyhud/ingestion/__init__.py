"""Ingestion layer.

Receives raw host messages, admits them into an ordered queue and dispatches
them to per-action handlers that write to the reactive store.
"""

__all__: list[str] = []
