"""State/store layer.

This package is the single source of truth for UI-relevant overlay state:
the reactive store, its value policy, validators and the inbound event types
the pipeline produces.
"""
