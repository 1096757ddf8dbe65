from __future__ import annotations

from pyhud._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "action": "hudtick",
        "citizenid": "ABC123",
        "license": "license:deadbeef",
        "nested": {"steam": "steam:1100001", "health": 90},
    }

    redacted = redact_for_log(payload)
    assert redacted["action"] == "hudtick"
    assert redacted["citizenid"] == "<redacted>"
    assert redacted["license"] == "<redacted>"
    assert redacted["nested"]["steam"] == "<redacted>"
    assert redacted["nested"]["health"] == 90


def test_redact_for_log_masks_prefixed_identifiers_under_any_key() -> None:
    payload = {
        "owner": "discord:123456789",
        "players": [{"id": "License:abcdef", "name": "Jo"}],
        "player_ip": "10.0.0.1",
        "note": "steam bonus",
    }

    redacted = redact_for_log(payload)
    assert redacted["owner"] == "<redacted>"
    assert redacted["players"][0]["id"] == "<redacted>"
    assert redacted["players"][0]["name"] == "Jo"
    assert redacted["player_ip"] == "10.0.0.1"
    assert redacted["note"] == "steam bonus"


def test_redact_for_log_normalizes_key_spelling() -> None:
    redacted = redact_for_log({"Citizen_Id": "ABC123", "TOKEN": "t"})
    assert redacted == {"Citizen_Id": "<redacted>", "TOKEN": "<redacted>"}


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_limits_sequences() -> None:
    redacted = redact_for_log(list(range(5)), max_items=2)
    assert redacted == [0, 1, "<3 more>"]
