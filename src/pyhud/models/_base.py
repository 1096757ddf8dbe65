"""Base model for host payloads.

Every inbound payload model inherits from :class:`HudBaseModel` which
provides:

* ``alias_generator=to_camel`` so the host's camelCase keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that strips sentinel values
  (``""``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.

Field types are lax on purpose: a malformed field becomes ``None`` instead of
failing validation, and the handler falls back to the previously known value.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from pyhud.ingestion.normalize import safe_number, safe_str, strict_flag

_SENTINELS = frozenset({"", "--", "NaN", "nan", "undefined"})

HudNumber = Annotated[int | float | None, BeforeValidator(safe_number)]
"""Finite number or ``None``; non-numeric input becomes ``None``."""

HudText = Annotated[str | None, BeforeValidator(safe_str)]

HudFlag = Annotated[bool | None, BeforeValidator(strict_flag)]
"""Real boolean or ``None``; truthy non-booleans are not flags."""


class HudBaseModel(BaseModel):
    """Base for host payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original host payload."""

    @model_validator(mode="before")
    @classmethod
    def _clean_host_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)

        cleaned: dict[str, Any] = {}
        for key, value in original.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value

        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned

    def provided(self, field_name: str) -> bool:
        """Whether the host sent a usable value for *field_name*."""
        return field_name in self.model_fields_set and getattr(self, field_name) is not None
