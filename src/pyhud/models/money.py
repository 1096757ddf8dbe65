"""Money payloads (``show`` and ``updatemoney``)."""

from __future__ import annotations

from pydantic import Field

from pyhud.models._base import HudBaseModel, HudFlag, HudNumber, HudText


class MoneyPayload(HudBaseModel):
    """Account balances.

    ``money_type`` names the account the change applies to (``"cash"`` or
    ``"bank"``); ``minus`` marks a withdrawal.
    """

    cash: HudNumber = None
    bank: HudNumber = None
    money_type: HudText = Field(default=None, alias="type")
    minus: HudFlag = None
