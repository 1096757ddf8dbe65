"""Vehicle overlay update (``car``)."""

from __future__ import annotations

from pyhud.models._base import HudBaseModel, HudFlag, HudNumber


class VehiclePayload(HudBaseModel):
    show: HudFlag = None
    speed: HudNumber = None
    fuel: HudNumber = None
    altitude: HudNumber = None
    seatbelt: HudFlag = None
