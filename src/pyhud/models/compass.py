"""Compass and street-name payloads (``baseplate`` and ``update``)."""

from __future__ import annotations

from pyhud.models._base import HudBaseModel, HudFlag, HudNumber, HudText


class CompassPayload(HudBaseModel):
    show: HudFlag = None
    street1: HudText = None
    street2: HudText = None
    show_compass: HudFlag = None
    show_streets: HudFlag = None
    show_pointer: HudFlag = None
    show_degrees: HudFlag = None


class HeadingPayload(HudBaseModel):
    """Compass heading in degrees."""

    value: HudNumber = None
