"""Player status tick (``hudtick``)."""

from __future__ import annotations

from pyhud.models._base import HudBaseModel, HudFlag, HudNumber


class HudTickPayload(HudBaseModel):
    """Periodic player status snapshot pushed by the host."""

    health: HudNumber = None
    armor: HudNumber = None
    hunger: HudNumber = None
    thirst: HudNumber = None
    stress: HudNumber = None
    oxygen: HudNumber = None

    speed: HudNumber = None
    engine: HudNumber = None
    nos: HudNumber = None
    nitro_active: HudFlag = None
    cruise: HudFlag = None

    show: HudFlag = None
    player_dead: HudFlag = None
    armed: HudFlag = None
    talking: HudFlag = None
    radio: HudNumber = None
    voice: HudNumber = None
    parachute: HudNumber = None
    dev: HudFlag = None

    @property
    def has_vehicle_fields(self) -> bool:
        return any(self.provided(name) for name in ("speed", "engine", "nos"))
