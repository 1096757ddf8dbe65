"""Theme/alert collaborator contract.

Rendering lives outside the core. Handlers that want visual feedback call an
object implementing :class:`ThemeCollaborator`; the core only needs the
palette data below to pick colors.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Protocol

DEFAULT_THEME = "cyberpunk"

THEME_PALETTES: MappingProxyType[str, MappingProxyType[str, str]] = MappingProxyType(
    {
        "cyberpunk": MappingProxyType(
            {
                "primary": "#00ffff",
                "secondary": "#a020f0",
                "accent": "#ff9800",
                "critical": "#ff4444",
                "success": "#66bb6a",
                "warning": "#ffb74d",
                "info": "#29b6f6",
            }
        ),
        "synthwave": MappingProxyType(
            {
                "primary": "#ff0080",
                "secondary": "#8000ff",
                "accent": "#00ffff",
                "critical": "#ff4444",
                "success": "#00ff80",
                "warning": "#ffff00",
                "info": "#ff80ff",
            }
        ),
        "matrix": MappingProxyType(
            {
                "primary": "#00ff00",
                "secondary": "#008000",
                "accent": "#ffffff",
                "critical": "#ff4444",
                "success": "#00ff00",
                "warning": "#ffff00",
                "info": "#80ff80",
            }
        ),
    }
)

WITHDRAWAL_COLOR = "#ff4444"
DEPOSIT_COLOR = "#66bb6a"


def palette_color(theme: str | None, role: str) -> str:
    """Color for *role* in *theme*, falling back to the default theme."""
    palette = THEME_PALETTES.get(theme or DEFAULT_THEME) or THEME_PALETTES[DEFAULT_THEME]
    return palette.get(role, palette["primary"])


class ThemeCollaborator(Protocol):
    """Structural interface of the external theme/alert layer."""

    def set_theme(self, name: str, animate: bool = True) -> None: ...

    def trigger_glow(self, element: str, color: str, intensity: float = 1.0) -> None: ...

    def trigger_critical_alert(self, element: str, value: float) -> None: ...

    def animate_value_change(self, element: str, old_value: float, new_value: float, duration_ms: float) -> None: ...

    def set_animations_enabled(self, enabled: bool) -> None: ...

    def set_neon_intensity(self, intensity: float) -> None: ...
