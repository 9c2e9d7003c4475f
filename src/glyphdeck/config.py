"""
Configuration & Constants
=========================
This module serves as the central registry for tunables, resource paths and
application identity.

Why is this file needed?
------------------------
1. Abstraction: Timing thresholds, grid sizes and tint tables are not scattered
   through the navigator, emitter and renderer.
2. Testing: Every component receives its settings object, so tests can shorten
   the lock and debounce windows without patching module globals.
3. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find bundled resources when the app is frozen into an executable.

Exports:
    NavigatorSettings, RippleSettings, FieldSettings, DeckSettings
    DEFAULT_SECTIONS_PATH (str): Absolute path to the bundled section descriptors.
"""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

RGB = tuple[int, int, int]

ORG_ID = "glyphdeck"
APP_ID = "glyphdeck"
VISIBLE_APP_NAME = "Glyph Deck"


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, "glyphdeck", relative_path)

    # config.py is in src/glyphdeck/
    package_root: Path = Path(__file__).parent
    return os.path.join(str(package_root), relative_path)


DEFAULT_SECTIONS_PATH: str = get_resource_path(os.path.join("resources", "sections.json"))


@dataclass(frozen=True)
class NavigatorSettings:
    """Gesture thresholds and timer windows of the section navigator."""
    lock_ms: int = 900
    wheel_trigger: float = 80.0
    touch_trigger: float = 70.0
    wheel_reset_ms: int = 220
    visibility_threshold: float = 0.5

    def __post_init__(self) -> None:
        if self.lock_ms <= 0 or self.wheel_reset_ms <= 0:
            raise ValueError("Timer windows must be positive.")
        if self.wheel_trigger <= 0 or self.touch_trigger <= 0:
            raise ValueError("Gesture triggers must be positive.")


@dataclass(frozen=True)
class RippleSettings:
    capacity: int = 6
    duration: float = 2.6
    angular_speed: float = 7.1
    strength: float = 0.65
    initial_strength: float = 0.4
    # Origin as a fraction of the viewport, per icon side
    left_x: float = 0.18
    right_x: float = 0.82
    origin_y: float = 0.45

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("Ripple capacity must be at least 1.")
        if self.duration <= 0:
            raise ValueError("Ripple duration must be positive.")


DEFAULT_TINTS: dict[str, RGB] = {
    "about": (184, 198, 224),
    "tech": (172, 196, 232),
    "events": (236, 206, 182),
}


@dataclass(frozen=True)
class FieldSettings:
    """Grid geometry, star density and colors of the glyph field."""
    cell_size: int = 18
    star_density: float = 0.012
    min_stars: int = 80
    frame_interval_ms: int = 16
    tints: dict[str, RGB] = field(default_factory=lambda: dict(DEFAULT_TINTS))
    default_tint: RGB = (184, 198, 224)
    star_tint: RGB = (220, 233, 255)
    # Vertical background gradient stops (position, hex color)
    background: tuple[tuple[float, str], ...] = (
        (0.0, "#01020b"),
        (0.6, "#020414"),
        (1.0, "#010208"),
    )

    def __post_init__(self) -> None:
        if self.cell_size <= 0:
            raise ValueError("Cell size must be positive.")
        if self.frame_interval_ms <= 0:
            raise ValueError("Frame interval must be positive.")

    @property
    def frame_budget(self) -> float:
        """Seconds available to compose one frame."""
        return self.frame_interval_ms / 1000.0


@dataclass(frozen=True)
class DeckSettings:
    navigator: NavigatorSettings = field(default_factory=NavigatorSettings)
    ripples: RippleSettings = field(default_factory=RippleSettings)
    glyphs: FieldSettings = field(default_factory=FieldSettings)
