"""
Runtime State Records
=====================
Mutable navigator state and the immutable ripple value object.

Why is this file needed?
------------------------
1. Ownership: Each component keeps its mutable fields in one record instead of
   loose attributes, so resetting or inspecting state is a single operation.
2. Decoupling: The renderer and the emitter exchange Ripple values without
   importing each other.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class NavigatorState:
    """Single-owner state of a SectionNavigator."""
    active_index: int = 0
    locked: bool = False
    wheel_accumulator: float = 0.0
    pending_touch_origin: Optional[float] = None


@dataclass(frozen=True)
class Ripple:
    """
    A transient radial disturbance of the glyph field.

    Attributes:
        x, y: Origin in viewport pixels.
        start_time: Creation time on the shared clock, in seconds.
        duration: Lifetime in seconds.
        angular_speed: Phase speed of the travelling wave.
        strength: Amplitude multiplier.
    """
    x: float
    y: float
    start_time: float
    duration: float
    angular_speed: float
    strength: float

    def age(self, now: float) -> float:
        return now - self.start_time

    def is_expired(self, now: float) -> bool:
        return self.age(now) > self.duration
