from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

import numpy as np

from glyphdeck.field.grid import GridShape
from glyphdeck.model.state import Ripple

if TYPE_CHECKING:
    import numpy.typing as npt

WAVE_NUMBER = 0.015
PHASE_SCALE = 0.6
SPATIAL_FALLOFF = 0.001
AMPLITUDE = 0.2


def temporal_decay(ripple: Ripple, now: float) -> float:
    """Linear fall from 1 at birth to 0 at the end of the ripple's life."""
    return max(0.0, min(1.0, 1.0 - ripple.age(now) / ripple.duration))


def ripple_contribution(
    shape: GridShape,
    ripple: Ripple,
    now: float,
) -> npt.NDArray[np.float64] | float:
    """
    Field perturbation of one ripple, measured from each cell centre.

    Returns 0.0 for a ripple past its duration.
    """
    decay = temporal_decay(ripple, now)
    if decay <= 0.0:
        return 0.0

    px, py = shape.cell_origins()
    half = shape.cell * 0.5
    dx = (px + half - ripple.x)[np.newaxis, :]
    dy = (py + half - ripple.y)[:, np.newaxis]
    dist = np.hypot(dx, dy)

    age = ripple.age(now)
    wave = np.sin(dist * WAVE_NUMBER - age * ripple.angular_speed * PHASE_SCALE)
    attenuation = decay * np.exp(-dist * SPATIAL_FALLOFF)
    return wave * attenuation * ripple.strength * AMPLITUDE


def superpose(
    shape: GridShape,
    ripples: Iterable[Ripple],
    now: float,
) -> npt.NDArray[np.float64]:
    """Sum of all ripple contributions, oldest first."""
    total = np.zeros((shape.rows, shape.cols), dtype=np.float64)
    for ripple in ripples:
        total += ripple_contribution(shape, ripple, now)
    return total
