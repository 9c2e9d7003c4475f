from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Mapping, Optional

import numpy as np

from glyphdeck.config import RGB
from glyphdeck.field.grid import GridShape
from glyphdeck.field.noise import base_field, star_twinkle
from glyphdeck.field.waves import superpose
from glyphdeck.model.state import Ripple

if TYPE_CHECKING:
    import numpy.typing as npt

# Ordered from faint to dense
FIELD_GLYPHS = "    .,:;ox%#@"
STAR_GLYPHS = " .:*%@"

# Stars never drop below this ramp position, so they cannot render blank
STAR_MIN_INDEX = max(len(STAR_GLYPHS) - 3, 2)

# (base, scale, floor) of the alpha mapping
FIELD_ALPHA = (0.18, 0.35, 0.18)
STAR_ALPHA = (0.58, 0.32, 0.6)
MAX_ALPHA = 0.85

_FIELD_RAMP = np.array(list(FIELD_GLYPHS))
_STAR_RAMP = np.array(list(STAR_GLYPHS))


@dataclass
class GlyphFrame:
    """
    One composed frame: per-cell glyph, alpha and star flag, all (rows, cols).
    """
    shape: GridShape
    values: npt.NDArray[np.float64]
    glyphs: npt.NDArray[np.str_]
    alpha: npt.NDArray[np.float64]
    star: npt.NDArray[np.bool_]
    field_tint: RGB
    star_tint: RGB

    def color_at(self, row: int, col: int) -> tuple[int, int, int, float]:
        r, g, b = self.star_tint if self.star[row, col] else self.field_tint
        return r, g, b, float(self.alpha[row, col])

    def visible_cells(self) -> tuple[npt.NDArray[np.intp], npt.NDArray[np.intp]]:
        """Row and column indices of every non-blank cell."""
        return np.nonzero(self.glyphs != " ")


def squash(value: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Map any composited value into [0, 1] through a sine."""
    return np.clip((np.sin(value) + 1.0) * 0.5, 0.0, 1.0)


def _ramp_index(normalized: npt.NDArray[np.float64], length: int) -> npt.NDArray[np.intp]:
    # Round half up, like the glyph ramps were tuned for
    return np.floor(normalized * (length - 1) + 0.5).astype(np.intp)


def select_glyphs(
    normalized: npt.NDArray[np.float64],
    star: npt.NDArray[np.bool_],
) -> npt.NDArray[np.str_]:
    field_index = np.clip(_ramp_index(normalized, len(FIELD_GLYPHS)), 0, len(FIELD_GLYPHS) - 1)
    star_index = np.clip(_ramp_index(normalized, len(STAR_GLYPHS)), STAR_MIN_INDEX, len(STAR_GLYPHS) - 1)
    return np.where(star, _STAR_RAMP[star_index], _FIELD_RAMP[field_index])


def select_alpha(
    normalized: npt.NDArray[np.float64],
    star: npt.NDArray[np.bool_],
) -> npt.NDArray[np.float64]:
    field_base, field_scale, field_floor = FIELD_ALPHA
    star_base, star_scale, star_floor = STAR_ALPHA
    base = np.where(star, star_base, field_base)
    scale = np.where(star, star_scale, field_scale)
    floor = np.where(star, star_floor, field_floor)
    return np.clip(base + normalized * scale, floor, MAX_ALPHA)


def tint_for(
    section_id: Optional[str],
    tints: Mapping[str, RGB],
    default: RGB,
) -> RGB:
    """Field tint of the active section, or the default for unknown ids."""
    if section_id is None:
        return default
    return tints.get(section_id, default)


def compose_frame(
    shape: GridShape,
    t: float,
    star_mask: npt.NDArray[np.bool_],
    ripples: Iterable[Ripple],
    now: float,
    field_tint: RGB,
    star_tint: RGB,
) -> GlyphFrame:
    """
    Composite noise, stars and ripples for every cell of the grid.

    Args:
        shape: Grid laid over the viewport.
        t: Seconds since the renderer started (drives the noise).
        star_mask: Flat mask of length shape.total.
        ripples: Live ripples, oldest first.
        now: Current time on the ripple clock (drives ripple age).
        field_tint: RGB of non-star cells.
        star_tint: RGB of star cells.
    """
    grid = (shape.rows, shape.cols)
    if shape.is_empty:
        empty = np.zeros(grid, dtype=np.float64)
        return GlyphFrame(
            shape=shape,
            values=empty,
            glyphs=np.full(grid, " "),
            alpha=empty.copy(),
            star=np.zeros(grid, dtype=bool),
            field_tint=field_tint,
            star_tint=star_tint,
        )

    if star_mask.size == shape.total:
        star = star_mask.reshape(grid)
    else:
        # Mask from a previous size; draw no stars until the next regeneration
        star = np.zeros(grid, dtype=bool)

    value = base_field(shape, t)
    value = value + np.where(star, star_twinkle(shape, t), 0.0)
    value += superpose(shape, ripples, now)

    normalized = squash(value)
    return GlyphFrame(
        shape=shape,
        values=normalized,
        glyphs=select_glyphs(normalized, star),
        alpha=select_alpha(normalized, star),
        star=star,
        field_tint=field_tint,
        star_tint=star_tint,
    )
