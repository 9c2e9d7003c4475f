from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from glyphdeck.field.grid import GridShape

if TYPE_CHECKING:
    import numpy.typing as npt


def normalized_coordinates(shape: GridShape) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Cell positions relative to the viewport centre, in [-0.5, 0.5].

    Returns nx with shape (1, cols) and ny with shape (rows, 1) so they
    broadcast to the full grid.
    """
    px, py = shape.cell_origins()
    nx = px / shape.width - 0.5
    ny = py / shape.height - 0.5
    return nx[np.newaxis, :], ny[:, np.newaxis]


def grain(shape: GridShape, t: float) -> npt.NDArray[np.float64]:
    """
    Small secondary noise indexed by grid row/col rather than position.

    Being tied to cell indices, it breaks up the axis-aligned banding the
    smooth positional terms would otherwise show.
    """
    row = np.arange(shape.rows, dtype=np.float64)[:, np.newaxis]
    col = np.arange(shape.cols, dtype=np.float64)[np.newaxis, :]
    return (
        np.sin(row * 6.1 + col * 4.6 + t * 0.45)
        + np.cos(row * 2.8 - col * 3.9 + t * 0.35)
        + 2.0
    ) * 0.08


def base_field(shape: GridShape, t: float) -> npt.NDArray[np.float64]:
    """Weighted sum of slow sinusoids plus the grain term, shape (rows, cols)."""
    nx, ny = normalized_coordinates(shape)
    return (
        np.sin((nx + t * 0.08) * 1.9)
        + np.cos((ny - t * 0.07) * 2.4) * 0.55
        + np.sin((nx + ny + t * 0.04) * 2.6) * 0.25
        + (grain(shape, t) - 0.5) * 0.45
    )


def star_twinkle(shape: GridShape, t: float) -> npt.NDArray[np.float64]:
    """Higher-frequency term added on top of star cells."""
    nx, ny = normalized_coordinates(shape)
    return np.sin(t * 1.2 + nx * 9.0 + ny * 8.0) * 0.9
