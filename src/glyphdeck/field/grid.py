from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class GridShape:
    """Cell grid laid over a viewport of width x height pixels."""
    cols: int
    rows: int
    cell: int
    width: float
    height: float

    @property
    def total(self) -> int:
        return self.cols * self.rows

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def cell_origins(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Pixel x (per column) and y (per row) of each cell's top-left corner."""
        px = np.arange(self.cols, dtype=np.float64) * self.cell
        py = np.arange(self.rows, dtype=np.float64) * self.cell
        return px, py


def grid_shape(width: float, height: float, cell: int) -> GridShape:
    """Columns and rows needed to cover the viewport, rounding up."""
    width = max(0.0, float(width))
    height = max(0.0, float(height))
    cols = math.ceil(width / cell)
    rows = math.ceil(height / cell)
    return GridShape(cols=cols, rows=rows, cell=cell, width=width, height=height)
