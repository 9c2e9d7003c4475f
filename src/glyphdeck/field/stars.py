from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


def star_sample_count(total: int, density: float = 0.012, minimum: int = 80) -> int:
    """Number of random draws for a grid of `total` cells."""
    return max(minimum, int(np.floor(total * density)))


def regenerate_star_mask(
    cols: int,
    rows: int,
    density: float = 0.012,
    minimum: int = 80,
    rng: Optional[np.random.Generator] = None,
) -> npt.NDArray[np.bool_]:
    """
    Flat boolean mask of length cols*rows marking star cells.

    Positions are independent draws, so two draws may hit the same cell and
    the distinct star count can be lower than the sample count.
    """
    total = cols * rows
    mask = np.zeros(total, dtype=bool)
    if total == 0:
        return mask

    rng = rng if rng is not None else np.random.default_rng()
    draws = rng.integers(0, total, size=star_sample_count(total, density, minimum))
    mask[draws] = True
    return mask
