"""
Glyph Field Engine
==================
The per-frame compositing of the animated background.

Why is this file needed?
------------------------
1. Signal: It sums the periodic noise field, the star twinkle and the ripple
   perturbations for every cell of the grid.
2. Mapping: It squashes the composited value into [0, 1] and maps it onto
   glyph ramps and alpha levels.
3. Performance: Every step is vectorised over the whole grid so one frame fits
   in the frame budget.

Note: This package should be pure Python/NumPy and should NOT import PySide6.
"""
from glyphdeck.field.compose import GlyphFrame, compose_frame
from glyphdeck.field.grid import GridShape, grid_shape
from glyphdeck.field.stars import regenerate_star_mask, star_sample_count

__all__ = [
    "GlyphFrame",
    "GridShape",
    "compose_frame",
    "grid_shape",
    "regenerate_star_mask",
    "star_sample_count",
]
