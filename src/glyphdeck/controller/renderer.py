"""
Glyph Field Renderer
====================
Owns the animation clock, the star mask and the frame loop of the background.

Why is this file needed?
------------------------
1. Loop: A self-rescheduling single-shot QTimer runs one tick and then asks for
   the next, until stop() clears the running flag.
2. Resize: The grid and the star mask follow the drawing surface's size
   without interrupting the loop.
3. Tint: It listens to section changes only to pick the field color; the
   ripples it draws are read from the RippleEmitter every frame.

Classes:
    GlyphSurface: What the renderer needs from a drawing surface.
    GlyphFieldRenderer: The frame loop controller.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, Optional, Protocol

import numpy as np
from PySide6.QtCore import QObject, QTimer

from glyphdeck.app.state import SectionChannel, Subscription, change_id
from glyphdeck.config import FieldSettings, RGB
from glyphdeck.field import GlyphFrame, GridShape, compose_frame, grid_shape, regenerate_star_mask
from glyphdeck.field.compose import tint_for
from glyphdeck.model.state import Ripple

logger = logging.getLogger(__name__)

RippleSource = Callable[[float], Iterable[Ripple]]

# Report only every Nth frame that blows the budget
OVERRUN_LOG_EVERY = 120


class GlyphSurface(Protocol):
    def width(self) -> int: ...

    def height(self) -> int: ...

    def present(self, frame: GlyphFrame) -> None: ...


class GlyphFieldRenderer(QObject):
    def __init__(
        self,
        surface: Optional[GlyphSurface],
        ripple_source: RippleSource,
        channel: SectionChannel,
        settings: FieldSettings | None = None,
        clock: Callable[[], float] = time.perf_counter,
        rng: Optional[np.random.Generator] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.surface = surface
        self.ripple_source = ripple_source
        self.channel = channel
        self.settings = settings or FieldSettings()
        self.clock = clock
        self.rng = rng if rng is not None else np.random.default_rng()

        self.tints: dict[str, RGB] = dict(self.settings.tints)
        self.active_section: Optional[str] = None
        self.shape: GridShape = grid_shape(0, 0, self.settings.cell_size)
        self.star_mask = regenerate_star_mask(0, 0)
        self.frame: Optional[GlyphFrame] = None
        self.frame_count = 0
        self.overruns = 0

        self._running = False
        self._started_at = 0.0
        self._subscription: Optional[Subscription] = None

        self._frame_timer = QTimer(self)
        self._frame_timer.setSingleShot(True)
        self._frame_timer.setInterval(self.settings.frame_interval_ms)
        self._frame_timer.timeout.connect(self._tick)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    @property
    def tint(self) -> RGB:
        return tint_for(self.active_section, self.tints, self.settings.default_tint)

    def viewport_size(self) -> tuple[float, float]:
        return self.shape.width, self.shape.height

    def set_section_tints(self, tints: dict[str, RGB]) -> None:
        """Overlay per-section tints on top of the default table."""
        self.tints.update(tints)

    def start(self) -> None:
        if self.surface is None:
            logger.warning("No drawing surface available; glyph field disabled.")
            return
        if self._running:
            return
        self._subscription = self.channel.subscribe(self._on_section_changed)
        self.resize(self.surface.width(), self.surface.height())
        self._started_at = self.clock()
        self._running = True
        self._frame_timer.start()
        logger.info(f"Glyph field running on a {self.shape.cols}x{self.shape.rows} grid.")

    def stop(self) -> None:
        """Cancel the frame loop and drop the tint subscription. Idempotent."""
        self._frame_timer.stop()
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        if self._running:
            logger.info(f"Glyph field stopped after {self.frame_count} frames.")
        self._running = False

    def resize(self, width: float, height: float) -> None:
        """Recompute the grid for a new viewport size and reseed the stars."""
        self.shape = grid_shape(width, height, self.settings.cell_size)
        self.star_mask = regenerate_star_mask(
            self.shape.cols,
            self.shape.rows,
            density=self.settings.star_density,
            minimum=self.settings.min_stars,
            rng=self.rng,
        )
        logger.debug(
            f"Viewport {width:g}x{height:g} -> grid {self.shape.cols}x{self.shape.rows}, "
            f"{int(self.star_mask.sum())} stars"
        )

    def render_frame(self) -> GlyphFrame:
        """Compose one frame at the current clock time."""
        now = self.clock()
        return compose_frame(
            self.shape,
            t=now - self._started_at,
            star_mask=self.star_mask,
            ripples=self.ripple_source(now),
            now=now,
            field_tint=self.tint,
            star_tint=self.settings.star_tint,
        )

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _tick(self) -> None:
        if not self._running:
            return
        began = time.perf_counter()
        self.frame = self.render_frame()
        if self.surface is not None:
            self.surface.present(self.frame)
        self.frame_count += 1

        elapsed = time.perf_counter() - began
        if elapsed > self.settings.frame_budget:
            self.overruns += 1
            if self.overruns % OVERRUN_LOG_EVERY == 1:
                logger.debug(
                    f"Frame took {elapsed * 1000:.1f} ms "
                    f"(budget {self.settings.frame_interval_ms} ms, {self.overruns} overruns)"
                )

        # The tick may have stopped the loop (e.g. surface closed)
        if self._running:
            self._frame_timer.start()

    def _on_section_changed(self, change: Any) -> None:
        section_id = change_id(change)
        if section_id is None:
            return
        self.active_section = section_id
