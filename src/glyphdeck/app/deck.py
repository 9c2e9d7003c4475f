"""
Deck Assembly
=============
Builds the channel, navigator, ripple emitter and renderer, and tears them
down together.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Creates the one SectionChannel every component talks through.
2. Shares one clock between the ripple emitter and the renderer, so ripple
   ages and frame times agree.
3. Owns the single teardown: timers, the frame loop, channel subscriptions
   and view hooks are released in one call, never partially.
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable, Optional, Sequence

import numpy as np

from glyphdeck.app.state import SectionChannel
from glyphdeck.config import DeckSettings
from glyphdeck.controller.navigator import SectionNavigator
from glyphdeck.controller.renderer import GlyphFieldRenderer, GlyphSurface
from glyphdeck.controller.ripples import RippleEmitter
from glyphdeck.model.sections import Section

if TYPE_CHECKING:
    from glyphdeck.view.section_scroller import SectionScroller

logger = logging.getLogger(__name__)


class Deck:
    def __init__(
        self,
        sections: Sequence[Section],
        surface: Optional[GlyphSurface] = None,
        scroller: Optional[SectionScroller] = None,
        settings: DeckSettings | None = None,
        clock: Callable[[], float] = time.perf_counter,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.sections = tuple(sections)
        self.surface = surface
        self.scroller = scroller
        self.settings = settings or DeckSettings()

        self.channel = SectionChannel()
        self.navigator = SectionNavigator(self.sections, self.channel, self.settings.navigator)
        self.renderer = GlyphFieldRenderer(
            surface,
            ripple_source=lambda now: self.emitter.active(now),
            channel=self.channel,
            settings=self.settings.glyphs,
            clock=clock,
            rng=rng,
        )
        self.emitter = RippleEmitter(
            self.channel,
            viewport_size=self.renderer.viewport_size,
            settings=self.settings.ripples,
            clock=clock,
        )
        self.renderer.set_section_tints({s.id: s.tint for s in self.sections if s.tint is not None})

        self._started = False
        self._closed = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """
        Start every component.

        The renderer goes first so the viewport size is known to the emitter;
        the navigator goes last so its deferred first publication reaches
        every subscriber.
        """
        if self._started or self._closed:
            return
        self._started = True
        resized = getattr(self.surface, "resized", None)
        if resized is not None:
            resized.connect(self.renderer.resize)

        self.renderer.start()
        self.emitter.start()
        if self.scroller is not None:
            self.scroller.attach(self.navigator, self.channel)
        self.navigator.start()
        logger.info(f"Deck started with {len(self.sections)} sections.")

    def close(self) -> None:
        """Release everything at once. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True

        if self._started:
            resized = getattr(self.surface, "resized", None)
            if resized is not None:
                resized.disconnect(self.renderer.resize)
        if self.scroller is not None:
            self.scroller.detach()
        self.navigator.shutdown()
        self.emitter.shutdown()
        self.renderer.stop()
        leftover = self.channel.subscriber_count()
        if leftover:
            logger.debug(f"Releasing {leftover} outside channel subscriptions.")
        self.channel.clear()
        logger.info("Deck closed.")

    def __enter__(self) -> Deck:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
