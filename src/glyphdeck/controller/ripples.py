from __future__ import annotations

import logging
import time
from collections import deque
from typing import Any, Callable, Deque, Optional

from glyphdeck.app.state import SectionChannel, Subscription, change_id
from glyphdeck.config import RippleSettings
from glyphdeck.model.sections import Side
from glyphdeck.model.state import Ripple

logger = logging.getLogger(__name__)

ViewportSize = Callable[[], tuple[float, float]]


class RippleEmitter:
    """
    Turns section changes into ripples held in a bounded FIFO.

    The ripple starts on the side opposite the section's content, where the
    section's icon sits. When the collection is full the oldest ripple is
    evicted, whatever its remaining lifetime.
    """
    def __init__(
        self,
        channel: SectionChannel,
        viewport_size: ViewportSize,
        settings: RippleSettings | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.channel = channel
        self.viewport_size = viewport_size
        self.settings = settings or RippleSettings()
        self.clock = clock

        self._ripples: Deque[Ripple] = deque(maxlen=self.settings.capacity)
        self._subscription: Optional[Subscription] = None

    @property
    def ripples(self) -> tuple[Ripple, ...]:
        return tuple(self._ripples)

    def start(self) -> None:
        """Subscribe to section changes and seed one soft ripple."""
        if self._subscription is None:
            self._subscription = self.channel.subscribe(self._on_section_changed)
        x, y = self.origin_for(Side.LEFT)
        self.push(x, y, self.settings.initial_strength)

    def shutdown(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self._ripples.clear()

    def origin_for(self, icon_side: Side) -> tuple[float, float]:
        width, height = self.viewport_size()
        fraction = self.settings.left_x if icon_side is Side.LEFT else self.settings.right_x
        return width * fraction, height * self.settings.origin_y

    def push(self, x: float, y: float, strength: Optional[float] = None) -> Ripple:
        ripple = Ripple(
            x=x,
            y=y,
            start_time=self.clock(),
            duration=self.settings.duration,
            angular_speed=self.settings.angular_speed,
            strength=self.settings.strength if strength is None else strength,
        )
        # deque(maxlen) drops the oldest entry on overflow
        self._ripples.append(ripple)
        return ripple

    def active(self, now: Optional[float] = None) -> tuple[Ripple, ...]:
        """Drop expired ripples and return the live ones, oldest first."""
        now = self.clock() if now is None else now
        if any(r.is_expired(now) for r in self._ripples):
            live = [r for r in self._ripples if not r.is_expired(now)]
            self._ripples.clear()
            self._ripples.extend(live)
        return tuple(self._ripples)

    def _on_section_changed(self, change: Any) -> None:
        if change_id(change) is None:
            logger.debug(f"Ignoring section change without id: {change!r}")
            return
        content_side = Side.parse(getattr(change, "side", Side.LEFT))
        x, y = self.origin_for(content_side.opposite)
        self.push(x, y)
