"""
Section Navigator
=================
Turns wheel, touch and visibility input into discrete section transitions.

Why is this file needed?
------------------------
1. Debouncing: Raw wheel deltas and touch drags arrive at high frequency. They
   are accumulated against fixed triggers so one gesture moves exactly one
   section.
2. Locking: A programmatic scroll takes time. While it is in flight, further
   gesture input is swallowed, and a timer releases the lock even if the
   scroll itself stalls.
3. Publication: Every change of the active section is published once through
   the SectionChannel; nothing else in the deck talks to the navigator.

Classes:
    SectionNavigator: The state machine, driven by the Qt event loop.
"""
from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional, Sequence

from PySide6.QtCore import QObject, QTimer

from glyphdeck.app.state import SectionChange, SectionChannel
from glyphdeck.config import NavigatorSettings
from glyphdeck.model.sections import Section, Side
from glyphdeck.model.state import NavigatorState

logger = logging.getLogger(__name__)

ScrollHandler = Callable[[Section], None]


class SectionNavigator(QObject):
    def __init__(
        self,
        sections: Sequence[Section],
        channel: SectionChannel,
        settings: NavigatorSettings | None = None,
        scroll_handler: Optional[ScrollHandler] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.sections: tuple[Section, ...] = tuple(sections)
        self.channel = channel
        self.settings = settings or NavigatorSettings()
        self.scroll_handler = scroll_handler

        self.state = NavigatorState()
        self.active_side: Side = self.sections[0].side if self.sections else Side.LEFT
        self._index_by_id = {s.id: s.index for s in self.sections}
        self._observing = False
        self._has_published = False

        self._wheel_reset_timer = QTimer(self)
        self._wheel_reset_timer.setSingleShot(True)
        self._wheel_reset_timer.setInterval(self.settings.wheel_reset_ms)
        self._wheel_reset_timer.timeout.connect(self._on_wheel_idle)

        self._release_timer = QTimer(self)
        self._release_timer.setSingleShot(True)
        self._release_timer.setInterval(self.settings.lock_ms)
        self._release_timer.timeout.connect(self._unlock)

        # Deferred first activation, so subscribers see a known initial state
        self._initial_timer = QTimer(self)
        self._initial_timer.setSingleShot(True)
        self._initial_timer.setInterval(0)
        self._initial_timer.timeout.connect(self._activate_initial)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def active_index(self) -> int:
        return self.state.active_index

    @property
    def active_section(self) -> Optional[Section]:
        if not self.sections:
            return None
        return self.sections[self.state.active_index]

    @property
    def locked(self) -> bool:
        return self.state.locked

    @property
    def observing(self) -> bool:
        return self._observing

    def start(self) -> None:
        """Begin observing input. A deck without sections stays inert."""
        if not self.sections:
            logger.info("No sections discovered; navigator stays idle.")
            return
        if self._observing:
            return
        self._observing = True
        self._initial_timer.start()
        logger.info(f"Navigator observing {len(self.sections)} sections.")

    def shutdown(self) -> None:
        """Stop every timer and return to the non-observing state."""
        self._initial_timer.stop()
        self._wheel_reset_timer.stop()
        self._release_timer.stop()
        self.state.wheel_accumulator = 0.0
        self.state.pending_touch_origin = None
        self.state.locked = False
        self.scroll_handler = None
        if self._observing:
            logger.info("Navigator stopped.")
        self._observing = False

    def update_visibility(self, ratios: Mapping[str, float]) -> None:
        """
        Activate the most visible section above the significance threshold.

        Not gated by the scroll lock: visibility follows the real scroll
        position, including the one a programmatic scroll produces.
        """
        if not self._observing:
            return
        best_index: Optional[int] = None
        best_ratio = 0.0
        for section_id, ratio in ratios.items():
            index = self._index_by_id.get(section_id)
            if index is None or ratio < self.settings.visibility_threshold:
                continue
            if best_index is None or ratio > best_ratio or (ratio == best_ratio and index < best_index):
                best_index, best_ratio = index, ratio
        if best_index is not None:
            self._set_active(best_index)

    def handle_wheel(self, delta_y: float) -> bool:
        """
        Feed a vertical wheel delta (positive = towards later sections).

        Returns:
            True if the host should suppress its native scrolling for this event.
        """
        if not self._observing:
            return False
        if self.state.locked:
            return True

        self.state.wheel_accumulator += delta_y
        self._wheel_reset_timer.start()

        if abs(self.state.wheel_accumulator) < self.settings.wheel_trigger:
            return False

        direction = 1 if self.state.wheel_accumulator > 0 else -1
        self.step(direction)
        self._reset_wheel()
        return True

    def handle_touch_start(self, ys: Sequence[float]) -> None:
        """Record the start of a single-finger drag; multi-touch is ignored."""
        if not self._observing or len(ys) != 1:
            return
        self.state.pending_touch_origin = float(ys[0])
        self._reset_wheel()

    def handle_touch_move(self, y: float) -> bool:
        """Returns True if this move fired a transition."""
        origin = self.state.pending_touch_origin
        if not self._observing or origin is None or self.state.locked:
            return False

        delta = origin - y
        if abs(delta) < self.settings.touch_trigger:
            return False

        self.step(1 if delta > 0 else -1)
        self.state.pending_touch_origin = None
        return True

    def handle_touch_end(self) -> None:
        """Touch end and touch cancel both land here."""
        self.state.pending_touch_origin = None

    def step(self, direction: int) -> bool:
        """Scroll to the neighbouring section in the given direction."""
        return self.scroll_to(self.state.active_index + direction)

    def scroll_to(self, index: int) -> bool:
        """
        Smoothly scroll the given section into view and lock gesture input.

        Out-of-range indices and requests made while a scroll is already in
        flight are ignored.
        """
        if not self._observing or not (0 <= index < len(self.sections)):
            return False
        if self.state.locked:
            logger.debug(f"Scroll to #{index} rejected: scroll in flight")
            return False

        self._reset_wheel()
        self.state.locked = True
        logger.debug(f"Scrolling to section #{index} ({self.sections[index].id})")
        if self.scroll_handler is not None:
            self.scroll_handler(self.sections[index])
        # Time-based release caps the lock even if the scroll never completes
        self._release_timer.start()
        return True

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _set_active(self, index: int, force: bool = False) -> None:
        if not force and self._has_published and index == self.state.active_index:
            return
        section = self.sections[index]
        self.state.active_index = index
        self.active_side = section.side
        self._has_published = True
        self.channel.publish(SectionChange(id=section.id, side=section.side))

    def _activate_initial(self) -> None:
        if self._observing:
            self._set_active(0, force=True)

    def _reset_wheel(self) -> None:
        self._wheel_reset_timer.stop()
        self.state.wheel_accumulator = 0.0

    def _on_wheel_idle(self) -> None:
        self.state.wheel_accumulator = 0.0

    def _unlock(self) -> None:
        self._release_timer.stop()
        self.state.locked = False
        logger.debug("Scroll lock released.")
