"""
Section Scroller
================
The scrollable page of full-viewport section panels.

Why is this file needed?
------------------------
1. Input: It is the widget that actually receives wheel and touch events, and
   forwards them to the SectionNavigator.
2. Visibility: It measures how much of every panel is inside the viewport and
   reports those ratios whenever the page scrolls or resizes.
3. Motion: It performs the smooth programmatic scroll the navigator asks for.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from PySide6.QtCore import QAbstractAnimation, QEasingCurve, QEvent, QPropertyAnimation, Qt
from PySide6.QtWidgets import QFrame, QLabel, QScrollArea, QVBoxLayout, QWidget

from glyphdeck.app.state import SectionChannel, Subscription, change_id
from glyphdeck.controller.navigator import SectionNavigator
from glyphdeck.model.sections import Section, Side

logger = logging.getLogger(__name__)

SCROLL_ANIMATION_MS = 600


class SectionPanel(QFrame):
    """One full-viewport content region, aligned to its side."""
    def __init__(self, section: Section, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.section = section
        self.setObjectName(f"section-{section.id}")
        self.setProperty("active", False)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)

        align = Qt.AlignmentFlag.AlignRight if section.side is Side.RIGHT else Qt.AlignmentFlag.AlignLeft

        layout = QVBoxLayout(self)
        layout.setContentsMargins(64, 48, 64, 48)
        layout.addStretch(1)

        self.title_label = QLabel(section.title or section.id)
        self.title_label.setAlignment(align)
        self.title_label.setStyleSheet("font-size: 40px; font-weight: bold; color: #e6ecf8;")
        layout.addWidget(self.title_label)

        self.body_label = QLabel(section.body)
        self.body_label.setAlignment(align)
        self.body_label.setWordWrap(True)
        self.body_label.setStyleSheet("font-size: 17px; color: #aeb9cf;")
        layout.addWidget(self.body_label)

        layout.addStretch(1)

    def set_active(self, active: bool) -> None:
        if self.property("active") == active:
            return
        self.setProperty("active", active)
        # Re-polish so stylesheet selectors on [active="true"] apply
        self.style().unpolish(self)
        self.style().polish(self)


class SectionScroller(QScrollArea):
    def __init__(self, sections: Sequence[Section], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.sections = tuple(sections)
        self.navigator: Optional[SectionNavigator] = None
        self._subscription: Optional[Subscription] = None
        self._target_index = 0

        self.setWidgetResizable(True)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setStyleSheet("QScrollArea, QScrollArea > QWidget > QWidget { background: transparent; }")
        self.viewport().setAutoFillBackground(False)
        self.viewport().setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)

        content = QWidget()
        content.setAutoFillBackground(False)
        layout = QVBoxLayout(content)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        self.panels: list[SectionPanel] = []
        for section in self.sections:
            panel = SectionPanel(section, content)
            layout.addWidget(panel)
            self.panels.append(panel)
        self.setWidget(content)

        self._animation = QPropertyAnimation(self.verticalScrollBar(), b"value", self)
        self._animation.setDuration(SCROLL_ANIMATION_MS)
        self._animation.setEasingCurve(QEasingCurve.Type.OutCubic)

        self.verticalScrollBar().valueChanged.connect(self._report_visibility)

    # ------------------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------------------

    def attach(self, navigator: SectionNavigator, channel: SectionChannel) -> None:
        """Route input to the navigator and follow the active section."""
        self.navigator = navigator
        navigator.scroll_handler = self.scroll_to_section
        if self._subscription is None:
            self._subscription = channel.subscribe(self._on_section_changed)
        self._report_visibility()

    def detach(self) -> None:
        self._animation.stop()
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        if self.navigator is not None and self.navigator.scroll_handler == self.scroll_to_section:
            self.navigator.scroll_handler = None
        self.navigator = None

    def scroll_to_section(self, section: Section) -> None:
        if not (0 <= section.index < len(self.panels)):
            return
        self._target_index = section.index
        target = self.panels[section.index].y()
        bar = self.verticalScrollBar()
        self._animation.stop()
        self._animation.setStartValue(bar.value())
        self._animation.setEndValue(max(bar.minimum(), min(bar.maximum(), target)))
        self._animation.start()

    def visibility_ratios(self) -> dict[str, float]:
        """Fraction of each panel's height that lies inside the viewport."""
        top = self.verticalScrollBar().value()
        bottom = top + self.viewport().height()
        ratios: dict[str, float] = {}
        for panel in self.panels:
            height = panel.height()
            if height <= 0:
                continue
            visible = min(bottom, panel.y() + height) - max(top, panel.y())
            ratios[panel.section.id] = max(0.0, visible) / height
        return ratios

    # ------------------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------------------

    def resizeEvent(self, event):
        super().resizeEvent(event)
        height = self.viewport().height()
        for panel in self.panels:
            panel.setMinimumHeight(height)
            panel.setMaximumHeight(height)
        # Lay the panels out now rather than on the next layout pass, so the
        # active panel can be re-aligned against its new position
        content = self.widget()
        content.resize(self.viewport().width(), height * len(self.panels))
        content.layout().activate()
        self._realign()

    def wheelEvent(self, event):
        if self.navigator is not None:
            # Qt reports wheel-away as positive; the navigator counts towards
            # later sections as positive.
            delta = -event.angleDelta().y()
            if delta and self.navigator.handle_wheel(delta):
                event.accept()
                return
        super().wheelEvent(event)

    def viewportEvent(self, event):
        etype = event.type()
        if self.navigator is not None and etype in (
            QEvent.Type.TouchBegin,
            QEvent.Type.TouchUpdate,
            QEvent.Type.TouchEnd,
            QEvent.Type.TouchCancel,
        ):
            points = event.points()
            if etype == QEvent.Type.TouchBegin:
                self.navigator.handle_touch_start([p.position().y() for p in points])
            elif etype == QEvent.Type.TouchUpdate and points:
                self.navigator.handle_touch_move(points[0].position().y())
            else:
                self.navigator.handle_touch_end()
            event.accept()
            return True
        return super().viewportEvent(event)

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _report_visibility(self, *_: Any) -> None:
        if self.navigator is not None:
            self.navigator.update_visibility(self.visibility_ratios())

    def _on_section_changed(self, change: Any) -> None:
        section_id = change_id(change)
        if section_id is None:
            return
        for panel in self.panels:
            panel.set_active(panel.section.id == section_id)

    def _realign(self) -> None:
        """Snap back onto the active panel (or the one being scrolled to)."""
        if self.navigator is not None and self.navigator.observing:
            index = self.navigator.active_index
            if self._animation.state() == QAbstractAnimation.State.Running:
                self._animation.stop()
                index = self._target_index
            if 0 <= index < len(self.panels):
                self.verticalScrollBar().setValue(self.panels[index].y())
        self._report_visibility()
