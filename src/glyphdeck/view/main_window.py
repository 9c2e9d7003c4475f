"""
Main Application Window
=======================
Stacks the glyph field behind the section page and owns the deck's lifetime.

Why is this file needed?
------------------------
1. Layout: The canvas fills the window; the transparent scroller sits on top.
2. Lifetime: Closing the window tears the whole deck down in one step.
"""
from __future__ import annotations

import logging
from typing import Sequence

from PySide6.QtWidgets import QMainWindow, QStackedLayout, QWidget

from glyphdeck.app.deck import Deck
from glyphdeck.config import VISIBLE_APP_NAME, DeckSettings
from glyphdeck.model.sections import Section
from glyphdeck.view.glyph_canvas import GlyphCanvas
from glyphdeck.view.section_scroller import SectionScroller

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, sections: Sequence[Section], settings: DeckSettings | None = None) -> None:
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1280, 800)
        settings = settings or DeckSettings()

        central = QWidget(self)
        stack = QStackedLayout(central)
        stack.setStackingMode(QStackedLayout.StackingMode.StackAll)
        stack.setContentsMargins(0, 0, 0, 0)

        self.canvas = GlyphCanvas(settings.glyphs, central)
        self.scroller = SectionScroller(sections, central)
        stack.addWidget(self.canvas)
        stack.addWidget(self.scroller)
        # StackAll shows every page; the current one is drawn on top
        stack.setCurrentWidget(self.scroller)

        self.setCentralWidget(central)

        self.deck = Deck(sections, surface=self.canvas, scroller=self.scroller, settings=settings)

    def showEvent(self, event):
        super().showEvent(event)
        # Start once the canvas has its real size
        if not self.deck.started:
            self.deck.start()

    def closeEvent(self, event, /) -> None:
        """Tear down the deck before the widgets go away."""
        self.deck.close()
        event.accept()
