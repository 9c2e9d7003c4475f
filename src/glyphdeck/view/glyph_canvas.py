"""
Glyph Canvas
Paints composed GlyphFrames: background gradient plus one glyph per cell.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QRectF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QFont, QLinearGradient, QPainter, QPixmap
from PySide6.QtWidgets import QWidget

from glyphdeck.config import FieldSettings, RGB
from glyphdeck.field import GlyphFrame

logger = logging.getLogger(__name__)

# Alpha is quantised so the atlas stays small
ALPHA_LEVELS = 32
FONT_FAMILIES = ["VT323", "JetBrains Mono", "monospace"]


def glyph_font(cell: int) -> QFont:
    font = QFont()
    font.setFamilies(FONT_FAMILIES)
    font.setStyleHint(QFont.StyleHint.Monospace)
    font.setPixelSize(max(13, cell - 4))
    return font


class GlyphAtlas:
    """Cache of pre-rendered glyph pixmaps keyed by glyph, tint and alpha level."""
    def __init__(self, cell: int) -> None:
        self.cell = cell
        self.font = glyph_font(cell)
        self._dpr = 1.0
        self._cache: dict[tuple[str, RGB, int], QPixmap] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def set_device_pixel_ratio(self, dpr: float) -> None:
        if dpr != self._dpr:
            self._dpr = dpr
            self._cache.clear()
            logger.debug(f"Device pixel ratio {dpr:g}; glyph atlas cleared")

    def pixmap(self, glyph: str, tint: RGB, level: int) -> QPixmap:
        key = (glyph, tint, level)
        pix = self._cache.get(key)
        if pix is None:
            pix = self._render(glyph, tint, level)
            self._cache[key] = pix
        return pix

    def _render(self, glyph: str, tint: RGB, level: int) -> QPixmap:
        size = max(1, round(self.cell * self._dpr))
        pix = QPixmap(size, size)
        pix.setDevicePixelRatio(self._dpr)
        pix.fill(Qt.GlobalColor.transparent)

        color = QColor(*tint)
        color.setAlphaF(level / (ALPHA_LEVELS - 1))

        painter = QPainter(pix)
        painter.setFont(self.font)
        painter.setPen(color)
        painter.drawText(
            QRectF(0, 0, self.cell, self.cell),
            Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop,
            glyph,
        )
        painter.end()
        return pix


class GlyphCanvas(QWidget):
    """The 2D raster surface the GlyphFieldRenderer presents frames to."""
    resized = Signal(int, int)

    def __init__(self, settings: FieldSettings | None = None, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.settings = settings or FieldSettings()
        self.atlas = GlyphAtlas(self.settings.cell_size)
        self.frame: Optional[GlyphFrame] = None

        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent, True)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)

    def present(self, frame: GlyphFrame) -> None:
        self.frame = frame
        self.update()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.resized.emit(self.width(), self.height())

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            self._paint_background(painter)
            if self.frame is not None:
                self._paint_frame(painter, self.frame)
        finally:
            painter.end()

    def _paint_background(self, painter: QPainter) -> None:
        gradient = QLinearGradient(0, 0, 0, self.height())
        for position, color in self.settings.background:
            gradient.setColorAt(position, QColor(color))
        painter.fillRect(self.rect(), QBrush(gradient))

    def _paint_frame(self, painter: QPainter, frame: GlyphFrame) -> None:
        self.atlas.set_device_pixel_ratio(self.devicePixelRatioF())
        cell = frame.shape.cell

        rows, cols = frame.visible_cells()
        for row, col in zip(rows.tolist(), cols.tolist()):
            r, g, b, alpha = frame.color_at(row, col)
            level = int(alpha * (ALPHA_LEVELS - 1) + 0.5)
            pix = self.atlas.pixmap(str(frame.glyphs[row, col]), (r, g, b), level)
            painter.drawPixmap(col * cell, row * cell, pix)
