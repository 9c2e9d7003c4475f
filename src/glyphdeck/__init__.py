"""Section-snapping presentation surface with an animated glyph field background."""
