"""
Section Descriptors
===================
Defines the ordered presentation regions and loads them from JSON.

Why is this file needed?
------------------------
1. Declarative input: The deck is described by a list of descriptors
   (id, side, optional title/body/tint) read once at startup.
2. Robustness: A malformed descriptor is skipped on its own; an unreadable
   file yields an empty deck instead of crashing the application.

Classes:
    Side: Which half of the viewport a section's content occupies.
    Section: Immutable reference to one presentation region.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Iterable, Optional

from glyphdeck.config import DEFAULT_SECTIONS_PATH, RGB

logger = logging.getLogger(__name__)


class Side(StrEnum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> Side:
        return Side.RIGHT if self is Side.LEFT else Side.LEFT

    @classmethod
    def parse(cls, value: Any) -> Side:
        """Anything other than an explicit 'right' reads as left."""
        return cls.RIGHT if str(value).strip().lower() == cls.RIGHT else cls.LEFT


@dataclass(frozen=True)
class Section:
    index: int
    id: str
    side: Side = Side.LEFT
    title: str = ""
    body: str = ""
    tint: Optional[RGB] = None


def _parse_tint(raw: Any) -> Optional[RGB]:
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.replace(",", " ").split()
    try:
        r, g, b = (int(c) for c in raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed tint {raw!r}")
        return None
    return (max(0, min(255, r)), max(0, min(255, g)), max(0, min(255, b)))


def sections_from_descriptors(descriptors: Iterable[Any]) -> list[Section]:
    """
    Build the ordered section list.

    Descriptors without a usable id, or with an id already taken, are skipped.
    Indices are assigned after skipping so they are always contiguous.
    """
    sections: list[Section] = []
    seen: set[str] = set()
    for position, raw in enumerate(descriptors):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping section descriptor #{position}: not an object")
            continue
        section_id = str(raw.get("id") or "").strip()
        if not section_id:
            logger.warning(f"Skipping section descriptor #{position}: missing id")
            continue
        if section_id in seen:
            logger.warning(f"Skipping section descriptor #{position}: duplicate id '{section_id}'")
            continue
        seen.add(section_id)
        sections.append(Section(
            index=len(sections),
            id=section_id,
            side=Side.parse(raw.get("side", Side.LEFT)),
            title=str(raw.get("title", section_id)),
            body=str(raw.get("body", "")),
            tint=_parse_tint(raw.get("tint")),
        ))
    return sections


def load_sections(path: Optional[str] = None) -> list[Section]:
    """
    Load section descriptors from a JSON file (bundled default if no path).

    The file holds either a list of descriptors or an object with a
    'sections' list.
    """
    filepath = path or DEFAULT_SECTIONS_PATH
    logger.info(f"Loading sections from: {filepath}")
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read sections from '{filepath}': {e}")
        return []

    if isinstance(data, dict):
        data = data.get("sections", [])
    if not isinstance(data, list):
        logger.warning(f"Sections file '{filepath}' does not contain a list")
        return []

    sections = sections_from_descriptors(data)
    logger.info(f"Loaded {len(sections)} sections.")
    return sections
