"""
Application Initialization
==========================
Parses the command line, sets up logging, and starts the Qt event loop.

Why is this file needed?
------------------------
It is the single entry point used by `python -m glyphdeck`, the `glyphdeck`
console script and the `run.py` bootstrap. It:
1. Reads the declarative section descriptors once.
2. Builds the settings from command-line overrides.
3. Shows the Main Window, which owns the deck.
"""
import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional, Sequence

from glyphdeck.app.application import create_app
from glyphdeck.config import DeckSettings
from glyphdeck.logging_config import setup_logging
from glyphdeck.model.sections import load_sections
from glyphdeck.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Section-snapping page over an animated glyph field")
    parser.add_argument("--sections", help="JSON file with section descriptors (default: bundled)")
    parser.add_argument("--cell-size", type=int, help="Glyph cell size in pixels")
    parser.add_argument("--fps", type=int, help="Target frames per second of the glyph field")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def settings_from_args(args: argparse.Namespace) -> DeckSettings:
    settings = DeckSettings()
    glyphs = settings.glyphs
    if args.cell_size is not None:
        glyphs = replace(glyphs, cell_size=args.cell_size)
    if args.fps is not None:
        if args.fps <= 0:
            raise ValueError("Frame rate must be positive.")
        glyphs = replace(glyphs, frame_interval_ms=max(1, round(1000 / args.fps)))
    return replace(settings, glyphs=glyphs)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    # 2. Settings and sections
    try:
        settings = settings_from_args(args)
    except ValueError as e:
        logger.error(f"Invalid settings: {e}")
        return 2
    sections = load_sections(args.sections)

    # 3. Create the Qt Application
    app = create_app()

    # 4. Initialize the Main Window, which owns the deck
    window = MainWindow(sections, settings)
    window.show()

    # 5. Start Event Loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
