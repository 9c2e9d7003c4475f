"""
Run with: python -m glyphdeck
"""
import sys

from glyphdeck.main import main

if __name__ == "__main__":
    sys.exit(main())
