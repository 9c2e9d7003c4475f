"""
Entry Point Script (Bootstrap)
==============================
Starting point of the application for development from a source checkout.

Why is this file needed?
------------------------
1. It is located outside the 'src' package to act as a convenient runner.
2. It modifies 'sys.path' so Python can resolve 'glyphdeck' without an install.

Usage:
    $ python run.py [--sections my_sections.json] [-v]
"""
import sys
import os

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

from glyphdeck.main import main

if __name__ == "__main__":
    sys.exit(main())
