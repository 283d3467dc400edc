#!/usr/bin/env python3
"""Sati Timer — entry point.

Run with:
    python main.py 20
    python -m satitimer 20
"""

import sys

from satitimer.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
