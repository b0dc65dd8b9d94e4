#!/usr/bin/env python3
"""
Fetch new tournaments into the cache and rewrite the ratings file.

Run from a checkout without installing the package:
    python scripts/update_ratings.py -i tournaments.txt -c cache.json -o ratings.json

Takes the same options as the ``chelo`` console script (see --help).
"""
from __future__ import annotations

import sys
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from chelo.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
