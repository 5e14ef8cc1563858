#!/usr/bin/env python3
"""
Compute infrastructure statistics for a region.

This script:
1. Reads ways and areas from an OSM extract (or the ohsome API for a bounding box)
2. Classifies roads, paths, bike infrastructure, bridges, buildings and farmland
3. Prints a summary report and optionally saves CSV/JSON tables
"""

from infra_stats.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
