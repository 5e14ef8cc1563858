"""
Infra Stats - aggregate infrastructure statistics from OpenStreetMap data.

This package provides tools for:
- Resolving directional and per-lane OSM tags
- Counting lanes and turn lanes on roads
- Classifying ways and areas into road, path, bike, building and farmland totals
- Streaming passes over OSM extracts (pyosmium) or ohsome API snapshots
- Rendering the totals as text and tabular reports
"""

from infra_stats.config import (
    PROGRESS_INTERVAL,
    YEARS,
    WGS84_CRS,
)

from infra_stats.models import Area, Way

from infra_stats.ledger import Ledger

from infra_stats.lanes import (
    lane_count,
    turn_lane_length,
)

from infra_stats.roads import (
    BridgeDeduplicator,
    classify_way,
)

from infra_stats.areas import classify_area

from infra_stats.passes import (
    AreaPass,
    WayPass,
    run_area_pass,
    run_way_pass,
)

from infra_stats.report import (
    render_report,
    save_report,
)

__version__ = "0.1.0"

__all__ = [
    # Config
    "PROGRESS_INTERVAL",
    "YEARS",
    "WGS84_CRS",
    # Records
    "Way",
    "Area",
    "Ledger",
    # Classification
    "lane_count",
    "turn_lane_length",
    "BridgeDeduplicator",
    "classify_way",
    "classify_area",
    # Passes
    "WayPass",
    "AreaPass",
    "run_way_pass",
    "run_area_pass",
    # Reports
    "render_report",
    "save_report",
    # Modules
    "tags",
    "geometry",
    "pbf",
    "ohsome",
    "cli",
]
