"""
Area classification: building footprints and farmland.
"""

import logging
import math

from infra_stats.config import FARM_LANDUSE_VALUES
from infra_stats.ledger import Ledger
from infra_stats.models import Area
from infra_stats.tags import has_value_other_than_no

logger = logging.getLogger(__name__)


def is_degenerate(area: Area) -> bool:
    """Areas whose geometry could not be resolved into a positive area."""
    return area.area is None or not math.isfinite(area.area) or area.area <= 0


def classify_area(area: Area, ledger: Ledger) -> None:
    """
    Add an area's footprint to the building and farmland totals.

    Degenerate areas are skipped with a warning; a single malformed
    polygon never aborts the pass.

    Args:
        area: The area, with its size in square meters
        ledger: Running totals to update
    """
    ledger.area_count += 1

    if is_degenerate(area):
        logger.warning("Skipping area %s: degenerate geometry", area.id)
        ledger.degenerate_area_count += 1
        return

    tags = area.tags

    if has_value_other_than_no(tags, "building"):
        ledger.building_cover_area += area.area
        ledger.building_count += 1

    if tags.get("landuse") in FARM_LANDUSE_VALUES:
        ledger.farmland_area += area.area
        ledger.farm_count += 1
