"""
Statistics passes over OSM extract files (.osm.pbf, .osm) via pyosmium.

The way pass needs node locations to measure ways; the area pass also
needs osmium's multipolygon assembly, which runs a second read of the
file. Both passes keep disjoint parts of the ledger and can run
independently.
"""

import logging
from typing import Dict, Optional

import osmium
import osmium.geom
from shapely import wkb

from infra_stats.config import (
    CLASSIFICATION_KEYS,
    FARM_LANDUSE_VALUES,
    PIPELINE_VALUE,
    PROGRESS_INTERVAL,
    RAILWAY_TYPES,
)
from infra_stats.geometry import area_or_none, line_length
from infra_stats.ledger import Ledger
from infra_stats.models import Area, Way
from infra_stats.passes import AreaPass, WayPass

logger = logging.getLogger(__name__)


def _tags_dict(obj) -> Dict[str, str]:
    return {tag.k: tag.v for tag in obj.tags}


def is_measured_way(tags: Dict[str, str]) -> bool:
    """Ways that contribute to any linear statistic."""
    return (
        any(key in tags for key in CLASSIFICATION_KEYS)
        or tags.get("railway") in RAILWAY_TYPES
        or tags.get("man_made") == PIPELINE_VALUE
    )


def is_measured_area(tags: Dict[str, str]) -> bool:
    """Areas that contribute to any area statistic."""
    return "building" in tags or tags.get("landuse") in FARM_LANDUSE_VALUES


class WayStatsHandler(osmium.SimpleHandler):
    """Measure ways and feed them to a way pass."""

    def __init__(self, way_pass: WayPass):
        super().__init__()
        self.way_pass = way_pass
        self.wkb_factory = osmium.geom.WKBFactory()

    def way(self, w):
        tags = _tags_dict(w)
        if not is_measured_way(tags):
            return

        try:
            line = wkb.loads(self.wkb_factory.create_linestring(w), hex=True)
        except (osmium.InvalidLocationError, RuntimeError) as e:
            # Extracts clipped at a boundary reference nodes they do not contain
            logger.debug("Skipping way %s: %s", w.id, e)
            self.way_pass.ledger.skipped_way_count += 1
            return

        self.way_pass.feed(Way(
            id=w.id,
            tags=tags,
            length=line_length(line),
            node_refs=(w.nodes[0].ref, w.nodes[-1].ref),
        ))


class AreaStatsHandler(osmium.SimpleHandler):
    """Measure assembled areas and feed them to an area pass."""

    def __init__(self, area_pass: AreaPass):
        super().__init__()
        self.area_pass = area_pass
        self.wkb_factory = osmium.geom.WKBFactory()

    def area(self, a):
        tags = _tags_dict(a)
        if not is_measured_area(tags):
            return

        try:
            polygon = wkb.loads(self.wkb_factory.create_multipolygon(a), hex=True)
        except (osmium.InvalidLocationError, RuntimeError) as e:
            logger.debug("Unable to build area %s: %s", a.orig_id(), e)
            polygon = None

        self.area_pass.feed(Area(
            id=a.orig_id(),
            tags=tags,
            area=area_or_none(polygon),
        ))


def compute_way_stats(
    path: str,
    ledger: Optional[Ledger] = None,
    progress_interval: int = PROGRESS_INTERVAL,
) -> Ledger:
    """
    Run the way pass over an extract file.

    Args:
        path: Path to an .osm.pbf or .osm file
        ledger: Ledger to accumulate into (default: a new one)
        progress_interval: Log progress every N ways

    Returns:
        The ledger with road, path and linear infrastructure totals
    """
    logger.info("Reading ways from %s", path)
    way_pass = WayPass(ledger, progress_interval)
    WayStatsHandler(way_pass).apply_file(path, locations=True)
    return way_pass.finish()


def compute_area_stats(
    path: str,
    ledger: Optional[Ledger] = None,
    progress_interval: int = PROGRESS_INTERVAL,
) -> Ledger:
    """Run the area pass (buildings, farmland) over an extract file."""
    logger.info("Reading areas from %s", path)
    area_pass = AreaPass(ledger, progress_interval)
    AreaStatsHandler(area_pass).apply_file(path, locations=True)
    return area_pass.finish()


def compute_stats(path: str, progress_interval: int = PROGRESS_INTERVAL) -> Ledger:
    """Run both passes over an extract file and merge their ledgers."""
    ways = compute_way_stats(path, progress_interval=progress_interval)
    areas = compute_area_stats(path, progress_interval=progress_interval)
    return ways.merge(areas)
