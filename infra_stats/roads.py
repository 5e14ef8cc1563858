"""
Road classification for linear features.

Each way is sorted into any number of statistical buckets (public roads,
interstates, service subtypes, sidewalks, bike lanes, ...) and its length
is added to the matching totals of a Ledger. Buckets are not mutually
exclusive: a way can be both public and interstate.
"""

import logging
from typing import Dict, Hashable, Mapping, Optional

from infra_stats.config import (
    BIKE_LANE_VALUE,
    CLASSIFICATION_KEYS,
    DIVIDED_HIGHWAY_TYPES,
    INTERSTATE_REF_PREFIX,
    MAXSPEED_KEYS,
    PEDESTRIAN_TYPES,
    PIPELINE_VALUE,
    PUBLIC_ACCESS_VALUES,
    RAILWAY_TYPES,
    SERVICE_TYPES,
    SHARROW_VALUE,
)
from infra_stats.lanes import lane_count, turn_lane_length
from infra_stats.ledger import Ledger
from infra_stats.models import Way
from infra_stats.tags import has_value_other_than_no, is_oneway

logger = logging.getLogger(__name__)


class BridgeDeduplicator:
    """
    Count physically distinct bridges from a stream of bridge ways.

    Bridges are often split into several ways that share endpoint nodes.
    A way whose endpoints were both unseen starts a new bridge; any way
    touching a known endpoint extends an existing one. Branching bridges
    are not treated specially: a shared node simply points at the most
    recent way.
    """

    def __init__(self):
        self.endpoints: Dict[Hashable, int] = {}

    def observe(self, way: Way) -> bool:
        """
        Record a bridge way.

        Returns:
            True if the way starts a new bridge span
        """
        first, last = way.first_node, way.last_node
        is_new = first not in self.endpoints and last not in self.endpoints
        self.endpoints[first] = way.id
        self.endpoints[last] = way.id
        return is_new

    def clear(self) -> None:
        self.endpoints.clear()

    def __len__(self) -> int:
        return len(self.endpoints)


def road_class(tags: Mapping[str, str]) -> Optional[str]:
    """
    Get the primary classification of a way.

    Ways tagged with footway=* or cycleway=* but no highway=* are classified
    as footways and cycleways respectively.
    """
    highway = tags.get("highway")
    if highway:
        return highway
    if tags.get("footway"):
        return "footway"
    if tags.get("cycleway"):
        return "cycleway"
    return None


def is_public(tags: Mapping[str, str]) -> bool:
    """Non-service roads without restrictive access tags."""
    access = tags.get("access")
    return (
        road_class(tags) != "service"
        and (access is None or access in PUBLIC_ACCESS_VALUES)
    )


def is_interstate(tags: Mapping[str, str]) -> bool:
    ref = tags.get("ref") or ""
    return (
        ref.startswith(INTERSTATE_REF_PREFIX)
        and road_class(tags) != "motorway_link"
    )


def is_freeway(tags: Mapping[str, str]) -> bool:
    """Motorways not already counted as interstates."""
    return road_class(tags) == "motorway" and not is_interstate(tags)


def has_speed_limit(tags: Mapping[str, str]) -> bool:
    return any(tags.get(key) for key in MAXSPEED_KEYS)


def _count_linear_infrastructure(tags: Mapping[str, str], length: float, ledger: Ledger) -> None:
    if tags.get("railway") in RAILWAY_TYPES:
        ledger.railway_length += length
    if tags.get("man_made") == PIPELINE_VALUE:
        ledger.pipeline_length += length


def _count_path(highway: str, tags: Mapping[str, str], length: float, ledger: Ledger) -> bool:
    """
    Account for hallways, footpaths, stairs and bike paths.

    Returns:
        True if the way was a path and needs no further classification
    """
    if highway == "corridor":
        ledger.hallway_length += length
        return True

    if highway in PEDESTRIAN_TYPES:
        footway = tags.get("footway")
        if footway == "crossing":
            ledger.crosswalk_length += length
        elif footway == "sidewalk":
            ledger.sidewalk_length += length
        else:
            ledger.footpath_length += length
        return True

    if highway == "steps":
        ledger.stairs_length += length
        return True

    if highway == "cycleway":
        ledger.bike_path_length += length
        if "crossing" in (tags.get("cycleway"), tags.get("footway")):
            ledger.bike_crossing_length += length
        return True

    return False


def _count_bike_lanes(tags: Mapping[str, str], length: float, ledger: Ledger) -> None:
    if is_oneway(tags):
        values = {
            tags.get("cycleway"),
            tags.get("cycleway:both"),
            tags.get("cycleway:left"),
            tags.get("cycleway:right"),
        }
        if BIKE_LANE_VALUE in values:
            ledger.bike_lane_length += length
        if SHARROW_VALUE in values:
            ledger.sharrow_length += length
        return

    # Each side of a two-way road carries its own lane
    for side in ("left", "right"):
        value = tags.get(f"cycleway:{side}")
        if value == BIKE_LANE_VALUE:
            ledger.bike_lane_length += length
        elif value == SHARROW_VALUE:
            ledger.sharrow_length += length


def classify_way(way: Way, ledger: Ledger, bridges: BridgeDeduplicator) -> None:
    """
    Add a way's length to every bucket it belongs to.

    Args:
        way: The way, with its length in meters
        ledger: Running totals to update
        bridges: Bridge endpoint index for the current pass
    """
    tags = way.tags
    length = way.length

    ledger.way_count += 1
    _count_linear_infrastructure(tags, length, ledger)

    if not any(tags.get(key) for key in CLASSIFICATION_KEYS):
        return

    highway = road_class(tags)
    if _count_path(highway, tags, length, ledger):
        return

    public = is_public(tags)
    interstate = is_interstate(tags)
    freeway = is_freeway(tags)
    oneway = is_oneway(tags)

    ledger.road_count += 1

    # Centerline
    ledger.centerline_length += length
    if public:
        ledger.public_centerline_length += length
    if interstate:
        ledger.interstate_centerline_length += length
    elif freeway:
        ledger.freeway_centerline_length += length

    if oneway and highway in DIVIDED_HIGHWAY_TYPES:
        ledger.oneway_centerline_length += length
        if public:
            ledger.oneway_public_centerline_length += length

    if highway == "service":
        service_field = SERVICE_TYPES.get(tags.get("service"))
        if service_field is not None:
            ledger.add(service_field, length)

    # Lanes
    way_lane_length = length * lane_count(tags)
    ledger.lane_length += way_lane_length
    if public:
        ledger.public_lane_length += way_lane_length
    if interstate:
        ledger.interstate_lane_length += way_lane_length
    elif freeway:
        ledger.freeway_lane_length += way_lane_length

    ledger.turn_lane_length += turn_lane_length(tags, length)

    _count_bike_lanes(tags, length, ledger)

    ledger.lengths_by_road_class[highway] += length

    if has_speed_limit(tags):
        ledger.speed_limited_length += length
        ledger.speed_limited_lengths_by_road_class[highway] += length

    if has_value_other_than_no(tags, "bridge"):
        if bridges.observe(way):
            ledger.bridge_count += 1
        ledger.bridge_length += length

    if has_value_other_than_no(tags, "toll"):
        ledger.toll_length += length

    logger.debug("Classified way %s as %s (%.1f m)", way.id, highway, length)
