"""
Typed lookup over OSM tag mappings.

Directional (``:forward``/``:backward``) and per-lane (``:lanes``) variants
of a key are distinct tags. This module resolves them with a single
precedence rule so the classifiers never build suffixed keys themselves.
"""

import math
from typing import Any, List, Mapping, Optional, Tuple

from infra_stats.config import ONEWAY_BACKWARD_VALUES, ONEWAY_FORWARD_VALUES

FORWARD = "forward"
BACKWARD = "backward"
DIRECTIONS = (FORWARD, BACKWARD)

LANE_SEPARATOR = "|"


def _get(tags: Mapping[str, str], key: str) -> Optional[str]:
    """Get a tag value, treating empty strings as absent."""
    value = tags.get(key)
    if value is None or value == "":
        return None
    return value


def parse_count(value: Any) -> Optional[int]:
    """
    Parse a tag value as a non-negative integer.

    Handles formats like:
    - "2" -> 2
    - " 2 " -> 2
    - "2.0" -> 2
    - "2;3", "many", "-1", "" -> None
    """
    if value is None:
        return None

    try:
        number = float(str(value).strip())
    except ValueError:
        return None

    if math.isnan(number) or math.isinf(number) or number < 0:
        return None

    return int(number)


def resolve_tag(
    tag: str,
    tags: Mapping[str, str],
    direction: str,
    lane_count: Optional[int] = None,
) -> Optional[str]:
    """
    Resolve the value of a tag for one direction of travel.

    Lookup precedence, highest first:
    1. ``{tag}:lanes:{direction}``
    2. ``{tag}:lanes``
    3. ``{tag}:{direction}``
    4. ``{tag}``

    For the last two, a single value is replicated into a per-lane list of
    ``lane_count`` entries when ``lane_count`` is given. Values that already
    hold a per-lane list are returned as-is.

    Args:
        tag: Base key, without any suffix (e.g., "turn")
        tags: The feature's tag mapping
        direction: FORWARD or BACKWARD
        lane_count: Number of lanes in that direction, if known

    Returns:
        The resolved value, or None if no variant is present
    """
    value = _get(tags, f"{tag}:lanes:{direction}") or _get(tags, f"{tag}:lanes")
    if value is not None:
        return value

    value = _get(tags, f"{tag}:{direction}") or _get(tags, tag)
    if value is not None and lane_count and LANE_SEPARATOR not in value:
        return LANE_SEPARATOR.join([value] * lane_count)
    return value


def split_lanes(value: Optional[str]) -> List[str]:
    """Split a per-lane value into its entries."""
    if value is None:
        return []
    return value.split(LANE_SEPARATOR)


def traversable_directions(tags: Mapping[str, str]) -> Tuple[str, ...]:
    """Directions of travel permitted by the oneway tag."""
    oneway = tags.get("oneway")
    if oneway in ONEWAY_FORWARD_VALUES:
        return (FORWARD,)
    if oneway in ONEWAY_BACKWARD_VALUES:
        return (BACKWARD,)
    return DIRECTIONS


def is_oneway(tags: Mapping[str, str]) -> bool:
    return len(traversable_directions(tags)) == 1


def has_value_other_than_no(tags: Mapping[str, str], key: str) -> bool:
    """True when the tag is present and not explicitly "no"."""
    value = _get(tags, key)
    return value is not None and value != "no"
