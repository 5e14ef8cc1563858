"""
Lane counting and turn-lane accounting.

Lane counts are derived from ``lanes``, ``lanes:forward``/``lanes:backward``
and the per-lane ``turn`` lists, with defaults for ways that leave lanes
untagged.
"""

from typing import Mapping, Optional

from infra_stats.config import (
    LINK_SUFFIX,
    MERGE_TURN_FRAGMENT,
    THROUGH_TURN_VALUE,
)
from infra_stats.tags import (
    DIRECTIONS,
    is_oneway,
    parse_count,
    resolve_tag,
    split_lanes,
    traversable_directions,
)


def lane_count(tags: Mapping[str, str], direction: Optional[str] = None) -> int:
    """
    Count the lanes of a way.

    Args:
        tags: The way's tag mapping
        direction: FORWARD or BACKWARD to count one direction of travel.
                   Omit to count every lane regardless of direction.

    Returns:
        Number of lanes, always at least 1
    """
    total = parse_count(tags.get("lanes"))

    if direction is None:
        if total:
            return total
        # Service roads normally lack marked lanes.
        if tags.get("highway") == "service":
            return 1
        return sum(lane_count(tags, d) for d in traversable_directions(tags))

    count = parse_count(tags.get(f"lanes:{direction}")) or 0

    turn_lanes = resolve_tag("turn", tags, direction)
    if turn_lanes is not None:
        count = max(count, len(split_lanes(turn_lanes)))

    if not count:
        count = total or 0
        if len(traversable_directions(tags)) == len(DIRECTIONS):
            count //= 2

    return count or 1


def is_turn_channel(tags: Mapping[str, str]) -> bool:
    """
    Check whether a way is a turn channel: a short one-way link or service
    way carrying a single turning or merging movement.
    """
    highway = tags.get("highway") or ""
    # Unparsable or zero lanes count as untagged
    single_lane = "turn" in tags or parse_count(tags.get("lanes")) in (None, 0, 1)
    return (
        single_lane
        and is_oneway(tags)
        and (highway == "service" or LINK_SUFFIX in highway)
    )


def _is_turn_lane(value: str) -> bool:
    return (
        value != ""
        and value != THROUGH_TURN_VALUE
        and MERGE_TURN_FRAGMENT not in value
    )


def turn_lane_count(tags: Mapping[str, str], direction: str) -> int:
    """Count the lanes in one direction dedicated to turning."""
    turn_lanes = resolve_tag("turn", tags, direction, lane_count(tags, direction))
    return sum(1 for lane in split_lanes(turn_lanes) if _is_turn_lane(lane))


def turn_lane_length(tags: Mapping[str, str], length: float) -> float:
    """
    Compute the turn-lane meters contributed by a way.

    Args:
        tags: The way's tag mapping
        length: Length of the way in meters

    Returns:
        Sum over traversable directions of turn lanes times length
    """
    if is_turn_channel(tags):
        return 0.0

    return sum(
        turn_lane_count(tags, direction) * length
        for direction in traversable_directions(tags)
    )
