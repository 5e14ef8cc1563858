"""
Running totals accumulated over a feature stream.

A Ledger is created empty at the start of a pass, mutated by the
classifiers, and read once the pass is finished. Independent passes can
use separate ledgers and merge them afterwards.
"""

from collections import defaultdict
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Tuple


def _class_map() -> Dict[str, float]:
    return defaultdict(float)


@dataclass
class Ledger:
    """Named lengths (m), areas (m²) and counts, all starting at zero."""

    # Counts
    way_count: int = 0
    road_count: int = 0
    skipped_way_count: int = 0
    bridge_count: int = 0
    area_count: int = 0
    degenerate_area_count: int = 0
    building_count: int = 0
    farm_count: int = 0

    # Centerline lengths
    centerline_length: float = 0.0
    oneway_centerline_length: float = 0.0
    public_centerline_length: float = 0.0
    oneway_public_centerline_length: float = 0.0
    interstate_centerline_length: float = 0.0
    freeway_centerline_length: float = 0.0

    # Lane lengths
    lane_length: float = 0.0
    public_lane_length: float = 0.0
    interstate_lane_length: float = 0.0
    freeway_lane_length: float = 0.0
    turn_lane_length: float = 0.0

    # Service roads
    alley_length: float = 0.0
    driveway_length: float = 0.0
    parking_aisle_length: float = 0.0
    drive_through_length: float = 0.0

    # Pedestrian infrastructure
    hallway_length: float = 0.0
    crosswalk_length: float = 0.0
    sidewalk_length: float = 0.0
    footpath_length: float = 0.0
    stairs_length: float = 0.0

    # Bike infrastructure
    bike_path_length: float = 0.0
    bike_crossing_length: float = 0.0
    bike_lane_length: float = 0.0
    sharrow_length: float = 0.0

    # Other road attributes
    speed_limited_length: float = 0.0
    bridge_length: float = 0.0
    toll_length: float = 0.0

    # Non-road linear infrastructure
    railway_length: float = 0.0
    pipeline_length: float = 0.0

    # Areas
    building_cover_area: float = 0.0
    farmland_area: float = 0.0

    # Per road class (keyed by highway=*)
    lengths_by_road_class: Dict[str, float] = field(default_factory=_class_map)
    speed_limited_lengths_by_road_class: Dict[str, float] = field(
        default_factory=_class_map
    )

    def add(self, name: str, amount: float) -> None:
        """Increment a scalar total by name."""
        setattr(self, name, getattr(self, name) + amount)

    def merge(self, other: "Ledger") -> "Ledger":
        """Return a new ledger holding the sum of this one and ``other``."""
        merged = Ledger()
        for f in fields(self):
            mine = getattr(self, f.name)
            theirs = getattr(other, f.name)
            if isinstance(mine, dict):
                combined = _class_map()
                for source in (mine, theirs):
                    for road_class, length in source.items():
                        combined[road_class] += length
                setattr(merged, f.name, combined)
            else:
                setattr(merged, f.name, mine + theirs)
        return merged

    def centerline_range(self) -> Tuple[float, float]:
        """
        Bounds on physical centerline length.

        One-way carriageways of divided roads are mapped once per direction,
        so the lower bound counts each of them as half a road.
        """
        return (
            self.centerline_length - self.oneway_centerline_length / 2,
            self.centerline_length,
        )

    def public_centerline_range(self) -> Tuple[float, float]:
        return (
            self.public_centerline_length - self.oneway_public_centerline_length / 2,
            self.public_centerline_length,
        )

    def interstate_centerline(self) -> float:
        """Interstates are divided highways mapped as two one-way carriageways."""
        return self.interstate_centerline_length / 2

    def speed_limit_coverage(self) -> float:
        """Fraction of road centerline length with a posted speed limit."""
        if self.centerline_length <= 0:
            return 0.0
        return self.speed_limited_length / self.centerline_length

    def to_dict(self) -> Dict[str, Any]:
        """Flat snapshot of every total, with the per-class maps as plain dicts."""
        snapshot = {}
        for f in fields(self):
            value = getattr(self, f.name)
            snapshot[f.name] = dict(value) if isinstance(value, dict) else value
        return snapshot
