"""
Rendering of a finished ledger into text and tabular reports.
"""

import json
import os
from typing import Any, Dict

import pandas as pd

from infra_stats.config import OUTPUT_DIR
from infra_stats.ledger import Ledger


def summary_record(ledger: Ledger) -> Dict[str, Any]:
    """
    Flatten a ledger into scalar statistics, including derived bounds.

    The per-class maps are left out; see road_class_frame().
    """
    record = {
        name: value
        for name, value in ledger.to_dict().items()
        if not isinstance(value, dict)
    }
    record["centerline_min_length"], record["centerline_max_length"] = ledger.centerline_range()
    (
        record["public_centerline_min_length"],
        record["public_centerline_max_length"],
    ) = ledger.public_centerline_range()
    record["interstate_centerline"] = ledger.interstate_centerline()
    record["speed_limit_coverage"] = ledger.speed_limit_coverage()
    return record


def ledger_to_frame(ledger: Ledger) -> pd.DataFrame:
    """One row per statistic, with columns 'statistic' and 'value'."""
    record = summary_record(ledger)
    return pd.DataFrame({
        "statistic": list(record.keys()),
        "value": list(record.values()),
    })


def road_class_frame(ledger: Ledger) -> pd.DataFrame:
    """
    Per road class length and speed limit coverage.

    Returns:
        DataFrame indexed by road class, sorted by length (longest first),
        with columns length, speed_limited_length and speed_limit_coverage
    """
    df = pd.DataFrame({
        "length": pd.Series(dict(ledger.lengths_by_road_class), dtype=float),
        "speed_limited_length": pd.Series(
            dict(ledger.speed_limited_lengths_by_road_class), dtype=float
        ),
    }).fillna(0.0)
    df.index.name = "road_class"

    if len(df) == 0:
        df["speed_limit_coverage"] = pd.Series(dtype=float)
        return df

    df["speed_limit_coverage"] = (df["speed_limited_length"] / df["length"]).where(
        df["length"] > 0, 0.0
    )
    return df.sort_values("length", ascending=False)


def render_report(ledger: Ledger) -> str:
    """Render a human-readable summary of a ledger."""
    centerline_min, centerline_max = ledger.centerline_range()
    public_min, public_max = ledger.public_centerline_range()

    lines = [
        "----",
        "Interstates:",
        f"\t{ledger.interstate_centerline():.0f} centerline meters",
        f"\t{ledger.interstate_lane_length:.0f} lane meters",
        "Other freeways:",
        f"\t{ledger.freeway_centerline_length:.0f} carriageway meters",
        f"\t{ledger.freeway_lane_length:.0f} lane meters",
        "Public roadways:",
        f"\tFrom {public_min:.0f} to {public_max:.0f} centerline meters",
        f"\t{ledger.public_lane_length:.0f} lane meters",
        "All roadways:",
        f"\tFrom {centerline_min:.0f} to {centerline_max:.0f} centerline meters",
        f"\t{ledger.lane_length:.0f} lane meters",
        f"\t{ledger.turn_lane_length:.0f} turn lane meters",
        f"\t{ledger.speed_limit_coverage():.1%} with posted speed limits",
        f"\t{ledger.toll_length:.0f} tolled meters",
        "Service roads:",
        f"\t{ledger.alley_length:.0f} meters of alleys",
        f"\t{ledger.driveway_length:.0f} meters of driveways",
        f"\t{ledger.parking_aisle_length:.0f} meters of parking aisles",
        f"\t{ledger.drive_through_length:.0f} meters of drive-throughs",
        "Bridges:",
        f"\t{ledger.bridge_count} bridges spanning {ledger.bridge_length:.0f} meters",
        "Pedestrians:",
        f"\t{ledger.sidewalk_length:.0f} meters of sidewalks",
        f"\t{ledger.crosswalk_length:.0f} meters of crosswalks",
        f"\t{ledger.footpath_length:.0f} meters of other footpaths",
        f"\t{ledger.stairs_length:.0f} meters of stairs",
        f"\t{ledger.hallway_length:.0f} meters of hallways",
        "Cyclists:",
        f"\t{ledger.bike_path_length:.0f} meters of bike paths",
        f"\t{ledger.bike_crossing_length:.0f} meters of bike crossings",
        f"\t{ledger.bike_lane_length:.0f} meters of bike lanes",
        f"\t{ledger.sharrow_length:.0f} meters of sharrows",
        "Other infrastructure:",
        f"\t{ledger.railway_length:.0f} meters of railway",
        f"\t{ledger.pipeline_length:.0f} meters of pipeline",
        "Land use:",
        f"\t{ledger.building_count} buildings covering {ledger.building_cover_area:.0f} square meters",
        f"\t{ledger.farm_count} farms covering {ledger.farmland_area:.0f} square meters",
    ]

    if ledger.degenerate_area_count:
        lines.append(f"\t({ledger.degenerate_area_count} areas skipped for degenerate geometry)")

    if ledger.lengths_by_road_class:
        lines.append("By road class:")
        for road_class, row in road_class_frame(ledger).iterrows():
            lines.append(
                f"\t{road_class}: {row['length']:.0f} meters, "
                f"{row['speed_limit_coverage']:.1%} with posted speed limits"
            )

    return "\n".join(lines)


def save_report(ledger: Ledger, output_dir: str = OUTPUT_DIR, prefix: str = "infra_stats") -> Dict[str, str]:
    """
    Save a ledger as CSV tables and a JSON snapshot.

    Args:
        ledger: Finished ledger
        output_dir: Directory to write to (created if missing)
        prefix: File name prefix

    Returns:
        Dictionary mapping output kind to written path
    """
    os.makedirs(output_dir, exist_ok=True)

    paths = {
        "summary": os.path.join(output_dir, f"{prefix}_summary.csv"),
        "road_classes": os.path.join(output_dir, f"{prefix}_road_classes.csv"),
        "json": os.path.join(output_dir, f"{prefix}.json"),
    }

    ledger_to_frame(ledger).to_csv(paths["summary"], index=False)
    road_class_frame(ledger).to_csv(paths["road_classes"])

    with open(paths["json"], "w") as f:
        json.dump(ledger.to_dict(), f, indent=2, sort_keys=True)

    return paths
