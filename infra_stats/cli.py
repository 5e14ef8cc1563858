"""
Command line entry point.

Compute statistics from a local extract:

    compute_stats.py region.osm.pbf --output-dir output

or from the ohsome API for a bounding box, at one date or once a year:

    compute_stats.py --bbox 34.74,32.04,34.82,32.12 --timestamp 2024-01-01
    compute_stats.py --bbox 34.74,32.04,34.82,32.12 --years 2015-2024
"""

import argparse
import logging
import os
from typing import List, Optional, Tuple

from infra_stats.config import OUTPUT_DIR, PROGRESS_INTERVAL, CACHE_DIR
from infra_stats.ledger import Ledger
from infra_stats.report import render_report, save_report

DEFAULT_TIMESTAMP = "2024-01-01"


def _parse_bbox(value: str) -> Tuple[float, float, float, float]:
    try:
        parts = [float(p) for p in value.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid bounding box: {value}")
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("bounding box needs min_lon,min_lat,max_lon,max_lat")
    return tuple(parts)


def _parse_years(value: str) -> range:
    try:
        if "-" in value:
            start, end = (int(p) for p in value.split("-", 1))
        else:
            start = end = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid year range: {value}")
    if end < start:
        raise argparse.ArgumentTypeError(f"invalid year range: {value}")
    return range(start, end + 1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Aggregate road, path, building and farmland statistics from OSM data.",
    )
    parser.add_argument("extract", nargs="?", help="Path to an .osm.pbf or .osm extract")
    parser.add_argument("--bbox", type=_parse_bbox, help="Query ohsome for min_lon,min_lat,max_lon,max_lat")
    when = parser.add_mutually_exclusive_group()
    when.add_argument("--timestamp", help=f"Snapshot date for --bbox (default: {DEFAULT_TIMESTAMP})")
    when.add_argument("--years", type=_parse_years, help="Yearly snapshots for --bbox, e.g. 2015-2024")
    parser.add_argument("--no-cache", action="store_true", help="Do not cache ohsome responses")
    parser.add_argument("--cache-dir", default=CACHE_DIR, help=f"ohsome cache directory (default: {CACHE_DIR})")

    passes = parser.add_mutually_exclusive_group()
    passes.add_argument("--ways-only", action="store_true", help="Skip the area pass (extracts only)")
    passes.add_argument("--areas-only", action="store_true", help="Skip the way pass (extracts only)")

    parser.add_argument(
        "--progress-interval",
        type=int,
        default=PROGRESS_INTERVAL,
        help=f"Log progress every N features (default: {PROGRESS_INTERVAL})",
    )
    parser.add_argument("--output-dir", help=f"Also save CSV/JSON reports here (e.g. {OUTPUT_DIR})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")
    return parser


def _stats_from_extract(args) -> Ledger:
    from infra_stats.pbf import compute_area_stats, compute_way_stats

    ledger = Ledger()
    if not args.areas_only:
        ledger = compute_way_stats(args.extract, ledger, args.progress_interval)
    if not args.ways_only:
        ledger = compute_area_stats(args.extract, ledger, args.progress_interval)
    return ledger


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if bool(args.extract) == bool(args.bbox):
        parser.error("give either an extract path or --bbox")
    if args.extract and not os.path.exists(args.extract):
        parser.error(f"no such file: {args.extract}")
    if args.years and not args.bbox:
        parser.error("--years requires --bbox")
    if args.timestamp and not args.bbox:
        parser.error("--timestamp requires --bbox")
    if args.bbox and (args.ways_only or args.areas_only):
        parser.error("--ways-only and --areas-only apply to extracts, not --bbox")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.bbox and args.years:
        from infra_stats.ohsome import compute_yearly_stats

        yearly_df = compute_yearly_stats(
            args.bbox, args.years, not args.no_cache, args.cache_dir, args.progress_interval
        )
        print(yearly_df.to_string(index=False))
        if args.output_dir:
            os.makedirs(args.output_dir, exist_ok=True)
            path = os.path.join(args.output_dir, "infra_stats_yearly.csv")
            yearly_df.to_csv(path, index=False)
            print(f"Saved to: {path}")
        return 0

    if args.bbox:
        from infra_stats.ohsome import compute_stats_at_time

        ledger = compute_stats_at_time(
            args.bbox,
            args.timestamp or DEFAULT_TIMESTAMP,
            not args.no_cache,
            args.cache_dir,
            args.progress_interval,
        )
    else:
        ledger = _stats_from_extract(args)

    print(render_report(ledger))

    if args.output_dir:
        for path in save_report(ledger, args.output_dir).values():
            print(f"Saved to: {path}")

    return 0
