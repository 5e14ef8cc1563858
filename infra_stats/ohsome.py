"""
Statistics from historical OSM snapshots via the ohsome API.

The ohsome API (https://ohsome.org) provides historical OpenStreetMap data
snapshots, so the same statistics can be computed for a region as it was
mapped at any point in time from 2007 to present.

This module handles:
- Querying way/area geometries with tags at specific timestamps
- Caching results locally to avoid repeated API calls
- Converting query results into Way/Area records for the passes
- Building yearly statistics for progress summaries
"""

import os
import json
import hashlib
import logging
from typing import Any, Dict, Hashable, Iterator, Optional, Tuple

import requests
import geopandas as gpd
import pandas as pd
from shapely.geometry import shape

from infra_stats.config import (
    AREA_FILTER,
    CACHE_DIR,
    ENDPOINT_PRECISION,
    OHSOME_ELEMENTS_GEOMETRY,
    OHSOME_TIMEOUT_SECONDS,
    PROGRESS_INTERVAL,
    SNAPSHOT_DATE_FORMAT,
    WAY_FILTER,
    WGS84_CRS,
    YEARS,
)
from infra_stats.geometry import area_or_none, line_length
from infra_stats.ledger import Ledger
from infra_stats.models import Area, Way
from infra_stats.passes import run_area_pass, run_way_pass
from infra_stats.report import summary_record

logger = logging.getLogger(__name__)

BBox = Tuple[float, float, float, float]


def _get_cache_path(cache_key: str, cache_dir: str = CACHE_DIR) -> str:
    """Get the file path for a cached result."""
    os.makedirs(cache_dir, exist_ok=True)
    return os.path.join(cache_dir, f"ohsome_{cache_key}.geojson")


def _compute_cache_key(params: Dict[str, Any]) -> str:
    """Compute a hash-based cache key from query parameters."""
    param_str = json.dumps(params, sort_keys=True)
    return hashlib.sha256(param_str.encode()).hexdigest()[:16]


def _load_from_cache(cache_key: str, cache_dir: str = CACHE_DIR) -> Optional[gpd.GeoDataFrame]:
    """Load cached GeoDataFrame if it exists."""
    cache_path = _get_cache_path(cache_key, cache_dir)
    if os.path.exists(cache_path):
        try:
            gdf = gpd.read_file(cache_path)
            logger.info("Loaded from cache: %s", cache_path)
            return gdf
        except Exception as e:
            logger.warning("Cache load failed for %s: %s", cache_path, e)
    return None


def _save_to_cache(gdf: gpd.GeoDataFrame, cache_key: str, cache_dir: str = CACHE_DIR) -> None:
    """Save GeoDataFrame to cache."""
    cache_path = _get_cache_path(cache_key, cache_dir)
    try:
        gdf.to_file(cache_path, driver="GeoJSON")
        logger.info("Saved to cache: %s", cache_path)
    except Exception as e:
        logger.warning("Cache save failed for %s: %s", cache_path, e)


def query_ohsome(
    bbox: BBox,
    osm_filter: str,
    timestamp: str,
    properties: str = "tags",
    use_cache: bool = True,
    cache_dir: str = CACHE_DIR,
) -> gpd.GeoDataFrame:
    """
    Query the ohsome API for OSM elements at a specific point in time.

    Args:
        bbox: Bounding box as (min_lon, min_lat, max_lon, max_lat)
        osm_filter: ohsome filter string (e.g., "highway=* and type:way")
        timestamp: ISO date string (e.g., "2020-01-01")
        properties: Which properties to return ("tags", "metadata", or "unclipped")
        use_cache: Whether to use local caching
        cache_dir: Directory for cached results

    Returns:
        GeoDataFrame with OSM elements and their tags

    Raises:
        requests.RequestException: if the API request fails. A failed query
            never yields a partial snapshot.
    """
    params = {
        "bboxes": f"{bbox[0]},{bbox[1]},{bbox[2]},{bbox[3]}",
        "filter": osm_filter,
        "time": timestamp,
        "properties": properties,
    }

    # Check cache first
    cache_key = _compute_cache_key(params)
    if use_cache:
        cached = _load_from_cache(cache_key, cache_dir)
        if cached is not None:
            return cached

    logger.info("Querying ohsome API for %s (%s)", timestamp, osm_filter)

    response = requests.post(
        OHSOME_ELEMENTS_GEOMETRY,
        data=params,
        headers={"Accept": "application/json"},
        timeout=OHSOME_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    data = response.json()

    features = data.get("features") or []
    if len(features) == 0:
        logger.info("No features returned for %s", timestamp)
        return gpd.GeoDataFrame(columns=["geometry"], geometry="geometry", crs=WGS84_CRS)

    geometries = []
    properties_list = []

    for feature in features:
        geometries.append(shape(feature["geometry"]))
        properties_list.append(feature.get("properties", {}))

    gdf = gpd.GeoDataFrame(properties_list, geometry=geometries, crs=WGS84_CRS)

    logger.info("Retrieved %d features", len(gdf))

    if use_cache:
        _save_to_cache(gdf, cache_key, cache_dir)

    return gdf


def _parse_osm_id(value: Any) -> int:
    """Parse an ohsome element id such as "way/123" into 123."""
    text = str(value)
    return int(text.rsplit("/", 1)[-1])


def _row_tags(row: pd.Series) -> Dict[str, str]:
    """Collect a row's OSM tags, dropping ohsome metadata and missing values."""
    tags = {}
    for key, value in row.items():
        if key == "geometry" or str(key).startswith("@"):
            continue
        if value is None:
            continue
        try:
            if pd.isna(value):
                continue
        except (ValueError, TypeError):
            pass
        tags[str(key)] = str(value)
    return tags


def _endpoint(coord) -> Hashable:
    return tuple(round(c, ENDPOINT_PRECISION) for c in coord[:2])


def _line_endpoints(geom) -> Tuple[Hashable, Hashable]:
    """First and last vertex of a line, used in place of node ids."""
    if geom.geom_type == "MultiLineString":
        parts = list(geom.geoms)
        return _endpoint(parts[0].coords[0]), _endpoint(parts[-1].coords[-1])
    if geom.geom_type in ("Polygon", "MultiPolygon"):
        ring = geom.exterior if geom.geom_type == "Polygon" else list(geom.geoms)[0].exterior
        start = _endpoint(ring.coords[0])
        return start, start
    return _endpoint(geom.coords[0]), _endpoint(geom.coords[-1])


def ways_from_geodataframe(gdf: gpd.GeoDataFrame) -> Iterator[Way]:
    """
    Convert ohsome way geometries into Way records.

    Closed ways returned as polygons are measured along their boundary.
    Rows without a usable geometry are skipped.
    """
    for idx, row in gdf.iterrows():
        geom = row.geometry
        if geom is None or geom.is_empty:
            logger.debug("Skipping row %s: no geometry", idx)
            continue

        line = geom.boundary if geom.geom_type in ("Polygon", "MultiPolygon") else geom
        osm_id = row.get("@osmId", idx)

        yield Way(
            id=_parse_osm_id(osm_id),
            tags=_row_tags(row),
            length=line_length(line),
            node_refs=_line_endpoints(geom),
        )


def areas_from_geodataframe(gdf: gpd.GeoDataFrame) -> Iterator[Area]:
    """Convert ohsome polygon geometries into Area records."""
    for idx, row in gdf.iterrows():
        geom = row.geometry
        if geom is not None and geom.geom_type not in ("Polygon", "MultiPolygon"):
            geom = None

        yield Area(
            id=_parse_osm_id(row.get("@osmId", idx)),
            tags=_row_tags(row),
            area=area_or_none(geom),
        )


def compute_stats_at_time(
    bbox: BBox,
    timestamp: str,
    use_cache: bool = True,
    cache_dir: str = CACHE_DIR,
    progress_interval: int = PROGRESS_INTERVAL,
) -> Ledger:
    """
    Compute way and area statistics for a region at a point in time.

    Args:
        bbox: Bounding box as (min_lon, min_lat, max_lon, max_lat)
        timestamp: ISO date string
        use_cache: Whether to use local caching
        cache_dir: Directory for cached results
        progress_interval: Log progress every N features

    Returns:
        Ledger with both passes merged
    """
    ways_gdf = query_ohsome(bbox, WAY_FILTER, timestamp, use_cache=use_cache, cache_dir=cache_dir)
    areas_gdf = query_ohsome(bbox, AREA_FILTER, timestamp, use_cache=use_cache, cache_dir=cache_dir)

    ways = run_way_pass(ways_from_geodataframe(ways_gdf), progress_interval=progress_interval)
    areas = run_area_pass(areas_from_geodataframe(areas_gdf), progress_interval=progress_interval)
    return ways.merge(areas)


def compute_yearly_stats(
    bbox: BBox,
    years: range = YEARS,
    use_cache: bool = True,
    cache_dir: str = CACHE_DIR,
    progress_interval: int = PROGRESS_INTERVAL,
) -> pd.DataFrame:
    """
    Compute statistics for a region on January 1st of each year.

    Args:
        bbox: Bounding box as (min_lon, min_lat, max_lon, max_lat)
        years: Range of years to query (default: 2015-2024)
        use_cache: Whether to use local caching
        cache_dir: Directory for cached results
        progress_interval: Log progress every N features

    Returns:
        DataFrame with one row per year and one column per statistic
    """
    records = []

    for year in years:
        timestamp = SNAPSHOT_DATE_FORMAT.format(year=year)
        logger.info("Year %d (%s)", year, timestamp)

        ledger = compute_stats_at_time(bbox, timestamp, use_cache, cache_dir, progress_interval)
        record = {"year": year}
        record.update(summary_record(ledger))
        records.append(record)

    return pd.DataFrame(records)
