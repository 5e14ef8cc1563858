"""
Configuration constants for infrastructure statistics.
"""

# Coordinate Reference Systems
WGS84_CRS = "EPSG:4326"  # Standard lat/lon
GEOD_ELLIPSOID = "WGS84"  # Ellipsoid for geodesic length/area

# Pass configuration
PROGRESS_INTERVAL = 100_000  # Log progress every N features

# Endpoint rounding for sources without node ids (~1 cm at the equator)
ENDPOINT_PRECISION = 7

# Temporal configuration
YEARS = range(2015, 2025)  # 2015 through 2024
SNAPSHOT_DATE_FORMAT = "{year}-01-01"  # January 1st of each year

# ohsome API configuration
OHSOME_API_BASE = "https://api.ohsome.org/v1"
OHSOME_ELEMENTS_GEOMETRY = f"{OHSOME_API_BASE}/elements/geometry"
OHSOME_TIMEOUT_SECONDS = 300

# OSM filters for ohsome queries
WAY_FILTER = (
    "(highway=* or cycleway=* or footway=* or railway=* or man_made=pipeline) "
    "and type:way"
)
AREA_FILTER = (
    "(building=* or landuse in (farm, farmland)) and geometry:polygon"
)

# Road classification
CLASSIFICATION_KEYS = ("highway", "cycleway", "footway")

PUBLIC_ACCESS_VALUES = {"yes", "destination", "designated"}

INTERSTATE_REF_PREFIX = "I "

# Classes whose one-way carriageways usually come in divided pairs
DIVIDED_HIGHWAY_TYPES = {
    "motorway",
    "trunk",
    "primary",
    "secondary",
    "tertiary",
}

LINK_SUFFIX = "_link"

# oneway tag values
ONEWAY_FORWARD_VALUES = {"yes", "true", "1"}
ONEWAY_BACKWARD_VALUES = {"-1", "reverse"}

# service=* subtypes, mapped to ledger fields
SERVICE_TYPES = {
    "alley": "alley_length",
    "driveway": "driveway_length",
    "parking_aisle": "parking_aisle_length",
    "drive-through": "drive_through_length",
}

PEDESTRIAN_TYPES = {"pedestrian", "footway"}

MAXSPEED_KEYS = (
    "maxspeed",
    "maxspeed:forward",
    "maxspeed:backward",
    "maxspeed:advisory",
    "maxspeed:advisory:forward",
    "maxspeed:advisory:backward",
)

# Turn lane values that do not count as turn lanes
THROUGH_TURN_VALUE = "through"
MERGE_TURN_FRAGMENT = "merge"

BIKE_LANE_VALUE = "lane"
SHARROW_VALUE = "shared_lane"

# Linear non-road infrastructure
RAILWAY_TYPES = {
    "rail",
    "light_rail",
    "subway",
    "tram",
    "narrow_gauge",
    "monorail",
    "funicular",
    "preserved",
}
PIPELINE_VALUE = "pipeline"

# Area classification
FARM_LANDUSE_VALUES = {"farm", "farmland"}

# Output directories
OUTPUT_DIR = "output"
CACHE_DIR = "cache"
