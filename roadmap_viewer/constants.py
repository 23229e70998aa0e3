"""Configuration constants for Road Network Viewer.

All configurable parameters are centralized here for easy tuning.

Classes:
    AppConfig: UI application settings
    DataConfig: Road network data file locations
    GeoConfig: Planar projection parameters
    SearchConfig: Point location and road name search parameters
    PathFinderConfig: A* search parameters
    MapConfig: Default map view parameters
    StyleConfig: Visual colors and styling
"""

from pathlib import Path

# Package root directory (where roadmap_viewer/ lives)
PACKAGE_DIR = Path(__file__).parent

# Project root directory (parent of roadmap_viewer/)
PROJECT_ROOT = PACKAGE_DIR.parent

# Data directory outside package (road network files are not shipped with the package)
DATA_DIR = PROJECT_ROOT / "data"


class AppConfig:
    """UI application settings."""

    TITLE = "Road Network Viewer"
    ICON = "🗺️"
    LAYOUT = "wide"


class DataConfig:
    """Road network data files (tab separated)."""

    DEFAULT_DATA_DIR = DATA_DIR / "small"

    NODES_FILE = "nodeID-lat-lon.tab"
    ROADS_FILE = "roadID-roadInfo.tab"
    SEGMENTS_FILE = "roadSeg-roadID-length-nodeID-nodeID-coords.tab"

    # Placeholder used in the roads file when a road has no label
    NO_LABEL = "-"

    # Value of the oneway column for one-way roads
    ONE_WAY_FLAG = 1


class GeoConfig:
    """Equirectangular projection from lat/lon to planar kilometres.

    Centre is Auckland, New Zealand (origin of the bundled data sets).
    At the centre, 1 degree of latitude ≈ 111 km.
    """

    CENTRE_LAT = -36.847622
    CENTRE_LON = 174.763444
    KM_PER_DEGREE_LAT = 111.0


class SearchConfig:
    """Point location and road name search parameters."""

    # How far away from an intersection a click may land and still select it (km)
    MAX_CLICKED_DISTANCE_KM = 0.15

    # Maximum number of road names listed after a search
    MAX_LISTED_NAMES = 50


class PathFinderConfig:
    """A* search parameters."""

    # Maximum number of finalized intersections before giving up (None = unbounded)
    MAX_EXPANSIONS: int | None = None


class MapConfig:
    """Default map view parameters."""

    START_CENTER_LAT = GeoConfig.CENTRE_LAT
    START_CENTER_LON = GeoConfig.CENTRE_LON
    DEFAULT_ZOOM = 12
    DEFAULT_PITCH = 0.0
    DEFAULT_BEARING = 0.0

    MAP_HEIGHT_PX = 650

    # Carto basemaps need no API key
    MAP_STYLE = "light"
    MAP_PROVIDER = "carto"

    # Extra pixels around the cursor in which deck.gl picks objects
    PICKING_RADIUS_PX = 6

    # Padding added around the network bounds when centring the view (degrees)
    BOUNDS_PADDING_DEG = 0.01

    # "type" field of pickable layer data, reported back on click
    TYPE_INTERSECTION = "intersection"
    TYPE_SEGMENT = "segment"


class StyleConfig:
    """Visual colors and styling (RGBA lists for pydeck)."""

    NODE_COLOR = [77, 113, 255, 200]
    SEGMENT_COLOR = [130, 130, 130, 160]
    HIGHLIGHT_COLOR = [255, 219, 77, 230]
    START_NODE_COLOR = [239, 68, 68, 255]
    TARGET_NODE_COLOR = [34, 197, 94, 255]
    CUT_VERTEX_COLOR = [255, 219, 77, 255]

    SEGMENT_WIDTH_PX = 1
    HIGHLIGHT_WIDTH_PX = 4

    NODE_RADIUS_PX = 2
    SELECTED_NODE_RADIUS_PX = 7
    CUT_VERTEX_RADIUS_PX = 5

    # Used when formatting distances in route summaries
    DISTANCE_DECIMALS = 3
