"""Road name search."""

from roadmap_viewer.search.road_index import RoadNameIndex

__all__ = [
    "RoadNameIndex",
]
