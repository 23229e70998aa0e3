"""Data model classes for road network representation.

Separates geometry (where things are) from topology (how things connect):
- Location: Planar position in kilometres
- Intersection: Graph node (lat/lon, ID, incident segments)
- Road: Named road with one-way flag, owning its segments
- RoadSegment: Graph edge between two intersections
- RoadGraph: Central manager owning all entities
- RouteResult: Outcome of a route search
"""

from roadmap_viewer.model.intersection import Intersection
from roadmap_viewer.model.location import Location
from roadmap_viewer.model.road import Road
from roadmap_viewer.model.road_graph import RoadGraph, UnknownIntersectionError
from roadmap_viewer.model.road_segment import RoadSegment
from roadmap_viewer.model.route import RouteResult, RouteStatus

__all__ = [
    "Location",
    "Intersection",
    "Road",
    "RoadSegment",
    "RoadGraph",
    "UnknownIntersectionError",
    "RouteResult",
    "RouteStatus",
]
