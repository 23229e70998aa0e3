"""RoadGraph - container for intersections, roads and segments.

Owns all entities of a loaded road network. Provides:
- Entity registration while loading (intersections, roads, segments)
- Lookup by ID with a dedicated error for unknown intersections
- Nearest-intersection lookup for locating clicked points
- Geographic bounds for centring the map

Entities are read-only once loading is complete.
"""

from collections.abc import Iterable

from roadmap_viewer.constants import SearchConfig
from roadmap_viewer.model.intersection import Intersection
from roadmap_viewer.model.location import Location
from roadmap_viewer.model.road import Road
from roadmap_viewer.model.road_segment import RoadSegment


class UnknownIntersectionError(KeyError):
    """Raised when an intersection ID is not part of the graph."""

    def __init__(self, intersection_id: int) -> None:
        super().__init__(intersection_id)
        self.intersection_id = intersection_id

    def __str__(self) -> str:
        return f"Intersection {self.intersection_id} not found in graph"


class RoadGraph:
    """Graph of intersections connected by road segments.

    Example:
        graph = RoadGraph()
        a = graph.add_intersection(Intersection(id=1, lat=-36.85, lon=174.76))
        b = graph.add_intersection(Intersection(id=2, lat=-36.86, lon=174.76))
        road = graph.add_road(Road(id=10, name="queen street"))
        graph.add_segment(road_id=10, start_id=1, end_id=2, length=1.2)
    """

    def __init__(self) -> None:
        """Initialize empty road graph."""
        self.intersections: dict[int, Intersection] = {}
        self.roads: dict[int, Road] = {}
        self.segments: list[RoadSegment] = []

    # =========================================================================
    # Construction
    # =========================================================================

    def add_intersection(self, intersection: Intersection) -> Intersection:
        """Register an intersection. IDs must be unique."""
        if intersection.id in self.intersections:
            raise ValueError(f"Duplicate intersection ID {intersection.id}")
        self.intersections[intersection.id] = intersection
        return intersection

    def add_road(self, road: Road) -> Road:
        """Register a road. IDs must be unique."""
        if road.id in self.roads:
            raise ValueError(f"Duplicate road ID {road.id}")
        self.roads[road.id] = road
        return road

    def add_segment(
        self,
        road_id: int,
        start_id: int,
        end_id: int,
        length: float,
        coords: Iterable[tuple[float, float]] = (),
    ) -> RoadSegment:
        """Create a segment and wire it into both endpoints and its road.

        Args:
            road_id: ID of the owning road (must be registered)
            start_id: ID of the declared start intersection
            end_id: ID of the declared end intersection
            length: Segment length in kilometres (non-negative)
            coords: Optional (lat, lon) polyline for drawing

        Returns:
            The new RoadSegment.

        Raises:
            ValueError: Unknown road or intersection, or negative length.
        """
        road = self.roads.get(road_id)
        if road is None:
            raise ValueError(f"Segment references unknown road {road_id}")
        start = self.intersections.get(start_id)
        end = self.intersections.get(end_id)
        if start is None or end is None:
            missing = start_id if start is None else end_id
            raise ValueError(f"Segment on road {road_id} references unknown intersection {missing}")

        segment = RoadSegment(road=road, length=length, start=start, end=end, coords=list(coords))
        start.add_segment(segment)
        if end is not start:
            end.add_segment(segment)
        road.add_segment(segment)
        self.segments.append(segment)
        return segment

    # =========================================================================
    # Queries
    # =========================================================================

    def get_intersection(self, intersection_id: int) -> Intersection:
        """Return the intersection with the given ID.

        Raises:
            UnknownIntersectionError: If the ID is not in the graph.
        """
        intersection = self.intersections.get(intersection_id)
        if intersection is None:
            raise UnknownIntersectionError(intersection_id)
        return intersection

    def __contains__(self, intersection_id: object) -> bool:
        return intersection_id in self.intersections

    def __len__(self) -> int:
        return len(self.intersections)

    def find_nearest_intersection(
        self,
        lat: float,
        lon: float,
        max_distance_km: float = SearchConfig.MAX_CLICKED_DISTANCE_KM,
    ) -> Intersection | None:
        """Find the nearest intersection within a threshold distance.

        Args:
            lat, lon: Target coordinates
            max_distance_km: Maximum planar distance in kilometres

        Returns:
            Nearest Intersection or None if none lies strictly within the threshold.
        """
        target = Location.from_lat_lon(lat=lat, lon=lon)
        best_dist = max_distance_km
        best_node = None

        for node in self.intersections.values():
            dist = node.location.distance_to(other=target)
            if dist < best_dist:
                best_dist = dist
                best_node = node

        return best_node

    def bounds(self) -> tuple[float, float, float, float]:
        """Return (min_lat, min_lon, max_lat, max_lon) of all intersections.

        Raises:
            ValueError: If the graph is empty.
        """
        if not self.intersections:
            raise ValueError("Empty graph has no bounds")
        lats = [node.lat for node in self.intersections.values()]
        lons = [node.lon for node in self.intersections.values()]
        return min(lats), min(lons), max(lats), max(lons)

    def __repr__(self) -> str:
        return (
            f"RoadGraph({len(self.intersections)} intersections, "
            f"{len(self.roads)} roads, {len(self.segments)} segments)"
        )
