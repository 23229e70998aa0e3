"""RoadSegment - a weighted edge between two intersections.

A RoadSegment belongs to exactly one Road. Its endpoint order only matters
when the road is one-way: then it may be traversed start -> end only.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roadmap_viewer.model.intersection import Intersection
    from roadmap_viewer.model.road import Road


@dataclass(eq=False)
class RoadSegment:
    """A road segment between two intersections.

    Attributes:
        road: Owning road
        length: Distance along the segment in kilometres (non-negative,
            not necessarily equal to the straight-line distance)
        start: Declared start intersection
        end: Declared end intersection
        coords: Polyline as (lat, lon) pairs, used for drawing
    """

    road: "Road"
    length: float
    start: "Intersection"
    end: "Intersection"
    coords: list[tuple[float, float]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if not self.length >= 0:
            raise ValueError(f"Segment on road {self.road.id} must have non-negative length, got {self.length}")

    @property
    def is_one_way(self) -> bool:
        """Whether the owning road is one-way."""
        return self.road.one_way

    def other_end(self, node: "Intersection") -> "Intersection":
        """Return the endpoint that is not `node` (the start for a self-loop)."""
        if node is self.start:
            return self.end
        if node is self.end:
            return self.start
        raise ValueError(f"Intersection {node.id} is not an endpoint of segment {self}")

    def neighbour_from(self, node: "Intersection") -> "Intersection | None":
        """Endpoint reached by leaving `node` through this segment.

        Returns:
            The opposite endpoint, or None if the road is one-way and `node`
            is the declared end (traversal would go against the direction).
        """
        if self.is_one_way and node is self.end and node is not self.start:
            return None
        return self.other_end(node=node)

    def path_coords(self) -> list[list[float]]:
        """Polyline in [lon, lat] order for pydeck, falling back to the endpoints."""
        if len(self.coords) >= 2:
            return [[lon, lat] for lat, lon in self.coords]
        return [[self.start.lon, self.start.lat], [self.end.lon, self.end.lat]]

    def __repr__(self) -> str:
        return f"RoadSegment({self.road.name}, {self.start.id}->{self.end.id}, {self.length:.3f}km)"
