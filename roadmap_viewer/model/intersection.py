"""Intersection - a node of the road graph.

An Intersection is a point where road segments meet. It stores its ID,
its geographic coordinates and projected Location, and all segments
incident to it (parallel segments to the same neighbour are allowed).

Intersections carry no traversal state. Search and connectivity runs keep
their scratch data in side tables keyed by intersection ID.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from roadmap_viewer.model.location import Location

if TYPE_CHECKING:
    from roadmap_viewer.model.road_segment import RoadSegment


@dataclass(eq=False)
class Intersection:
    """A junction point in the road graph.

    Equality and hashing are by identity: one Intersection object exists
    per ID within a graph.

    Attributes:
        id: Unique integer identifier
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees
        location: Projected planar Location (derived from lat/lon)
        segments: Incident road segments, in insertion order

    Example:
        node = Intersection(id=12420, lat=-36.85, lon=174.76)
        node.location.distance_to(other=other_node.location)
    """

    id: int
    lat: float
    lon: float
    location: Location = field(init=False, repr=False)
    segments: list["RoadSegment"] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Validate coordinates and derive the planar location."""
        if not (np.isfinite(self.lat) and np.isfinite(self.lon)):
            raise ValueError(f"Intersection {self.id} must have finite coordinates, got ({self.lat}, {self.lon})")
        self.location = Location.from_lat_lon(lat=self.lat, lon=self.lon)

    @property
    def lon_lat(self) -> tuple[float, float]:
        """Return (lon, lat) tuple - GeoJSON/Pydeck order."""
        return (self.lon, self.lat)

    def add_segment(self, segment: "RoadSegment") -> None:
        """Register an incident segment."""
        self.segments.append(segment)

    def neighbours(self) -> list["Intersection"]:
        """Distinct adjacent intersections, ignoring one-way restrictions.

        Parallel segments collapse to a single neighbour and self-loops are
        skipped. Order follows the first incident segment of each neighbour.
        """
        seen: set[int] = set()
        result: list[Intersection] = []
        for segment in self.segments:
            other = segment.other_end(node=self)
            if other is self or other.id in seen:
                continue
            seen.add(other.id)
            result.append(other)
        return result

    def segment_to(self, other: "Intersection") -> "RoadSegment | None":
        """Return any segment incident to both this and the other intersection."""
        for segment in self.segments:
            if segment.other_end(node=self) is other:
                return segment
        return None

    def describe(self) -> str:
        """Informative text: ID, location and the names of roads meeting here."""
        road_names = dict.fromkeys(segment.road.name for segment in self.segments)
        return f"ID: {self.id}  loc: ({self.lat:.6f}, {self.lon:.6f})\nroads: {', '.join(road_names)}"

    def __repr__(self) -> str:
        return f"Intersection({self.id}, {len(self.segments)} segments)"
