"""Road - a named chain of road segments.

A Road groups the segments that share a road ID in the data set.
The one-way flag applies to every component segment.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roadmap_viewer.model.road_segment import RoadSegment


@dataclass(eq=False)
class Road:
    """A named road composed of segments.

    Attributes:
        id: Road ID from the data set
        name: Display name (lowercase, as in the data set)
        city: City the road lies in
        one_way: Whether segments may only be traversed start -> end
        speed: Speed limit category from the data set
        road_class: Road class category from the data set
        segments: Component segments, in load order
    """

    id: int
    name: str
    city: str = ""
    one_way: bool = False
    speed: int = 0
    road_class: int = 0
    segments: list["RoadSegment"] = field(default_factory=list, repr=False)

    def add_segment(self, segment: "RoadSegment") -> None:
        """Append a component segment."""
        self.segments.append(segment)

    @property
    def total_length(self) -> float:
        """Sum of component segment lengths in kilometres."""
        return sum(seg.length for seg in self.segments)

    def __repr__(self) -> str:
        direction = "one-way" if self.one_way else "two-way"
        return f"Road({self.id}, {self.name!r}, {direction}, {len(self.segments)} segments)"
