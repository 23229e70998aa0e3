"""RouteResult - outcome of a shortest-path query.

A query ends in exactly one of three ways:
- FOUND: ordered segments from start to target (empty when start == target)
- UNREACHABLE: the frontier was exhausted without reaching the target
- SEARCH_LIMIT_REACHED: a caller-imposed expansion limit stopped the search

Only FOUND carries segments. The other variants never hold a partial path.
"""

from dataclasses import dataclass
from enum import Enum

from roadmap_viewer.constants import StyleConfig
from roadmap_viewer.model.road_segment import RoadSegment


class RouteStatus(Enum):
    """How a shortest-path query ended."""

    FOUND = "found"
    UNREACHABLE = "unreachable"
    SEARCH_LIMIT_REACHED = "search_limit_reached"


@dataclass(frozen=True)
class RouteResult:
    """Result of a path finder query.

    Attributes:
        status: How the query ended
        start_id: ID of the start intersection
        target_id: ID of the target intersection
        segments: Segments from start to target (FOUND only)
        intersection_ids: Visited intersection IDs from start to target (FOUND only)
        total_length: Sum of segment lengths in km (inf unless FOUND)
        expanded: Number of intersections finalized during the search
    """

    status: RouteStatus
    start_id: int
    target_id: int
    segments: tuple[RoadSegment, ...] = ()
    intersection_ids: tuple[int, ...] = ()
    total_length: float = float("inf")
    expanded: int = 0

    @property
    def found(self) -> bool:
        """True if a path was found."""
        return self.status is RouteStatus.FOUND

    @classmethod
    def not_found(
        cls,
        status: RouteStatus,
        start_id: int,
        target_id: int,
        expanded: int,
    ) -> "RouteResult":
        """Create a result for a query that produced no path."""
        if status is RouteStatus.FOUND:
            raise ValueError("not_found() requires a non-FOUND status")
        return cls(status=status, start_id=start_id, target_id=target_id, expanded=expanded)

    def road_lengths(self) -> dict[str, float]:
        """Total length travelled on each road name, in first-travelled order."""
        lengths: dict[str, float] = {}
        for segment in self.segments:
            name = segment.road.name
            lengths[name] = lengths.get(name, 0.0) + segment.length
        return lengths

    def describe(self) -> str:
        """Human-readable route summary: one line per road plus the total."""
        if not self.found:
            if self.status is RouteStatus.SEARCH_LIMIT_REACHED:
                return f"No path found from {self.start_id} to {self.target_id} (search limit reached)."
            return f"No path exists from {self.start_id} to {self.target_id}."

        decimals = StyleConfig.DISTANCE_DECIMALS
        lines = [f"{name}: {round(length, decimals)}km" for name, length in self.road_lengths().items()]
        lines.append("")
        lines.append(f"Total Distance: {round(self.total_length, decimals)}km")
        return "\n".join(lines)

    def __repr__(self) -> str:
        if self.found:
            return f"RouteResult({self.start_id}->{self.target_id}, {len(self.segments)} segments, {self.total_length:.3f}km)"
        return f"RouteResult({self.start_id}->{self.target_id}, {self.status.value})"
