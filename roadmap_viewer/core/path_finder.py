"""Shortest routes between intersections using A* search.

Search over the road graph treated as a weighted multigraph in which
one-way roads may only be travelled from segment start to segment end.

Heuristic: straight-line planar distance to the target. Road segments are
never shorter than the straight line between their endpoints, so the
heuristic is admissible and consistent and the first time the target is
popped from the frontier its cost is optimal.

Frontier handling uses lazy deletion: a node may be pushed several times,
the first pop finalizes it and later pops of the same node are discarded.
This needs only insert and remove-min from the priority queue.

Segment lengths must be non-negative (enforced by RoadSegment).
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field

from roadmap_viewer.constants import PathFinderConfig
from roadmap_viewer.model.intersection import Intersection
from roadmap_viewer.model.road_graph import RoadGraph
from roadmap_viewer.model.road_segment import RoadSegment
from roadmap_viewer.model.route import RouteResult, RouteStatus

logger = logging.getLogger(__name__)


@dataclass(order=True)
class FrontierEntry:
    """A candidate on the search frontier.

    Ordered by estimated total cost, then intersection ID, then insertion
    order, so equal-priority entries pop in a deterministic order.
    """

    priority: float
    node_id: int
    sequence: int
    cost: float = field(compare=False)
    node: Intersection = field(compare=False)
    predecessor: Intersection | None = field(compare=False)


class PathFinder:
    """A* shortest-path search over a RoadGraph.

    Each call to find_path() keeps its scratch data (finalized set and
    predecessor table) local to the call, so runs never see stale state.

    Example:
        finder = PathFinder()
        result = finder.find_path(graph=graph, start_id=1, target_id=42)
        if result.found:
            print(result.describe())
    """

    def __init__(self, max_expansions: int | None = PathFinderConfig.MAX_EXPANSIONS) -> None:
        """Initialize the path finder.

        Args:
            max_expansions: Give up after finalizing this many intersections
                (None = search until the frontier is exhausted).
        """
        if max_expansions is not None and max_expansions < 1:
            raise ValueError(f"max_expansions must be positive, got {max_expansions}")
        self.max_expansions = max_expansions

    def find_path(self, graph: RoadGraph, start_id: int, target_id: int) -> RouteResult:
        """Find the shortest route from start to target.

        Args:
            graph: Loaded road graph
            start_id: ID of the start intersection
            target_id: ID of the target intersection

        Returns:
            RouteResult with status FOUND, UNREACHABLE or SEARCH_LIMIT_REACHED.

        Raises:
            UnknownIntersectionError: If start or target is not in the graph.
        """
        start = graph.get_intersection(start_id)
        target = graph.get_intersection(target_id)
        logger.debug(f"A* search from {start_id} to {target_id}")

        finalized: set[int] = set()
        predecessors: dict[int, Intersection | None] = {}
        counter = itertools.count()

        fringe: list[FrontierEntry] = []
        heapq.heappush(
            fringe,
            FrontierEntry(
                priority=self._estimate(node=start, target=target),
                node_id=start.id,
                sequence=next(counter),
                cost=0.0,
                node=start,
                predecessor=None,
            ),
        )

        while fringe:
            entry = heapq.heappop(fringe)
            current = entry.node
            if current.id in finalized:
                continue

            if self.max_expansions is not None and len(finalized) >= self.max_expansions:
                logger.warning(
                    f"A* search from {start_id} to {target_id} stopped after {len(finalized)} expansions"
                )
                return RouteResult.not_found(
                    status=RouteStatus.SEARCH_LIMIT_REACHED,
                    start_id=start_id,
                    target_id=target_id,
                    expanded=len(finalized),
                )

            finalized.add(current.id)
            predecessors[current.id] = entry.predecessor

            if current is target:
                segments, node_ids = self._reconstruct(target=target, predecessors=predecessors)
                result = RouteResult(
                    status=RouteStatus.FOUND,
                    start_id=start_id,
                    target_id=target_id,
                    segments=segments,
                    intersection_ids=node_ids,
                    total_length=entry.cost,
                    expanded=len(finalized),
                )
                logger.info(
                    f"Route {start_id} -> {target_id}: {len(segments)} segments, "
                    f"{entry.cost:.3f}km, {len(finalized)} expanded"
                )
                return result

            for segment in current.segments:
                neighbour = segment.neighbour_from(node=current)
                if neighbour is None or neighbour.id in finalized:
                    continue
                cost = entry.cost + segment.length
                heapq.heappush(
                    fringe,
                    FrontierEntry(
                        priority=cost + self._estimate(node=neighbour, target=target),
                        node_id=neighbour.id,
                        sequence=next(counter),
                        cost=cost,
                        node=neighbour,
                        predecessor=current,
                    ),
                )

        logger.warning(f"No route from {start_id} to {target_id} ({len(finalized)} intersections reachable)")
        return RouteResult.not_found(
            status=RouteStatus.UNREACHABLE,
            start_id=start_id,
            target_id=target_id,
            expanded=len(finalized),
        )

    @staticmethod
    def _estimate(node: Intersection, target: Intersection) -> float:
        """Heuristic: straight-line distance to the target in km."""
        return node.location.distance_to(other=target.location)

    @staticmethod
    def _reconstruct(
        target: Intersection,
        predecessors: dict[int, Intersection | None],
    ) -> tuple[tuple[RoadSegment, ...], tuple[int, ...]]:
        """Walk predecessor links back from the target and return start -> target order."""
        segments: list[RoadSegment] = []
        node_ids: list[int] = [target.id]
        current = target
        previous = predecessors[current.id]
        while previous is not None:
            segments.append(PathFinder._connecting_segment(from_node=previous, to_node=current))
            node_ids.append(previous.id)
            current = previous
            previous = predecessors[current.id]

        segments.reverse()
        node_ids.reverse()
        return tuple(segments), tuple(node_ids)

    @staticmethod
    def _connecting_segment(from_node: Intersection, to_node: Intersection) -> RoadSegment:
        """Shortest segment that can be travelled from one node to the other.

        Parallel segments are not distinguished by the search, and the
        shortest traversable one is the one whose cost the search used.
        """
        candidates = [seg for seg in from_node.segments if seg.neighbour_from(node=from_node) is to_node]
        if not candidates:
            raise RuntimeError(f"No traversable segment from {from_node.id} to {to_node.id} on reconstructed path")
        return min(candidates, key=lambda seg: seg.length)
