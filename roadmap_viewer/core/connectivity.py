"""Cut vertex (articulation point) detection.

A cut vertex is an intersection whose removal splits its connected
component into more than one piece. Detection uses a depth-first scan
that tracks, for every intersection, its discovery depth and its
low-link: the smallest depth reachable from its subtree through one
back-edge. A non-root node P is a cut vertex if some child C has
low_link(C) >= depth(P).

The scan is iterative. Recursion is simulated with an explicit stack of
frames so that long chains of roads cannot exhaust the interpreter's
recursion limit.

Connectivity ignores one-way restrictions: removing an intersection
disconnects the network physically regardless of travel direction.
"""

import logging
from dataclasses import dataclass, field

from roadmap_viewer.model.intersection import Intersection
from roadmap_viewer.model.road_graph import RoadGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ScanFrame:
    """One simulated recursive call: node reached at depth from parent."""

    node: Intersection
    depth: int
    parent: Intersection


@dataclass
class _ScanState:
    """Scratch tables for one scan, keyed by intersection ID."""

    depth: dict[int, int] = field(default_factory=dict)
    low_link: dict[int, int] = field(default_factory=dict)
    pending: dict[int, list[Intersection]] = field(default_factory=dict)
    cut_vertices: set[int] = field(default_factory=set)

    def is_visited(self, node: Intersection) -> bool:
        return node.id in self.depth


class ArticulationPointFinder:
    """Finds cut vertices of a RoadGraph.

    Example:
        finder = ArticulationPointFinder()
        cut_ids = finder.find_cut_vertices(graph=graph, root_id=12420)
        all_cut_ids = finder.find_all_cut_vertices(graph=graph)
    """

    def find_cut_vertices(self, graph: RoadGraph, root_id: int) -> frozenset[int]:
        """Cut vertices of the connected component containing the root.

        Intersections outside the root's component are not visited and
        never reported.

        Args:
            graph: Loaded road graph
            root_id: ID of the intersection to start the scan from

        Returns:
            IDs of the cut vertices found.

        Raises:
            UnknownIntersectionError: If the root is not in the graph.
        """
        root = graph.get_intersection(root_id)
        state = _ScanState()
        self._scan_component(root=root, state=state)
        logger.info(f"Cut vertex scan from {root_id}: {len(state.depth)} visited, {len(state.cut_vertices)} found")
        return frozenset(state.cut_vertices)

    def find_all_cut_vertices(self, graph: RoadGraph) -> frozenset[int]:
        """Cut vertices of every component of the graph.

        Re-runs the scan from the lowest-ID unvisited intersection until
        every intersection has been visited.
        """
        state = _ScanState()
        components = 0
        for node_id in sorted(graph.intersections):
            node = graph.intersections[node_id]
            if state.is_visited(node):
                continue
            self._scan_component(root=node, state=state)
            components += 1

        logger.info(f"Cut vertex scan: {components} components, {len(state.cut_vertices)} cut vertices")
        return frozenset(state.cut_vertices)

    def _scan_component(self, root: Intersection, state: _ScanState) -> None:
        """Scan the component containing root, recording cut vertices in state."""
        state.depth[root.id] = 0
        state.low_link[root.id] = 0

        subtrees = 0
        for neighbour in root.neighbours():
            if not state.is_visited(neighbour):
                self._scan_subtree(first=neighbour, depth=1, root=root, state=state)
                subtrees += 1

        # The child rule does not apply to the root, which has no parent
        if subtrees > 1:
            state.cut_vertices.add(root.id)

    @staticmethod
    def _scan_subtree(first: Intersection, depth: int, root: Intersection, state: _ScanState) -> None:
        """Depth-first scan of one subtree of the root with an explicit frame stack."""
        stack = [_ScanFrame(node=first, depth=depth, parent=root)]

        while stack:
            frame = stack[-1]
            node = frame.node

            if not state.is_visited(node):
                state.depth[node.id] = frame.depth
                state.low_link[node.id] = frame.depth
                state.pending[node.id] = [n for n in node.neighbours() if n is not frame.parent]

            elif state.pending[node.id]:
                child = state.pending[node.id].pop(0)
                if state.is_visited(child):
                    # Back-edge to an already discovered node
                    state.low_link[node.id] = min(state.low_link[node.id], state.depth[child.id])
                else:
                    stack.append(_ScanFrame(node=child, depth=frame.depth + 1, parent=node))

            else:
                if node is not first:
                    parent = frame.parent
                    state.low_link[parent.id] = min(state.low_link[parent.id], state.low_link[node.id])
                    if state.low_link[node.id] >= state.depth[parent.id]:
                        state.cut_vertices.add(parent.id)
                del state.pending[node.id]
                stack.pop()
