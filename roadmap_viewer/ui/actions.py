"""Viewer actions: locate, search, route and cut vertex scan.

Each action updates the ViewerContext (messages and highlights) before
firing any state transition, because the Streamlit listener reruns the
script as soon as a transition completes.

These functions do not touch Streamlit directly so they can be driven
from tests with a listener-free state machine.
"""

import logging

from roadmap_viewer.constants import SearchConfig
from roadmap_viewer.core.connectivity import ArticulationPointFinder
from roadmap_viewer.core.path_finder import PathFinder
from roadmap_viewer.model.intersection import Intersection
from roadmap_viewer.model.road_graph import RoadGraph
from roadmap_viewer.search.road_index import RoadNameIndex
from roadmap_viewer.ui.state_machine import ViewerStateMachine

logger = logging.getLogger(__name__)


def locate_intersection(
    sm: ViewerStateMachine,
    graph: RoadGraph,
    lat: float,
    lon: float,
    max_distance_km: float = SearchConfig.MAX_CLICKED_DISTANCE_KM,
) -> Intersection | None:
    """Select the intersection nearest to a clicked point.

    The first located intersection becomes the route start, later ones
    the route target. Clicks too far from any intersection are ignored.

    Returns:
        The located Intersection, or None if the click was too far away.
    """
    ctx = sm.context
    node = graph.find_nearest_intersection(lat=lat, lon=lon, max_distance_km=max_distance_km)
    if node is None:
        logger.debug(f"[LOCATE] No intersection within {max_distance_km}km of ({lat:.6f}, {lon:.6f})")
        return None

    logger.info(f"[LOCATE] Intersection {node.id} at ({node.lat:.6f}, {node.lon:.6f})")
    ctx.messages.error = ""
    if sm.is_idle:
        ctx.messages.message = f"Start node:\n{node.describe()}\n\nClick your target node"
        sm.try_transition("select_start", intersection_id=node.id)
    else:
        start = graph.get_intersection(ctx.selection.start_id)
        ctx.messages.message = f"Start node:\n{start.describe()}\n\nTarget node:\n{node.describe()}"
        sm.try_transition("select_target", intersection_id=node.id)
    return node


def compute_route(sm: ViewerStateMachine, graph: RoadGraph, finder: PathFinder) -> bool:
    """Run the path finder between the selected intersections.

    Returns:
        True if a search ran (whether or not a path exists), False if
        start and target were not both selected.
    """
    ctx = sm.context
    if not sm.is_target_selected:
        ctx.messages.error = "Needs to specify both nodes."
        return False

    start_id = ctx.selection.start_id
    target_id = ctx.selection.target_id
    logger.info(f"[ROUTE] Searching {start_id} -> {target_id}")
    route = finder.find_path(graph=graph, start_id=start_id, target_id=target_id)

    ctx.messages.error = ""
    ctx.messages.message = route.describe()
    return sm.try_transition("complete_route", route=route)


def compute_cut_vertices(sm: ViewerStateMachine, graph: RoadGraph, finder: ArticulationPointFinder) -> frozenset[int]:
    """Scan the whole network for cut vertices and highlight them."""
    ctx = sm.context
    cut_ids = finder.find_all_cut_vertices(graph=graph)
    ctx.highlights.cut_vertex_ids = cut_ids
    ctx.messages.error = ""
    ctx.messages.message = f"There are {len(cut_ids)} articulation points in the graph."
    logger.info(f"[APS] {len(cut_ids)} cut vertices")
    return cut_ids


def search_roads(sm: ViewerStateMachine, index: RoadNameIndex, query: str) -> list[str]:
    """Highlight roads matching the query and list their distinct names."""
    ctx = sm.context
    ctx.search_query = query
    roads = index.search(query=query)
    ctx.highlights.road_ids = [road.id for road in roads]

    names = RoadNameIndex.distinct_names(roads=roads)
    shown = names[: SearchConfig.MAX_LISTED_NAMES]
    text = "; ".join(shown)
    if len(names) > len(shown):
        text += f"; ... ({len(names) - len(shown)} more)"
    ctx.messages.error = ""
    ctx.messages.message = text
    logger.info(f"[SEARCH] {query!r}: {len(roads)} roads, {len(names)} names")
    return names


def clear_highlights(sm: ViewerStateMachine) -> None:
    """Drop all selections and highlighted results."""
    ctx = sm.context
    ctx.highlights.clear()
    ctx.messages.clear()
    ctx.search_query = ""
    if not sm.is_idle:
        sm.try_transition("reset")
