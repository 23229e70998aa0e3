"""Road Network Viewer - Interactive road map query application.

Load a road network data set, click intersections to pick a start and a
target, find the shortest route between them, search roads by name, and
highlight the articulation points of the network.

Run: streamlit run roadmap_viewer/app.py
"""

import logging
import traceback
from pathlib import Path

import streamlit as st

from roadmap_viewer.constants import AppConfig, DataConfig, MapConfig
from roadmap_viewer.core.connectivity import ArticulationPointFinder
from roadmap_viewer.core.path_finder import PathFinder
from roadmap_viewer.io.network_loader import NetworkFormatError, NetworkLoader
from roadmap_viewer.model.road_graph import RoadGraph
from roadmap_viewer.search.road_index import RoadNameIndex
from roadmap_viewer.ui import (
    MapRenderer,
    SidebarRenderer,
    ViewerContext,
    ViewerStateMachine,
    clear_highlights,
    compute_cut_vertices,
    compute_route,
    locate_intersection,
    search_roads,
)
from roadmap_viewer.ui.pydeck_click_handler import bump_map_version, map_key, render_pydeck_map

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# SESSION STATE
# =============================================================================


def init_session_state() -> None:
    """Initialize session state with query engines and UI components."""
    if "graph" not in st.session_state:
        st.session_state.graph = None
        st.session_state.road_index = RoadNameIndex()

    if "state_machine" not in st.session_state:
        sm, ctx = ViewerStateMachine.create()
        st.session_state.state_machine = sm
        st.session_state.context = ctx

    if "map_renderer" not in st.session_state:
        st.session_state.map_renderer = MapRenderer()

    if "path_finder" not in st.session_state:
        st.session_state.path_finder = PathFinder()
        st.session_state.cut_vertex_finder = ArticulationPointFinder()

    if "map_version" not in st.session_state:
        st.session_state.map_version = 0


def reset_ui_state() -> None:
    """Reset UI state to initial while preserving the loaded network.

    Called after loading a data set and when an error occurs. Resets the
    state machine, its context and the map component.
    """
    logger.info("Resetting UI state")
    sm, ctx = ViewerStateMachine.create()
    st.session_state.state_machine = sm
    st.session_state.context = ctx
    bump_map_version()


def load_network(data_dir: str) -> bool:
    """Load a data set into session state. Returns True on success."""
    logger.info(f"[LOAD] Loading road network from {data_dir}")
    try:
        with st.spinner("Loading road network..."):
            graph = NetworkLoader(data_dir=Path(data_dir)).load()
    except (FileNotFoundError, NetworkFormatError) as e:
        logger.error(f"[LOAD] {e}")
        st.error(f"⚠️ Could not load road network: {e}")
        return False

    st.session_state.data_dir = data_dir
    st.session_state.graph = graph
    st.session_state.road_index = RoadNameIndex(roads=graph.roads.values())

    renderer: MapRenderer = st.session_state.map_renderer
    renderer.graph = graph
    renderer.fit_to_graph()

    reset_ui_state()
    logger.info(f"[LOAD] {graph}, {len(st.session_state.road_index)} named roads indexed")
    return True


# =============================================================================
# ACTION DISPATCH
# =============================================================================


def dispatch_sidebar_actions(actions: dict) -> None:
    """Run the queries requested from the sidebar."""
    sm: ViewerStateMachine = st.session_state.state_machine
    graph: RoadGraph | None = st.session_state.graph

    if actions["load"] is not None:
        if load_network(data_dir=actions["load"]):
            st.rerun()
        return

    if graph is None:
        return

    if actions["clear"]:
        clear_highlights(sm=sm)  # Triggers st.rerun() via listener unless already idle
        st.rerun()

    if actions["search"] is not None:
        logger.info(f"[SEARCH] Road name query {actions['search']!r}")
        search_roads(sm=sm, index=st.session_state.road_index, query=actions["search"])

    if actions["cut_vertices"]:
        logger.info(f"[APS] Scanning {len(graph)} intersections")
        with st.spinner("Scanning for articulation points..."):
            compute_cut_vertices(sm=sm, graph=graph, finder=st.session_state.cut_vertex_finder)

    if actions["route"]:
        logger.info(f"[ROUTE] Routing in state {sm.get_state_name()}")
        compute_route(sm=sm, graph=graph, finder=st.session_state.path_finder)


# =============================================================================
# MAP RENDERING
# =============================================================================


def _render_map() -> None:
    """Render map and handle clicks, recovering from unexpected errors."""
    try:
        _render_map_inner()
    except Exception as e:
        error_msg = f"{type(e).__name__}: {e}"
        logger.error(f"[RENDER] Map error caught: {error_msg}\n{traceback.format_exc()}")
        st.error(f"⚠️ [RENDER] Something went wrong: {error_msg}")

        # Reset UI state while preserving the network
        reset_ui_state()
        if st.button("🔄 Reset and Continue", type="primary"):
            st.rerun()


def _render_map_inner() -> None:
    sm: ViewerStateMachine = st.session_state.state_machine
    ctx: ViewerContext = st.session_state.context
    graph: RoadGraph = st.session_state.graph
    renderer: MapRenderer = st.session_state.map_renderer

    logger.debug(f"[RENDER] Map: state={sm.get_state_name()}, map_version={st.session_state.map_version}")

    # A completed route keeps its endpoints marked after the selection is cleared
    route = ctx.highlights.route
    start_id = ctx.selection.start_id
    target_id = ctx.selection.target_id
    if route is not None and sm.is_idle:
        start_id, target_id = route.start_id, route.target_id

    deck = renderer.render(
        route=route,
        highlight_road_ids=ctx.highlights.road_ids,
        cut_vertex_ids=ctx.highlights.cut_vertex_ids,
        start_id=start_id,
        target_id=target_id,
    )
    click_result = render_pydeck_map(
        deck=deck,
        key=map_key(),
        height=MapConfig.MAP_HEIGHT_PX,
    )

    lat_lon = click_result.lat_lon
    if lat_lon is not None:
        lat, lon = lat_lon
        if sm.is_idle:
            # The target may be the start spot again, which the current component would drop
            bump_map_version()
        # Selecting an intersection triggers st.rerun() via listener
        locate_intersection(sm=sm, graph=graph, lat=lat, lon=lon)


def _render_messages() -> None:
    ctx: ViewerContext = st.session_state.context
    if ctx.messages.error:
        st.error(ctx.messages.error)
    if ctx.messages.message:
        st.text(ctx.messages.message)
    elif st.session_state.graph is not None:
        st.caption("Click an intersection to select the route start.")


# =============================================================================
# MAIN
# =============================================================================


def main() -> None:
    """Application entry point."""
    st.set_page_config(page_title=AppConfig.TITLE, page_icon=AppConfig.ICON, layout=AppConfig.LAYOUT)
    init_session_state()

    st.title(AppConfig.TITLE)

    actions = SidebarRenderer(sm=st.session_state.state_machine, graph=st.session_state.graph).render()
    dispatch_sidebar_actions(actions=actions)

    if st.session_state.graph is None:
        st.info(f"Load a road network data set to begin (default: {DataConfig.DEFAULT_DATA_DIR}).")
        return

    map_col, info_col = st.columns([3, 1])
    with info_col:
        _render_messages()
    with map_col:
        _render_map()


if __name__ == "__main__":
    main()
