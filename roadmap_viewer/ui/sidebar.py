"""Sidebar UI renderer for the road network viewer.

Renders the left sidebar with:
- Data set directory and load button
- Road name search box
- Route and cut vertex buttons
- Network statistics

The sidebar only reports what the user asked for; app.py dispatches the
requests to ui.actions.
"""

import logging
from typing import Any

import streamlit as st

from roadmap_viewer.constants import DataConfig
from roadmap_viewer.model.road_graph import RoadGraph
from roadmap_viewer.ui.state_machine import ViewerContext, ViewerStateMachine

logger = logging.getLogger(__name__)


class SidebarRenderer:
    """Renders the sidebar controls.

    Example:
        actions = SidebarRenderer(sm=sm, graph=graph).render()
        if actions["route"]:
            compute_route(...)
    """

    def __init__(self, sm: ViewerStateMachine, graph: RoadGraph | None) -> None:
        self.sm = sm
        self.ctx: ViewerContext = sm.context
        self.graph = graph

    def render(self) -> dict[str, Any]:
        """Render sidebar and return requested actions.

        Returns:
            Dict with keys: load (data dir or None), search (query or None),
            route, cut_vertices, clear
        """
        with st.sidebar:
            actions: dict[str, Any] = {
                "load": None,
                "search": None,
                "route": False,
                "cut_vertices": False,
                "clear": False,
            }

            actions["load"] = self._render_data_loader()
            st.divider()

            if self.graph is not None:
                actions["search"] = self._render_search_box()
                st.divider()
                actions.update(self._render_query_buttons())
                st.divider()
                self._render_network_stats()

            return actions

    def _render_data_loader(self) -> str | None:
        """Render data directory input. Returns the directory when Load is pressed."""
        st.subheader("📂 Data Set")
        data_dir = st.text_input(
            "Data directory",
            value=st.session_state.get("data_dir", str(DataConfig.DEFAULT_DATA_DIR)),
            help="Directory holding the nodeID, roadID and roadSeg .tab files",
        )
        if st.button("Load", type="primary", width="stretch"):
            return data_dir
        return None

    def _render_search_box(self) -> str | None:
        """Render road name search. Returns the query when it changed."""
        query = st.text_input("🔍 Search roads", value=self.ctx.search_query, placeholder="Road name prefix")
        if query != self.ctx.search_query:
            return query
        return None

    def _render_query_buttons(self) -> dict[str, bool]:
        can_route = self.sm.is_target_selected
        if can_route:
            route_help = "Shortest route by distance"
        elif self.sm.is_start_selected:
            route_help = "Click a target intersection on the map"
        else:
            route_help = "Click a start and a target intersection first"
        route = st.button("🧭 Find Route", width="stretch", disabled=not can_route, help=route_help)
        cut_vertices = st.button(
            "📍 Articulation Points",
            width="stretch",
            help="Intersections whose removal disconnects the network",
        )
        clear = st.button("✖️ Clear", width="stretch", help="Drop selection and highlights")
        return {"route": route, "cut_vertices": cut_vertices, "clear": clear}

    def _render_network_stats(self) -> None:
        st.subheader("📊 Network")
        col1, col2, col3 = st.columns(3)
        col1.metric("Intersections", len(self.graph.intersections))
        col2.metric("Roads", len(self.graph.roads))
        col3.metric("Segments", len(self.graph.segments))
        st.caption(f"State: {self.sm.get_state_name()}")
