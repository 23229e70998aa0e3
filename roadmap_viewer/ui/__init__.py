"""User interface components for the road network viewer.

File Structure:
- sidebar.py: Sidebar with data loader, road search, query buttons, stats
- map_renderer.py: Pydeck map with segments, highlights, intersections
- pydeck_click_handler.py: Map click capture via streamlit-deckgl

Core Components:
- state_machine.py: ViewerStateMachine (3 states) + ViewerContext
- actions.py: Action functions (locate, route, cut vertices, search, clear)
"""

from roadmap_viewer.ui.actions import (
    clear_highlights,
    compute_cut_vertices,
    compute_route,
    locate_intersection,
    search_roads,
)
from roadmap_viewer.ui.map_renderer import LayerCollection, MapRenderer
from roadmap_viewer.ui.sidebar import SidebarRenderer
from roadmap_viewer.ui.state_machine import (
    StreamlitUIListener,
    ViewerContext,
    ViewerStateMachine,
)

__all__ = [
    "ViewerStateMachine",
    "ViewerContext",
    "StreamlitUIListener",
    "MapRenderer",
    "LayerCollection",
    "SidebarRenderer",
    "clear_highlights",
    "compute_cut_vertices",
    "compute_route",
    "locate_intersection",
    "search_roads",
]
