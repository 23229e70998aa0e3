"""MapRenderer - Pydeck map rendering for the road network viewer.

Renders the network and query results on a flat deck.gl map:
- Road segments as thin grey lines (PathLayer)
- Highlighted roads and the current route as thick lines (PathLayer)
- Intersections as small clickable dots (ScatterplotLayer)
- Cut vertices, start and target as larger dots (ScatterplotLayer)

Key conventions:
- Uses [lon, lat] coordinate order (GeoJSON standard)
- Colors as RGBA lists [R, G, B, A] (0-255)
- Data prepared as list[dict] for GPU streaming
- pickable=True enables click detection
"""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field

import pydeck as pdk

from roadmap_viewer.constants import MapConfig, StyleConfig
from roadmap_viewer.model.road_graph import RoadGraph
from roadmap_viewer.model.road_segment import RoadSegment
from roadmap_viewer.model.route import RouteResult

logger = logging.getLogger(__name__)


@dataclass
class LayerCollection:
    """Manages Pydeck layers with correct z-ordering.

    Z-order (back to front): segments → highlights → intersections → markers

    Intersections are placed AFTER segments so they get click priority.
    Markers (start, target, cut vertices) always stay on top.
    """

    segments: list[pdk.Layer] = field(default_factory=list)
    highlights: list[pdk.Layer] = field(default_factory=list)
    intersections: list[pdk.Layer] = field(default_factory=list)
    markers: list[pdk.Layer] = field(default_factory=list)

    def get_ordered_layers(self) -> list[pdk.Layer]:
        """Return all layers in correct z-order (back to front)."""
        return self.segments + self.highlights + self.intersections + self.markers


class MapRenderer:
    """Renders a road graph on a Pydeck map.

    Example:
        renderer = MapRenderer(graph=graph)
        renderer.fit_to_graph()
        deck = renderer.render(route=route)
    """

    def __init__(
        self,
        graph: RoadGraph | None = None,
        center_lat: float = MapConfig.START_CENTER_LAT,
        center_lon: float = MapConfig.START_CENTER_LON,
        zoom: float = MapConfig.DEFAULT_ZOOM,
    ) -> None:
        self.graph = graph
        self.center_lat = center_lat
        self.center_lon = center_lon
        self.zoom = zoom

    def get_view_state(self) -> pdk.ViewState:
        """Create Pydeck ViewState from current settings."""
        return pdk.ViewState(
            latitude=self.center_lat,
            longitude=self.center_lon,
            zoom=self.zoom,
            pitch=MapConfig.DEFAULT_PITCH,
            bearing=MapConfig.DEFAULT_BEARING,
        )

    def fit_to_graph(self) -> None:
        """Centre the view on the graph and pick a zoom that shows all of it.

        Keeps the current view when there is no graph or it is empty.
        """
        if self.graph is None or len(self.graph) == 0:
            return
        min_lat, min_lon, max_lat, max_lon = self.graph.bounds()
        self.center_lat = (min_lat + max_lat) / 2
        self.center_lon = (min_lon + max_lon) / 2

        span = max(max_lat - min_lat, max_lon - min_lon) + 2 * MapConfig.BOUNDS_PADDING_DEG
        # Web mercator: zoom level z shows roughly 360 / 2^z degrees
        self.zoom = max(1.0, min(float(MapConfig.DEFAULT_ZOOM + 4), math.log2(360.0 / span)))
        logger.debug(f"View fitted to ({self.center_lat:.5f}, {self.center_lon:.5f}) zoom {self.zoom:.2f}")

    def render(
        self,
        route: RouteResult | None = None,
        highlight_road_ids: Iterable[int] = (),
        cut_vertex_ids: Iterable[int] = (),
        start_id: int | None = None,
        target_id: int | None = None,
    ) -> pdk.Deck:
        """Render complete map with all layers.

        Args:
            route: Route to draw on top of the network (drawn only if found)
            highlight_road_ids: Roads matched by a name search
            cut_vertex_ids: Intersections reported by the cut vertex scan
            start_id: Selected start intersection
            target_id: Selected target intersection

        Returns:
            pdk.Deck object ready for display.
        """
        layers = LayerCollection()

        if self.graph is not None:
            layers.segments.append(
                self._create_path_layer(
                    segments=self.graph.segments,
                    color=StyleConfig.SEGMENT_COLOR,
                    width=StyleConfig.SEGMENT_WIDTH_PX,
                    layer_id="segments",
                )
            )

            road_ids = set(highlight_road_ids)
            highlighted = [seg for seg in self.graph.segments if seg.road.id in road_ids]
            if route is not None and route.found:
                highlighted.extend(route.segments)
            if highlighted:
                layers.highlights.append(
                    self._create_path_layer(
                        segments=highlighted,
                        color=StyleConfig.HIGHLIGHT_COLOR,
                        width=StyleConfig.HIGHLIGHT_WIDTH_PX,
                        layer_id="highlights",
                    )
                )

            layers.intersections.append(self._create_intersection_layer())
            layers.markers.extend(
                self._create_marker_layers(cut_vertex_ids=cut_vertex_ids, start_id=start_id, target_id=target_id)
            )

        return pdk.Deck(
            map_style=MapConfig.MAP_STYLE,
            map_provider=MapConfig.MAP_PROVIDER,
            initial_view_state=self.get_view_state(),
            layers=layers.get_ordered_layers(),
            tooltip=self._create_tooltip_config(),
            parameters={"pickingRadius": MapConfig.PICKING_RADIUS_PX},
        )

    # =========================================================================
    # LAYERS
    # =========================================================================

    @staticmethod
    def _create_path_layer(segments: Iterable[RoadSegment], color: list[int], width: int, layer_id: str) -> pdk.Layer:
        """Create a PathLayer drawing each segment along its shape points."""
        data = [
            {
                "type": MapConfig.TYPE_SEGMENT,
                "id": seg.road.id,
                "path": seg.path_coords(),
                "name": seg.road.name,
            }
            for seg in segments
        ]
        return pdk.Layer(
            "PathLayer",
            data,
            get_path="path",
            get_color=color,
            get_width=width,
            width_units="pixels",
            width_min_pixels=width,
            pickable=False,
            id=layer_id,
        )

    def _create_intersection_layer(self) -> pdk.Layer:
        """Create clickable layer for all intersections."""
        if self.graph is None:
            return pdk.Layer("ScatterplotLayer", [], id="intersections")

        data = [
            {
                "type": MapConfig.TYPE_INTERSECTION,
                "id": node.id,
                "position": node.lon_lat,
                "name": f"Intersection {node.id}",
            }
            for node in self.graph.intersections.values()
        ]
        return pdk.Layer(
            "ScatterplotLayer",
            data,
            get_position="position",
            get_fill_color=StyleConfig.NODE_COLOR,
            get_radius=StyleConfig.NODE_RADIUS_PX,
            radius_units="pixels",
            pickable=True,
            auto_highlight=True,
            highlight_color=[255, 255, 0, 180],
            id="intersections",
        )

    def _create_marker_layers(
        self,
        cut_vertex_ids: Iterable[int],
        start_id: int | None,
        target_id: int | None,
    ) -> list[pdk.Layer]:
        """Create layers for cut vertices and the selected start/target."""
        layers = []
        markers = [
            ("cut_vertices", list(cut_vertex_ids), StyleConfig.CUT_VERTEX_COLOR, StyleConfig.CUT_VERTEX_RADIUS_PX),
            ("start", [start_id] if start_id is not None else [], StyleConfig.START_NODE_COLOR, StyleConfig.SELECTED_NODE_RADIUS_PX),
            ("target", [target_id] if target_id is not None else [], StyleConfig.TARGET_NODE_COLOR, StyleConfig.SELECTED_NODE_RADIUS_PX),
        ]
        for layer_id, node_ids, color, radius in markers:
            data = [
                {
                    "type": MapConfig.TYPE_INTERSECTION,
                    "id": node_id,
                    "position": self.graph.intersections[node_id].lon_lat,
                    "name": f"Intersection {node_id}",
                }
                for node_id in node_ids
                if node_id in self.graph
            ]
            if not data:
                continue
            layers.append(
                pdk.Layer(
                    "ScatterplotLayer",
                    data,
                    get_position="position",
                    get_fill_color=color,
                    get_radius=radius,
                    radius_units="pixels",
                    pickable=True,
                    id=layer_id,
                )
            )
        return layers

    def _create_tooltip_config(self) -> dict[str, str | dict[str, str]]:
        """Create Pydeck tooltip configuration - name only, details in side panel."""
        return {
            "html": "<b>{name}</b>",
            "style": {
                "backgroundColor": "rgba(255, 255, 255, 0.95)",
                "color": "#333",
                "padding": "6px 10px",
                "borderRadius": "4px",
            },
        }
