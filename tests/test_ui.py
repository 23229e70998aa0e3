"""Tests for roadmap_viewer UI state machine, actions and map rendering.

Tests: ViewerStateMachine, ViewerContext, ui.actions, MapRenderer, click parsing
Focus: Selection workflow, context updates, messages, layer contents

Note: Fixtures are defined in conftest.py. The state machine is created
without the Streamlit listener so no st.rerun() happens.
"""

from typing import Any

import pydeck as pdk
import pytest
from statemachine.exceptions import TransitionNotAllowed

from roadmap_viewer.core.connectivity import ArticulationPointFinder
from roadmap_viewer.core.path_finder import PathFinder
from roadmap_viewer.model.road_graph import RoadGraph
from roadmap_viewer.model.route import RouteStatus
from roadmap_viewer.search.road_index import RoadNameIndex
from roadmap_viewer.ui import pydeck_click_handler
from roadmap_viewer.ui.actions import (
    clear_highlights,
    compute_cut_vertices,
    compute_route,
    locate_intersection,
    search_roads,
)
from roadmap_viewer.ui.map_renderer import LayerCollection, MapRenderer
from roadmap_viewer.ui.pydeck_click_handler import PydeckClickResult, _get_click_id, parse_click_event
from roadmap_viewer.ui.state_machine import ViewerContext, ViewerStateMachine

StateMachineContext = tuple[ViewerStateMachine, ViewerContext]


def click_on(sm: ViewerStateMachine, graph: RoadGraph, node_id: int) -> None:
    node = graph.get_intersection(node_id)
    locate_intersection(sm=sm, graph=graph, lat=node.lat, lon=node.lon)


class TestViewerContext:
    def test_context_defaults(self) -> None:
        ctx = ViewerContext()
        assert ctx.selection.start_id is None
        assert ctx.highlights.route is None
        assert ctx.highlights.cut_vertex_ids == frozenset()
        assert ctx.highlights.road_ids == []
        assert ctx.messages.message == ""

    def test_clear_methods(self) -> None:
        ctx = ViewerContext()
        ctx.selection.start_id = 1
        ctx.highlights.road_ids = [3]
        ctx.messages.error = "oops"
        ctx.selection.clear()
        ctx.highlights.clear()
        ctx.messages.clear()
        assert ctx.selection.start_id is None
        assert ctx.highlights.road_ids == []
        assert ctx.messages.error == ""


class TestStateMachine:
    def test_create_returns_tuple(self) -> None:
        sm, ctx = ViewerStateMachine.create(add_ui_listener=False)
        assert isinstance(sm, ViewerStateMachine)
        assert sm.context is ctx

    def test_initial_state_is_idle(self, state_machine_and_context: StateMachineContext) -> None:
        sm, _ = state_machine_and_context
        assert sm.is_idle
        assert sm.get_state_name() == "Idle"

    def test_select_start_then_target(self, state_machine_and_context: StateMachineContext) -> None:
        sm, ctx = state_machine_and_context
        sm.select_start(intersection_id=5)
        assert sm.is_start_selected
        assert ctx.selection.start_id == 5
        sm.select_target(intersection_id=8)
        assert sm.is_target_selected
        assert ctx.selection.target_id == 8

    def test_target_can_be_replaced(self, state_machine_and_context: StateMachineContext) -> None:
        sm, ctx = state_machine_and_context
        sm.select_start(intersection_id=5)
        sm.select_target(intersection_id=8)
        sm.select_target(intersection_id=9)
        assert sm.is_target_selected
        assert ctx.selection.target_id == 9

    def test_target_requires_start(self, state_machine_and_context: StateMachineContext) -> None:
        sm, _ = state_machine_and_context
        with pytest.raises(TransitionNotAllowed):
            sm.select_target(intersection_id=8)

    def test_reset_clears_selection(self, state_machine_and_context: StateMachineContext) -> None:
        sm, ctx = state_machine_and_context
        sm.select_start(intersection_id=5)
        sm.reset()
        assert sm.is_idle
        assert ctx.selection.start_id is None

    def test_state_name_follows_transitions(self, state_machine_and_context: StateMachineContext) -> None:
        sm, _ = state_machine_and_context
        sm.select_start(intersection_id=5)
        assert sm.get_state_name() == "StartSelected"
        sm.select_target(intersection_id=8)
        assert sm.get_state_name() == "TargetSelected"
        assert "TargetSelected" in repr(sm)

    def test_try_transition_reports_failure(self, state_machine_and_context: StateMachineContext) -> None:
        sm, _ = state_machine_and_context
        assert sm.try_transition("reset") is False
        assert sm.try_transition("select_start", intersection_id=1) is True
        assert sm.is_start_selected


class TestLocateIntersection:
    def test_first_click_selects_start(
        self, state_machine_and_context: StateMachineContext, square_graph: RoadGraph
    ) -> None:
        sm, ctx = state_machine_and_context
        click_on(sm=sm, graph=square_graph, node_id=1)
        assert sm.is_start_selected
        assert ctx.selection.start_id == 1
        assert "Start node:\nID: 1" in ctx.messages.message

    def test_second_click_selects_target(
        self, state_machine_and_context: StateMachineContext, square_graph: RoadGraph
    ) -> None:
        sm, ctx = state_machine_and_context
        click_on(sm=sm, graph=square_graph, node_id=1)
        click_on(sm=sm, graph=square_graph, node_id=3)
        assert sm.is_target_selected
        assert ctx.selection.target_id == 3
        assert "Target node:\nID: 3" in ctx.messages.message

    def test_click_far_away_ignored(
        self, state_machine_and_context: StateMachineContext, square_graph: RoadGraph
    ) -> None:
        sm, ctx = state_machine_and_context
        node = locate_intersection(sm=sm, graph=square_graph, lat=-36.0, lon=174.0)
        assert node is None
        assert sm.is_idle
        assert ctx.messages.message == ""


class TestComputeRoute:
    def test_needs_both_nodes(self, state_machine_and_context: StateMachineContext, square_graph: RoadGraph) -> None:
        sm, ctx = state_machine_and_context
        click_on(sm=sm, graph=square_graph, node_id=1)
        assert compute_route(sm=sm, graph=square_graph, finder=PathFinder()) is False
        assert ctx.messages.error == "Needs to specify both nodes."
        assert sm.is_start_selected

    def test_route_stored_and_described(
        self, state_machine_and_context: StateMachineContext, square_graph: RoadGraph
    ) -> None:
        sm, ctx = state_machine_and_context
        click_on(sm=sm, graph=square_graph, node_id=1)
        click_on(sm=sm, graph=square_graph, node_id=3)
        assert compute_route(sm=sm, graph=square_graph, finder=PathFinder()) is True
        assert sm.is_idle
        route = ctx.highlights.route
        assert route is not None
        assert route.intersection_ids == (1, 2, 3)
        assert ctx.messages.message == "queen street: 2.0km\n\nTotal Distance: 2.0km"

    def test_unreachable_route_message(
        self, state_machine_and_context: StateMachineContext, two_component_graph: RoadGraph
    ) -> None:
        sm, ctx = state_machine_and_context
        click_on(sm=sm, graph=two_component_graph, node_id=1)
        click_on(sm=sm, graph=two_component_graph, node_id=6)
        compute_route(sm=sm, graph=two_component_graph, finder=PathFinder())
        assert ctx.highlights.route.status is RouteStatus.UNREACHABLE
        assert ctx.messages.message == "No path exists from 1 to 6."

    def test_new_start_clears_previous_route(
        self, state_machine_and_context: StateMachineContext, square_graph: RoadGraph
    ) -> None:
        sm, ctx = state_machine_and_context
        click_on(sm=sm, graph=square_graph, node_id=1)
        click_on(sm=sm, graph=square_graph, node_id=3)
        compute_route(sm=sm, graph=square_graph, finder=PathFinder())
        click_on(sm=sm, graph=square_graph, node_id=2)
        assert ctx.highlights.route is None
        assert ctx.selection.start_id == 2


class TestQueries:
    def test_cut_vertices(self, state_machine_and_context: StateMachineContext, two_component_graph: RoadGraph) -> None:
        sm, ctx = state_machine_and_context
        cut_ids = compute_cut_vertices(sm=sm, graph=two_component_graph, finder=ArticulationPointFinder())
        assert cut_ids == frozenset({2, 5})
        assert ctx.highlights.cut_vertex_ids == cut_ids
        assert ctx.messages.message == "There are 2 articulation points in the graph."

    def test_search_roads(self, state_machine_and_context: StateMachineContext, square_graph: RoadGraph) -> None:
        sm, ctx = state_machine_and_context
        index = RoadNameIndex(roads=square_graph.roads.values())
        names = search_roads(sm=sm, index=index, query="k")
        assert names == ["k road"]
        assert ctx.highlights.road_ids == [20]
        assert ctx.messages.message == "k road"
        assert ctx.search_query == "k"

    def test_search_lists_distinct_names(
        self, state_machine_and_context: StateMachineContext, square_graph: RoadGraph
    ) -> None:
        sm, ctx = state_machine_and_context
        index = RoadNameIndex(roads=square_graph.roads.values())
        search_roads(sm=sm, index=index, query="")
        assert ctx.highlights.road_ids == []
        search_roads(sm=sm, index=index, query="queen")
        assert ctx.messages.message == "queen street"

    def test_clear_highlights(self, state_machine_and_context: StateMachineContext, square_graph: RoadGraph) -> None:
        sm, ctx = state_machine_and_context
        compute_cut_vertices(sm=sm, graph=square_graph, finder=ArticulationPointFinder())
        click_on(sm=sm, graph=square_graph, node_id=1)
        clear_highlights(sm=sm)
        assert sm.is_idle
        assert ctx.selection.start_id is None
        assert ctx.highlights.cut_vertex_ids == frozenset()
        assert ctx.messages.message == ""

    def test_clear_when_idle_keeps_state(self, state_machine_and_context: StateMachineContext) -> None:
        sm, ctx = state_machine_and_context
        ctx.search_query = "queen"
        clear_highlights(sm=sm)
        assert sm.is_idle
        assert ctx.search_query == ""

    def test_same_intersection_as_start_and_target(
        self, state_machine_and_context: StateMachineContext, square_graph: RoadGraph
    ) -> None:
        sm, ctx = state_machine_and_context
        click_on(sm=sm, graph=square_graph, node_id=2)
        click_on(sm=sm, graph=square_graph, node_id=2)
        assert (ctx.selection.start_id, ctx.selection.target_id) == (2, 2)

        assert compute_route(sm=sm, graph=square_graph, finder=PathFinder()) is True
        assert sm.is_idle
        assert ctx.highlights.route.intersection_ids == (2,)


class FakeSessionState(dict):
    """Dict with attribute access, standing in for st.session_state."""

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __setattr__(self, name: str, value: Any) -> None:
        self[name] = value


class TestClickDeduplication:
    CLICK = {"type": "intersection", "id": 2, "coordinate": [174.7634, -36.8386], "eventType": "click"}

    @pytest.fixture
    def session_state(self, monkeypatch: pytest.MonkeyPatch) -> FakeSessionState:
        state = FakeSessionState()
        monkeypatch.setattr(pydeck_click_handler.st, "session_state", state)
        # st_deckgl keeps returning the last event on every rerun
        monkeypatch.setattr(pydeck_click_handler, "st_deckgl", lambda deck, key, height, events: self.CLICK)
        return state

    def test_repeated_event_reported_once(self, session_state: FakeSessionState) -> None:
        deck = MapRenderer().render()
        first = pydeck_click_handler.render_pydeck_map(deck=deck, key=pydeck_click_handler.map_key())
        again = pydeck_click_handler.render_pydeck_map(deck=deck, key=pydeck_click_handler.map_key())
        assert first.is_object_click
        assert again.lat_lon is None

    def test_same_spot_reported_again_after_bump(self, session_state: FakeSessionState) -> None:
        deck = MapRenderer().render()
        pydeck_click_handler.render_pydeck_map(deck=deck, key=pydeck_click_handler.map_key())
        pydeck_click_handler.bump_map_version()
        assert session_state.map_version == 1
        second = pydeck_click_handler.render_pydeck_map(deck=deck, key=pydeck_click_handler.map_key())
        assert second.lat_lon == (-36.8386, 174.7634)

    def test_map_key_follows_version(self, session_state: FakeSessionState) -> None:
        assert pydeck_click_handler.map_key() == "main_map_0"
        pydeck_click_handler.bump_map_version()
        assert pydeck_click_handler.map_key(prefix="m") == "m_1"


class TestMapRenderer:
    def test_layer_collection_order(self) -> None:
        segments = pdk.Layer("PathLayer", [], id="segments")
        markers = pdk.Layer("ScatterplotLayer", [], id="start")
        nodes = pdk.Layer("ScatterplotLayer", [], id="intersections")
        lc = LayerCollection(segments=[segments], intersections=[nodes], markers=[markers])
        assert [layer.id for layer in lc.get_ordered_layers()] == ["segments", "intersections", "start"]

    def test_render_without_graph(self) -> None:
        deck = MapRenderer().render()
        assert isinstance(deck, pdk.Deck)
        assert deck.layers == []

    def test_render_network(self, square_graph: RoadGraph) -> None:
        deck = MapRenderer(graph=square_graph).render()
        assert [layer.id for layer in deck.layers] == ["segments", "intersections"]
        nodes = deck.layers[1].data
        assert len(nodes) == 4
        assert nodes[0]["type"] == "intersection"
        assert nodes[0]["position"] == square_graph.get_intersection(nodes[0]["id"]).lon_lat

    def test_render_route_and_markers(self, square_graph: RoadGraph) -> None:
        route = PathFinder().find_path(graph=square_graph, start_id=1, target_id=3)
        deck = MapRenderer(graph=square_graph).render(
            route=route, cut_vertex_ids=[2], start_id=1, target_id=3, highlight_road_ids=[20]
        )
        layers = {layer.id: layer for layer in deck.layers}
        assert set(layers) == {"segments", "highlights", "intersections", "cut_vertices", "start", "target"}
        # k road (1 segment) plus the 2 route segments
        assert len(layers["highlights"].data) == 3
        assert layers["start"].data[0]["id"] == 1

    def test_unknown_marker_ids_skipped(self, square_graph: RoadGraph) -> None:
        deck = MapRenderer(graph=square_graph).render(start_id=99)
        assert "start" not in [layer.id for layer in deck.layers]

    def test_fit_to_graph_centres_view(self, square_graph: RoadGraph) -> None:
        renderer = MapRenderer(graph=square_graph)
        renderer.fit_to_graph()
        min_lat, min_lon, max_lat, max_lon = square_graph.bounds()
        assert renderer.center_lat == pytest.approx((min_lat + max_lat) / 2)
        assert renderer.center_lon == pytest.approx((min_lon + max_lon) / 2)
        assert renderer.zoom >= 1.0

    def test_fit_to_empty_graph_keeps_view(self, empty_graph: RoadGraph) -> None:
        renderer = MapRenderer(graph=empty_graph, center_lat=-36.0, center_lon=174.0)
        renderer.fit_to_graph()
        assert renderer.center_lat == -36.0


class TestClickParsing:
    def test_no_event(self) -> None:
        result = parse_click_event(None)
        assert not result.has_coordinate
        assert not result.is_object_click

    def test_map_click(self) -> None:
        result = parse_click_event({"coordinate": [174.76, -36.85], "eventType": "click"})
        assert not result.is_object_click
        assert result.lat_lon == (-36.85, 174.76)

    def test_object_click(self) -> None:
        event = {"type": "intersection", "id": 4, "coordinate": [174.76, -36.85], "eventType": "click"}
        result = parse_click_event(event)
        assert result.is_object_click
        assert result.clicked_object == {"type": "intersection", "id": 4}

    def test_object_click_without_coordinate_uses_position(self) -> None:
        result = parse_click_event({"type": "intersection", "id": 4, "position": [174.7, -36.8]})
        assert result.lat_lon == (-36.8, 174.7)

    def test_empty_result(self) -> None:
        assert PydeckClickResult.empty().lat_lon is None

    def test_click_id_distinguishes_objects(self) -> None:
        a = _get_click_id(obj={"type": "intersection", "id": 1}, coord=[174.7, -36.8])
        b = _get_click_id(obj={"type": "intersection", "id": 2}, coord=[174.7, -36.8])
        assert a != b
