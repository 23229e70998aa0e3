"""Shared pytest fixtures for roadmap_viewer tests.

Provides small hand-built road graphs and data set writers for all tests.
All fixtures use explicit values with documented rationale.

COORDINATE SYSTEM:
    Test intersections sit near the projection centre (Auckland). Latitude
    steps of 0.009 degrees are ~1 km apart (111 km per degree), so segment
    lengths of 1.0 km per 0.009 degree step keep the straight-line
    heuristic admissible.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from hypothesis import strategies as st

from roadmap_viewer.constants import DataConfig, GeoConfig
from roadmap_viewer.model.intersection import Intersection
from roadmap_viewer.model.road import Road
from roadmap_viewer.model.road_graph import RoadGraph
from roadmap_viewer.ui.state_machine import ViewerContext, ViewerStateMachine

# Latitude step of ~1 km
KM_STEP_DEG = 0.009

BASE_LAT = GeoConfig.CENTRE_LAT
BASE_LON = GeoConfig.CENTRE_LON


def build_graph(
    nodes: dict[int, tuple[float, float]],
    roads: dict[int, tuple[str, bool]],
    segments: list[tuple[int, int, int, float]],
) -> RoadGraph:
    """Build a RoadGraph from plain tuples.

    Args:
        nodes: id -> (lat, lon)
        roads: id -> (name, one_way)
        segments: (road_id, start_id, end_id, length_km)
    """
    graph = RoadGraph()
    for node_id, (lat, lon) in nodes.items():
        graph.add_intersection(Intersection(id=node_id, lat=lat, lon=lon))
    for road_id, (name, one_way) in roads.items():
        graph.add_road(Road(id=road_id, name=name, one_way=one_way))
    for road_id, start_id, end_id, length in segments:
        graph.add_segment(road_id=road_id, start_id=start_id, end_id=end_id, length=length)
    return graph


def north_of_base(steps: float, east_steps: float = 0.0) -> tuple[float, float]:
    """(lat, lon) `steps` km north and `east_steps` ~km east of the base point."""
    return BASE_LAT + steps * KM_STEP_DEG, BASE_LON + east_steps * KM_STEP_DEG * 1.25


# =============================================================================
# GRAPH FIXTURES
# =============================================================================


@pytest.fixture
def empty_graph() -> RoadGraph:
    return RoadGraph()


@pytest.fixture
def chain_graph() -> RoadGraph:
    """Path 1 - 2 - 3 - 4 running north, 1 km per segment, one road.

    Every interior node (2, 3) is a cut vertex; the endpoints are not.
    """
    return build_graph(
        nodes={i: north_of_base(i - 1) for i in range(1, 5)},
        roads={10: ("queen street", False)},
        segments=[(10, 1, 2, 1.0), (10, 2, 3, 1.0), (10, 3, 4, 1.0)],
    )


@pytest.fixture
def square_graph() -> RoadGraph:
    """Cycle 1 - 2 - 3 - 4 - 1 with a cheap and an expensive side.

        2 ---- 3          1 -> 2 -> 3 = 2.0 km (queen street)
        |      |          1 -> 4 -> 3 = 2.6 km (k road, then ponsonby road)
        1 ---- 4

    A cycle has no cut vertices.
    """
    return build_graph(
        nodes={
            1: north_of_base(0, 0),
            2: north_of_base(1, 0),
            3: north_of_base(1, 1),
            4: north_of_base(0, 1),
        },
        roads={
            10: ("queen street", False),
            20: ("k road", False),
            30: ("ponsonby road", False),
        },
        segments=[
            (10, 1, 2, 1.0),
            (10, 2, 3, 1.0),
            (20, 1, 4, 1.3),
            (30, 4, 3, 1.3),
        ],
    )


@pytest.fixture
def one_way_graph() -> RoadGraph:
    """Direct one-way road 1 -> 2 plus a two-way detour via 3.

        1 ==(one-way 1.0)==> 2
         \\                 /
          --(1.5)- 3 -(1.5)-

    1 -> 2 uses the one-way road (1.0 km). 2 -> 1 must detour (3.0 km).
    """
    return build_graph(
        nodes={
            1: north_of_base(0, 0),
            2: north_of_base(0, 1),
            3: north_of_base(-0.5, 0.5),
        },
        roads={
            10: ("fanshawe street", True),
            20: ("detour road", False),
        },
        segments=[(10, 1, 2, 1.0), (20, 1, 3, 1.5), (20, 3, 2, 1.5)],
    )


@pytest.fixture
def two_component_graph() -> RoadGraph:
    """Chain 1 - 2 - 3 and a separate chain 4 - 5 - 6 (no road between them)."""
    return build_graph(
        nodes={
            1: north_of_base(0, 0),
            2: north_of_base(1, 0),
            3: north_of_base(2, 0),
            4: north_of_base(0, 3),
            5: north_of_base(1, 3),
            6: north_of_base(2, 3),
        },
        roads={10: ("west road", False), 20: ("east road", False)},
        segments=[(10, 1, 2, 1.0), (10, 2, 3, 1.0), (20, 4, 5, 1.0), (20, 5, 6, 1.0)],
    )


@pytest.fixture
def bowtie_graph() -> RoadGraph:
    """Two triangles sharing intersection 3.

        1       4
        | \\   / |
        |  3    |
        | /   \\ |
        2       5

    Only 3 is a cut vertex, whichever intersection the scan starts from.
    """
    return build_graph(
        nodes={
            1: north_of_base(1, 0),
            2: north_of_base(-1, 0),
            3: north_of_base(0, 1),
            4: north_of_base(1, 2),
            5: north_of_base(-1, 2),
        },
        roads={10: ("left loop", False), 20: ("right loop", False)},
        segments=[
            (10, 1, 2, 2.0),
            (10, 2, 3, 1.6),
            (10, 3, 1, 1.6),
            (20, 3, 4, 1.6),
            (20, 4, 5, 2.0),
            (20, 5, 3, 1.6),
        ],
    )


# =============================================================================
# DATA SET FILES
# =============================================================================


NODES_TEXT = (
    "1\t-36.847622\t174.763444\n"
    "2\t-36.838622\t174.763444\n"
    "3\t-36.838622\t174.774681\n"
)

ROADS_TEXT = (
    "roadid\ttype\tlabel\tcity\toneway\tspeed\troadclass\tnotforcar\tnotforpede\tnotforbicy\n"
    "10\t0\tqueen street\tauckland city\t0\t4\t2\t0\t0\t0\n"
    "20\t0\t-\tnorth shore\t1\t3\t1\t0\t0\t0\n"
)

SEGMENTS_TEXT = (
    "roadid\tlength\tnodeid1\tnodeid2\tcoords\n"
    "10\t1.0\t1\t2\t-36.847622\t174.763444\t-36.838622\t174.763444\t\n"
    "20\t1.0\t2\t3\t-36.838622\t174.763444\t-36.838622\t174.774681\t\n"
)


@pytest.fixture
def write_data_set(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a data set directory; pass text to override a file."""

    def _write(nodes: str = NODES_TEXT, roads: str = ROADS_TEXT, segments: str = SEGMENTS_TEXT) -> Path:
        (tmp_path / DataConfig.NODES_FILE).write_text(nodes, encoding="utf-8")
        (tmp_path / DataConfig.ROADS_FILE).write_text(roads, encoding="utf-8")
        (tmp_path / DataConfig.SEGMENTS_FILE).write_text(segments, encoding="utf-8")
        return tmp_path

    return _write


# =============================================================================
# UI STATE MACHINE
# =============================================================================


@pytest.fixture
def state_machine_and_context() -> tuple[ViewerStateMachine, ViewerContext]:
    """Viewer state machine without the Streamlit rerun listener."""
    return ViewerStateMachine.create(add_ui_listener=False)


# =============================================================================
# RANDOM GRAPHS (hypothesis)
# =============================================================================


@st.composite
def random_road_graphs(draw: st.DrawFn, max_nodes: int = 10, max_segments: int = 25) -> RoadGraph:
    """Random road graphs on a small grid, IDs 1..n.

    Segment lengths are never shorter than the straight line between their
    endpoints, as in real data sets. Roughly one road in three is one-way.
    Parallel segments and self-loops occur naturally.
    """
    n = draw(st.integers(min_value=1, max_value=max_nodes))
    cells = draw(
        st.lists(
            st.tuples(st.integers(min_value=0, max_value=6), st.integers(min_value=0, max_value=6)),
            min_size=n,
            max_size=n,
        )
    )
    graph = RoadGraph()
    for index, (north, east) in enumerate(cells):
        lat, lon = north_of_base(north, east)
        graph.add_intersection(Intersection(id=index + 1, lat=lat, lon=lon))

    edges = draw(
        st.lists(
            st.tuples(
                st.integers(min_value=1, max_value=n),
                st.integers(min_value=1, max_value=n),
                st.floats(min_value=0.0, max_value=3.0, allow_nan=False),
                st.integers(min_value=0, max_value=2),
            ),
            max_size=max_segments,
        )
    )
    for road_id, (start_id, end_id, detour, kind) in enumerate(edges, start=1):
        graph.add_road(Road(id=road_id, name=f"road {road_id % 4}", one_way=kind == 0))
        straight = graph.intersections[start_id].location.distance_to(other=graph.intersections[end_id].location)
        graph.add_segment(road_id=road_id, start_id=start_id, end_id=end_id, length=straight + 0.01 + detour)
    return graph
