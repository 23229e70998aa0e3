"""Pydeck click handler using streamlit-deckgl.

st.pydeck_chart only reports picked objects. The viewer needs the clicked
coordinate for every click, since clicks near (not exactly on) an
intersection should still select it, so the map is rendered with st_deckgl
from streamlit-deckgl which returns the full deck.gl onClick event.
"""

import logging
from dataclasses import dataclass
from typing import Any

import pydeck as pdk
import streamlit as st
from streamlit_deckgl import st_deckgl  # type: ignore[import-untyped]

from roadmap_viewer.constants import MapConfig

logger = logging.getLogger(__name__)


@dataclass
class PydeckClickResult:
    """Result from Pydeck click detection.

    Attributes:
        clicked_object: The picked deck.gl object data (dict) or None for a map click
        clicked_coordinate: [lon, lat] of the click location
    """

    clicked_object: dict[str, Any] | None
    clicked_coordinate: list[float] | None

    @property
    def is_object_click(self) -> bool:
        return self.clicked_object is not None

    @property
    def has_coordinate(self) -> bool:
        return self.clicked_coordinate is not None

    @property
    def lat_lon(self) -> tuple[float, float] | None:
        """Clicked (lat, lon), or None if the event carried no coordinate."""
        if self.clicked_coordinate is None:
            return None
        lon, lat = self.clicked_coordinate
        return lat, lon

    @staticmethod
    def empty() -> "PydeckClickResult":
        """Return empty result (no click detected)."""
        return PydeckClickResult(clicked_object=None, clicked_coordinate=None)


def parse_click_event(event: Any) -> PydeckClickResult:
    """Turn a raw st_deckgl event into a PydeckClickResult.

    st_deckgl spreads picked object properties into the event dict rather
    than nesting them under an "object" key:
    - Map click: {coordinate: [lon, lat], eventType: "click"}
    - Object click: {type: ..., id: ..., coordinate: [lon, lat], eventType: "click"}
    """
    if not event or not isinstance(event, dict):
        return PydeckClickResult.empty()

    clicked_object: dict[str, Any] | None = None
    clicked_coordinate: list[float] | None = None

    coord = event.get("coordinate")
    if isinstance(coord, (list, tuple)) and len(coord) >= 2:
        clicked_coordinate = [float(coord[0]), float(coord[1])]

    # "type" is set on every pickable datum by MapRenderer
    if event.get("type") and event["type"] != "click":
        clicked_object = {k: v for k, v in event.items() if k not in ("coordinate", "eventType")}

    # An object click without a coordinate still locates its intersection
    if clicked_coordinate is None and clicked_object is not None:
        position = clicked_object.get("position")
        if isinstance(position, (list, tuple)) and len(position) >= 2:
            clicked_coordinate = [float(position[0]), float(position[1])]

    return PydeckClickResult(clicked_object=clicked_object, clicked_coordinate=clicked_coordinate)


def render_pydeck_map(deck: pdk.Deck, key: str, height: int = MapConfig.MAP_HEIGHT_PX) -> PydeckClickResult:
    """Render Pydeck map and return the newest click, if any.

    The same event is returned by st_deckgl on every rerun until the user
    clicks again, so clicks are deduplicated through session state.

    Args:
        deck: Configured pydeck.Deck object
        key: Unique key for this component instance
        height: Height in pixels

    Returns:
        PydeckClickResult with click info, empty if nothing new was clicked.
    """
    last_click_key = f"_deckgl_last_click_{key}"
    if last_click_key not in st.session_state:
        st.session_state[last_click_key] = None

    # events=['click'] is required for st_deckgl to report clicks
    event = st_deckgl(deck, key=key, height=height, events=["click"])
    result = parse_click_event(event)
    if not result.has_coordinate and not result.is_object_click:
        return PydeckClickResult.empty()

    click_id = _get_click_id(obj=result.clicked_object, coord=result.clicked_coordinate)
    if click_id == st.session_state.get(last_click_key):
        return PydeckClickResult.empty()
    st.session_state[last_click_key] = click_id

    logger.debug(f"Click detected: object={result.is_object_click}, coord={result.clicked_coordinate}")
    return result


def bump_map_version() -> None:
    """Increment map_version so the next render mounts a fresh map component.

    A new component key starts with no remembered click, so a click at the
    exact spot of the previous one is reported again.
    """
    old_version = st.session_state.get("map_version", 0)
    st.session_state.map_version = old_version + 1
    logger.info(f"[MAP] Bumped map_version: {old_version} -> {old_version + 1}")


def map_key(prefix: str = "main_map") -> str:
    """Component key of the map for the current map_version."""
    return f"{prefix}_{st.session_state.get('map_version', 0)}"


def _get_click_id(obj: dict[str, Any] | None, coord: list[float] | None) -> str:
    """Generate unique ID for click deduplication."""
    parts = []
    if obj and obj.get("type") and obj.get("id") is not None:
        parts.append(f"{obj['type']}_{obj['id']}")
    if coord:
        # Round coordinates for dedup tolerance
        parts.append(f"coord_{coord[0]:.5f}_{coord[1]:.5f}")
    return "_".join(parts)
