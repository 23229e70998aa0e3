"""State machine for the road network viewer UI.

Uses python-statemachine for the intersection selection workflow:

States:
    IDLE: Nothing selected; the next located intersection becomes the start
    START_SELECTED: Start chosen; the next located intersection becomes the target
    TARGET_SELECTED: Both chosen; route search may run. Locating another
        intersection replaces the target.

Transitions:
    IDLE -> START_SELECTED: select_start
    START_SELECTED -> TARGET_SELECTED: select_target
    TARGET_SELECTED -> TARGET_SELECTED: select_target (replace target)
    TARGET_SELECTED -> IDLE: complete_route (stores the route result)
    START_SELECTED | TARGET_SELECTED -> IDLE: reset

Search results (highlighted roads, cut vertices) live in the context and
are orthogonal to the state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import streamlit as st
from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

if TYPE_CHECKING:
    from roadmap_viewer.model.route import RouteResult

logger = logging.getLogger(__name__)


@dataclass
class SelectionContext:
    """Start and target intersections chosen on the map."""

    start_id: int | None = None
    target_id: int | None = None

    def clear(self) -> None:
        self.start_id = None
        self.target_id = None


@dataclass
class HighlightContext:
    """Query results drawn on top of the network."""

    route: RouteResult | None = None
    cut_vertex_ids: frozenset[int] = frozenset()
    road_ids: list[int] = field(default_factory=list)

    def clear(self) -> None:
        self.route = None
        self.cut_vertex_ids = frozenset()
        self.road_ids = []


@dataclass
class UIMessagesContext:
    """User-facing messages and errors."""

    message: str = ""
    error: str = ""

    def clear(self) -> None:
        self.message = ""
        self.error = ""


@dataclass
class ViewerContext:
    """Shared context/model for the viewer state machine.

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model.
    """

    # State managed by python-statemachine (model pattern)
    state: str | None = None

    selection: SelectionContext = field(default_factory=SelectionContext)
    highlights: HighlightContext = field(default_factory=HighlightContext)
    messages: UIMessagesContext = field(default_factory=UIMessagesContext)
    search_query: str = ""

    def __repr__(self) -> str:
        return (
            f"ViewerContext(state={self.state}, start={self.selection.start_id}, "
            f"target={self.selection.target_id}, roads={len(self.highlights.road_ids)}, "
            f"cut_vertices={len(self.highlights.cut_vertex_ids)})"
        )


class StreamlitUIListener:
    """Listener that refreshes the Streamlit UI after state transitions.

    Usage:
        sm = ViewerStateMachine(context=context)
        sm.add_listener(StreamlitUIListener())
    """

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.info(f"[STATE] {source.name} --({event})--> {target.name}")
        st.rerun()


class ViewerStateMachine(StateMachine):
    """State machine for selecting start/target intersections and routing."""

    idle = State("Idle", initial=True)
    start_selected = State("StartSelected")
    target_selected = State("TargetSelected")

    select_start = idle.to(start_selected)
    select_target = start_selected.to(target_selected) | target_selected.to.itself()
    complete_route = target_selected.to(idle)
    reset = start_selected.to(idle) | target_selected.to(idle)

    # ==========================================================================
    # State Check Properties
    # ==========================================================================

    @property
    def is_idle(self) -> bool:
        return self.idle.is_active

    @property
    def is_start_selected(self) -> bool:
        return self.start_selected.is_active

    @property
    def is_target_selected(self) -> bool:
        return self.target_selected.is_active

    @property
    def context(self) -> ViewerContext:
        """Alias for model."""
        return self.model

    # ==========================================================================
    # Hooks
    # ==========================================================================

    def on_enter_idle(self) -> None:
        """Hook: Entering idle state."""
        self.context.selection.clear()

    def before_select_start(self, intersection_id: int) -> None:
        """Start a new selection; previous route and cut vertices are cleared."""
        self.context.selection.start_id = intersection_id
        self.context.selection.target_id = None
        self.context.highlights.route = None
        self.context.highlights.cut_vertex_ids = frozenset()

    def before_select_target(self, intersection_id: int) -> None:
        self.context.selection.target_id = intersection_id

    def before_complete_route(self, route: RouteResult) -> None:
        self.context.highlights.route = route

    # ==========================================================================
    # Utility Methods
    # ==========================================================================

    def __init__(self, context: ViewerContext | None = None, start_value: str | None = None) -> None:
        """Initialize state machine with model pattern.

        Args:
            context: Shared context/model (creates new if None)
            start_value: Optional initial state value (for restoring state)
        """
        model = context or ViewerContext()
        super().__init__(model=model, start_value=start_value)

    def get_state_name(self) -> str:
        """Get current state name for display."""
        for state in (self.idle, self.start_selected, self.target_selected):
            if state.is_active:
                return state.name
        return str(self.current_state_value)

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure."""
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            logger.warning(f"Transition '{event}' not allowed from {self.get_state_name()}")
            return False

    def __repr__(self) -> str:
        return f"ViewerStateMachine(state={self.get_state_name()}, model={self.context!r})"

    @staticmethod
    def create(add_ui_listener: bool = True) -> tuple["ViewerStateMachine", ViewerContext]:
        """Factory method to create state machine with context and optional UI listener.

        Args:
            add_ui_listener: If True, adds StreamlitUIListener for auto st.rerun().
                             Set to False for testing or non-Streamlit usage.
        """
        context = ViewerContext()
        sm = ViewerStateMachine(context=context)
        if add_ui_listener:
            sm.add_listener(StreamlitUIListener())
        return sm, context
