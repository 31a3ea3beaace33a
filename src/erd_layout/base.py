"""
Base classes for the layout placers.

This module provides abstract base classes that define the common interface
and shared functionality for all placers:

- BaseLayout: Abstract base with event system and graph management
- IterativeLayout: For simulations with a fixed tick budget (force-directed)
- StaticLayout: For single-pass placers (grid, hierarchical)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Sequence

if TYPE_CHECKING:
    from typing_extensions import Self

from .graph import SchemaGraph
from .types import (
    Event,
    EventCallback,
    EventType,
    NodeLike,
    PositionMap,
    Relationship,
    RelationshipLike,
)
from .validation import validate_iterations


class BaseLayout(ABC):
    """
    Abstract base class for all placers.

    Provides shared infrastructure:
    - Event system (start/tick/end events)
    - Visible node / relationship management via properties
    - Result access through the positions property

    A run over an empty node set is a no-op: no event fires and has_run stays
    False, so callers can tell "nothing to lay out" from "laid out nothing".

    Example:
        layout = SomeLayout(
            nodes=["account", "contact"],
            edges=[{"from": "contact", "to": "account", "type": "N:1"}],
        )
        layout.run()

        for name, pos in layout.positions.items():
            print(f"{name}: ({pos.x}, {pos.y})")
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        edges: Optional[Sequence[RelationshipLike]] = None,
        random_seed: Optional[int] = None,
        on_start: Optional[EventCallback] = None,
        on_tick: Optional[EventCallback] = None,
        on_end: Optional[EventCallback] = None,
    ) -> None:
        """
        Initialize layout with configuration.

        Args:
            nodes: Visible entities (ids, dicts, or objects with an id)
            edges: Relationships (Relationship objects, dicts, or objects).
                Edges touching an entity outside ``nodes`` are ignored.
            random_seed: Random seed for reproducible layouts
            on_start: Callback for start event
            on_tick: Callback for tick event (iterative layouts)
            on_end: Callback for end event
        """
        self._node_input: list[NodeLike] = []
        self._edge_input: list[Relationship] = []
        self._graph: SchemaGraph = SchemaGraph()
        self._positions: PositionMap = {}
        self._has_run: bool = False
        self._events: dict[EventType, EventCallback] = {}
        self._random_seed: Optional[int] = random_seed

        if nodes is not None:
            self.nodes = nodes
        if edges is not None:
            self.edges = edges

        # Register event callbacks
        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> list[str]:
        """Get the visible entity ids in input order."""
        return self._graph.nodes

    @nodes.setter
    def nodes(self, value: Sequence[NodeLike]) -> None:
        """Set the visible entities, re-projecting the relationships onto them."""
        if isinstance(value, SchemaGraph):
            self._node_input = value.nodes
            self._edge_input = value.edges
        else:
            self._node_input = list(value)
        self._graph = SchemaGraph(self._node_input, self._edge_input)

    @property
    def edges(self) -> list[Relationship]:
        """Get the relationships whose endpoints are both visible."""
        return self._graph.edges

    @edges.setter
    def edges(self, value: Sequence[RelationshipLike]) -> None:
        """Set relationships from Relationship objects, dicts, or objects."""
        self._edge_input = [Relationship.coerce(e) for e in value]
        self._graph = SchemaGraph(self._node_input, self._edge_input)

    @property
    def graph(self) -> SchemaGraph:
        """Get the visible graph projection."""
        return self._graph

    @property
    def random_seed(self) -> Optional[int]:
        """Get random seed for reproducible layouts."""
        return self._random_seed

    @random_seed.setter
    def random_seed(self, value: Optional[int]) -> None:
        """Set random seed for reproducible layouts."""
        self._random_seed = value

    @property
    def positions(self) -> PositionMap:
        """Get a copy of the positions computed by the last run()."""
        return dict(self._positions)

    @property
    def has_run(self) -> bool:
        """True once run() has produced positions for a non-empty node set."""
        return self._has_run

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: EventCallback) -> Self:
        """
        Subscribe to a layout event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """
        Run the placer.

        Implementations should leave positions empty and fire no event when
        there are no nodes; otherwise compute a position for every node.

        Returns:
            self (for chaining)
        """
        pass

    def _reset(self) -> None:
        """Forget the result of a previous run."""
        self._positions = {}
        self._has_run = False


class IterativeLayout(BaseLayout):
    """
    Base class for simulations that run a fixed number of ticks.

    Provides:
    - Iteration budget
    - Alpha (cooling factor) tracking
    - Tick loop via kick()
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        edges: Optional[Sequence[RelationshipLike]] = None,
        random_seed: Optional[int] = None,
        on_start: Optional[EventCallback] = None,
        on_tick: Optional[EventCallback] = None,
        on_end: Optional[EventCallback] = None,
        # IterativeLayout-specific parameters
        iterations: int = 100,
    ) -> None:
        """
        Initialize iterative layout.

        Args:
            nodes: Visible entities
            edges: Relationships
            random_seed: Random seed for reproducible layouts
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
            iterations: Number of simulation ticks per run

        Raises:
            ValidationError: If iterations < 1
        """
        super().__init__(
            nodes=nodes,
            edges=edges,
            random_seed=random_seed,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
        )
        self._iterations: int = validate_iterations(iterations)
        self._alpha: float = 1.0
        self._iteration: int = 0
        self._budget: int = self._iterations

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def iterations(self) -> int:
        """Get the iteration budget."""
        return self._iterations

    @iterations.setter
    def iterations(self, value: int) -> None:
        """Set the iteration budget (minimum 1)."""
        self._iterations = validate_iterations(value)

    @property
    def alpha(self) -> float:
        """Get current cooling factor (1 at the first tick, falling toward 0)."""
        return self._alpha

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def tick(self) -> bool:
        """
        Perform one iteration of the simulation.

        Returns:
            True when the budget is exhausted, False otherwise.
        """
        pass

    def kick(self) -> None:
        """Run tick() until the iteration budget is spent."""
        while not self.tick():
            pass


class StaticLayout(BaseLayout):
    """
    Base class for single-pass placers.

    These placers compute positions in one pure pass without iteration.
    Examples: grid, hierarchical.
    """

    def run(self, **kwargs: Any) -> Self:
        """
        Run the placer.

        Fires start event, computes positions, fires end event. Does nothing
        when there are no nodes.

        Args:
            **kwargs: Additional arguments passed to _compute()

        Returns:
            self (for chaining)
        """
        self._reset()
        if len(self._graph) == 0:
            return self

        self.trigger({"type": EventType.start, "alpha": 1.0})

        # Subclasses implement _compute()
        self._positions = self._compute(**kwargs)
        self._has_run = True

        self.trigger({"type": EventType.end, "alpha": 0.0})
        return self

    @abstractmethod
    def _compute(self, **kwargs: Any) -> PositionMap:
        """
        Compute node positions.

        Subclasses must return one position per visible node.
        """
        pass


__all__ = [
    "BaseLayout",
    "IterativeLayout",
    "StaticLayout",
]
