"""
Grid layout algorithm.

Tiles entities left-to-right, top-to-bottom in a roughly square grid.
Relationships play no part in the placement.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..base import StaticLayout
from ..constants import SPACING_X, SPACING_Y, START_X, START_Y
from ..types import (
    EventCallback,
    NodeLike,
    Position,
    PositionLike,
    PositionMap,
    RelationshipLike,
    coerce_position,
    node_id,
)
from ..validation import ValidationError, validate_coordinate, validate_spacing


def grid_columns(count: int) -> int:
    """Column count of a roughly square grid holding ``count`` cells."""
    return max(1, math.ceil(math.sqrt(count)))


class GridLayout(StaticLayout):
    """
    Grid layout - tiles entities in rows and columns.

    With N entities the grid has ceil(sqrt(N)) columns. Entity ``i`` lands in
    column ``i % columns`` and row ``i // columns``. Output depends only on
    the node order, so repeated runs are identical.

    Example:
        layout = GridLayout(nodes=["account", "contact", "lead", "opportunity"])
        layout.run()
        layout.positions["lead"]  # Position(x=100.0, y=400.0)
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
        # Grid-specific parameters
        start_x: float = START_X,
        start_y: float = START_Y,
        spacing_x: float = SPACING_X,
        spacing_y: float = SPACING_Y,
        columns: Optional[int] = None,
    ) -> None:
        """
        Initialize Grid layout.

        Args:
            nodes: Visible entities, in tiling order
            edges: Relationships (stored for consistency, not used)
            random_seed: Unused; accepted for a uniform constructor
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
            start_x: X coordinate of the first column
            start_y: Y coordinate of the first row
            spacing_x: Horizontal distance between columns
            spacing_y: Vertical distance between rows
            columns: Fixed column count. If None, ceil(sqrt(N)).

        Raises:
            InvalidSpacingError: If a spacing is not positive.
            ValidationError: If columns < 1 or an origin coordinate is not finite.
        """
        super().__init__(
            nodes=nodes,
            edges=edges,
            random_seed=random_seed,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
        )

        self._start_x: float = validate_coordinate(start_x, "start_x")
        self._start_y: float = validate_coordinate(start_y, "start_y")
        self._spacing_x: float = validate_spacing(spacing_x, "spacing_x")
        self._spacing_y: float = validate_spacing(spacing_y, "spacing_y")
        self._columns: Optional[int] = None
        self.columns = columns

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def start_x(self) -> float:
        """Get X coordinate of the first column."""
        return self._start_x

    @start_x.setter
    def start_x(self, value: float) -> None:
        """Set X coordinate of the first column."""
        self._start_x = validate_coordinate(value, "start_x")

    @property
    def start_y(self) -> float:
        """Get Y coordinate of the first row."""
        return self._start_y

    @start_y.setter
    def start_y(self, value: float) -> None:
        """Set Y coordinate of the first row."""
        self._start_y = validate_coordinate(value, "start_y")

    @property
    def spacing_x(self) -> float:
        """Get horizontal distance between columns."""
        return self._spacing_x

    @spacing_x.setter
    def spacing_x(self, value: float) -> None:
        """Set horizontal distance between columns."""
        self._spacing_x = validate_spacing(value, "spacing_x")

    @property
    def spacing_y(self) -> float:
        """Get vertical distance between rows."""
        return self._spacing_y

    @spacing_y.setter
    def spacing_y(self, value: float) -> None:
        """Set vertical distance between rows."""
        self._spacing_y = validate_spacing(value, "spacing_y")

    @property
    def columns(self) -> Optional[int]:
        """Get fixed column count (None = square-ish grid)."""
        return self._columns

    @columns.setter
    def columns(self, value: Optional[int]) -> None:
        """Set fixed column count."""
        if value is not None:
            value = int(value)
            if value < 1:
                raise ValidationError(f"columns must be >= 1, got {value}")
        self._columns = value

    # -------------------------------------------------------------------------
    # Layout Computation
    # -------------------------------------------------------------------------

    def _compute(self, **kwargs: Any) -> PositionMap:
        """Compute grid positions."""
        nodes = self._graph.nodes
        cols = self._columns if self._columns is not None else grid_columns(len(nodes))

        positions: PositionMap = {}
        for i, name in enumerate(nodes):
            col = i % cols
            row = i // cols
            positions[name] = Position(
                self._start_x + col * self._spacing_x,
                self._start_y + row * self._spacing_y,
            )
        return positions


def append_to_grid(
    prior: Mapping[str, PositionLike],
    new_nodes: Iterable[NodeLike],
    start_x: float = START_X,
    spacing_x: float = SPACING_X,
    spacing_y: float = SPACING_Y,
) -> PositionMap:
    """
    Place newly revealed entities in a grid below an existing arrangement.

    Prior positions are left alone; only the new entities get coordinates.
    The block starts one row below the lowest prior entity (below y=0 when
    no prior entity sits lower) and tiles ceil(sqrt(k)) columns wide.
    Prior positions with a non-finite y do not move the block.

    Args:
        prior: Existing positions, keyed by entity id
        new_nodes: Entities to place, in tiling order
        start_x: X coordinate of the first column
        spacing_x: Horizontal distance between columns
        spacing_y: Vertical distance between rows and below the prior block

    Returns:
        Positions for the new entities only.

    Example:
        >>> append_to_grid({"account": (100, 80)}, ["contact"])
        {'contact': Position(x=100.0, y=400.0)}
    """
    names = [n for n in dict.fromkeys(node_id(n) for n in new_nodes) if n not in prior]
    if not names:
        return {}

    max_y = 0.0
    for data in prior.values():
        y = coerce_position(data).y
        if math.isfinite(y):
            max_y = max(max_y, y)

    cols = grid_columns(len(names))
    positions: PositionMap = {}
    for i, name in enumerate(names):
        col = i % cols
        row = i // cols
        positions[name] = Position(
            float(start_x + col * spacing_x),
            float(max_y + spacing_y + row * spacing_y),
        )
    return positions


__all__ = ["GridLayout", "append_to_grid", "grid_columns"]
