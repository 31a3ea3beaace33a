"""
Leveled (auto-arrange) layout for relationship dependencies.

Entities that reference nothing sit on the top row; every entity that
depends on another sits at least one row below its deepest dependency.
The algorithm has three phases:
1. Cycle removal (drop depth-first back edges, with a warning)
2. Level assignment (longest path over a topological order)
3. Row placement (each level centered on the canvas width)
"""

from __future__ import annotations

import warnings
from typing import Any, Optional, Sequence

from ..base import StaticLayout
from ..constants import CANVAS_WIDTH, HORIZONTAL_SPACING, LEVEL_HEIGHT, START_X, START_Y
from ..preprocessing import assign_levels, group_by_level, remove_cycles
from ..types import (
    EventCallback,
    NodeLike,
    Position,
    PositionMap,
    RelationshipLike,
)
from ..validation import validate_coordinate, validate_spacing


class DependencyCycleWarning(UserWarning):
    """Warning issued when relationship dependencies form a cycle."""

    pass


class LeveledLayout(StaticLayout):
    """
    Hierarchical layout driven by relationship cardinality.

    An N:1 relationship makes its source depend on its target (the
    referencing record depends on the record it points to); a 1:N
    relationship is the mirror image. N:N relationships are ignored
    unless include_many_to_many is set.

    Example:
        layout = LeveledLayout(
            nodes=["account", "contact", "opportunity"],
            edges=[
                {"from": "contact", "to": "account", "type": "N:1"},
                {"from": "opportunity", "to": "account", "type": "N:1"},
            ],
        )
        layout.run()
        layout.levels  # {'account': 0, 'contact': 1, 'opportunity': 1}
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
        # Leveled-specific parameters
        start_x: float = START_X,
        start_y: float = START_Y,
        horizontal_spacing: float = HORIZONTAL_SPACING,
        level_height: float = LEVEL_HEIGHT,
        canvas_width: float = CANVAS_WIDTH,
        include_many_to_many: bool = False,
    ) -> None:
        """
        Initialize Leveled layout.

        Args:
            nodes: Visible entities; order is kept within each level
            edges: Relationships
            random_seed: Unused; accepted for a uniform constructor
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
            start_x: Minimum X coordinate of a level's first entity
            start_y: Y coordinate of level 0
            horizontal_spacing: Distance between entities on one level
            level_height: Vertical distance between levels
            canvas_width: Width each level is centered within
            include_many_to_many: Read N:N relationships like N:1.

        Raises:
            InvalidSpacingError: If a spacing, level height or width is not positive.
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
        self._horizontal_spacing: float = validate_spacing(
            horizontal_spacing, "horizontal_spacing"
        )
        self._level_height: float = validate_spacing(level_height, "level_height")
        self._canvas_width: float = validate_spacing(canvas_width, "canvas_width")
        self._include_many_to_many: bool = bool(include_many_to_many)

        # Internal state
        self._levels: dict[str, int] = {}
        self._dropped_edges: int = 0

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def start_x(self) -> float:
        """Get minimum X coordinate of a level's first entity."""
        return self._start_x

    @start_x.setter
    def start_x(self, value: float) -> None:
        """Set minimum X coordinate of a level's first entity."""
        self._start_x = validate_coordinate(value, "start_x")

    @property
    def start_y(self) -> float:
        """Get Y coordinate of level 0."""
        return self._start_y

    @start_y.setter
    def start_y(self, value: float) -> None:
        """Set Y coordinate of level 0."""
        self._start_y = validate_coordinate(value, "start_y")

    @property
    def horizontal_spacing(self) -> float:
        """Get distance between entities on one level."""
        return self._horizontal_spacing

    @horizontal_spacing.setter
    def horizontal_spacing(self, value: float) -> None:
        """Set distance between entities on one level."""
        self._horizontal_spacing = validate_spacing(value, "horizontal_spacing")

    @property
    def level_height(self) -> float:
        """Get vertical distance between levels."""
        return self._level_height

    @level_height.setter
    def level_height(self, value: float) -> None:
        """Set vertical distance between levels."""
        self._level_height = validate_spacing(value, "level_height")

    @property
    def canvas_width(self) -> float:
        """Get width each level is centered within."""
        return self._canvas_width

    @canvas_width.setter
    def canvas_width(self, value: float) -> None:
        """Set width each level is centered within."""
        self._canvas_width = validate_spacing(value, "canvas_width")

    @property
    def include_many_to_many(self) -> bool:
        """Get whether N:N relationships create dependencies."""
        return self._include_many_to_many

    @include_many_to_many.setter
    def include_many_to_many(self, value: bool) -> None:
        self._include_many_to_many = bool(value)

    @property
    def levels(self) -> dict[str, int]:
        """Get the level of each entity from the last run()."""
        return dict(self._levels)

    @property
    def dropped_edges(self) -> int:
        """Get how many dependencies the last run() dropped to break cycles."""
        return self._dropped_edges

    # -------------------------------------------------------------------------
    # Phase 1 + 2: Level Assignment
    # -------------------------------------------------------------------------

    def _assign_levels(self) -> list[int]:
        """Break dependency cycles, then assign longest-path levels."""
        n = len(self._graph)
        links = self._graph.dependency_links(self._include_many_to_many)

        acyclic, dropped = remove_cycles(n, links)
        self._dropped_edges = len(dropped)
        if dropped:
            warnings.warn(
                f"Relationship dependencies contain a cycle; ignored {len(dropped)} "
                "dependency edge(s) to assign levels.",
                DependencyCycleWarning,
                stacklevel=4,
            )

        return assign_levels(n, acyclic)

    # -------------------------------------------------------------------------
    # Phase 3: Row Placement
    # -------------------------------------------------------------------------

    def _place_levels(self, levels: list[int]) -> PositionMap:
        """Center each level horizontally and stack levels vertically."""
        nodes = self._graph.nodes
        positions: PositionMap = {}

        for level, members in enumerate(group_by_level(levels)):
            if not members:
                continue

            total_width = len(members) * self._horizontal_spacing
            start = max(self._start_x, (self._canvas_width - total_width) / 2)
            y = self._start_y + level * self._level_height

            for j, idx in enumerate(members):
                positions[nodes[idx]] = Position(start + j * self._horizontal_spacing, y)

        return positions

    # -------------------------------------------------------------------------
    # Layout Computation
    # -------------------------------------------------------------------------

    def _compute(self, **kwargs: Any) -> PositionMap:
        """Compute leveled layout."""
        levels = self._assign_levels()
        self._levels = {name: levels[i] for i, name in enumerate(self._graph.nodes)}
        return self._place_levels(levels)

    def _reset(self) -> None:
        super()._reset()
        self._levels = {}
        self._dropped_edges = 0


__all__ = ["LeveledLayout", "DependencyCycleWarning"]
