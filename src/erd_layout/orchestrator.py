"""
Layout orchestration.

LayoutOrchestrator maps a layout mode to a placer and runs it on demand.
LayoutController adds the trigger discipline on top: it recomputes only when
the mode or the visible entity set changes, never because positions moved,
and writes each fresh result to a position store.
"""

from __future__ import annotations

import math
import random
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from .basic import GridLayout, append_to_grid
from .force import ForceLayout
from .graph import SchemaGraph
from .hierarchical import LeveledLayout
from .types import (
    LayoutMode,
    NodeLike,
    PositionLike,
    PositionMap,
    RelationshipLike,
    coerce_position,
)
from .validation import ValidationError

PositionStore = Callable[[PositionMap], None]

# Supplied by recompute() on every call, never by placer options
_PER_CALL_KEYS = ("nodes", "edges")
_FORCE_PER_CALL_KEYS = _PER_CALL_KEYS + ("prior_positions",)


def _check_options(options: Mapping[str, Any], reserved: Sequence[str], name: str) -> None:
    for key in reserved:
        if key in options:
            raise ValidationError(
                f"{name} cannot set {key!r}; it is passed to each recompute() call"
            )


class LayoutOrchestrator:
    """
    Select and run the placer for a layout mode.

    Manual mode never produces positions: user-arranged entities must not be
    overwritten. An empty visible set produces nothing either. In both cases
    recompute() returns None, which is distinct from an empty mapping.

    Example:
        orchestrator = LayoutOrchestrator(random_seed=1)
        positions = orchestrator.recompute("grid", ["account", "contact"], [])
        orchestrator.recompute("manual", ["account"], [])  # None
    """

    def __init__(
        self,
        *,
        grid_options: Optional[Mapping[str, Any]] = None,
        hierarchical_options: Optional[Mapping[str, Any]] = None,
        force_options: Optional[Mapping[str, Any]] = None,
        random_seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        incremental: bool = False,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            grid_options: Keyword arguments for GridLayout
            hierarchical_options: Keyword arguments for LeveledLayout
            force_options: Keyword arguments for ForceLayout. random_seed and
                rng here are overridden by the arguments below when those are set.
            random_seed: Seed for force-layout seeding of new entities
            rng: Random source for force-layout seeding; overrides random_seed
            incremental: In force mode, when some entities already have
                positions, keep them and grid-place only the new ones
                instead of re-running the simulation.

        Raises:
            ValidationError: If an options mapping sets nodes, edges or
                prior_positions, or a placer rejects its options.
        """
        self._grid_options: dict[str, Any] = dict(grid_options or {})
        self._hierarchical_options: dict[str, Any] = dict(hierarchical_options or {})
        self._force_options: dict[str, Any] = dict(force_options or {})
        self._random_seed = random_seed
        self._rng = rng
        self._incremental = bool(incremental)

        # Fail fast on bad configuration rather than on first recompute
        _check_options(self._grid_options, _PER_CALL_KEYS, "grid_options")
        _check_options(self._hierarchical_options, _PER_CALL_KEYS, "hierarchical_options")
        _check_options(self._force_options, _FORCE_PER_CALL_KEYS, "force_options")
        GridLayout(**self._grid_options)
        LeveledLayout(**self._hierarchical_options)
        ForceLayout(**self._force_options)

    @property
    def incremental(self) -> bool:
        """Get whether force mode only places new entities when it can."""
        return self._incremental

    @incremental.setter
    def incremental(self, value: bool) -> None:
        self._incremental = bool(value)

    def recompute(
        self,
        mode: Union[LayoutMode, str],
        nodes: Sequence[NodeLike],
        edges: Sequence[RelationshipLike] = (),
        prior_positions: Optional[Mapping[str, PositionLike]] = None,
    ) -> Optional[PositionMap]:
        """
        Compute positions for the visible entities under a layout mode.

        Args:
            mode: "force", "grid", "hierarchical" (or "auto"), or "manual"
            nodes: Visible entities
            edges: Relationships; those touching hidden entities are ignored
            prior_positions: Current positions, used to seed force layout

        Returns:
            One position per visible entity, or None when nothing should be
            written (manual mode or no visible entities).

        Raises:
            InvalidLayoutModeError: If mode names no known layout.
        """
        mode = LayoutMode.parse(mode)
        if mode is LayoutMode.MANUAL:
            return None

        graph = SchemaGraph(nodes, edges)
        if len(graph) == 0:
            return None

        if mode is LayoutMode.GRID:
            layout = GridLayout(nodes=graph, **self._grid_options)
        elif mode is LayoutMode.HIERARCHICAL:
            layout = LeveledLayout(nodes=graph, **self._hierarchical_options)
        else:
            prior = dict(prior_positions or {})
            if self._incremental:
                placed = self._place_new_only(graph, prior)
                if placed is not None:
                    return placed
            layout = ForceLayout(nodes=graph, prior_positions=prior, **self._seeded_force_options())

        layout.run()
        return layout.positions

    def _seeded_force_options(self) -> dict[str, Any]:
        """Force options with the orchestrator's seed and rng applied where set."""
        options = dict(self._force_options)
        if self._random_seed is not None:
            options["random_seed"] = self._random_seed
        if self._rng is not None:
            options["rng"] = self._rng
        return options

    def _place_new_only(
        self, graph: SchemaGraph, prior: Mapping[str, PositionLike]
    ) -> Optional[PositionMap]:
        """Keep known positions and grid-place the rest, if both kinds exist."""
        known: PositionMap = {}
        for name in graph:
            if name in prior:
                pos = coerce_position(prior[name])
                # Non-finite priors count as missing
                if math.isfinite(pos.x) and math.isfinite(pos.y):
                    known[name] = pos
        new = [name for name in graph if name not in known]
        if not known or not new:
            return None

        grid = GridLayout(**self._grid_options)
        added = append_to_grid(
            known,
            new,
            start_x=grid.start_x,
            spacing_x=grid.spacing_x,
            spacing_y=grid.spacing_y,
        )
        return {name: known[name] if name in known else added[name] for name in graph}


class LayoutController:
    """
    Recompute layouts only when the mode or the visible entity set changes.

    Position writes must not feed back into recomputation, or a force
    layout would re-trigger itself forever after storing its own output.
    The controller remembers the mode and visible set of the last update()
    and ignores calls where neither changed.

    Example:
        store = {}
        controller = LayoutController(store.update)
        controller.update("force", ["account", "contact"], edges, store)
        controller.update("force", ["account", "contact"], edges, store)  # no-op
    """

    def __init__(
        self,
        store: Optional[PositionStore] = None,
        orchestrator: Optional[LayoutOrchestrator] = None,
    ) -> None:
        """
        Initialize controller.

        Args:
            store: Called with each fresh position map
            orchestrator: Placer selection; a default one if None
        """
        self._store = store
        self._orchestrator = orchestrator if orchestrator is not None else LayoutOrchestrator()
        self._last_mode: Optional[LayoutMode] = None
        self._last_nodes: Optional[frozenset[str]] = None

    @property
    def orchestrator(self) -> LayoutOrchestrator:
        """Get the orchestrator used for recomputation."""
        return self._orchestrator

    def needs_update(self, mode: Union[LayoutMode, str], nodes: Sequence[NodeLike]) -> bool:
        """True if mode or the visible set differs from the last update()."""
        mode = LayoutMode.parse(mode)
        visible = frozenset(SchemaGraph(nodes).nodes)
        return mode is not self._last_mode or visible != self._last_nodes

    def update(
        self,
        mode: Union[LayoutMode, str],
        nodes: Sequence[NodeLike],
        edges: Sequence[RelationshipLike] = (),
        prior_positions: Optional[Mapping[str, PositionLike]] = None,
    ) -> Optional[PositionMap]:
        """
        Recompute and store positions if the mode or visible set changed.

        Returns:
            The stored position map, or None if nothing was recomputed or
            the orchestrator produced no positions.
        """
        if not self.needs_update(mode, nodes):
            return None

        self._last_mode = LayoutMode.parse(mode)
        self._last_nodes = frozenset(SchemaGraph(nodes).nodes)

        positions = self._orchestrator.recompute(mode, nodes, edges, prior_positions)
        if positions is not None and self._store is not None:
            self._store(positions)
        return positions

    def invalidate(self) -> None:
        """Forget the last state so the next update() always recomputes."""
        self._last_mode = None
        self._last_nodes = None


__all__ = ["LayoutOrchestrator", "LayoutController", "PositionStore"]
