"""
Force-directed layout for entity-relationship diagrams.

A damped spring-and-charge simulation run for a fixed number of ticks:
- Every pair of entities repels with an inverse-square (Coulomb) force
- Every relationship is a Hooke spring with a rest length
- A weak pull toward the canvas center stops the graph drifting away

All forces are scaled by a cooling factor that falls linearly from 1 to 0
over the run. Repulsion is O(n^2) per tick, which bounds the practical graph
size to a few hundred entities.
"""

from __future__ import annotations

import math
import random
from typing import Any, Mapping, Optional, Sequence

import numpy as np
from typing_extensions import Self

from ..base import IterativeLayout
from ..constants import (
    CENTER,
    CENTER_FORCE,
    DAMPING,
    ITERATIONS,
    REPULSION,
    SEED_BOUNDS,
    SPRING_LENGTH,
    SPRING_STRENGTH,
)
from ..types import (
    EventCallback,
    EventType,
    NodeLike,
    Position,
    PositionLike,
    PositionMap,
    RelationshipLike,
    SimulationPosition,
    coerce_position,
)
from ..validation import (
    ValidationError,
    validate_bounds,
    validate_coordinate,
    validate_iterations,
    validate_spacing,
    validate_unit_interval,
)


class ForceLayout(IterativeLayout):
    """
    Spring-and-charge force-directed layout.

    Entities with a prior position start from it, so re-running after the
    visible set grows does not scatter what was already placed. Entities
    without one are seeded uniformly inside seed_bounds.

    Per tick t of T, with alpha = 1 - t/T:
    - repulsion: F = repulsion / r^2 for every unordered pair
    - springs:   F = (r - spring_length) * spring_strength for every edge
    - centering: F = (center - p) * center_force for every entity
    then v += alpha * F, p += v, v *= damping. Distances below 1 count as 1.

    Example:
        layout = ForceLayout(
            nodes=["account", "contact"],
            edges=[{"from": "contact", "to": "account", "type": "N:1"}],
            prior_positions={"account": (200, 300)},
            random_seed=7,
        )
        layout.run()
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
        # IterativeLayout parameters
        iterations: int = ITERATIONS,
        # ForceLayout-specific parameters
        prior_positions: Optional[Mapping[str, PositionLike]] = None,
        rng: Optional[random.Random] = None,
        repulsion: float = REPULSION,
        spring_length: float = SPRING_LENGTH,
        spring_strength: float = SPRING_STRENGTH,
        center_force: float = CENTER_FORCE,
        center: tuple[float, float] = CENTER,
        damping: float = DAMPING,
        seed_bounds: Sequence[float] = SEED_BOUNDS,
        large_graph_threshold: Optional[int] = None,
        large_graph_iterations: Optional[int] = None,
    ) -> None:
        """
        Initialize Force layout.

        Args:
            nodes: Visible entities
            edges: Relationships; each one is a spring regardless of cardinality
            random_seed: Seed for the position of entities without a prior
            on_start: Callback for start event
            on_tick: Callback for tick event, fired once per iteration
            on_end: Callback for end event
            iterations: Number of ticks per run. Default 100.
            prior_positions: Starting positions keyed by entity id. Entities
                missing here (or with a non-finite position) are seeded.
            rng: Random source for seeding; takes precedence over random_seed.
            repulsion: Inverse-square repulsion constant. Default 8000.
            spring_length: Rest length of relationship springs. Default 280.
            spring_strength: Spring constant. Default 0.01.
            center_force: Strength of the pull toward center. Default 0.001.
            center: Point entities are pulled toward. Default (600, 400).
            damping: Velocity retained after each tick, in [0, 1]. Default 0.9.
            seed_bounds: (min_x, min_y, max_x, max_y) box for seeded entities.
            large_graph_threshold: Node count above which the tick budget is capped.
            large_graph_iterations: Tick cap applied above the threshold.

        Raises:
            ValidationError: If a parameter is out of range.
        """
        super().__init__(
            nodes=nodes,
            edges=edges,
            random_seed=random_seed,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
            iterations=iterations,
        )

        self._prior_positions: dict[str, PositionLike] = dict(prior_positions or {})
        self._rng: Optional[random.Random] = rng
        self._repulsion: float = self._non_negative(repulsion, "repulsion")
        self._spring_length: float = validate_spacing(spring_length, "spring_length")
        self._spring_strength: float = self._non_negative(spring_strength, "spring_strength")
        self._center_force: float = self._non_negative(center_force, "center_force")
        self._center: tuple[float, float] = (
            validate_coordinate(center[0], "center x"),
            validate_coordinate(center[1], "center y"),
        )
        self._damping: float = validate_unit_interval(damping, "damping")
        self._seed_bounds: tuple[float, float, float, float] = validate_bounds(seed_bounds)
        self._large_graph_threshold: Optional[int] = large_graph_threshold
        self._large_graph_iterations: Optional[int] = (
            validate_iterations(large_graph_iterations)
            if large_graph_iterations is not None
            else None
        )

        # Internal state
        self._pos: Optional[np.ndarray] = None
        self._vel: Optional[np.ndarray] = None
        self._springs: Optional[np.ndarray] = None

    @staticmethod
    def _non_negative(value: float, name: str) -> float:
        value = float(value)
        if not math.isfinite(value) or value < 0:
            raise ValidationError(f"{name} must be non-negative, got {value}")
        return value

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def prior_positions(self) -> dict[str, PositionLike]:
        """Get the starting positions the next run() seeds from."""
        return dict(self._prior_positions)

    @prior_positions.setter
    def prior_positions(self, value: Optional[Mapping[str, PositionLike]]) -> None:
        """Set the starting positions the next run() seeds from."""
        self._prior_positions = dict(value or {})

    @property
    def repulsion(self) -> float:
        """Get the repulsion constant."""
        return self._repulsion

    @repulsion.setter
    def repulsion(self, value: float) -> None:
        self._repulsion = self._non_negative(value, "repulsion")

    @property
    def spring_length(self) -> float:
        """Get the rest length of relationship springs."""
        return self._spring_length

    @spring_length.setter
    def spring_length(self, value: float) -> None:
        self._spring_length = validate_spacing(value, "spring_length")

    @property
    def spring_strength(self) -> float:
        """Get the spring constant."""
        return self._spring_strength

    @spring_strength.setter
    def spring_strength(self, value: float) -> None:
        self._spring_strength = self._non_negative(value, "spring_strength")

    @property
    def center_force(self) -> float:
        """Get the strength of the pull toward center."""
        return self._center_force

    @center_force.setter
    def center_force(self, value: float) -> None:
        self._center_force = self._non_negative(value, "center_force")

    @property
    def center(self) -> tuple[float, float]:
        """Get the point entities are pulled toward."""
        return self._center

    @center.setter
    def center(self, value: tuple[float, float]) -> None:
        self._center = (
            validate_coordinate(value[0], "center x"),
            validate_coordinate(value[1], "center y"),
        )

    @property
    def damping(self) -> float:
        """Get the fraction of velocity kept after each tick."""
        return self._damping

    @damping.setter
    def damping(self, value: float) -> None:
        self._damping = validate_unit_interval(value, "damping")

    @property
    def seed_bounds(self) -> tuple[float, float, float, float]:
        """Get the (min_x, min_y, max_x, max_y) box used for seeding."""
        return self._seed_bounds

    @seed_bounds.setter
    def seed_bounds(self, value: Sequence[float]) -> None:
        self._seed_bounds = validate_bounds(value)

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    def _random_source(self) -> random.Random:
        if self._rng is not None:
            return self._rng
        return random.Random(self._random_seed)

    def _initial_positions(self) -> list[SimulationPosition]:
        """Start from prior positions where known, seed the rest."""
        rng = self._random_source()
        min_x, min_y, max_x, max_y = self._seed_bounds

        start: list[SimulationPosition] = []
        for name in self._graph.nodes:
            prior = self._prior_positions.get(name)
            if prior is not None:
                pos = coerce_position(prior)
                if math.isfinite(pos.x) and math.isfinite(pos.y):
                    start.append(SimulationPosition(pos.x, pos.y))
                    continue
            start.append(
                SimulationPosition(rng.uniform(min_x, max_x), rng.uniform(min_y, max_y))
            )
        return start

    def _tick_budget(self, n: int) -> int:
        """Iteration count for a graph of n entities."""
        if (
            self._large_graph_threshold is not None
            and self._large_graph_iterations is not None
            and n > self._large_graph_threshold
        ):
            return min(self._iterations, self._large_graph_iterations)
        return self._iterations

    # -------------------------------------------------------------------------
    # Layout Implementation
    # -------------------------------------------------------------------------

    def run(self, **kwargs: Any) -> Self:
        """
        Run the simulation for the full tick budget.

        Does nothing, and fires no event, when there are no entities.

        Returns:
            self for chaining
        """
        self._reset()
        n = len(self._graph)
        if n == 0:
            return self

        start = self._initial_positions()
        self._pos = np.array([[p.x, p.y] for p in start], dtype=np.float64)
        self._vel = np.array([[p.vx, p.vy] for p in start], dtype=np.float64)

        springs = [(s, t) for s, t in self._graph.link_indices() if s != t]
        self._springs = np.array(springs, dtype=np.intp).reshape(-1, 2)

        self._iteration = 0
        self._budget = self._tick_budget(n)
        self._alpha = 1.0

        self.trigger({"type": EventType.start, "alpha": self._alpha})

        self.kick()

        # Velocities stay behind; only coordinates leave the simulation
        self._positions = {
            name: Position(x, y) for name, (x, y) in zip(self._graph.nodes, self._pos.tolist())
        }
        self._has_run = True

        self.trigger({"type": EventType.end, "alpha": 0.0})
        return self

    def tick(self) -> bool:
        """
        Perform one iteration of the simulation.

        Returns:
            True once the tick budget is spent, False otherwise.
        """
        # These are set in run() before tick() is called
        assert self._pos is not None
        assert self._vel is not None
        assert self._springs is not None

        if self._iteration >= self._budget:
            return True

        alpha = 1.0 - self._iteration / self._budget
        self._alpha = alpha

        force = np.zeros_like(self._pos)
        self._compute_repulsive(force)
        self._compute_springs(force)
        self._compute_centering(force)

        # Integrate: accumulate, move, then damp
        self._vel += force * alpha
        self._pos += self._vel
        self._vel *= self._damping

        movement = float(np.abs(self._vel).sum())
        self._iteration += 1

        self.trigger(
            {
                "type": EventType.tick,
                "alpha": alpha,
                "stress": movement,
                "iteration": self._iteration,
            }
        )

        return self._iteration >= self._budget

    def _compute_repulsive(self, force: np.ndarray) -> None:
        """Inverse-square repulsion over all unordered pairs."""
        assert self._pos is not None
        n = len(self._pos)
        if n < 2 or self._repulsion == 0:
            return

        # delta[i, j] points from j to i, so a positive force pushes i away from j
        delta = self._pos[:, np.newaxis, :] - self._pos[np.newaxis, :, :]
        dist = np.maximum(np.sqrt((delta**2).sum(axis=2)), 1.0)
        magnitude = self._repulsion / (dist * dist)
        np.fill_diagonal(magnitude, 0.0)

        force += ((delta / dist[:, :, np.newaxis]) * magnitude[:, :, np.newaxis]).sum(axis=1)

    def _compute_springs(self, force: np.ndarray) -> None:
        """Hooke springs along relationships; parallel edges add up."""
        assert self._pos is not None and self._springs is not None
        if len(self._springs) == 0 or self._spring_strength == 0:
            return

        src = self._springs[:, 0]
        tgt = self._springs[:, 1]
        delta = self._pos[tgt] - self._pos[src]
        dist = np.maximum(np.sqrt((delta**2).sum(axis=1)), 1.0)
        magnitude = (dist - self._spring_length) * self._spring_strength
        pull = (delta / dist[:, np.newaxis]) * magnitude[:, np.newaxis]

        # Stretched springs pull the source toward the target and vice versa
        np.add.at(force, src, pull)
        np.subtract.at(force, tgt, pull)

    def _compute_centering(self, force: np.ndarray) -> None:
        """Linear pull toward the canvas center."""
        assert self._pos is not None
        if self._center_force == 0:
            return
        force += (np.asarray(self._center) - self._pos) * self._center_force


__all__ = ["ForceLayout"]
