"""
Common types for the ERD layout engine.

This module provides the fundamental types shared by every placer:
- Cardinality: Relationship multiplicity (1:N, N:1, N:N)
- LayoutMode: Strategy selected by the layout-mode picker
- Relationship: Typed edge between two entities
- Position: Persisted (x, y) coordinate of an entity
- SimulationPosition: Position plus transient velocity (force simulator only)
- EventType / Event: Layout lifecycle events
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Callable, Optional, TypedDict, Union

from .validation import InvalidCardinalityError, InvalidLayoutModeError


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Layout computation has begun
    - tick: Fired once per simulation iteration (force layout only)
    - end: Layout computation has finished
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    alpha: float
    stress: Optional[float]
    iteration: int


class Cardinality(Enum):
    """Multiplicity of a relationship, read from source to target."""

    ONE_TO_MANY = "1:N"
    MANY_TO_ONE = "N:1"
    MANY_TO_MANY = "N:N"

    @classmethod
    def parse(cls, value: Union[Cardinality, str]) -> Cardinality:
        """
        Parse a cardinality from the enum itself, its value or its name.

        Raises:
            InvalidCardinalityError: If the value names no cardinality.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text.upper() == member.value or text.upper() == member.name:
                return member
        raise InvalidCardinalityError(
            f"Unknown cardinality {value!r}, expected one of "
            f"{[m.value for m in cls]}"
        )


class LayoutMode(Enum):
    """Layout strategy chosen by the user."""

    FORCE = "force"
    GRID = "grid"
    HIERARCHICAL = "hierarchical"
    MANUAL = "manual"

    @classmethod
    def parse(cls, value: Union[LayoutMode, str]) -> LayoutMode:
        """
        Parse a layout mode from the enum or its string value.

        ``"auto"`` is accepted as the editor's historical name for
        hierarchical placement.

        Raises:
            InvalidLayoutModeError: If the value names no mode.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text == "auto":
            return cls.HIERARCHICAL
        for member in cls:
            if text == member.value:
                return member
        raise InvalidLayoutModeError(
            f"Unknown layout mode {value!r}, expected one of "
            f"{[m.value for m in cls]}"
        )


class Relationship:
    """
    Typed edge between two entities.

    Attributes:
        source: Id of the referencing entity
        target: Id of the referenced entity
        cardinality: Relationship multiplicity, read from source to target
    """

    __slots__ = ("source", "target", "cardinality")

    def __init__(
        self,
        source: str,
        target: str,
        cardinality: Union[Cardinality, str] = Cardinality.MANY_TO_ONE,
    ) -> None:
        if source is None:
            raise ValueError("Relationship source cannot be None")
        if target is None:
            raise ValueError("Relationship target cannot be None")

        self.source = str(source)
        self.target = str(target)
        self.cardinality = Cardinality.parse(cardinality)

    @classmethod
    def coerce(cls, data: RelationshipLike) -> Relationship:
        """Build a Relationship from a Relationship, dict, or attribute object."""
        if isinstance(data, Relationship):
            return data
        if isinstance(data, dict):
            source = data.get("from", data.get("source"))
            target = data.get("to", data.get("target"))
            cardinality = data.get("type", data.get("cardinality", Cardinality.MANY_TO_ONE))
        else:
            source = getattr(data, "source", getattr(data, "from_", None))
            target = getattr(data, "target", getattr(data, "to", None))
            cardinality = getattr(
                data, "cardinality", getattr(data, "type", Cardinality.MANY_TO_ONE)
            )
        return cls(source, target, cardinality)

    @property
    def is_self_reference(self) -> bool:
        """True when the relationship points back at its own entity."""
        return self.source == self.target

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Relationship):
            return NotImplemented
        return (self.source, self.target, self.cardinality) == (
            other.source,
            other.target,
            other.cardinality,
        )

    def __hash__(self) -> int:
        return hash((self.source, self.target, self.cardinality))

    def __repr__(self) -> str:
        return f"Relationship({self.source} -{self.cardinality.value}-> {self.target})"


@dataclass(frozen=True)
class Position:
    """Persisted position of an entity on the canvas."""

    x: float
    y: float

    def as_dict(self) -> dict[str, float]:
        """Plain mapping for position stores."""
        return {"x": self.x, "y": self.y}


@dataclass
class SimulationPosition:
    """
    Position with the transient velocity used by the force simulator.

    Never returned from a placer; convert with to_position() first.
    """

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0

    def to_position(self) -> Position:
        """Drop the velocity and return the persisted position."""
        return Position(float(self.x), float(self.y))


def node_id(data: NodeLike) -> str:
    """Extract an entity id from a string, dict, or object."""
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        value = data.get("id", data.get("logical_name"))
    else:
        value = getattr(data, "id", getattr(data, "logical_name", None))
    if value is None:
        raise ValueError(f"Cannot determine entity id from {data!r}")
    return str(value)


def coerce_position(data: PositionLike) -> Position:
    """Build a Position from a Position, (x, y) pair, dict, or attribute object."""
    if isinstance(data, Position):
        return data
    if isinstance(data, dict):
        return Position(float(data["x"]), float(data["y"]))
    if isinstance(data, (tuple, list)):
        return Position(float(data[0]), float(data[1]))
    return Position(float(data.x), float(data.y))


# Type aliases for callbacks
EventCallback = Callable[[Optional[Event]], None]

# Type aliases for Pythonic API
NodeLike = Union[str, dict[str, Any], Any]
"""Input type for entities: ids, dicts with ``id``/``logical_name``, or objects."""

RelationshipLike = Union[Relationship, dict[str, Any], Any]
"""Input type for edges: Relationship objects, dicts, or objects with source/target."""

PositionLike = Union[Position, dict[str, float], tuple[float, float], Any]
"""Input type for prior positions."""

PositionMap = dict[str, Position]
"""Complete mapping from visible entity id to position."""


__all__ = [
    "EventType",
    "Event",
    "Cardinality",
    "LayoutMode",
    "Relationship",
    "Position",
    "SimulationPosition",
    "node_id",
    "coerce_position",
    "EventCallback",
    "NodeLike",
    "RelationshipLike",
    "PositionLike",
    "PositionMap",
]
