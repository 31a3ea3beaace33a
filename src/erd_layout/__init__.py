"""
erd-layout: Layout engine for entity-relationship diagrams.

This package computes canvas positions for the visible entities of a schema
diagram.

Available algorithms:
- basic: Grid tiling (and incremental placement of new entities)
- hierarchical: Dependency levels derived from relationship cardinality
- force: Spring-and-charge force-directed simulation

The orchestrator picks one of them from a layout mode and decides when
recomputation is needed.
"""

__version__ = "0.1.0"

# Base classes for building layouts
from .base import (
    BaseLayout,
    IterativeLayout,
    StaticLayout,
)

# Grid layouts
from .basic import GridLayout, append_to_grid

# Force-directed layouts
from .force import ForceLayout

# Graph model
from .graph import SchemaGraph

# Hierarchical layouts
from .hierarchical import DependencyCycleWarning, LeveledLayout

# Orchestration
from .orchestrator import LayoutController, LayoutOrchestrator

# Preprocessing utilities
from .preprocessing import (
    assign_levels,
    detect_cycle,
    group_by_level,
    has_cycle,
    remove_cycles,
    topological_sort,
)
from .types import (
    Cardinality,
    Event,
    EventType,
    LayoutMode,
    NodeLike,
    Position,
    PositionMap,
    Relationship,
    RelationshipLike,
    SimulationPosition,
)

# Validation utilities
from .validation import (
    InvalidBoundsError,
    InvalidCardinalityError,
    InvalidLayoutModeError,
    InvalidSpacingError,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "Cardinality",
    "LayoutMode",
    "Relationship",
    "Position",
    "SimulationPosition",
    "PositionMap",
    "EventType",
    "Event",
    # Type aliases for API
    "NodeLike",
    "RelationshipLike",
    # Graph model
    "SchemaGraph",
    # Base classes
    "BaseLayout",
    "IterativeLayout",
    "StaticLayout",
    # Layouts
    "GridLayout",
    "append_to_grid",
    "LeveledLayout",
    "DependencyCycleWarning",
    "ForceLayout",
    # Orchestration
    "LayoutOrchestrator",
    "LayoutController",
    # Preprocessing
    "detect_cycle",
    "has_cycle",
    "remove_cycles",
    "topological_sort",
    "assign_levels",
    "group_by_level",
    # Validation
    "ValidationError",
    "InvalidSpacingError",
    "InvalidBoundsError",
    "InvalidLayoutModeError",
    "InvalidCardinalityError",
]
