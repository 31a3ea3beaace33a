"""
Hierarchical layout algorithms.

This module provides dependency-driven placement:
- LeveledLayout: Auto-arrange entities in levels by relationship cardinality
"""

from .leveled import DependencyCycleWarning, LeveledLayout

__all__ = [
    "LeveledLayout",
    "DependencyCycleWarning",
]
