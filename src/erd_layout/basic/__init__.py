"""
Basic layout algorithms.

This module provides edge-agnostic placement:
- GridLayout: Square-ish row/column tiling
- append_to_grid: Grid placement of new entities below an existing layout
"""

from .grid import GridLayout, append_to_grid, grid_columns

__all__ = [
    "GridLayout",
    "append_to_grid",
    "grid_columns",
]
