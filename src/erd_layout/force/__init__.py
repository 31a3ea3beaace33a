"""
Force-directed layout algorithms.

This module provides the physics-based placer:
- ForceLayout: Damped spring-and-charge simulation with a fixed tick budget
"""

from .simulation import ForceLayout

__all__ = ["ForceLayout"]
