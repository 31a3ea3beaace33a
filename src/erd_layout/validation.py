"""
Input validation utilities for the layout engine.

Provides centralized validation functions for placer configuration
(spacing, canvas width, seed bounds, iteration budget, damping).
Raises descriptive exceptions on invalid configuration; graph input
itself is never rejected.
"""

from __future__ import annotations

import math
from typing import Sequence


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class InvalidSpacingError(ValidationError):
    """Raised when a spacing, level height or canvas width is not positive."""

    pass


class InvalidBoundsError(ValidationError):
    """Raised when a seeding bounding box is empty or malformed."""

    pass


class InvalidLayoutModeError(ValidationError):
    """Raised when a layout mode string names no known mode."""

    pass


class InvalidCardinalityError(ValidationError):
    """Raised when a relationship cardinality is not recognized."""

    pass


def validate_spacing(value: float, name: str = "spacing") -> float:
    """
    Validate a spacing-like distance is a positive finite number.

    Args:
        value: Distance in canvas units
        name: Parameter name used in the error message

    Returns:
        Validated value as float

    Raises:
        InvalidSpacingError: If value is not positive and finite
    """
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidSpacingError(f"{name} must be positive, got {value}")
    return value


def validate_coordinate(value: float, name: str = "coordinate") -> float:
    """
    Validate a coordinate is finite.

    Raises:
        ValidationError: If value is NaN or infinite
    """
    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    return value


def validate_bounds(bounds: Sequence[float]) -> tuple[float, float, float, float]:
    """
    Validate a (min_x, min_y, max_x, max_y) bounding box.

    Args:
        bounds: Four-element sequence

    Returns:
        Validated (min_x, min_y, max_x, max_y) tuple

    Raises:
        InvalidBoundsError: If the box is malformed or empty
    """
    if len(bounds) != 4:
        raise InvalidBoundsError(
            f"Bounds must have 4 elements [min_x, min_y, max_x, max_y], got {len(bounds)}"
        )

    min_x, min_y, max_x, max_y = (float(v) for v in bounds)

    if not all(math.isfinite(v) for v in (min_x, min_y, max_x, max_y)):
        raise InvalidBoundsError(f"Bounds must be finite, got {tuple(bounds)}")
    if min_x >= max_x:
        raise InvalidBoundsError(f"Bounds min_x must be below max_x, got {min_x} >= {max_x}")
    if min_y >= max_y:
        raise InvalidBoundsError(f"Bounds min_y must be below max_y, got {min_y} >= {max_y}")

    return min_x, min_y, max_x, max_y


def validate_iterations(iterations: int) -> int:
    """
    Validate iteration count is positive.

    Args:
        iterations: Number of iterations

    Returns:
        Validated iteration count

    Raises:
        ValidationError: If iterations < 1
    """
    iterations = int(iterations)
    if iterations < 1:
        raise ValidationError(f"iterations must be >= 1, got {iterations}")
    return iterations


def validate_unit_interval(value: float, name: str) -> float:
    """
    Validate a factor lies in [0, 1].

    Raises:
        ValidationError: If value not in [0, 1]
    """
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise ValidationError(f"{name} must be in [0, 1], got {value}")
    return value


__all__ = [
    "ValidationError",
    "InvalidSpacingError",
    "InvalidBoundsError",
    "InvalidLayoutModeError",
    "InvalidCardinalityError",
    "validate_spacing",
    "validate_coordinate",
    "validate_bounds",
    "validate_iterations",
    "validate_unit_interval",
]
