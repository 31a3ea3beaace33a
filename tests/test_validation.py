"""
Tests for input validation.
"""

import math

import pytest

from erd_layout import GridLayout, LeveledLayout
from erd_layout.validation import (
    InvalidBoundsError,
    InvalidSpacingError,
    ValidationError,
    validate_bounds,
    validate_coordinate,
    validate_iterations,
    validate_spacing,
    validate_unit_interval,
)


class TestSpacingValidation:
    """Tests for spacing validation."""

    def test_valid_spacing(self):
        """Positive spacing should pass and be returned as float."""
        assert validate_spacing(380) == 380.0
        assert isinstance(validate_spacing(380), float)

    def test_zero_spacing_raises(self):
        """Zero spacing should raise."""
        with pytest.raises(InvalidSpacingError, match="must be positive"):
            validate_spacing(0)

    def test_negative_spacing_raises(self):
        """Negative spacing should raise."""
        with pytest.raises(InvalidSpacingError):
            validate_spacing(-1)

    def test_nan_spacing_raises(self):
        """NaN spacing should raise."""
        with pytest.raises(InvalidSpacingError):
            validate_spacing(math.nan)

    def test_name_in_message(self):
        """The parameter name appears in the message."""
        with pytest.raises(InvalidSpacingError, match="canvas_width"):
            validate_spacing(0, "canvas_width")

    def test_spacing_error_is_value_error(self):
        """Validation errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            validate_spacing(0)


class TestCoordinateValidation:
    """Tests for coordinate validation."""

    def test_negative_coordinate_allowed(self):
        """Coordinates may be negative."""
        assert validate_coordinate(-50) == -50.0

    def test_infinite_coordinate_raises(self):
        """Infinite coordinates should raise."""
        with pytest.raises(ValidationError, match="finite"):
            validate_coordinate(math.inf, "start_x")


class TestBoundsValidation:
    """Tests for bounding box validation."""

    def test_valid_bounds(self):
        """Valid box should pass."""
        assert validate_bounds([100, 100, 900, 700]) == (100.0, 100.0, 900.0, 700.0)

    def test_wrong_length_raises(self):
        """Boxes need exactly four values."""
        with pytest.raises(InvalidBoundsError, match="4 elements"):
            validate_bounds([0, 0, 1])

    def test_empty_width_raises(self):
        """min_x must be below max_x."""
        with pytest.raises(InvalidBoundsError, match="min_x"):
            validate_bounds([10, 0, 10, 5])

    def test_empty_height_raises(self):
        """min_y must be below max_y."""
        with pytest.raises(InvalidBoundsError, match="min_y"):
            validate_bounds([0, 8, 10, 5])


class TestIterationsValidation:
    """Tests for iterations validation."""

    def test_valid_iterations(self):
        """Positive iterations should pass."""
        assert validate_iterations(100) == 100

    def test_minimum_iterations(self):
        """Iterations of 1 should pass."""
        assert validate_iterations(1) == 1

    def test_zero_iterations_raises(self):
        """Zero iterations should raise."""
        with pytest.raises(ValidationError, match="iterations must be >= 1"):
            validate_iterations(0)

    def test_negative_iterations_raises(self):
        """Negative iterations should raise."""
        with pytest.raises(ValidationError):
            validate_iterations(-10)


class TestUnitIntervalValidation:
    """Tests for [0, 1] factor validation."""

    def test_valid_factor(self):
        """Values inside the interval should pass."""
        assert validate_unit_interval(0.9, "damping") == 0.9

    def test_bounds_inclusive(self):
        """Both ends of the interval are allowed."""
        assert validate_unit_interval(0, "damping") == 0.0
        assert validate_unit_interval(1, "damping") == 1.0

    def test_negative_raises(self):
        """Negative values should raise."""
        with pytest.raises(ValidationError, match="damping"):
            validate_unit_interval(-0.1, "damping")

    def test_greater_than_one_raises(self):
        """Values above one should raise."""
        with pytest.raises(ValidationError):
            validate_unit_interval(1.1, "damping")


class TestLayoutValidation:
    """Tests for validation through layout constructors."""

    def test_grid_rejects_zero_spacing(self):
        """GridLayout should reject zero spacing."""
        with pytest.raises(InvalidSpacingError):
            GridLayout(spacing_x=0)

    def test_leveled_rejects_bad_canvas(self):
        """LeveledLayout should reject a non-positive canvas width."""
        with pytest.raises(InvalidSpacingError, match="canvas_width"):
            LeveledLayout(canvas_width=-100)

    def test_graph_input_never_rejected(self):
        """Dangling relationships are dropped rather than raising."""
        layout = GridLayout(
            nodes=["account"],
            edges=[{"from": "account", "to": "missing", "type": "N:1"}],
        )
        assert layout.edges == []
        assert layout.graph.skipped_edges == 1
