"""
Tests for grid layout and incremental grid placement.
"""

import pytest

from erd_layout import EventType, GridLayout, Position, append_to_grid
from erd_layout.basic import grid_columns
from erd_layout.validation import InvalidSpacingError, ValidationError

# =============================================================================
# Test Fixtures
# =============================================================================

CRM_ENTITIES = ["account", "contact", "opportunity", "lead"]


def run_grid(nodes, **kwargs):
    """Run a grid layout and return its positions."""
    layout = GridLayout(nodes=nodes, **kwargs)
    layout.run()
    return layout.positions


# =============================================================================
# GridLayout Tests
# =============================================================================


class TestGridLayoutBasic:
    """Basic functionality tests."""

    def test_layout_runs_without_error(self):
        """Layout should return itself from run()."""
        layout = GridLayout(nodes=CRM_ENTITIES)
        result = layout.run()

        assert result is layout
        assert layout.has_run

    def test_single_node_at_origin(self):
        """A single entity sits exactly at (start_x, start_y)."""
        positions = run_grid(["account"])
        assert positions == {"account": Position(100.0, 80.0)}

    def test_two_by_two_grid(self):
        """Four entities tile into two columns and two rows."""
        positions = run_grid(CRM_ENTITIES)

        assert positions["account"] == Position(100, 80)
        assert positions["contact"] == Position(480, 80)
        assert positions["opportunity"] == Position(100, 400)
        assert positions["lead"] == Position(480, 400)

    def test_three_nodes_spacing(self):
        """With three entities, column and row gaps equal the spacings."""
        positions = run_grid(["account", "contact", "opportunity"])

        assert positions["contact"].x - positions["account"].x == 380
        assert positions["opportunity"].y - positions["account"].y == 320
        assert positions["opportunity"].x == positions["account"].x

    def test_one_entry_per_node(self):
        """The map has exactly one key per visible entity."""
        nodes = [f"entity_{i}" for i in range(10)]
        positions = run_grid(nodes)
        assert set(positions) == set(nodes)

    def test_duplicate_ids_collapse(self):
        """Repeated ids are placed once, at their first occurrence."""
        positions = run_grid(["account", "contact", "account"])
        assert list(positions) == ["account", "contact"]

    def test_empty_graph_is_noop(self):
        """Empty input produces no positions and no events."""
        events = []
        layout = GridLayout(nodes=[], on_start=events.append, on_end=events.append)
        layout.run()

        assert layout.positions == {}
        assert not layout.has_run
        assert events == []

    def test_edges_are_ignored(self):
        """Relationships do not change grid placement."""
        without = run_grid(CRM_ENTITIES)
        with_edges = run_grid(
            CRM_ENTITIES,
            edges=[{"from": "contact", "to": "account", "type": "N:1"}],
        )

        assert without == with_edges

    def test_idempotent(self):
        """Running twice with the same input gives identical output."""
        layout = GridLayout(nodes=[f"e{i}" for i in range(7)])
        first = layout.run().positions
        second = layout.run().positions
        assert first == second

    def test_accepts_entity_dicts(self):
        """Entities may be dicts carrying a logical_name."""
        positions = run_grid([{"logical_name": "account"}, {"id": "contact"}])
        assert set(positions) == {"account", "contact"}


class TestGridLayoutConfiguration:
    """Configuration property tests."""

    def test_custom_spacing(self):
        """Custom origin and spacing are honored."""
        positions = run_grid(
            CRM_ENTITIES, start_x=0, start_y=0, spacing_x=10, spacing_y=20
        )
        assert positions["lead"] == Position(10, 20)

    def test_fixed_columns(self):
        """An explicit column count overrides the square-ish default."""
        positions = run_grid(CRM_ENTITIES, columns=4)
        assert {p.y for p in positions.values()} == {80.0}
        assert positions["lead"].x == 100 + 3 * 380

    def test_properties(self):
        """Properties read back and validate on assignment."""
        layout = GridLayout(spacing_x=200)
        assert layout.spacing_x == 200

        layout.spacing_y = 150
        assert layout.spacing_y == 150

        with pytest.raises(InvalidSpacingError):
            layout.spacing_x = 0

    def test_invalid_columns_raises(self):
        """A column count below one is rejected."""
        with pytest.raises(ValidationError, match="columns"):
            GridLayout(columns=0)

    def test_negative_spacing_raises(self):
        """Negative spacing is rejected at construction."""
        with pytest.raises(InvalidSpacingError, match="spacing_y must be positive"):
            GridLayout(spacing_y=-5)


class TestGridLayoutEvents:
    """Event callback tests."""

    def test_start_and_end_fire(self):
        """Start and end events fire once per run."""
        seen = []
        layout = GridLayout(nodes=CRM_ENTITIES)
        layout.on("start", lambda e: seen.append(e["type"]))
        layout.on(EventType.end, lambda e: seen.append(e["type"]))
        layout.run()

        assert seen == [EventType.start, EventType.end]


class TestGridColumns:
    """Tests for the column-count helper."""

    @pytest.mark.parametrize(
        "count, expected",
        [(0, 1), (1, 1), (2, 2), (3, 2), (4, 2), (5, 3), (9, 3), (10, 4)],
    )
    def test_columns(self, count, expected):
        """Column count is ceil(sqrt(count)), at least 1."""
        assert grid_columns(count) == expected


# =============================================================================
# append_to_grid Tests
# =============================================================================


class TestAppendToGrid:
    """Tests for incremental grid placement."""

    def test_new_nodes_below_existing(self):
        """New entities start one row below the lowest prior entity."""
        prior = {"account": Position(600, 400), "contact": {"x": 200, "y": 700}}
        added = append_to_grid(prior, ["lead", "opportunity"])

        assert added["lead"] == Position(100, 1020)
        assert added["opportunity"] == Position(480, 1020)

    def test_prior_positions_untouched(self):
        """Only new entities appear in the result."""
        prior = {"account": (100, 80)}
        added = append_to_grid(prior, ["account", "contact"])
        assert list(added) == ["contact"]

    def test_no_new_nodes(self):
        """Nothing new to place yields an empty map."""
        assert append_to_grid({"account": (0, 0)}, ["account"]) == {}

    def test_empty_prior_starts_at_spacing(self):
        """Without prior positions the block starts one row below y=0."""
        added = append_to_grid({}, ["account"])
        assert added["account"] == Position(100, 320)

    def test_non_finite_prior_ignored(self):
        """A prior with an infinite or NaN y does not push the block down."""
        prior = {
            "account": (100, float("inf")),
            "lead": (100, float("nan")),
            "contact": (200, 400),
        }
        added = append_to_grid(prior, ["opportunity"])
        assert added["opportunity"] == Position(100, 720)
