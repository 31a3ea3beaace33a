"""
Tests for the shared types and the visible-graph projection.
"""

from types import SimpleNamespace

import pytest

from erd_layout import (
    Cardinality,
    InvalidCardinalityError,
    InvalidLayoutModeError,
    LayoutMode,
    Position,
    Relationship,
    SchemaGraph,
    SimulationPosition,
)
from erd_layout.types import coerce_position, node_id


class TestCardinality:
    """Tests for cardinality parsing."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1:N", Cardinality.ONE_TO_MANY),
            ("n:1", Cardinality.MANY_TO_ONE),
            (" N:N ", Cardinality.MANY_TO_MANY),
            ("many_to_one", Cardinality.MANY_TO_ONE),
            (Cardinality.ONE_TO_MANY, Cardinality.ONE_TO_MANY),
        ],
    )
    def test_parse(self, text, expected):
        """Values, names and members all parse."""
        assert Cardinality.parse(text) is expected

    def test_unknown_raises(self):
        """Unknown cardinalities are rejected."""
        with pytest.raises(InvalidCardinalityError):
            Cardinality.parse("1:1")


class TestLayoutMode:
    """Tests for layout mode parsing."""

    def test_parse_values(self):
        """Each mode parses from its string value."""
        for mode in LayoutMode:
            assert LayoutMode.parse(mode.value) is mode

    def test_case_insensitive(self):
        """Mode strings are case-insensitive."""
        assert LayoutMode.parse("Force") is LayoutMode.FORCE

    def test_auto_alias(self):
        """"auto" means hierarchical."""
        assert LayoutMode.parse("auto") is LayoutMode.HIERARCHICAL

    def test_unknown_raises(self):
        """Unknown modes are rejected."""
        with pytest.raises(InvalidLayoutModeError, match="radial"):
            LayoutMode.parse("radial")


class TestRelationship:
    """Tests for relationship coercion."""

    def test_from_dict(self):
        """Dicts with from/to/type keys are accepted."""
        rel = Relationship.coerce({"from": "contact", "to": "account", "type": "N:1"})
        assert rel == Relationship("contact", "account", Cardinality.MANY_TO_ONE)

    def test_from_source_target_dict(self):
        """Dicts with source/target/cardinality keys are accepted."""
        rel = Relationship.coerce(
            {"source": "account", "target": "contact", "cardinality": "1:N"}
        )
        assert rel.cardinality is Cardinality.ONE_TO_MANY

    def test_from_object(self):
        """Objects with source/target attributes are accepted."""
        data = SimpleNamespace(source="contact", target="account", cardinality="N:1")
        rel = Relationship.coerce(data)
        assert (rel.source, rel.target) == ("contact", "account")

    def test_default_cardinality(self):
        """A missing cardinality defaults to N:1."""
        rel = Relationship.coerce({"from": "contact", "to": "account"})
        assert rel.cardinality is Cardinality.MANY_TO_ONE

    def test_none_endpoint_raises(self):
        """Relationships need both endpoints."""
        with pytest.raises(ValueError, match="target"):
            Relationship.coerce({"from": "contact"})

    def test_self_reference(self):
        """A relationship to its own entity is a self-reference."""
        assert Relationship("account", "account").is_self_reference
        assert not Relationship("contact", "account").is_self_reference

    def test_hashable(self):
        """Equal relationships hash equally."""
        rels = {Relationship("a", "b", "N:1"), Relationship("a", "b", "n:1")}
        assert len(rels) == 1


class TestPositions:
    """Tests for position records and coercion."""

    @pytest.mark.parametrize(
        "data",
        [Position(1, 2), {"x": 1, "y": 2}, (1, 2), [1, 2], SimpleNamespace(x=1, y=2)],
    )
    def test_coerce_position(self, data):
        """Every supported shape coerces to the same Position."""
        assert coerce_position(data) == Position(1.0, 2.0)

    def test_simulation_position_drops_velocity(self):
        """Converting a simulation position discards velocity."""
        pos = SimulationPosition(3.0, 4.0, vx=1.5, vy=-2.0).to_position()
        assert pos == Position(3.0, 4.0)
        assert pos.as_dict() == {"x": 3.0, "y": 4.0}

    def test_position_is_frozen(self):
        """Positions are immutable."""
        pos = Position(0, 0)
        with pytest.raises(AttributeError):
            pos.x = 5


class TestNodeId:
    """Tests for entity id extraction."""

    def test_accepted_shapes(self):
        """Strings, dicts and objects all yield an id."""
        assert node_id("account") == "account"
        assert node_id({"id": "account"}) == "account"
        assert node_id({"logical_name": "contact"}) == "contact"
        assert node_id(SimpleNamespace(logical_name="lead")) == "lead"

    def test_missing_id_raises(self):
        """An entity without any id is rejected."""
        with pytest.raises(ValueError):
            node_id({"name": "account"})


class TestSchemaGraph:
    """Tests for the visible-graph projection."""

    def test_node_order_and_duplicates(self):
        """Nodes keep first-seen input order."""
        graph = SchemaGraph(["b", "a", "b", "c"])
        assert graph.nodes == ["b", "a", "c"]
        assert graph.index_of("c") == 2
        assert len(graph) == 3
        assert "a" in graph and "z" not in graph

    def test_dangling_edges_skipped(self):
        """Edges with a hidden endpoint are dropped and counted."""
        graph = SchemaGraph(
            ["account", "contact"],
            [
                {"from": "contact", "to": "account", "type": "N:1"},
                {"from": "lead", "to": "account", "type": "N:1"},
            ],
        )
        assert len(graph.edges) == 1
        assert graph.skipped_edges == 1

    def test_from_entities_visible_subset(self):
        """Only selected entities are kept, in entity order."""
        graph = SchemaGraph.from_entities(
            ["account", "contact", "lead"],
            [{"from": "lead", "to": "account", "type": "N:1"}],
            visible={"lead", "account"},
        )
        assert graph.nodes == ["account", "lead"]
        assert graph.link_indices() == [(1, 0)]

    def test_from_entities_all_visible(self):
        """Without a selection every entity is kept."""
        graph = SchemaGraph.from_entities(["account", "contact"], [])
        assert graph.nodes == ["account", "contact"]

    def test_dependency_links(self):
        """N:1 and 1:N both point from referenced to referencing entity."""
        graph = SchemaGraph(
            ["account", "contact", "lead", "list"],
            [
                {"from": "contact", "to": "account", "type": "N:1"},
                {"from": "account", "to": "lead", "type": "1:N"},
                {"from": "contact", "to": "list", "type": "N:N"},
                {"from": "account", "to": "account", "type": "N:1"},
            ],
        )
        assert graph.dependency_links() == [(0, 1), (0, 2)]
        assert graph.dependency_links(include_many_to_many=True) == [(0, 1), (0, 2), (3, 1)]
