"""
Read-only graph model for layout.

SchemaGraph projects entities and relationships onto the visible subset:
nodes keep their input order, and relationships whose endpoints are not both
visible are dropped. Placers address nodes by index into this projection.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from .types import (
    Cardinality,
    NodeLike,
    Relationship,
    RelationshipLike,
    node_id,
)


class SchemaGraph:
    """
    Visible entities and the relationships between them.

    Example:
        graph = SchemaGraph(
            ["account", "contact"],
            [{"from": "contact", "to": "account", "type": "N:1"}],
        )
        graph.dependency_links()  # [(0, 1)]: account above contact
    """

    def __init__(
        self,
        nodes: Iterable[NodeLike] = (),
        edges: Iterable[RelationshipLike] = (),
    ) -> None:
        # dict.fromkeys drops duplicate ids but keeps first-seen order
        self._nodes: list[str] = list(dict.fromkeys(node_id(n) for n in nodes))
        self._index: dict[str, int] = {name: i for i, name in enumerate(self._nodes)}
        self._edges: list[Relationship] = []
        self._skipped: int = 0

        for edge_data in edges:
            edge = Relationship.coerce(edge_data)
            if edge.source in self._index and edge.target in self._index:
                self._edges.append(edge)
            else:
                self._skipped += 1

    @classmethod
    def from_entities(
        cls,
        entities: Iterable[NodeLike],
        relationships: Iterable[RelationshipLike],
        visible: Optional[Iterable[str]] = None,
    ) -> SchemaGraph:
        """
        Restrict a full schema to the visible (selected) entities.

        Args:
            entities: All known entities, in display order
            relationships: All known relationships
            visible: Ids of the selected entities. None keeps every entity.

        Returns:
            Graph over the visible entities only, in entity order.
        """
        ids = [node_id(e) for e in entities]
        if visible is not None:
            selected = set(visible)
            ids = [i for i in ids if i in selected]
        return cls(ids, relationships)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> list[str]:
        """Visible entity ids in input order."""
        return list(self._nodes)

    @property
    def edges(self) -> list[Relationship]:
        """Relationships with both endpoints visible."""
        return list(self._edges)

    @property
    def skipped_edges(self) -> int:
        """Number of input relationships dropped for a missing endpoint."""
        return self._skipped

    def index_of(self, name: str) -> int:
        """Index of an entity id in node order."""
        return self._index[name]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return f"SchemaGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"

    # -------------------------------------------------------------------------
    # Index views
    # -------------------------------------------------------------------------

    def link_indices(self) -> list[tuple[int, int]]:
        """(source, target) index pairs of every visible edge."""
        return [(self._index[e.source], self._index[e.target]) for e in self._edges]

    def dependency_links(self, include_many_to_many: bool = False) -> list[tuple[int, int]]:
        """
        Directed (parent, child) index pairs where child depends on parent.

        An N:1 edge makes its source depend on its target; a 1:N edge is the
        mirror image. N:N edges are ignored unless include_many_to_many is
        set, in which case they are read like N:1. Self-references never
        produce a dependency.
        """
        links: list[tuple[int, int]] = []
        for edge in self._edges:
            if edge.is_self_reference:
                continue
            src = self._index[edge.source]
            tgt = self._index[edge.target]
            if edge.cardinality is Cardinality.MANY_TO_ONE:
                links.append((tgt, src))
            elif edge.cardinality is Cardinality.ONE_TO_MANY:
                links.append((src, tgt))
            elif include_many_to_many:
                links.append((tgt, src))
        return links


__all__ = ["SchemaGraph"]
