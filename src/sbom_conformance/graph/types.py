"""Canonical graph data structures for SBOM documents.

Public API:
    Node: Immutable component with a stable identifier and properties.
    Edge: Immutable directed relationship between two node identifiers.
    Graph: Immutable node list with edges and ordered root elements.
    property_signature: Deterministic text form of a property mapping.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from ..exceptions import InvalidGraphError

DEPENDS_ON = "depends-on"
CONTAINS = "contains"


def property_signature(properties: dict[str, Any]) -> str:
    """Render *properties* as canonical JSON (sorted keys, compact)."""
    return json.dumps(properties, sort_keys=True, separators=(",", ":"), default=str)


@dataclass(frozen=True, eq=False)
class Node:
    """An immutable node in the SBOM graph.

    Two nodes are equal iff both the identifier and the property
    signature match; property order is irrelevant, but ``1``, ``1.0``
    and ``True`` are distinct values.

    Attributes:
        node_id: Identifier, unique within a graph.
        properties: Semantic properties (name, version, type, hashes, ...).
    """

    node_id: str
    properties: dict[str, Any] = field(default_factory=dict)

    def signature(self) -> str:
        return property_signature(self.properties)

    def without(self, names: Iterable[str]) -> Node:
        """Return a copy with the named properties removed."""
        names = set(names)
        if not names & self.properties.keys():
            return self
        return Node(
            node_id=self.node_id,
            properties={k: v for k, v in self.properties.items() if k not in names},
        )

    def _key(self) -> tuple[str, str]:
        return (self.node_id, self.signature())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


@dataclass(frozen=True)
class Edge:
    """A directed relationship, compared on the (from, to, kind) triple.

    Attributes:
        source_id: Node ID of the source (tail) node.
        target_id: Node ID of the target (head) node.
        kind: Relationship kind (e.g. "depends-on", "contains").
    """

    source_id: str
    target_id: str
    kind: str

    def as_tuple(self) -> tuple[str, str, str]:
        return (self.source_id, self.target_id, self.kind)


@dataclass(frozen=True)
class Graph:
    """The node list of an SBOM document.

    Use :meth:`build` to construct a validated graph.  ``metadata``
    carries document-level data (name, serial, timestamp) and takes no
    part in equality or diffing.

    Attributes:
        nodes: Components in storage order.
        edges: Relationships in storage order.
        root_elements: Identifiers of the top-level components, ordered.
        metadata: Document-level data that codecs may carry along.
    """

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    root_elements: tuple[str, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def build(
        cls,
        nodes: Iterable[Node],
        edges: Iterable[Edge] = (),
        root_elements: Iterable[str] = (),
        metadata: dict[str, Any] | None = None,
    ) -> Graph:
        """Create a graph and check its invariants.

        Raises:
            InvalidGraphError: If a node ID is duplicated, or an edge
                endpoint or root element references a missing node.
        """
        graph = cls(
            nodes=tuple(nodes),
            edges=tuple(edges),
            root_elements=tuple(root_elements),
            metadata=dict(metadata or {}),
        )
        graph.validate()
        return graph

    def validate(self) -> None:
        seen: set[str] = set()
        for node in self.nodes:
            if node.node_id in seen:
                raise InvalidGraphError(f"Duplicate node id: {node.node_id!r}")
            seen.add(node.node_id)

        for edge in self.edges:
            for endpoint in (edge.source_id, edge.target_id):
                if endpoint not in seen:
                    raise InvalidGraphError(
                        f"Edge {edge.source_id!r} -[{edge.kind}]-> {edge.target_id!r} "
                        f"references unknown node {endpoint!r}"
                    )

        for root_id in self.root_elements:
            if root_id not in seen:
                raise InvalidGraphError(f"Root element references unknown node {root_id!r}")

    # ── lookups ───────────────────────────────────────────────

    def node_ids(self) -> list[str]:
        return [n.node_id for n in self.nodes]

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def edges_from(self, node_id: str, kind: str | None = None) -> Iterator[Edge]:
        """Yield outgoing edges of *node_id*, optionally of one kind."""
        for edge in self.edges:
            if edge.source_id == node_id and (kind is None or edge.kind == kind):
                yield edge

    def is_empty(self) -> bool:
        return not (self.nodes or self.edges or self.root_elements)


__all__ = [
    "CONTAINS",
    "DEPENDS_ON",
    "Edge",
    "Graph",
    "Node",
    "property_signature",
]
