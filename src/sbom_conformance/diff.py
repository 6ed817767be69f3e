"""Graph-equivalence diff engine.

Compares two canonical graphs with symmetric set difference so that the
result is insensitive to the collection order a codec happens to emit.
A node whose identifier is shared but whose properties differ is
reported as a removal plus an addition; there is no "modified" bucket.

Public API:
    RootOrder: Whether root element order is significant.
    DiffPolicy: Configuration input for the engine.
    NodeDiff, EdgeDiff, RootElementsDiff: Per-collection sub-reports.
    DiffResult: Full report; empty means the graphs are equivalent.
    diff_graphs: Compute the DiffResult for (golden, candidate).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .graph.types import Edge, Graph, Node


class RootOrder(Enum):
    """How root element sequences are compared."""

    SET = "set"
    ORDERED = "ordered"


@dataclass(frozen=True)
class DiffPolicy:
    """Configuration for :func:`diff_graphs`.

    Attributes:
        root_order: ``RootOrder.SET`` ignores root ordering,
            ``RootOrder.ORDERED`` compares roots position by position.
        ignored_properties: Node property names stripped from both graphs
            before comparison (fields a format is known to drop).
    """

    root_order: RootOrder = RootOrder.SET
    ignored_properties: frozenset[str] = frozenset()


@dataclass
class NodeDiff:
    added: list[Node] = field(default_factory=list)
    removed: list[Node] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.added or self.removed)


@dataclass
class EdgeDiff:
    added: list[Edge] = field(default_factory=list)
    removed: list[Edge] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.added or self.removed)


@dataclass
class RootElementsDiff:
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.added or self.removed)


@dataclass
class DiffResult:
    """Differences between a golden graph and a candidate graph.

    "Added" elements are present in the candidate but not the golden
    graph; "removed" elements are present in golden but not candidate.
    """

    nodes: NodeDiff = field(default_factory=NodeDiff)
    edges: EdgeDiff = field(default_factory=EdgeDiff)
    root_elements: RootElementsDiff = field(default_factory=RootElementsDiff)

    def is_empty(self) -> bool:
        """The conformance predicate: all six sequences are empty."""
        return (
            self.nodes.is_empty()
            and self.edges.is_empty()
            and self.root_elements.is_empty()
        )

    def __bool__(self) -> bool:
        return not self.is_empty()

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-compatible dict."""
        return {
            "nodes": {
                "added": [_node_dict(n) for n in self.nodes.added],
                "removed": [_node_dict(n) for n in self.nodes.removed],
            },
            "edges": {
                "added": [_edge_dict(e) for e in self.edges.added],
                "removed": [_edge_dict(e) for e in self.edges.removed],
            },
            "rootElements": {
                "added": list(self.root_elements.added),
                "removed": list(self.root_elements.removed),
            },
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=False, default=str)

    def summary(self) -> str:
        """One-line count summary, e.g. ``nodes +0/-1, edges +0/-1, roots +0/-0``."""
        return (
            f"nodes +{len(self.nodes.added)}/-{len(self.nodes.removed)}, "
            f"edges +{len(self.edges.added)}/-{len(self.edges.removed)}, "
            f"roots +{len(self.root_elements.added)}/-{len(self.root_elements.removed)}"
        )


def diff_graphs(
    golden: Graph,
    candidate: Graph,
    policy: DiffPolicy | None = None,
) -> DiffResult:
    """Compute the structural diff between *golden* and *candidate*.

    Pure and deterministic: the output does not depend on the storage
    order of either graph's nodes or edges (nor of root elements unless
    the policy makes root order significant).

    Args:
        golden: The reference graph.
        candidate: The graph reconstructed by a round trip.
        policy: Optional comparison policy; defaults to ``DiffPolicy()``.

    Returns:
        A DiffResult; ``is_empty()`` is the conformance verdict.
    """
    policy = policy or DiffPolicy()

    golden_nodes = _node_set(golden, policy.ignored_properties)
    candidate_nodes = _node_set(candidate, policy.ignored_properties)
    golden_edges = set(golden.edges)
    candidate_edges = set(candidate.edges)

    if policy.root_order is RootOrder.ORDERED:
        roots = _ordered_root_diff(golden.root_elements, candidate.root_elements)
    else:
        golden_roots = set(golden.root_elements)
        candidate_roots = set(candidate.root_elements)
        roots = RootElementsDiff(
            added=sorted(candidate_roots - golden_roots),
            removed=sorted(golden_roots - candidate_roots),
        )

    return DiffResult(
        nodes=NodeDiff(
            added=sorted(candidate_nodes - golden_nodes, key=_node_sort_key),
            removed=sorted(golden_nodes - candidate_nodes, key=_node_sort_key),
        ),
        edges=EdgeDiff(
            added=sorted(candidate_edges - golden_edges, key=Edge.as_tuple),
            removed=sorted(golden_edges - candidate_edges, key=Edge.as_tuple),
        ),
        root_elements=roots,
    )


# ── private helpers ───────────────────────────────────────────


def _node_set(graph: Graph, ignored: frozenset[str]) -> set[Node]:
    if not ignored:
        return set(graph.nodes)
    return {node.without(ignored) for node in graph.nodes}


def _node_sort_key(node: Node) -> tuple[str, str]:
    return (node.node_id, node.signature())


def _ordered_root_diff(
    golden: tuple[str, ...],
    candidate: tuple[str, ...],
) -> RootElementsDiff:
    """Compare root sequences position by position."""
    result = RootElementsDiff()
    for idx in range(max(len(golden), len(candidate))):
        g = golden[idx] if idx < len(golden) else None
        c = candidate[idx] if idx < len(candidate) else None
        if g == c:
            continue
        if g is not None:
            result.removed.append(g)
        if c is not None:
            result.added.append(c)
    return result


def _node_dict(node: Node) -> dict[str, Any]:
    return {"id": node.node_id, "properties": node.properties}


def _edge_dict(edge: Edge) -> dict[str, str]:
    return {"from": edge.source_id, "to": edge.target_id, "kind": edge.kind}


__all__ = [
    "RootOrder",
    "DiffPolicy",
    "NodeDiff",
    "EdgeDiff",
    "RootElementsDiff",
    "DiffResult",
    "diff_graphs",
]
