"""Canonical graph model for SBOM documents.

Public API:
    Node: Immutable component node.
    Edge: Immutable (from, to, kind) relationship.
    Graph: Validated node list with ordered root elements.
    FormatAdapter: Protocol all format codecs implement.
"""

from __future__ import annotations

from .protocol import FormatAdapter
from .types import CONTAINS, DEPENDS_ON, Edge, Graph, Node, property_signature

__all__ = [
    "CONTAINS",
    "DEPENDS_ON",
    "Node",
    "Edge",
    "Graph",
    "FormatAdapter",
    "property_signature",
]
