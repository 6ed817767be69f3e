"""CanonicalJSONAdapter -- lossless JSON rendering of the canonical graph.

Golden fixtures are stored in this format.  The document layout is::

    {
      "metadata": {...},
      "nodes": [{"id": "...", "properties": {...}}],
      "edges": [{"from": "...", "to": "...", "kind": "..."}],
      "rootElements": ["..."]
    }

Public API:
    CanonicalJSONAdapter: FormatAdapter for CANONICAL_JSON.
"""

from __future__ import annotations

from typing import Any, BinaryIO

from ..exceptions import DecodeError
from ..graph.types import Edge, Graph, Node
from ._codec import assemble, check_format, dump_json, load_json
from .descriptor import CANONICAL_JSON, FormatDescriptor


class CanonicalJSONAdapter:
    """Lossless canonical JSON codec."""

    @property
    def formats(self) -> tuple[FormatDescriptor, ...]:
        return (CANONICAL_JSON,)

    def encode(self, graph: Graph, fmt: FormatDescriptor = CANONICAL_JSON) -> bytes:
        check_format(fmt, self.formats)
        return dump_json(self.to_dict(graph))

    def decode(
        self, data: bytes | BinaryIO, fmt: FormatDescriptor = CANONICAL_JSON
    ) -> Graph:
        check_format(fmt, self.formats)
        return self.from_dict(load_json(data, fmt), fmt)

    # ── dict conversion ───────────────────────────────────────

    @staticmethod
    def to_dict(graph: Graph) -> dict[str, Any]:
        return {
            "metadata": dict(graph.metadata),
            "nodes": [
                {"id": n.node_id, "properties": dict(n.properties)} for n in graph.nodes
            ],
            "edges": [
                {"from": e.source_id, "to": e.target_id, "kind": e.kind}
                for e in graph.edges
            ],
            "rootElements": list(graph.root_elements),
        }

    @staticmethod
    def from_dict(
        document: Any, fmt: FormatDescriptor = CANONICAL_JSON
    ) -> Graph:
        if not isinstance(document, dict):
            raise DecodeError("document must be a JSON object", dest_format=fmt)
        try:
            nodes = [
                Node(node_id=str(n["id"]), properties=dict(n.get("properties") or {}))
                for n in document.get("nodes", [])
            ]
            edges = [
                Edge(source_id=str(e["from"]), target_id=str(e["to"]), kind=str(e["kind"]))
                for e in document.get("edges", [])
            ]
            roots = [str(r) for r in document.get("rootElements", [])]
            metadata = dict(document.get("metadata") or {})
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DecodeError(f"malformed canonical document: {e!r}", dest_format=fmt) from e
        return assemble(nodes, edges, roots, metadata, fmt)


__all__ = ["CanonicalJSONAdapter"]
