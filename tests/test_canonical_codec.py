"""Tests for the canonical JSON codec."""

from __future__ import annotations

import io
import json

import pytest

from sbom_conformance import DecodeError, Graph, diff_graphs
from sbom_conformance.formats import CANONICAL_JSON, CanonicalJSONAdapter


@pytest.fixture
def adapter():
    return CanonicalJSONAdapter()


class TestCanonicalEncode:
    def test_document_layout(self, adapter, ab_graph):
        document = json.loads(adapter.encode(ab_graph, CANONICAL_JSON))
        assert [n["id"] for n in document["nodes"]] == ["A", "B"]
        assert document["edges"] == [{"from": "A", "to": "B", "kind": "depends-on"}]
        assert document["rootElements"] == ["A"]

    def test_metadata_written(self, adapter):
        graph = Graph.build([], metadata={"name": "doc"})
        document = json.loads(adapter.encode(graph, CANONICAL_JSON))
        assert document["metadata"] == {"name": "doc"}


class TestCanonicalDecode:
    def test_identity_round_trip(self, adapter, sbom_graph):
        decoded = adapter.decode(adapter.encode(sbom_graph, CANONICAL_JSON), CANONICAL_JSON)
        assert decoded == sbom_graph
        assert diff_graphs(sbom_graph, decoded).is_empty()

    def test_decode_stream(self, adapter, ab_graph):
        stream = io.BytesIO(adapter.encode(ab_graph, CANONICAL_JSON))
        assert adapter.decode(stream, CANONICAL_JSON) == ab_graph

    def test_empty_document(self, adapter):
        assert adapter.decode(b"{}", CANONICAL_JSON).is_empty()

    def test_invalid_json(self, adapter):
        with pytest.raises(DecodeError, match="invalid JSON"):
            adapter.decode(b"{not json", CANONICAL_JSON)

    def test_not_an_object(self, adapter):
        with pytest.raises(DecodeError):
            adapter.decode(b"[]", CANONICAL_JSON)

    def test_node_without_id(self, adapter):
        with pytest.raises(DecodeError, match="malformed"):
            adapter.decode(b'{"nodes": [{"properties": {}}]}', CANONICAL_JSON)

    def test_dangling_edge(self, adapter):
        payload = {
            "nodes": [{"id": "A"}],
            "edges": [{"from": "A", "to": "B", "kind": "depends-on"}],
        }
        with pytest.raises(DecodeError, match="unknown node"):
            adapter.decode(json.dumps(payload).encode(), CANONICAL_JSON)

    def test_duplicate_roots_collapse(self, adapter):
        payload = {"nodes": [{"id": "A"}], "rootElements": ["A", "A"]}
        graph = adapter.decode(json.dumps(payload).encode(), CANONICAL_JSON)
        assert graph.root_elements == ("A",)
