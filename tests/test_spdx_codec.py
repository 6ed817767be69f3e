"""Tests for the SPDX JSON codec.

Test categories:
- TestSPDXEncode: document structure and field mapping
- TestSPDXDecode: roots, relationships, files, NOASSERTION handling
- TestSPDXRoundTrip: 2.3 is lossless for the vocabulary, 2.2 drops types
"""

from __future__ import annotations

import json

import pytest

from sbom_conformance import DecodeError, DiffPolicy, Edge, Graph, Node, diff_graphs
from sbom_conformance.formats import SPDX_JSON_22, SPDX_JSON_23, SPDXJSONAdapter
from sbom_conformance.formats.spdx import edge_kind, relationship_type


@pytest.fixture
def adapter():
    return SPDXJSONAdapter()


def _document(**overrides):
    document = {
        "spdxVersion": "SPDX-2.3",
        "SPDXID": "SPDXRef-DOCUMENT",
        "name": "doc",
        "packages": [
            {"SPDXID": "SPDXRef-a", "name": "a", "downloadLocation": "NOASSERTION"},
            {"SPDXID": "SPDXRef-b", "name": "b", "downloadLocation": "NOASSERTION"},
        ],
        "relationships": [],
    }
    document.update(overrides)
    return json.dumps(document).encode()


class TestRelationshipNames:
    @pytest.mark.parametrize(
        "kind, rel_type",
        [
            ("depends-on", "DEPENDS_ON"),
            ("contains", "CONTAINS"),
            ("dev-dependency-of", "DEV_DEPENDENCY_OF"),
        ],
    )
    def test_mapping(self, kind, rel_type):
        assert relationship_type(kind) == rel_type
        assert edge_kind(rel_type) == kind


class TestSPDXEncode:
    def test_header(self, adapter, sbom_graph):
        document = json.loads(adapter.encode(sbom_graph, SPDX_JSON_23))
        assert document["spdxVersion"] == "SPDX-2.3"
        assert document["SPDXID"] == "SPDXRef-DOCUMENT"
        assert document["dataLicense"] == "CC0-1.0"
        assert document["documentDescribes"] == ["SPDXRef-app"]

    def test_package_fields(self, adapter, sbom_graph):
        document = json.loads(adapter.encode(sbom_graph, SPDX_JSON_23))
        app = document["packages"][0]
        assert app["SPDXID"] == "SPDXRef-app"
        assert app["versionInfo"] == "3.2.1"
        assert app["supplier"] == "Organization: Example Inc"
        assert app["licenseDeclared"] == "Apache-2.0"
        assert app["copyrightText"] == "NOASSERTION"
        assert app["primaryPackagePurpose"] == "APPLICATION"
        assert app["checksums"] == [{"algorithm": "SHA256", "checksumValue": "aa" * 32}]
        assert app["externalRefs"][0]["referenceLocator"] == "pkg:generic/app@3.2.1"

    def test_relationships(self, adapter, sbom_graph):
        document = json.loads(adapter.encode(sbom_graph, SPDX_JSON_23))
        triples = [
            (r["spdxElementId"], r["relationshipType"], r["relatedSpdxElement"])
            for r in document["relationships"]
        ]
        assert triples == [
            ("SPDXRef-DOCUMENT", "DESCRIBES", "SPDXRef-app"),
            ("SPDXRef-app", "CONTAINS", "SPDXRef-core"),
            ("SPDXRef-app", "DEPENDS_ON", "SPDXRef-json"),
            ("SPDXRef-core", "DEPENDS_ON", "SPDXRef-json"),
        ]

    def test_spdx_22_has_no_purpose_or_describes_relationship(self, adapter, sbom_graph):
        document = json.loads(adapter.encode(sbom_graph, SPDX_JSON_22))
        assert all("primaryPackagePurpose" not in p for p in document["packages"])
        assert all(r["relationshipType"] != "DESCRIBES" for r in document["relationships"])
        assert document["documentDescribes"] == ["SPDXRef-app"]

    def test_invalid_ids_are_rewritten(self, adapter):
        graph = Graph.build(
            [Node("pkg:npm/a@1", {"name": "a"}), Node("pkg/npm/a@1", {"name": "a2"})],
            root_elements=["pkg:npm/a@1"],
        )
        document = json.loads(adapter.encode(graph, SPDX_JSON_23))
        ids = [p["SPDXID"] for p in document["packages"]]
        assert ids == ["SPDXRef-pkg-npm-a-1", "SPDXRef-pkg-npm-a-1-2"]
        assert document["documentDescribes"] == ["SPDXRef-pkg-npm-a-1"]

    def test_unknown_type_becomes_other(self, adapter):
        graph = Graph.build([Node("SPDXRef-x", {"name": "x", "type": "platform"})])
        document = json.loads(adapter.encode(graph, SPDX_JSON_23))
        assert document["packages"][0]["primaryPackagePurpose"] == "OTHER"


class TestSPDXDecode:
    def test_source_fixture_matches_golden(self, adapter, testdata_dir, fixture_source):
        path = testdata_dir / "spdx" / "2.3" / "json" / "curl.spdx.json"
        decoded = adapter.decode(path.read_bytes(), SPDX_JSON_23)
        golden = fixture_source.load("spdx/2.3/json/curl.spdx.json")
        assert diff_graphs(golden, decoded).is_empty()

    def test_roots_from_describes_relationship(self, adapter):
        data = _document(
            relationships=[
                {
                    "spdxElementId": "SPDXRef-DOCUMENT",
                    "relationshipType": "DESCRIBES",
                    "relatedSpdxElement": "SPDXRef-b",
                }
            ]
        )
        assert adapter.decode(data, SPDX_JSON_23).root_elements == ("SPDXRef-b",)

    def test_roots_from_described_by(self, adapter):
        data = _document(
            relationships=[
                {
                    "spdxElementId": "SPDXRef-a",
                    "relationshipType": "DESCRIBED_BY",
                    "relatedSpdxElement": "SPDXRef-DOCUMENT",
                }
            ]
        )
        assert adapter.decode(data, SPDX_JSON_23).root_elements == ("SPDXRef-a",)

    def test_roots_deduplicated(self, adapter):
        data = _document(
            documentDescribes=["SPDXRef-a"],
            relationships=[
                {
                    "spdxElementId": "SPDXRef-DOCUMENT",
                    "relationshipType": "DESCRIBES",
                    "relatedSpdxElement": "SPDXRef-a",
                }
            ],
        )
        assert adapter.decode(data, SPDX_JSON_23).root_elements == ("SPDXRef-a",)

    def test_relationship_to_external_element_skipped(self, adapter):
        data = _document(
            relationships=[
                {
                    "spdxElementId": "SPDXRef-a",
                    "relationshipType": "DEPENDS_ON",
                    "relatedSpdxElement": "DocumentRef-other:SPDXRef-z",
                },
                {
                    "spdxElementId": "SPDXRef-a",
                    "relationshipType": "DEPENDS_ON",
                    "relatedSpdxElement": "SPDXRef-b",
                },
            ]
        )
        graph = adapter.decode(data, SPDX_JSON_23)
        assert graph.edges == (Edge("SPDXRef-a", "SPDXRef-b", "depends-on"),)

    def test_noassertion_values_are_absent(self, adapter):
        data = _document(
            packages=[
                {
                    "SPDXID": "SPDXRef-a",
                    "name": "a",
                    "supplier": "NOASSERTION",
                    "licenseConcluded": "NOASSERTION",
                    "licenseDeclared": "NONE",
                    "copyrightText": "NOASSERTION",
                }
            ]
        )
        assert adapter.decode(data, SPDX_JSON_23).get_node("SPDXRef-a").properties == {
            "name": "a"
        }

    def test_person_supplier(self, adapter):
        data = _document(
            packages=[{"SPDXID": "SPDXRef-a", "name": "a", "supplier": "Person: Jane Doe"}]
        )
        node = adapter.decode(data, SPDX_JSON_23).get_node("SPDXRef-a")
        assert node.properties["supplier"] == "Jane Doe"

    def test_files_become_nodes(self, adapter):
        data = _document(
            files=[
                {
                    "SPDXID": "SPDXRef-File-main",
                    "fileName": "./src/main.c",
                    "checksums": [{"algorithm": "SHA1", "checksumValue": "ab" * 20}],
                    "licenseConcluded": "MIT",
                }
            ],
            relationships=[
                {
                    "spdxElementId": "SPDXRef-a",
                    "relationshipType": "CONTAINS",
                    "relatedSpdxElement": "SPDXRef-File-main",
                }
            ],
        )
        graph = adapter.decode(data, SPDX_JSON_23)
        assert graph.get_node("SPDXRef-File-main") == Node(
            "SPDXRef-File-main",
            {
                "type": "file",
                "name": "./src/main.c",
                "license": "MIT",
                "hashes": {"SHA-1": "ab" * 20},
            },
        )
        assert Edge("SPDXRef-a", "SPDXRef-File-main", "contains") in graph.edges

    def test_metadata(self, adapter, testdata_dir):
        path = testdata_dir / "spdx" / "2.3" / "json" / "curl.spdx.json"
        graph = adapter.decode(path.read_bytes(), SPDX_JSON_23)
        assert graph.metadata["name"] == "curl"
        assert graph.metadata["created"] == "2023-10-11T07:00:00Z"

    def test_not_spdx(self, adapter):
        with pytest.raises(DecodeError, match="not an SPDX document"):
            adapter.decode(b'{"bomFormat": "CycloneDX"}', SPDX_JSON_23)

    def test_package_without_spdxid(self, adapter):
        with pytest.raises(DecodeError, match="malformed"):
            adapter.decode(_document(packages=[{"name": "a"}]), SPDX_JSON_23)


class TestSPDXRoundTrip:
    def test_lossless_graph_23(self, adapter, sbom_graph):
        decoded = adapter.decode(adapter.encode(sbom_graph, SPDX_JSON_23), SPDX_JSON_23)
        assert diff_graphs(sbom_graph, decoded).is_empty()

    def test_any_edge_kind_survives(self, adapter):
        graph = Graph.build(
            [Node("SPDXRef-A", {"name": "a"}), Node("SPDXRef-B", {"name": "b"})],
            [Edge("SPDXRef-B", "SPDXRef-A", "dev-dependency-of")],
            ["SPDXRef-A", "SPDXRef-B"],
        )
        decoded = adapter.decode(adapter.encode(graph, SPDX_JSON_23), SPDX_JSON_23)
        assert diff_graphs(graph, decoded).is_empty()

    def test_spdx_22_drops_types(self, adapter, sbom_graph):
        decoded = adapter.decode(adapter.encode(sbom_graph, SPDX_JSON_22), SPDX_JSON_22)
        result = diff_graphs(sbom_graph, decoded)
        assert len(result.nodes.removed) == 3
        assert len(result.nodes.added) == 3
        assert result.edges.is_empty()
        assert result.root_elements.is_empty()

    def test_spdx_22_with_ignored_type(self, adapter, sbom_graph):
        decoded = adapter.decode(adapter.encode(sbom_graph, SPDX_JSON_22), SPDX_JSON_22)
        policy = DiffPolicy(ignored_properties=frozenset({"type"}))
        assert diff_graphs(sbom_graph, decoded, policy).is_empty()

    def test_extra_properties_dropped(self, adapter):
        graph = Graph.build([Node("SPDXRef-a", {"name": "a", "foundBy": "scanner"})])
        decoded = adapter.decode(adapter.encode(graph, SPDX_JSON_23), SPDX_JSON_23)
        assert decoded.get_node("SPDXRef-a").properties == {"name": "a"}
