"""Pytest configuration and fixtures for sbom-conformance-lib tests."""

from pathlib import Path

import pytest

from sbom_conformance import (
    Edge,
    EvidenceSink,
    GoldenFixtureSource,
    Graph,
    Node,
    create_default_registry,
)

TESTDATA = Path(__file__).parent / "testdata"


@pytest.fixture(autouse=True)
def isolated_evidence(tmp_path, monkeypatch):
    """Run each test from its own temporary directory.

    The default evidence root is relative (``.tmp/diff``), so this keeps
    evidence written by one test out of the source tree and out of
    other tests.
    """
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def testdata_dir():
    return TESTDATA


@pytest.fixture
def registry():
    """A fresh registry with every built-in adapter."""
    return create_default_registry()


@pytest.fixture
def fixture_source(registry):
    return GoldenFixtureSource(TESTDATA, registry)


@pytest.fixture
def evidence_sink(tmp_path):
    return EvidenceSink(tmp_path / "evidence")


@pytest.fixture
def ab_graph():
    """Nodes {A, B}, edge A -depends-on-> B, root A."""
    return Graph.build(
        nodes=[
            Node("A", {"name": "app", "version": "1.0.0", "type": "application"}),
            Node("B", {"name": "lib", "version": "2.0.0", "type": "library"}),
        ],
        edges=[Edge("A", "B", "depends-on")],
        root_elements=["A"],
    )


@pytest.fixture
def sbom_graph():
    """A small SBOM using the full property vocabulary."""
    return Graph.build(
        nodes=[
            Node(
                "SPDXRef-app",
                {
                    "name": "app",
                    "version": "3.2.1",
                    "type": "application",
                    "supplier": "Example Inc",
                    "license": "Apache-2.0",
                    "purl": "pkg:generic/app@3.2.1",
                    "description": "Example application",
                    "hashes": {"SHA-256": "aa" * 32},
                },
            ),
            Node(
                "SPDXRef-core",
                {"name": "core", "version": "3.2.1", "type": "library"},
            ),
            Node(
                "SPDXRef-json",
                {
                    "name": "json",
                    "version": "1.1.0",
                    "type": "library",
                    "license": "MIT",
                    "copyright": "Copyright 2020 JSON Authors",
                    "purl": "pkg:pypi/json@1.1.0",
                    "hashes": {"SHA-1": "bb" * 20, "SHA-512": "cc" * 64},
                },
            ),
        ],
        edges=[
            Edge("SPDXRef-app", "SPDXRef-core", "contains"),
            Edge("SPDXRef-app", "SPDXRef-json", "depends-on"),
            Edge("SPDXRef-core", "SPDXRef-json", "depends-on"),
        ],
        root_elements=["SPDXRef-app"],
    )
