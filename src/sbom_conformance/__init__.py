"""sbom-conformance-lib: round-trip conformance checks for SBOM formats."""

__version__ = "0.1.0"

from .diff import (
    DiffPolicy,
    DiffResult,
    EdgeDiff,
    NodeDiff,
    RootElementsDiff,
    RootOrder,
    diff_graphs,
)
from .evidence import EvidenceSink
from .exceptions import (
    ConformanceError,
    DecodeError,
    EncodeError,
    FixtureLoadError,
    InvalidGraphError,
    RoundTripError,
    UnknownFormatError,
)
from .fixtures import GoldenFixtureSource
from .formats import FormatDescriptor, FormatRegistry, create_default_registry
from .graph import Edge, FormatAdapter, Graph, Node
from .harness import RoundTripHarness, RoundTripOutcome
from .matrix import ConformanceCase, ConformanceMatrix, MatrixReport, UnitError

__all__ = [
    # Canonical graph model
    "Node",
    "Edge",
    "Graph",
    "FormatAdapter",
    # Diff engine
    "diff_graphs",
    "DiffPolicy",
    "DiffResult",
    "NodeDiff",
    "EdgeDiff",
    "RootElementsDiff",
    "RootOrder",
    # Formats
    "FormatDescriptor",
    "FormatRegistry",
    "create_default_registry",
    # Round-trip harness
    "RoundTripHarness",
    "RoundTripOutcome",
    "EvidenceSink",
    "GoldenFixtureSource",
    "ConformanceCase",
    "ConformanceMatrix",
    "MatrixReport",
    "UnitError",
    # Exceptions
    "ConformanceError",
    "InvalidGraphError",
    "UnknownFormatError",
    "RoundTripError",
    "FixtureLoadError",
    "EncodeError",
    "DecodeError",
]
