"""Helpers shared by the built-in codecs."""

from __future__ import annotations

import json
from typing import Any, BinaryIO, Iterable

from ..exceptions import DecodeError, InvalidGraphError, UnknownFormatError
from ..graph.types import Edge, Graph, Node
from .descriptor import FormatDescriptor

# Canonical node properties understood by the SBOM codecs.
NAME = "name"
VERSION = "version"
TYPE = "type"
PURL = "purl"
LICENSE = "license"
SUPPLIER = "supplier"
DESCRIPTION = "description"
COPYRIGHT = "copyright"
HASHES = "hashes"

VOCABULARY = frozenset(
    {NAME, VERSION, TYPE, PURL, LICENSE, SUPPLIER, DESCRIPTION, COPYRIGHT, HASHES}
)


def read_payload(data: bytes | BinaryIO) -> bytes:
    """Return the raw bytes of *data*, reading it if it is a stream."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    return data.read()


def load_json(data: bytes | BinaryIO, fmt: FormatDescriptor) -> Any:
    """Parse JSON bytes, raising DecodeError with format context."""
    try:
        return json.loads(read_payload(data).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"invalid JSON: {e}", dest_format=fmt) from e


def dump_json(document: Any) -> bytes:
    return json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")


def check_format(fmt: FormatDescriptor, supported: Iterable[FormatDescriptor]) -> None:
    if fmt not in tuple(supported):
        raise UnknownFormatError(f"Unsupported format: {fmt}")


def assemble(
    nodes: list[Node],
    edges: list[Edge],
    roots: list[str],
    metadata: dict[str, Any],
    fmt: FormatDescriptor,
) -> Graph:
    """Build a validated graph from decoded parts.

    Duplicate edges and root identifiers collapse to their first
    occurrence.

    Raises:
        DecodeError: If the decoded parts violate graph invariants.
    """
    unique_edges = list(dict.fromkeys(edges))
    unique_roots = list(dict.fromkeys(roots))
    try:
        return Graph.build(nodes, unique_edges, unique_roots, metadata)
    except InvalidGraphError as e:
        raise DecodeError(str(e), dest_format=fmt) from e


def extras(properties: dict[str, Any]) -> dict[str, Any]:
    """Properties outside the shared vocabulary."""
    return {k: v for k, v in properties.items() if k not in VOCABULARY}
