"""KuzuCypherAdapter -- graph round trip through a Kuzu database.

Encoding renders the graph as a Cypher script, one statement per line:
the schema DDL followed by ``CREATE`` statements for components, root
elements and relationships.  Decoding replays the script inside a
private temporary Kuzu database and reads the graph back with ``MATCH``
queries, so the round trip exercises a real graph store rather than a
pure text transform.

Schema::

    Component(node_id STRING PRIMARY KEY, properties STRING)   -- JSON
    RootElement(position INT64 PRIMARY KEY, node_id STRING)
    Relationship(FROM Component TO Component, kind STRING)

Public API:
    KuzuCypherAdapter: FormatAdapter for KUZU_CYPHER.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any, BinaryIO

import kuzu

from ..exceptions import DecodeError, EncodeError
from ..graph.types import Edge, Graph, Node
from ._codec import assemble, check_format, read_payload
from .descriptor import KUZU_CYPHER, FormatDescriptor

logger = logging.getLogger(__name__)

SCHEMA = (
    "CREATE NODE TABLE Component(node_id STRING, properties STRING, PRIMARY KEY(node_id))",
    "CREATE NODE TABLE RootElement(position INT64, node_id STRING, PRIMARY KEY(position))",
    "CREATE REL TABLE Relationship(FROM Component TO Component, kind STRING)",
)


class KuzuCypherAdapter:
    """Cypher script codec decoded through an embedded Kuzu database."""

    @property
    def formats(self) -> tuple[FormatDescriptor, ...]:
        return (KUZU_CYPHER,)

    # ── encode ────────────────────────────────────────────────

    def encode(self, graph: Graph, fmt: FormatDescriptor = KUZU_CYPHER) -> bytes:
        check_format(fmt, self.formats)
        try:
            statements = list(SCHEMA)
            for node in graph.nodes:
                props = json.dumps(node.properties, sort_keys=True, ensure_ascii=False)
                statements.append(
                    f"CREATE (:Component {{node_id: {_cypher_literal(node.node_id)}, "
                    f"properties: {_cypher_literal(props)}}})"
                )
            for position, root_id in enumerate(graph.root_elements):
                statements.append(
                    f"CREATE (:RootElement {{position: {position}, "
                    f"node_id: {_cypher_literal(root_id)}}})"
                )
            for edge in graph.edges:
                statements.append(
                    "MATCH (a:Component), (b:Component) "
                    f"WHERE a.node_id = {_cypher_literal(edge.source_id)} "
                    f"AND b.node_id = {_cypher_literal(edge.target_id)} "
                    f"CREATE (a)-[:Relationship {{kind: {_cypher_literal(edge.kind)}}}]->(b)"
                )
        except (TypeError, ValueError) as e:
            raise EncodeError(str(e), dest_format=fmt) from e
        return "".join(f"{s};\n" for s in statements).encode("utf-8")

    # ── decode ────────────────────────────────────────────────

    def decode(
        self, data: bytes | BinaryIO, fmt: FormatDescriptor = KUZU_CYPHER
    ) -> Graph:
        check_format(fmt, self.formats)
        try:
            script = read_payload(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"script is not UTF-8: {e}", dest_format=fmt) from e

        with tempfile.TemporaryDirectory(ignore_cleanup_errors=True) as tmp:
            db = kuzu.Database(str(Path(tmp) / "roundtrip.kuzu"))
            conn = kuzu.Connection(db)
            try:
                for statement in _statements(script):
                    conn.execute(statement)
                nodes = [
                    Node(node_id=row[0], properties=json.loads(row[1] or "{}"))
                    for row in self._rows(
                        conn, "MATCH (n:Component) RETURN n.node_id, n.properties"
                    )
                ]
                edges = [
                    Edge(source_id=row[0], target_id=row[1], kind=row[2])
                    for row in self._rows(
                        conn,
                        "MATCH (a:Component)-[r:Relationship]->(b:Component) "
                        "RETURN a.node_id, b.node_id, r.kind",
                    )
                ]
                roots = [
                    row[1]
                    for row in self._rows(
                        conn,
                        "MATCH (r:RootElement) RETURN r.position, r.node_id "
                        "ORDER BY r.position",
                    )
                ]
            except RuntimeError as e:
                raise DecodeError(f"Kuzu rejected script: {e}", dest_format=fmt) from e
            except json.JSONDecodeError as e:
                raise DecodeError(f"invalid properties JSON: {e}", dest_format=fmt) from e
            finally:
                conn = None  # type: ignore[assignment]
                db = None  # type: ignore[assignment]

        logger.debug(
            "Decoded %d nodes, %d edges, %d roots from Kuzu",
            len(nodes),
            len(edges),
            len(roots),
        )
        return assemble(nodes, edges, roots, {}, fmt)

    @staticmethod
    def _rows(conn: kuzu.Connection, cypher: str) -> list[list[Any]]:
        result = conn.execute(cypher)
        rows: list[list[Any]] = []
        while result.has_next():
            rows.append(result.get_next())
        return rows


# ── helpers ───────────────────────────────────────────────────


def _statements(script: str) -> list[str]:
    """Split a script into statements (one per line, trailing ``;`` dropped)."""
    statements = []
    for line in script.split("\n"):
        line = line.strip()
        if not line:
            continue
        statements.append(line[:-1] if line.endswith(";") else line)
    return statements


def _cypher_literal(value: Any) -> str:
    """Escape a Python string for interpolation into a Cypher string literal.

    Kuzu scripts are replayed statement by statement without parameter
    binding, so values are written as single-quoted literals with
    backslashes, quotes and line breaks escaped.
    """
    if not isinstance(value, str):
        raise TypeError(f"Expected str for Cypher literal, got {type(value).__name__}")
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


__all__ = ["KuzuCypherAdapter"]
