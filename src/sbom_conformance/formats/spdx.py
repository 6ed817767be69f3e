"""SPDXJSONAdapter -- SPDX 2.x JSON codec (versions 2.2 and 2.3).

Mapping to the canonical graph:

* packages (and files, on decode) -> nodes, keyed by ``SPDXID``;
* ``documentDescribes`` plus ``DESCRIBES`` relationships from the
  document -> root elements;
* every other relationship -> an edge whose kind is the relationship
  type in lower kebab case (``DEPENDS_ON`` <-> ``depends-on``).

Node identifiers that are not valid SPDX identifiers are rewritten, and
properties outside the shared vocabulary are dropped; SPDX 2.2 has no
``primaryPackagePurpose`` so the node type is dropped as well.

Public API:
    SPDXJSONAdapter: FormatAdapter for SPDX JSON.
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any, BinaryIO

from ..exceptions import DecodeError
from ..graph.types import Edge, Graph, Node
from ._codec import (
    COPYRIGHT,
    DESCRIPTION,
    HASHES,
    LICENSE,
    NAME,
    PURL,
    SUPPLIER,
    TYPE,
    VERSION,
    assemble,
    check_format,
    dump_json,
    extras,
    load_json,
)
from .descriptor import SPDX_JSON_22, SPDX_JSON_23, FormatDescriptor

logger = logging.getLogger(__name__)

DOCUMENT_ID = "SPDXRef-DOCUMENT"
NOASSERTION = "NOASSERTION"
TOOL_CREATOR = "Tool: sbom-conformance-lib"

_SPDX_ID = re.compile(r"^SPDXRef-[A-Za-z0-9.\-]+$")
_INVALID_ID_CHARS = re.compile(r"[^A-Za-z0-9.\-]+")
_NO_VALUE = {NOASSERTION, "NONE", ""}
_ACTOR_PREFIXES = ("Organization: ", "Person: ", "Tool: ")

PURPOSES = frozenset(
    {
        "APPLICATION",
        "FRAMEWORK",
        "LIBRARY",
        "CONTAINER",
        "OPERATING-SYSTEM",
        "DEVICE",
        "FIRMWARE",
        "SOURCE",
        "ARCHIVE",
        "FILE",
        "INSTALL",
        "OTHER",
    }
)

# CycloneDX-style algorithm names (canonical) -> SPDX checksum algorithms.
CHECKSUM_ALGORITHMS = {
    "MD5": "MD5",
    "SHA-1": "SHA1",
    "SHA-224": "SHA224",
    "SHA-256": "SHA256",
    "SHA-384": "SHA384",
    "SHA-512": "SHA512",
    "SHA3-256": "SHA3-256",
    "SHA3-384": "SHA3-384",
    "SHA3-512": "SHA3-512",
    "BLAKE2b-256": "BLAKE2b-256",
    "BLAKE2b-384": "BLAKE2b-384",
    "BLAKE2b-512": "BLAKE2b-512",
    "BLAKE3": "BLAKE3",
}
_CANONICAL_ALGORITHMS = {v: k for k, v in CHECKSUM_ALGORITHMS.items()}


def relationship_type(kind: str) -> str:
    """``depends-on`` -> ``DEPENDS_ON``."""
    return kind.upper().replace("-", "_")


def edge_kind(rel_type: str) -> str:
    """``DEPENDS_ON`` -> ``depends-on``."""
    return rel_type.lower().replace("_", "-")


class SPDXJSONAdapter:
    """SPDX 2.x JSON codec."""

    @property
    def formats(self) -> tuple[FormatDescriptor, ...]:
        return (SPDX_JSON_22, SPDX_JSON_23)

    # ── encode ────────────────────────────────────────────────

    def encode(self, graph: Graph, fmt: FormatDescriptor) -> bytes:
        check_format(fmt, self.formats)
        ids = self._spdx_ids(graph)
        with_purpose = fmt.version != "2.2"

        dropped = sorted({k for n in graph.nodes for k in extras(n.properties)})
        if dropped:
            logger.warning("SPDX %s drops node properties %s", fmt.version, dropped)
        if not with_purpose and any(TYPE in n.properties for n in graph.nodes):
            logger.warning("SPDX 2.2 has no primaryPackagePurpose; dropping node types")

        roots = [ids[r] for r in dict.fromkeys(graph.root_elements)]
        relationships: list[dict[str, str]] = []
        if with_purpose:
            relationships.extend(
                {
                    "spdxElementId": DOCUMENT_ID,
                    "relationshipType": "DESCRIBES",
                    "relatedSpdxElement": root,
                }
                for root in roots
            )
        relationships.extend(
            {
                "spdxElementId": ids[e.source_id],
                "relationshipType": relationship_type(e.kind),
                "relatedSpdxElement": ids[e.target_id],
            }
            for e in graph.edges
        )

        name = graph.metadata.get("name") or "sbom"
        document = {
            "spdxVersion": f"SPDX-{fmt.version}",
            "dataLicense": "CC0-1.0",
            "SPDXID": DOCUMENT_ID,
            "name": name,
            "documentNamespace": graph.metadata.get("namespace")
            or f"https://spdx.org/spdxdocs/{name}-{uuid.uuid4()}",
            "creationInfo": {
                "created": graph.metadata.get("created")
                or datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
                "creators": [TOOL_CREATOR],
            },
            "documentDescribes": roots,
            "packages": [self._package(n, ids[n.node_id], with_purpose) for n in graph.nodes],
            "relationships": relationships,
        }
        return dump_json(document)

    @staticmethod
    def _spdx_ids(graph: Graph) -> dict[str, str]:
        """Map node IDs to valid, unique SPDX identifiers."""
        ids: dict[str, str] = {}
        taken = {n.node_id for n in graph.nodes if _SPDX_ID.match(n.node_id)}
        for node in graph.nodes:
            if _SPDX_ID.match(node.node_id):
                ids[node.node_id] = node.node_id
                continue
            base = "SPDXRef-" + (_INVALID_ID_CHARS.sub("-", node.node_id).strip("-") or "node")
            candidate, counter = base, 1
            while candidate in taken:
                counter += 1
                candidate = f"{base}-{counter}"
            taken.add(candidate)
            ids[node.node_id] = candidate
            logger.warning("Node id %r is not an SPDX identifier; using %r", node.node_id, candidate)
        return ids

    @staticmethod
    def _package(node: Node, spdx_id: str, with_purpose: bool) -> dict[str, Any]:
        props = node.properties
        package: dict[str, Any] = {
            "SPDXID": spdx_id,
            "name": props.get(NAME, ""),
        }
        if props.get(VERSION):
            package["versionInfo"] = props[VERSION]
        if props.get(SUPPLIER):
            package["supplier"] = f"Organization: {props[SUPPLIER]}"
        package["downloadLocation"] = NOASSERTION
        package["filesAnalyzed"] = False
        if props.get(HASHES):
            package["checksums"] = [
                {"algorithm": CHECKSUM_ALGORITHMS.get(alg, alg), "checksumValue": value}
                for alg, value in props[HASHES].items()
            ]
        package["licenseConcluded"] = NOASSERTION
        package["licenseDeclared"] = props.get(LICENSE) or NOASSERTION
        package["copyrightText"] = props.get(COPYRIGHT) or NOASSERTION
        if props.get(DESCRIPTION):
            package["description"] = props[DESCRIPTION]
        if props.get(PURL):
            package["externalRefs"] = [
                {
                    "referenceCategory": "PACKAGE-MANAGER",
                    "referenceType": "purl",
                    "referenceLocator": props[PURL],
                }
            ]
        if with_purpose and props.get(TYPE):
            purpose = str(props[TYPE]).upper()
            if purpose not in PURPOSES:
                logger.warning("Type %r has no SPDX purpose; using OTHER", props[TYPE])
                purpose = "OTHER"
            package["primaryPackagePurpose"] = purpose
        return package

    # ── decode ────────────────────────────────────────────────

    def decode(self, data: bytes | BinaryIO, fmt: FormatDescriptor) -> Graph:
        check_format(fmt, self.formats)
        document = load_json(data, fmt)
        if not isinstance(document, dict) or not str(
            document.get("spdxVersion", "")
        ).startswith("SPDX-"):
            raise DecodeError("not an SPDX document", dest_format=fmt)

        try:
            doc_id = document.get("SPDXID", DOCUMENT_ID)
            nodes = [self._package_node(p) for p in document.get("packages") or []]
            nodes.extend(self._file_node(f) for f in document.get("files") or [])
            known = {n.node_id for n in nodes}

            roots = list(document.get("documentDescribes") or [])
            edges: list[Edge] = []
            for rel in document.get("relationships") or []:
                source = rel["spdxElementId"]
                target = rel["relatedSpdxElement"]
                rel_type = rel["relationshipType"]
                if source == doc_id and rel_type == "DESCRIBES":
                    roots.append(target)
                elif target == doc_id and rel_type == "DESCRIBED_BY":
                    roots.append(source)
                elif source in known and target in known:
                    edges.append(Edge(source, target, edge_kind(rel_type)))
                else:
                    logger.debug("Skipping relationship %s %s %s", source, rel_type, target)

            creation = document.get("creationInfo") or {}
            metadata = {
                key: value
                for key, value in (
                    ("name", document.get("name")),
                    ("namespace", document.get("documentNamespace")),
                    ("created", creation.get("created")),
                )
                if value
            }
        except (KeyError, TypeError, AttributeError) as e:
            raise DecodeError(f"malformed SPDX document: {e!r}", dest_format=fmt) from e

        return assemble(nodes, edges, roots, metadata, fmt)

    @staticmethod
    def _package_node(package: dict[str, Any]) -> Node:
        props: dict[str, Any] = {}
        if package.get("name"):
            props[NAME] = package["name"]
        if package.get("versionInfo"):
            props[VERSION] = package["versionInfo"]
        if package.get("primaryPackagePurpose"):
            props[TYPE] = package["primaryPackagePurpose"].lower()
        supplier = _actor_name(package.get("supplier"))
        if supplier:
            props[SUPPLIER] = supplier
        license_expr = _value(package.get("licenseDeclared")) or _value(
            package.get("licenseConcluded")
        )
        if license_expr:
            props[LICENSE] = license_expr
        copyright_text = _value(package.get("copyrightText"))
        if copyright_text:
            props[COPYRIGHT] = copyright_text
        if package.get("description"):
            props[DESCRIPTION] = package["description"]
        for ref in package.get("externalRefs") or []:
            if ref.get("referenceType") == "purl" and ref.get("referenceLocator"):
                props[PURL] = ref["referenceLocator"]
                break
        hashes = _hashes(package.get("checksums"))
        if hashes:
            props[HASHES] = hashes
        return Node(node_id=package["SPDXID"], properties=props)

    @staticmethod
    def _file_node(entry: dict[str, Any]) -> Node:
        props: dict[str, Any] = {TYPE: "file"}
        if entry.get("fileName"):
            props[NAME] = entry["fileName"]
        license_expr = _value(entry.get("licenseConcluded"))
        if license_expr:
            props[LICENSE] = license_expr
        copyright_text = _value(entry.get("copyrightText"))
        if copyright_text:
            props[COPYRIGHT] = copyright_text
        hashes = _hashes(entry.get("checksums"))
        if hashes:
            props[HASHES] = hashes
        return Node(node_id=entry["SPDXID"], properties=props)


def _value(text: Any) -> str | None:
    if text is None or str(text) in _NO_VALUE:
        return None
    return str(text)


def _actor_name(actor: Any) -> str | None:
    text = _value(actor)
    if text is None:
        return None
    for prefix in _ACTOR_PREFIXES:
        if text.startswith(prefix):
            return text[len(prefix):]
    return text


def _hashes(checksums: Any) -> dict[str, str]:
    return {
        _CANONICAL_ALGORITHMS.get(c["algorithm"], c["algorithm"]): c["checksumValue"]
        for c in checksums or []
    }


__all__ = ["SPDXJSONAdapter", "edge_kind", "relationship_type"]
