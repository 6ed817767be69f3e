"""CycloneDXJSONAdapter -- CycloneDX JSON codec (versions 1.4 - 1.6).

Mapping to the canonical graph:

* components (recursively, including ``metadata.component``) -> nodes,
  keyed by ``bom-ref``;
* ``metadata.component`` -> the single root element;
* nested ``components`` -> ``contains`` edges;
* ``dependencies`` -> ``depends-on`` edges;
* component ``properties`` -> node properties outside the shared
  vocabulary (string values).

CycloneDX cannot express every canonical graph.  Roots beyond the
first, other edge kinds, and a component contained by more than one
parent are dropped with a warning, so a conformance run surfaces them
as diffs.

Public API:
    CycloneDXJSONAdapter: FormatAdapter for CycloneDX JSON.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, BinaryIO

from ..exceptions import DecodeError
from ..graph.types import CONTAINS, DEPENDS_ON, Edge, Graph, Node
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
    VOCABULARY,
    assemble,
    check_format,
    dump_json,
    extras,
    load_json,
)
from .descriptor import (
    CYCLONEDX_JSON_14,
    CYCLONEDX_JSON_15,
    CYCLONEDX_JSON_16,
    FormatDescriptor,
)

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT_TYPE = "library"


class CycloneDXJSONAdapter:
    """CycloneDX JSON codec."""

    @property
    def formats(self) -> tuple[FormatDescriptor, ...]:
        return (CYCLONEDX_JSON_14, CYCLONEDX_JSON_15, CYCLONEDX_JSON_16)

    # ── encode ────────────────────────────────────────────────

    def encode(self, graph: Graph, fmt: FormatDescriptor) -> bytes:
        check_format(fmt, self.formats)

        root_id = graph.root_elements[0] if graph.root_elements else None
        if len(set(graph.root_elements)) > 1:
            logger.warning(
                "CycloneDX holds a single root; dropping roots %s",
                list(graph.root_elements[1:]),
            )

        parent_of = self._containment(graph, root_id)
        children: dict[str, list[str]] = defaultdict(list)
        for child_id, parent_id in parent_of.items():
            children[parent_id].append(child_id)

        nodes = {n.node_id: n for n in graph.nodes}

        def render(node_id: str) -> dict[str, Any]:
            component = self._component(nodes[node_id])
            if children.get(node_id):
                component["components"] = [render(c) for c in children[node_id]]
            return component

        dropped = sorted({e.kind for e in graph.edges} - {CONTAINS, DEPENDS_ON})
        if dropped:
            logger.warning("CycloneDX has no relationship for edge kinds %s", dropped)

        metadata: dict[str, Any] = {
            "timestamp": graph.metadata.get("created")
            or datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        if root_id is not None:
            metadata["component"] = render(root_id)

        document = {
            "bomFormat": "CycloneDX",
            "specVersion": fmt.version,
            "serialNumber": graph.metadata.get("serialNumber") or f"urn:uuid:{uuid.uuid4()}",
            "version": 1,
            "metadata": metadata,
            "components": [
                render(n.node_id)
                for n in graph.nodes
                if n.node_id != root_id and n.node_id not in parent_of
            ],
            "dependencies": [
                {
                    "ref": n.node_id,
                    "dependsOn": [e.target_id for e in graph.edges_from(n.node_id, DEPENDS_ON)],
                }
                for n in graph.nodes
            ],
        }
        return dump_json(document)

    @staticmethod
    def _containment(graph: Graph, root_id: str | None) -> dict[str, str]:
        """Pick one parent per contained node; returns child -> parent."""
        parent_of: dict[str, str] = {}
        for edge in graph.edges:
            if edge.kind != CONTAINS:
                continue
            child = edge.target_id
            if child == root_id or child in parent_of or child == edge.source_id:
                logger.warning(
                    "CycloneDX cannot nest %r under %r; dropping contains edge",
                    child,
                    edge.source_id,
                )
                continue
            parent_of[child] = edge.source_id

        # Break containment cycles, otherwise their members never render.
        # Only the edge that closes a cycle is dropped.
        for child in list(parent_of):
            seen = {child}
            current = child
            parent = parent_of.get(current)
            while parent is not None:
                if parent in seen:
                    logger.warning(
                        "Containment cycle through %r; dropping contains edge %r -> %r",
                        parent,
                        parent,
                        current,
                    )
                    del parent_of[current]
                    break
                seen.add(parent)
                current = parent
                parent = parent_of.get(current)
        return parent_of

    @staticmethod
    def _component(node: Node) -> dict[str, Any]:
        props = node.properties
        component: dict[str, Any] = {
            "type": props.get(TYPE, DEFAULT_COMPONENT_TYPE),
            "bom-ref": node.node_id,
        }
        if props.get(SUPPLIER):
            component["supplier"] = {"name": props[SUPPLIER]}
        component["name"] = props.get(NAME, "")
        if props.get(VERSION):
            component["version"] = props[VERSION]
        if props.get(DESCRIPTION):
            component["description"] = props[DESCRIPTION]
        if props.get(HASHES):
            component["hashes"] = [
                {"alg": alg, "content": content} for alg, content in props[HASHES].items()
            ]
        if props.get(LICENSE):
            component["licenses"] = [{"expression": props[LICENSE]}]
        if props.get(COPYRIGHT):
            component["copyright"] = props[COPYRIGHT]
        if props.get(PURL):
            component["purl"] = props[PURL]
        other = extras(props)
        if other:
            component["properties"] = [
                {"name": k, "value": v if isinstance(v, str) else json.dumps(v)}
                for k, v in other.items()
            ]
        return component

    # ── decode ────────────────────────────────────────────────

    def decode(self, data: bytes | BinaryIO, fmt: FormatDescriptor) -> Graph:
        check_format(fmt, self.formats)
        document = load_json(data, fmt)
        if not isinstance(document, dict) or document.get("bomFormat") != "CycloneDX":
            raise DecodeError("not a CycloneDX document", dest_format=fmt)
        if document.get("specVersion") != fmt.version:
            logger.debug(
                "Decoding CycloneDX %s document as %s",
                document.get("specVersion"),
                fmt,
            )

        nodes: dict[str, Node] = {}
        duplicates: list[Node] = []
        edges: list[Edge] = []

        def walk(component: dict[str, Any], parent_id: str | None) -> str:
            node = self._node(component, fmt)
            existing = nodes.get(node.node_id)
            if existing is None:
                nodes[node.node_id] = node
            elif existing != node:
                duplicates.append(node)
            if parent_id is not None:
                edges.append(Edge(parent_id, node.node_id, CONTAINS))
            for child in component.get("components") or []:
                walk(child, node.node_id)
            return node.node_id

        try:
            metadata = document.get("metadata") or {}
            roots: list[str] = []
            if metadata.get("component"):
                roots.append(walk(metadata["component"], None))
            for component in document.get("components") or []:
                walk(component, None)
            for dependency in document.get("dependencies") or []:
                ref = dependency["ref"]
                for target in dependency.get("dependsOn") or []:
                    edges.append(Edge(ref, target, DEPENDS_ON))
        except (KeyError, TypeError, AttributeError) as e:
            raise DecodeError(f"malformed CycloneDX document: {e!r}", dest_format=fmt) from e

        doc_metadata = {}
        if document.get("serialNumber"):
            doc_metadata["serialNumber"] = document["serialNumber"]
        if metadata.get("timestamp"):
            doc_metadata["created"] = metadata["timestamp"]

        return assemble(list(nodes.values()) + duplicates, edges, roots, doc_metadata, fmt)

    @staticmethod
    def _node(component: dict[str, Any], fmt: FormatDescriptor) -> Node:
        node_id = component.get("bom-ref") or component.get("purl")
        if not node_id:
            if not component.get("name"):
                raise DecodeError("component without bom-ref, purl or name", dest_format=fmt)
            node_id = f"{component['name']}@{component.get('version', '')}"

        props: dict[str, Any] = {}
        for key, field_name in (
            (NAME, "name"),
            (VERSION, "version"),
            (TYPE, "type"),
            (DESCRIPTION, "description"),
            (COPYRIGHT, "copyright"),
            (PURL, "purl"),
        ):
            if component.get(field_name):
                props[key] = component[field_name]

        supplier = (component.get("supplier") or {}).get("name")
        if supplier:
            props[SUPPLIER] = supplier

        hashes = {h["alg"]: h["content"] for h in component.get("hashes") or []}
        if hashes:
            props[HASHES] = hashes

        licenses = []
        for entry in component.get("licenses") or []:
            if entry.get("expression"):
                licenses.append(entry["expression"])
            elif entry.get("license"):
                lic = entry["license"]
                licenses.append(lic.get("id") or lic.get("name"))
        licenses = [lic for lic in licenses if lic]
        if licenses:
            props[LICENSE] = " AND ".join(licenses)

        for prop in component.get("properties") or []:
            name = prop.get("name")
            if name and name not in VOCABULARY:
                props.setdefault(name, prop.get("value", ""))

        return Node(node_id=str(node_id), properties=props)


__all__ = ["CycloneDXJSONAdapter"]
