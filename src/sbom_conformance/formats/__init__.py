"""Format descriptors, the adapter registry and the built-in codecs.

Public API:
    FormatDescriptor: (type, version, encoding) format identifier.
    FormatRegistry: Explicit descriptor -> adapter registry.
    create_default_registry: Registry holding all built-in adapters.
    CanonicalJSONAdapter: Lossless canonical JSON (golden fixture format).
    CycloneDXJSONAdapter: CycloneDX JSON 1.4 - 1.6.
    SPDXJSONAdapter: SPDX JSON 2.2 - 2.3.
    KuzuCypherAdapter: Cypher script replayed through Kuzu.
"""

from __future__ import annotations

from .canonical import CanonicalJSONAdapter
from .cyclonedx import CycloneDXJSONAdapter
from .descriptor import (
    CANONICAL_JSON,
    CYCLONEDX_JSON_14,
    CYCLONEDX_JSON_15,
    CYCLONEDX_JSON_16,
    KUZU_CYPHER,
    SPDX_JSON_22,
    SPDX_JSON_23,
    FormatDescriptor,
)
from .kuzu_cypher import KuzuCypherAdapter
from .registry import FormatRegistry, create_default_registry
from .spdx import SPDXJSONAdapter

__all__ = [
    "FormatDescriptor",
    "CANONICAL_JSON",
    "CYCLONEDX_JSON_14",
    "CYCLONEDX_JSON_15",
    "CYCLONEDX_JSON_16",
    "SPDX_JSON_22",
    "SPDX_JSON_23",
    "KUZU_CYPHER",
    "FormatRegistry",
    "create_default_registry",
    "CanonicalJSONAdapter",
    "CycloneDXJSONAdapter",
    "SPDXJSONAdapter",
    "KuzuCypherAdapter",
]
