"""FormatAdapter protocol -- the common interface all format codecs implement.

Public API:
    FormatAdapter: Runtime-checkable protocol defining the codec contract.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable

from .types import Graph

if TYPE_CHECKING:
    from ..formats.descriptor import FormatDescriptor


@runtime_checkable
class FormatAdapter(Protocol):
    """Common interface for translating canonical graphs to wire formats.

    Every concrete implementation (CycloneDX, SPDX, Kuzu, ...) must
    satisfy this protocol so the harness can swap formats without
    changes.  A :class:`~sbom_conformance.formats.FormatRegistry` is
    itself a FormatAdapter that dispatches on the descriptor.
    """

    @property
    def formats(self) -> tuple[FormatDescriptor, ...]:
        """Descriptors this adapter can encode and decode."""
        ...

    def encode(self, graph: Graph, fmt: FormatDescriptor) -> bytes:
        """Serialize *graph* into *fmt*.

        Raises:
            UnknownFormatError: If *fmt* is not supported.
            EncodeError: If the graph cannot be represented.
        """
        ...

    def decode(self, data: bytes | BinaryIO, fmt: FormatDescriptor) -> Graph:
        """Parse *data* written in *fmt* back into a canonical graph.

        Raises:
            UnknownFormatError: If *fmt* is not supported.
            DecodeError: If the bytes are malformed.
        """
        ...


__all__ = ["FormatAdapter"]
