"""FormatRegistry -- explicit mapping of format descriptors to adapters.

The registry is passed into the harness at construction rather than kept
as process-wide state, and is itself a FormatAdapter that dispatches
``encode``/``decode`` to the adapter registered for the descriptor.

Public API:
    FormatRegistry: Descriptor -> adapter registry.
    create_default_registry: Factory for a registry holding all built-in adapters.
"""

from __future__ import annotations

import logging
import threading
from typing import BinaryIO, Iterator

from ..exceptions import UnknownFormatError
from ..graph.protocol import FormatAdapter
from ..graph.types import Graph
from .canonical import CanonicalJSONAdapter
from .cyclonedx import CycloneDXJSONAdapter
from .descriptor import FormatDescriptor
from .kuzu_cypher import KuzuCypherAdapter
from .spdx import SPDXJSONAdapter

logger = logging.getLogger(__name__)


class FormatRegistry:
    """Registry of format adapters keyed by descriptor.

    Thread-safe via a reentrant lock so conformance units running
    concurrently may share one registry.
    """

    def __init__(self, adapters: list[FormatAdapter] | None = None) -> None:
        self._adapters: dict[FormatDescriptor, FormatAdapter] = {}
        self._lock = threading.RLock()
        for adapter in adapters or []:
            self.register(adapter)

    # ── registration ──────────────────────────────────────────

    def register(self, adapter: FormatAdapter, replace: bool = False) -> None:
        """Register *adapter* for every descriptor it declares.

        Raises:
            TypeError: If *adapter* does not satisfy FormatAdapter.
            ValueError: If a descriptor is already registered and
                *replace* is False.
        """
        if not isinstance(adapter, FormatAdapter):
            raise TypeError(f"{type(adapter).__name__} does not implement FormatAdapter")

        with self._lock:
            if not replace:
                for fmt in adapter.formats:
                    if fmt in self._adapters:
                        raise ValueError(f"Format already registered: {fmt}")
            for fmt in adapter.formats:
                self._adapters[fmt] = adapter
                logger.debug("Registered %s for %s", type(adapter).__name__, fmt)

    def get(self, fmt: FormatDescriptor | str) -> FormatAdapter:
        """Return the adapter for *fmt* (descriptor or media-type string).

        Raises:
            UnknownFormatError: If no adapter is registered for *fmt*.
        """
        descriptor = FormatDescriptor.parse(fmt)
        with self._lock:
            adapter = self._adapters.get(descriptor)
        if adapter is None:
            raise UnknownFormatError(f"No adapter registered for {descriptor}")
        return adapter

    @property
    def formats(self) -> tuple[FormatDescriptor, ...]:
        with self._lock:
            return tuple(self._adapters)

    def __contains__(self, fmt: object) -> bool:
        if not isinstance(fmt, (str, FormatDescriptor)):
            return False
        try:
            self.get(fmt)
        except UnknownFormatError:
            return False
        return True

    def __iter__(self) -> Iterator[FormatDescriptor]:
        return iter(self.formats)

    def __len__(self) -> int:
        return len(self.formats)

    # ── FormatAdapter ─────────────────────────────────────────

    def encode(self, graph: Graph, fmt: FormatDescriptor | str) -> bytes:
        descriptor = FormatDescriptor.parse(fmt)
        return self.get(descriptor).encode(graph, descriptor)

    def decode(self, data: bytes | BinaryIO, fmt: FormatDescriptor | str) -> Graph:
        descriptor = FormatDescriptor.parse(fmt)
        return self.get(descriptor).decode(data, descriptor)


def create_default_registry() -> FormatRegistry:
    """Create a fresh registry holding the built-in adapters.

    Returns:
        A new FormatRegistry; callers own it and may register more.
    """
    return FormatRegistry(
        [
            CanonicalJSONAdapter(),
            CycloneDXJSONAdapter(),
            SPDXJSONAdapter(),
            KuzuCypherAdapter(),
        ]
    )


__all__ = ["FormatRegistry", "create_default_registry"]
