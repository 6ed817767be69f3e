"""Format descriptors: (type, version, encoding) values naming a wire format.

Descriptors render to and parse from media-type strings such as
``application/vnd.cyclonedx+json;version=1.5``.

Public API:
    FormatDescriptor: Immutable, hashable format identifier.
    CANONICAL_JSON, CYCLONEDX_JSON_*, SPDX_JSON_*, KUZU_CYPHER: Built-in formats.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..exceptions import UnknownFormatError

_MEDIA_TYPE = re.compile(
    r"^(?P<top>[a-z]+)/(?P<vnd>vnd\.)?(?P<type>[A-Za-z0-9.\-]+)"
    r"\+(?P<encoding>[A-Za-z0-9\-]+)"
    r"(?:\s*;\s*version=(?P<version>[^;\s]+))?$"
)


@dataclass(frozen=True)
class FormatDescriptor:
    """Identifies a serialization format.

    Attributes:
        type: Schema family (e.g. "cyclonedx", "spdx").
        version: Schema version (e.g. "1.5", "2.3").
        encoding: Data serialization syntax (e.g. "json").
        media_prefix: Media-type prefix used when rendering
            (e.g. "application/vnd.", "text/"); not part of identity.
    """

    type: str
    version: str
    encoding: str
    media_prefix: str = field(default="application/vnd.", compare=False)

    @classmethod
    def parse(cls, value: str | FormatDescriptor) -> FormatDescriptor:
        """Parse a media-type string into a descriptor.

        Raises:
            UnknownFormatError: If *value* is not a ``type/subtype+encoding``
                media type with a version parameter.
        """
        if isinstance(value, FormatDescriptor):
            return value
        match = _MEDIA_TYPE.match(value.strip())
        if match is None or match.group("version") is None:
            raise UnknownFormatError(f"Cannot parse format descriptor: {value!r}")
        return cls(
            type=match.group("type"),
            version=match.group("version"),
            encoding=match.group("encoding"),
            media_prefix=f"{match.group('top')}/{match.group('vnd') or ''}",
        )

    @property
    def media_type(self) -> str:
        return f"{self.media_prefix}{self.type}+{self.encoding}"

    @property
    def slug(self) -> str:
        """``type-version-encoding``, used for test identifiers."""
        return f"{self.type}-{self.version}-{self.encoding}"

    @property
    def evidence_key(self) -> str:
        """``type-version``, used for evidence directory names."""
        return f"{self.type}-{self.version}"

    def __str__(self) -> str:
        return f"{self.media_type};version={self.version}"


CANONICAL_JSON = FormatDescriptor("sbom-canonical", "1", "json")
CYCLONEDX_JSON_14 = FormatDescriptor("cyclonedx", "1.4", "json")
CYCLONEDX_JSON_15 = FormatDescriptor("cyclonedx", "1.5", "json")
CYCLONEDX_JSON_16 = FormatDescriptor("cyclonedx", "1.6", "json")
SPDX_JSON_22 = FormatDescriptor("spdx", "2.2", "json", media_prefix="text/")
SPDX_JSON_23 = FormatDescriptor("spdx", "2.3", "json", media_prefix="text/")
KUZU_CYPHER = FormatDescriptor("kuzu", "1", "cypher")


__all__ = [
    "FormatDescriptor",
    "CANONICAL_JSON",
    "CYCLONEDX_JSON_14",
    "CYCLONEDX_JSON_15",
    "CYCLONEDX_JSON_16",
    "SPDX_JSON_22",
    "SPDX_JSON_23",
    "KUZU_CYPHER",
]
