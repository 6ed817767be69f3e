"""Custom exceptions for sbom-conformance-lib."""

from __future__ import annotations

from typing import Any


class ConformanceError(Exception):
    """Base exception for conformance operations."""


class InvalidGraphError(ConformanceError):
    """Raised when a graph violates its structural invariants."""


class UnknownFormatError(ConformanceError):
    """Raised when a format descriptor cannot be parsed or is not registered."""


class RoundTripError(ConformanceError):
    """Base for failures that abort a single round trip.

    Carries enough context (fixture and both formats) to triage the
    failing unit of the conformance matrix.
    """

    stage = "round trip"

    def __init__(
        self,
        message: str,
        source_format: Any = None,
        dest_format: Any = None,
        fixture: str | None = None,
    ) -> None:
        self.source_format = source_format
        self.dest_format = dest_format
        self.fixture = fixture
        self.reason = message
        super().__init__(self._render())

    def _render(self) -> str:
        parts = [f"{self.stage} failed"]
        if self.fixture:
            parts.append(f"fixture={self.fixture}")
        if self.source_format is not None:
            parts.append(f"source={self.source_format}")
        if self.dest_format is not None:
            parts.append(f"destination={self.dest_format}")
        return f"{' '.join(parts)}: {self.reason}"


class FixtureLoadError(RoundTripError):
    """Raised when a golden fixture cannot be read or decoded."""

    stage = "fixture load"


class EncodeError(RoundTripError):
    """Raised when a graph cannot be encoded into the destination format."""

    stage = "encode"


class DecodeError(RoundTripError):
    """Raised when destination bytes cannot be decoded back into a graph."""

    stage = "decode"
