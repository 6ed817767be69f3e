"""Round-trip harness: encode -> decode -> diff for one conformance unit.

A unit is a (fixture, source format, destination format) triple.  The
harness asks its adapter to encode the golden graph in the destination
format, decodes the bytes back, and diffs the reconstructed graph
against the golden one.  Adapter failures abort only the unit and are
re-raised with fixture and format context; a non-empty diff is a normal
result, routed to the evidence sink before the caller asserts on it.

Public API:
    RoundTripOutcome: Result of a single unit.
    RoundTripHarness: Runs units against an explicit FormatAdapter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .diff import DiffPolicy, DiffResult, diff_graphs
from .evidence import EvidenceSink
from .exceptions import DecodeError, EncodeError, FixtureLoadError, RoundTripError
from .fixtures import GoldenFixtureSource
from .formats.descriptor import FormatDescriptor
from .graph.protocol import FormatAdapter
from .graph.types import Graph

logger = logging.getLogger(__name__)


def round_trip_id(
    source_format: FormatDescriptor,
    dest_format: FormatDescriptor,
    fixture_name: str | None = None,
) -> str:
    """Stable identifier for a unit, e.g. ``diff-cyclonedx-1.5-json->spdx-2.3-json``."""
    test_id = f"diff-{source_format.slug}->{dest_format.slug}"
    if fixture_name:
        test_id = f"{test_id}/{Path(fixture_name).name}"
    return test_id


def _reason(error: Exception) -> str:
    if isinstance(error, RoundTripError):
        return error.reason
    return str(error) or type(error).__name__


@dataclass
class RoundTripOutcome:
    """Result of one round trip.

    Attributes:
        fixture: Fixture name (base name is used for evidence).
        source_format: Format the fixture was originally written in.
        dest_format: Format the golden graph was round-tripped through.
        diff: Diff between the golden and the reconstructed graph.
        encoded: Destination-format bytes produced by encode.
        evidence_path: Evidence directory, set when evidence was written.
    """

    fixture: str
    source_format: FormatDescriptor
    dest_format: FormatDescriptor
    diff: DiffResult
    encoded: bytes = b""
    evidence_path: Path | None = None

    @property
    def passed(self) -> bool:
        return self.diff.is_empty()

    @property
    def test_id(self) -> str:
        return round_trip_id(self.source_format, self.dest_format, self.fixture)


class RoundTripHarness:
    """Drives round trips against an explicitly supplied adapter.

    Args:
        adapter: Any FormatAdapter, normally a FormatRegistry.
        evidence_sink: Where mismatch evidence goes; None disables it.
        policy: Diff policy applied to every unit.
    """

    def __init__(
        self,
        adapter: FormatAdapter,
        evidence_sink: EvidenceSink | None = None,
        policy: DiffPolicy | None = None,
    ):
        self.adapter = adapter
        self.evidence_sink = evidence_sink
        self.policy = policy or DiffPolicy()

    def verify_round_trip(
        self,
        golden: Graph,
        source_format: FormatDescriptor,
        dest_format: FormatDescriptor,
        fixture_name: str = "graph",
    ) -> DiffResult:
        """Round-trip *golden* through *dest_format* and return the diff.

        Raises:
            EncodeError: If the adapter cannot encode the golden graph.
            DecodeError: If the adapter cannot decode its own output.
        """
        return self.run(golden, source_format, dest_format, fixture_name).diff

    def run(
        self,
        golden: Graph,
        source_format: FormatDescriptor,
        dest_format: FormatDescriptor,
        fixture_name: str = "graph",
    ) -> RoundTripOutcome:
        """Round-trip *golden* and persist evidence on mismatch."""
        test_id = round_trip_id(source_format, dest_format, fixture_name)
        logger.debug("Running %s", test_id)

        try:
            encoded = self.adapter.encode(golden, dest_format)
        except Exception as e:
            raise EncodeError(
                _reason(e),
                source_format=source_format,
                dest_format=dest_format,
                fixture=fixture_name,
            ) from e

        try:
            decoded = self.adapter.decode(encoded, dest_format)
        except Exception as e:
            raise DecodeError(
                _reason(e),
                source_format=source_format,
                dest_format=dest_format,
                fixture=fixture_name,
            ) from e

        outcome = RoundTripOutcome(
            fixture=fixture_name,
            source_format=source_format,
            dest_format=dest_format,
            diff=diff_graphs(golden, decoded, self.policy),
            encoded=encoded,
        )
        if outcome.passed:
            return outcome

        logger.warning(
            "%s: graphs differ (%s)\n%s",
            test_id,
            outcome.diff.summary(),
            outcome.diff.to_json(),
        )
        if self.evidence_sink is not None:
            try:
                outcome.evidence_path = self.evidence_sink.persist(
                    source_format, dest_format, fixture_name, encoded, outcome.diff
                )
                logger.warning("%s: evidence written to %s", test_id, outcome.evidence_path)
            except OSError as e:
                logger.error("%s: failed to write evidence: %s", test_id, e)
        return outcome

    def run_fixture(
        self,
        fixtures: GoldenFixtureSource,
        fixture: Path | str,
        source_format: FormatDescriptor,
        dest_format: FormatDescriptor,
    ) -> RoundTripOutcome:
        """Load the golden graph for *fixture* and round-trip it.

        Raises:
            FixtureLoadError: If the golden graph cannot be loaded.
        """
        try:
            golden = fixtures.load(fixture)
        except FixtureLoadError as e:
            raise FixtureLoadError(
                e.reason,
                source_format=source_format,
                dest_format=dest_format,
                fixture=str(fixture),
            ) from e
        return self.run(golden, source_format, dest_format, str(fixture))


__all__ = ["RoundTripHarness", "RoundTripOutcome", "round_trip_id"]
