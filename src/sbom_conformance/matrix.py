"""Conformance matrix: the (source, destination, fixture) units to exercise.

A matrix is a list of named cases, each naming a source format, a
destination format and the fixtures written in the source format.  It
is either configured explicitly (the usual, curated subset) or built as
the full cross product of a registry's formats and discovered fixtures.

Configuration file layout::

    {
      "cases": [
        {
          "name": "cdx_1.5_to_spdx_2.3",
          "source": "application/vnd.cyclonedx+json;version=1.5",
          "destination": "text/spdx+json;version=2.3",
          "fixtures": ["cyclonedx/1.5/json/bom-1.5.json"]
        }
      ]
    }

Public API:
    ConformanceCase: One named (source, destination, fixtures) case.
    UnitError: A unit aborted by a fixture, encode or decode error.
    MatrixReport: Outcomes and errors of a matrix run.
    ConformanceMatrix: The cases, plus loading and concurrent execution.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

from .exceptions import RoundTripError
from .fixtures import GoldenFixtureSource
from .formats.descriptor import FormatDescriptor
from .harness import RoundTripHarness, RoundTripOutcome, round_trip_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConformanceCase:
    """A named set of round trips sharing one format pair."""

    name: str
    source_format: FormatDescriptor
    dest_format: FormatDescriptor
    fixtures: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConformanceCase:
        """Build a case from its configuration entry.

        Raises:
            ValueError: If a required key is missing.
            UnknownFormatError: If a format string cannot be parsed.
        """
        missing = [k for k in ("name", "source", "destination") if k not in data]
        if missing:
            raise ValueError(f"Conformance case is missing {', '.join(missing)}")
        return cls(
            name=str(data["name"]),
            source_format=FormatDescriptor.parse(data["source"]),
            dest_format=FormatDescriptor.parse(data["destination"]),
            fixtures=tuple(str(f) for f in data.get("fixtures", [])),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "source": str(self.source_format),
            "destination": str(self.dest_format),
            "fixtures": list(self.fixtures),
        }


@dataclass
class UnitError:
    case: ConformanceCase
    fixture: str
    error: RoundTripError

    @property
    def test_id(self) -> str:
        return round_trip_id(self.case.source_format, self.case.dest_format, self.fixture)


@dataclass
class MatrixReport:
    """Results of running a matrix, in (case, fixture) order."""

    outcomes: list[RoundTripOutcome] = field(default_factory=list)
    errors: list[UnitError] = field(default_factory=list)

    @property
    def failures(self) -> list[RoundTripOutcome]:
        return [o for o in self.outcomes if not o.passed]

    @property
    def passed(self) -> bool:
        return not self.errors and not self.failures

    def summary(self) -> str:
        lines = [
            f"{len(self.outcomes) + len(self.errors)} round trips: "
            f"{len(self.outcomes) - len(self.failures)} passed, "
            f"{len(self.failures)} failed, {len(self.errors)} errors"
        ]
        for outcome in self.failures:
            line = f"FAIL {outcome.test_id}: {outcome.diff.summary()}"
            if outcome.evidence_path is not None:
                line += f" (evidence: {outcome.evidence_path})"
            lines.append(line)
        for unit_error in self.errors:
            lines.append(f"ERROR {unit_error.test_id}: {unit_error.error}")
        return "\n".join(lines)


class ConformanceMatrix:
    """An ordered collection of conformance cases."""

    def __init__(self, cases: Iterable[ConformanceCase] = ()):
        self.cases = list(cases)

    # ── construction ──────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConformanceMatrix:
        return cls(ConformanceCase.from_dict(c) for c in data.get("cases", []))

    @classmethod
    def load(cls, path: Path | str) -> ConformanceMatrix:
        """Load a matrix from a JSON configuration file."""
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def full(
        cls,
        formats: Iterable[FormatDescriptor],
        fixture_source: GoldenFixtureSource,
    ) -> ConformanceMatrix:
        """Cross product of *formats* with every discovered fixture.

        Source formats without fixtures contribute no cases.
        """
        formats = list(formats)
        cases = []
        for source in formats:
            fixtures = tuple(str(p) for p in fixture_source.discover(source))
            if not fixtures:
                continue
            for dest in formats:
                cases.append(
                    ConformanceCase(
                        name=f"{source.slug}_to_{dest.slug}",
                        source_format=source,
                        dest_format=dest,
                        fixtures=fixtures,
                    )
                )
        return cls(cases)

    def to_dict(self) -> dict[str, Any]:
        return {"cases": [c.to_dict() for c in self.cases]}

    # ── execution ─────────────────────────────────────────────

    def units(self) -> Iterator[tuple[ConformanceCase, str]]:
        for case in self.cases:
            for fixture in case.fixtures:
                yield case, fixture

    def __len__(self) -> int:
        return sum(len(c.fixtures) for c in self.cases)

    def run(
        self,
        harness: RoundTripHarness,
        fixture_source: GoldenFixtureSource,
        max_workers: int | None = None,
    ) -> MatrixReport:
        """Run every unit concurrently and collect a report.

        Fixture, encode and decode errors abort only their own unit.

        Args:
            harness: Harness to run each unit with.
            fixture_source: Where golden graphs are loaded from.
            max_workers: Thread pool size; None lets the executor decide.
        """

        def run_unit(unit: tuple[ConformanceCase, str]) -> RoundTripOutcome | UnitError:
            case, fixture = unit
            try:
                return harness.run_fixture(
                    fixture_source, fixture, case.source_format, case.dest_format
                )
            except RoundTripError as e:
                logger.error("%s: %s", case.name, e)
                return UnitError(case=case, fixture=fixture, error=e)

        report = MatrixReport()
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            for result in executor.map(run_unit, list(self.units())):
                if isinstance(result, UnitError):
                    report.errors.append(result)
                else:
                    report.outcomes.append(result)

        logger.info(report.summary().splitlines()[0])
        return report


__all__ = ["ConformanceCase", "ConformanceMatrix", "MatrixReport", "UnitError"]
