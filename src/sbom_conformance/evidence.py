"""Evidence sink for failed round trips.

Persists the destination-format bytes and the diff report so a failing
conformance pair can be inspected offline.  Layout::

    <root>/<srcType>-<srcVersion>/<dstType>-<dstVersion>/<fixture>/
        diff.json
        dst.<dstType>.<dstEncoding>

Keys are unique per (source, destination, fixture) unit, so concurrent
units write to disjoint directories without coordination.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .diff import DiffResult
from .formats.descriptor import FormatDescriptor

logger = logging.getLogger(__name__)

DEFAULT_EVIDENCE_ROOT = Path(".tmp") / "diff"
DIFF_REPORT_NAME = "diff.json"


class EvidenceSink:
    """Writes round-trip evidence under a scratch root.

    Attributes:
        root: Directory that holds all evidence for a conformance run.
    """

    def __init__(self, root: Path | str | None = None):
        self.root = Path(root) if root is not None else DEFAULT_EVIDENCE_ROOT

    def evidence_dir(
        self,
        source_format: FormatDescriptor,
        dest_format: FormatDescriptor,
        fixture_name: str,
    ) -> Path:
        """Return the evidence directory for a unit without creating it."""
        return (
            self.root
            / source_format.evidence_key
            / dest_format.evidence_key
            / Path(fixture_name).name
        )

    def persist(
        self,
        source_format: FormatDescriptor,
        dest_format: FormatDescriptor,
        fixture_name: str,
        encoded: bytes,
        diff: DiffResult,
    ) -> Path:
        """Write the diff report and destination bytes.

        Returns:
            The evidence directory.

        Raises:
            OSError: If the directory or files cannot be written.
        """
        target = self.evidence_dir(source_format, dest_format, fixture_name)
        target.mkdir(parents=True, exist_ok=True)

        (target / DIFF_REPORT_NAME).write_text(diff.to_json(indent=2), encoding="utf-8")
        (target / f"dst.{dest_format.type}.{dest_format.encoding}").write_bytes(encoded)

        logger.debug("Wrote round-trip evidence to %s", target)
        return target


__all__ = ["EvidenceSink", "DEFAULT_EVIDENCE_ROOT", "DIFF_REPORT_NAME"]
