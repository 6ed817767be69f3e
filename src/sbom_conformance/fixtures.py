"""Golden fixture source: loads pre-validated canonical graphs.

A fixture is addressed by the path of its original document (for
example ``cyclonedx/1.5/json/bom-1.5.json``); the golden graph lives
next to it with a fixed suffix denoting the canonical format
(``bom-1.5.json.canonical.json``).
"""

from __future__ import annotations

from pathlib import Path

from .exceptions import FixtureLoadError, RoundTripError
from .formats.descriptor import CANONICAL_JSON, FormatDescriptor
from .graph.protocol import FormatAdapter
from .graph.types import Graph

DEFAULT_SUFFIX = ".canonical.json"


class GoldenFixtureSource:
    """Loads golden graphs from a fixture tree.

    Args:
        root: Directory that relative fixture paths are resolved against.
        adapter: Adapter able to decode *canonical_format*.
        suffix: Suffix appended to a fixture path to find its golden graph.
        canonical_format: Format the golden files are written in.
    """

    def __init__(
        self,
        root: Path | str,
        adapter: FormatAdapter,
        suffix: str = DEFAULT_SUFFIX,
        canonical_format: FormatDescriptor = CANONICAL_JSON,
    ):
        self.root = Path(root)
        self.adapter = adapter
        self.suffix = suffix
        self.canonical_format = canonical_format

    def golden_path(self, fixture: Path | str) -> Path:
        path = Path(fixture)
        if not path.is_absolute():
            path = self.root / path
        return path.with_name(path.name + self.suffix)

    def load(self, fixture: Path | str) -> Graph:
        """Load the golden graph for *fixture*.

        Raises:
            FixtureLoadError: If the golden file is missing or cannot be decoded.
        """
        golden = self.golden_path(fixture)
        try:
            data = golden.read_bytes()
        except OSError as e:
            raise FixtureLoadError(
                f"cannot read {golden}: {e.strerror or e}", fixture=str(fixture)
            ) from e

        try:
            return self.adapter.decode(data, self.canonical_format)
        except Exception as e:
            reason = e.reason if isinstance(e, RoundTripError) else str(e) or type(e).__name__
            raise FixtureLoadError(reason, fixture=str(fixture)) from e

    def discover(self, fmt: FormatDescriptor) -> list[Path]:
        """List fixtures written in *fmt* that have a golden companion.

        Fixtures live under ``<root>/<type>/<version>/<encoding>/``.
        Returned paths are relative to the root and sorted.
        """
        directory = self.root / fmt.type / fmt.version / fmt.encoding
        if not directory.is_dir():
            return []
        found = []
        for path in sorted(directory.iterdir()):
            if not path.is_file() or path.name.endswith(self.suffix):
                continue
            if self.golden_path(path).is_file():
                found.append(path.relative_to(self.root))
        return found


__all__ = ["GoldenFixtureSource", "DEFAULT_SUFFIX"]
