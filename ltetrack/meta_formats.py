"""Ordering of DCI formats by how often they were found."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass
class MetaFormat:
    """A DCI format with its position in the full list and its hit count."""

    format: Any
    global_index: int
    hits: int = 0


class DCIMetaFormats:
    """Splits DCI formats into a primary and a secondary set by hit frequency.

    Formats are ranked by hits; the most frequent ones, up to ``split_ratio``
    of all hits, become primary and the rest secondary.
    """

    def __init__(self, formats: Iterable[Any], split_ratio: float) -> None:
        self.all_formats = [MetaFormat(fmt, i) for i, fmt in enumerate(formats)]
        self.primary: list[MetaFormat] = []
        self.secondary: list[MetaFormat] = []
        self.skip_secondary = False
        self.split_ratio = split_ratio
        self.update_formats()

    def hit(self, index: int) -> None:
        """Count one detection of the format at ``index`` in the full list."""
        self.all_formats[index].hits += 1

    def update_formats(self) -> None:
        """Re-rank the formats by hits, split them and reset the hit counts."""
        ranked = list(self.all_formats)
        total_hits = sum(f.hits for f in ranked)
        n = len(ranked)
        for i in range(n - 1):
            best = max(range(i, n), key=lambda j: ranked[j].hits)
            ranked[i], ranked[best] = ranked[best], ranked[i]

        threshold = total_hits * self.split_ratio
        cumulation = 0
        self.primary = []
        self.secondary = []
        for fmt in ranked:
            (self.primary if cumulation <= threshold else self.secondary).append(fmt)
            cumulation += fmt.hits
            fmt.hits = 0

    def describe(self) -> str:
        """List the primary and the secondary formats, one per line."""
        lines = ["Primary DCI meta formats:"]
        lines.extend(str(f.format) for f in self.primary)
        lines.append("Secondary DCI meta formats:")
        lines.extend(str(f.format) for f in self.secondary)
        return "\n".join(lines) + "\n"