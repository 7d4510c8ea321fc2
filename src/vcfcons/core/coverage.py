"""
Coverage tracking and the depth-outlier pass.

The maximum-depth threshold is a multiple of the median depth over the whole
call stream, so SNV acceptance stays provisional until the stream is drained
and filter_depth_outliers() has run.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from ..errors import NoDepthError


class Candidate(NamedTuple):
    """A provisionally accepted SNV."""

    base: str
    depth: int


class CoverageTracker:
    """
    Collects the total depth of every processed record, zero depths excluded.

    Depths are raw coverage across the genome, whether or not the record was
    a variant or was filtered.
    """

    def __init__(self):
        self._depths: list[int] = []

    def add(self, depth: int) -> None:
        if depth != 0:
            self._depths.append(depth)

    @property
    def count(self) -> int:
        return len(self._depths)

    def median(self) -> float:
        """
        Median of the observed depths; even counts average the two middle values.

        Raises:
            NoDepthError: if no non-zero depth was observed.
        """
        n = len(self._depths)
        if n == 0:
            raise NoDepthError("No depth observations in call stream; median depth is undefined")
        depths = np.sort(np.asarray(self._depths, dtype=np.int64))
        if n % 2 == 0:
            return (int(depths[n // 2 - 1]) + int(depths[n // 2])) / 2
        return float(depths[(n - 1) // 2])

    def max_observed(self) -> int:
        return max(self._depths, default=0)


@dataclass(frozen=True)
class DepthOutlierResult:
    threshold: float
    accepted: dict[str, dict[int, Candidate]]
    rejected: list[tuple[str, int]]


def filter_depth_outliers(
    candidates: Mapping[str, Mapping[int, Candidate]], median: float, max_fold: float
) -> DepthOutlierResult:
    """
    Split candidates at median * max_fold.

    Candidates whose depth is strictly above the threshold are rejected; the
    input mapping is left untouched.
    """
    threshold = median * max_fold
    accepted: dict[str, dict[int, Candidate]] = {}
    rejected: list[tuple[str, int]] = []

    for chrom, by_pos in candidates.items():
        kept = accepted.setdefault(chrom, {})
        for pos in sorted(by_pos):
            candidate = by_pos[pos]
            if candidate.depth > threshold:
                rejected.append((chrom, pos))
            else:
                kept[pos] = candidate

    return DepthOutlierResult(threshold=threshold, accepted=accepted, rejected=rejected)
