"""
Position Classifier: assigns every reference position a final status.

Call records arrive sorted by sequence (in blocks) and strictly increasing
position. Positions the caller never reported are uncovered and become
missing: before the first record of a sequence, between records, after the
last record, and whole sequences absent from the stream.

Status is kept as one uint8 array per sequence, indexed by position - 1.
"""

import logging
from collections.abc import Iterable
from enum import Enum

import numpy as np

from ..errors import CallOrderError, InvalidPositionError, UnknownSequenceError
from ..models.core import (
    CallRecord,
    Diagnostic,
    FilterConfig,
    FilterReason,
    FilterStats,
    MaskIndex,
    PositionStatus,
    ReferenceCatalog,
)
from .coverage import Candidate, CoverageTracker, DepthOutlierResult, filter_depth_outliers
from .filters import FilterEngine

logger = logging.getLogger(__name__)


class ScopeState(str, Enum):
    """Lifecycle of one sequence within the call stream."""
    BEFORE_FIRST_RECORD = "before_first_record"
    IN_SEQUENCE = "in_sequence"
    SEQUENCE_CLOSED = "sequence_closed"


class PositionClassifier:
    """
    Consumes call records and builds the candidate SNV and missing sets.

    Usage:
        classifier = PositionClassifier(catalog, FilterConfig(), mask)
        classifier.process_all(records)
        classifier.finalize()
    """

    def __init__(
        self,
        catalog: ReferenceCatalog,
        config: FilterConfig,
        mask: MaskIndex | None = None,
        coverage: CoverageTracker | None = None,
    ):
        self.catalog = catalog
        self.config = config
        self.engine = FilterEngine(config, mask)
        self.coverage = coverage if coverage is not None else CoverageTracker()
        self.stats = FilterStats()
        self.diagnostics: list[Diagnostic] = []

        self.status: dict[str, np.ndarray] = {
            seq.id: np.zeros(seq.length, dtype=np.uint8) for seq in catalog
        }
        self.candidates: dict[str, dict[int, Candidate]] = {seq.id: {} for seq in catalog}
        self.scopes: dict[str, ScopeState] = {
            seq.id: ScopeState.BEFORE_FIRST_RECORD for seq in catalog
        }

        self._current: str | None = None
        self._last_pos = 0
        self._finished = False
        self._outliers: DepthOutlierResult | None = None

    # ------------------------------------------------------------------
    # Phase 1: stream
    # ------------------------------------------------------------------

    def process_all(self, records: Iterable[CallRecord]) -> "PositionClassifier":
        for record in records:
            self.process(record)
        return self

    def process(self, record: CallRecord) -> None:
        if self._finished:
            raise RuntimeError("Classifier already finished; no more records accepted")

        chrom, pos = record.chrom, record.pos
        if chrom not in self.catalog:
            raise UnknownSequenceError(chrom)
        length = self.catalog.length_of(chrom)
        if pos > length:
            raise InvalidPositionError(
                f"Position {chrom}:{pos} is beyond the reference length ({length})"
            )

        if chrom != self._current:
            self._open(chrom)
            if pos > 1:
                self._mark_missing(chrom, 1, pos - 1)
        else:
            if pos <= self._last_pos:
                raise CallOrderError(
                    f"Calls out of order on {chrom}: position {pos} follows {self._last_pos}"
                )
            if pos > self._last_pos + 1:
                self._mark_missing(chrom, self._last_pos + 1, pos - 1)

        self.coverage.add(record.total_depth)

        if record.is_variant:
            self._classify_variant(record)
        elif record.total_depth < self.config.min_depth:
            # Non-variant position without enough coverage to confirm the reference
            self._mark_missing(chrom, pos, pos)

        self._last_pos = pos

    def _open(self, chrom: str) -> None:
        if self.scopes[chrom] is not ScopeState.BEFORE_FIRST_RECORD:
            raise CallOrderError(
                f"Calls for {chrom} resumed after other sequences; input must be sorted"
            )
        if self._current is not None:
            self._close_current()
        self.scopes[chrom] = ScopeState.IN_SEQUENCE
        self._current = chrom
        self._last_pos = 0

    def _close_current(self) -> None:
        chrom = self._current
        length = self.catalog.length_of(chrom)
        if self._last_pos < length:
            self._mark_missing(chrom, self._last_pos + 1, length)
        self.scopes[chrom] = ScopeState.SEQUENCE_CLOSED

    def _classify_variant(self, record: CallRecord) -> None:
        outcome = self.engine.evaluate(record)
        self.diagnostics.extend(outcome.diagnostics)

        if outcome.passed:
            self.candidates[record.chrom][record.pos] = Candidate(
                record.substitution_base, record.total_depth
            )
            self.status[record.chrom][record.pos - 1] = PositionStatus.ACCEPTED
            return

        self.stats.record_filtered(outcome.reasons)
        if FilterReason.BELOW_MIN_DEPTH in outcome.reasons:
            # Low-depth SNVs also count as uncovered
            self.stats.missing_or_uncovered += 1
        self.status[record.chrom][record.pos - 1] = PositionStatus.MISSING

    def _mark_missing(self, chrom: str, start: int, stop: int) -> None:
        """Mark the closed 1-based range [start, stop] uncovered."""
        if stop < start:
            return
        self.status[chrom][start - 1 : stop] = PositionStatus.MISSING
        self.stats.missing_or_uncovered += stop - start + 1

    def finish(self) -> None:
        """
        Close the stream: fill trailing positions of the last sequence and any
        sequence that never appeared.
        """
        if self._finished:
            return
        if self._current is not None:
            self._close_current()
        for chrom, state in self.scopes.items():
            if state is ScopeState.BEFORE_FIRST_RECORD:
                logger.warning("No calls for reference sequence %s; marking it uncovered", chrom)
                self._mark_missing(chrom, 1, self.catalog.length_of(chrom))
                self.scopes[chrom] = ScopeState.SEQUENCE_CLOSED
        self._finished = True

    # ------------------------------------------------------------------
    # Phase 2: depth outliers
    # ------------------------------------------------------------------

    def finalize(self) -> DepthOutlierResult:
        """
        Finish the stream and drop candidates above median * max_fold.

        Raises:
            NoDepthError: if the stream had no non-zero depth.
        """
        if self._outliers is not None:
            return self._outliers
        self.finish()
        median = self.coverage.median()
        result = filter_depth_outliers(self.candidates, median, self.config.max_fold)
        self.apply_depth_outliers(result)
        self._outliers = result
        return result

    def apply_depth_outliers(self, result: DepthOutlierResult) -> None:
        for chrom, pos in result.rejected:
            self.status[chrom][pos - 1] = PositionStatus.MISSING
            self.stats.record_filtered([FilterReason.ABOVE_MAX_DEPTH])
        self.candidates = result.accepted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def total_snvs(self) -> int:
        return sum(len(by_pos) for by_pos in self.candidates.values())

    def status_of(self, chrom: str, pos: int) -> PositionStatus:
        return PositionStatus(int(self.status[chrom][pos - 1]))

    def missing_positions(self, chrom: str) -> list[int]:
        return (np.flatnonzero(self.status[chrom] == PositionStatus.MISSING) + 1).tolist()
