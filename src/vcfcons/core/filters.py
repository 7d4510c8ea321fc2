"""
Filter Engine: the SNV acceptance criteria.

Every check is evaluated for every variant record, so a single record can
fail several criteria at once. Filtering is an expected outcome, not an
error: nothing here logs above DEBUG.
"""

import logging
from dataclasses import dataclass, field

from ..models.core import (
    HOMOZYGOUS_GENOTYPES,
    CallRecord,
    Diagnostic,
    FilterConfig,
    FilterReason,
    MaskIndex,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterOutcome:
    """Failed criteria for one record, plus any data-quality warnings."""

    reasons: frozenset[FilterReason] = frozenset()
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        return not self.reasons


class FilterEngine:
    """
    Evaluates the filter chain against single call records.
    """

    def __init__(self, config: FilterConfig, mask: MaskIndex | None = None):
        self.config = config
        self.mask = mask if mask is not None else MaskIndex()

    def evaluate(self, record: CallRecord) -> FilterOutcome:
        """
        Return every criterion the record fails.

        Raises:
            ZeroDepthError: if the record has no depth, since the consensus
                percentage is undefined.
        """
        cfg = self.config
        reasons: set[FilterReason] = set()
        diagnostics: list[Diagnostic] = []

        if record.qual < cfg.min_qual:
            reasons.add(FilterReason.BELOW_MIN_QUAL)

        if record.consensus_pct < cfg.min_consensus_pct:
            reasons.add(FilterReason.BELOW_MIN_CONSENSUS)

        if record.total_depth < cfg.min_depth:
            reasons.add(FilterReason.BELOW_MIN_DEPTH)

        if record.forward_alt < cfg.min_dir_depth or record.reverse_alt < cfg.min_dir_depth:
            reasons.add(FilterReason.UNIDIRECTIONAL)

        if record.genotype is None:
            diagnostic = Diagnostic(
                kind="missing_gt",
                chrom=record.chrom,
                pos=record.pos,
                message="Variant position without GT value",
            )
            logger.warning("%s:%d: %s", record.chrom, record.pos, diagnostic.message)
            diagnostics.append(diagnostic)

        if cfg.require_homozygous and record.genotype not in HOMOZYGOUS_GENOTYPES:
            reasons.add(FilterReason.NON_HOMOZYGOUS)

        if self.mask.is_masked(record.chrom, record.pos):
            reasons.add(FilterReason.MASKED)

        if reasons:
            logger.debug(
                "Filtered %s:%d (%s)",
                record.chrom,
                record.pos,
                ", ".join(sorted(r.value for r in reasons)),
            )
        return FilterOutcome(frozenset(reasons), tuple(diagnostics))
