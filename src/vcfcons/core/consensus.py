"""
Consensus Emitter: renders the final sequence for every reference sequence.

Per position, in priority order: accepted SNV base, gap for missing or
filtered, otherwise the reference base.
"""

from collections.abc import Mapping

import numpy as np

from ..models.core import GAP, ConsensusRecord, PositionStatus, ReferenceCatalog
from .coverage import Candidate


class ConsensusEmitter:
    """
    Builds ConsensusRecords in catalog order.

    With an output ID override, a single-sequence reference is renamed to the
    override; several sequences are prefixed as "<override>_<id>".
    """

    def __init__(self, catalog: ReferenceCatalog, output_id: str | None = None):
        self.catalog = catalog
        self.output_id = output_id

    def output_id_for(self, seq_id: str) -> str:
        if self.output_id is None:
            return seq_id
        if len(self.catalog) == 1:
            return self.output_id
        return f"{self.output_id}_{seq_id}"

    def emit(
        self,
        status: Mapping[str, np.ndarray],
        accepted: Mapping[str, Mapping[int, Candidate]],
    ) -> list[ConsensusRecord]:
        records = []
        for seq in self.catalog:
            bases = list(seq.bases)
            for idx in np.flatnonzero(status[seq.id] == PositionStatus.MISSING):
                bases[idx] = GAP
            for pos, candidate in accepted.get(seq.id, {}).items():
                bases[pos - 1] = candidate.base
            records.append(
                ConsensusRecord(
                    id=self.output_id_for(seq.id),
                    source_id=seq.id,
                    sequence="".join(bases),
                )
            )
        return records
