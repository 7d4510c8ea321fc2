"""
Data models for vcfcons.

Provides Pydantic models for configuration, call records, reference
sequences and run statistics.
"""

from .core import (
    CallRecord,
    ConsensusConfig,
    ConsensusRecord,
    ConsensusSummary,
    Diagnostic,
    FilterConfig,
    FilterReason,
    FilterStats,
    MaskIndex,
    PositionStatus,
    ReferenceCatalog,
    ReferenceSequence,
)

__all__ = [
    "CallRecord",
    "ConsensusConfig",
    "ConsensusRecord",
    "ConsensusSummary",
    "Diagnostic",
    "FilterConfig",
    "FilterReason",
    "FilterStats",
    "MaskIndex",
    "PositionStatus",
    "ReferenceCatalog",
    "ReferenceSequence",
]
