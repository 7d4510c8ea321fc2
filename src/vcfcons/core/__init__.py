"""
Core module for vcfcons.

Provides the filter engine, position classifier, coverage tracking and
consensus emission.
"""

from .classifier import PositionClassifier, ScopeState
from .consensus import ConsensusEmitter
from .coverage import Candidate, CoverageTracker, DepthOutlierResult, filter_depth_outliers
from .filters import FilterEngine, FilterOutcome

__all__ = [
    "Candidate",
    "ConsensusEmitter",
    "CoverageTracker",
    "DepthOutlierResult",
    "FilterEngine",
    "FilterOutcome",
    "PositionClassifier",
    "ScopeState",
    "filter_depth_outliers",
]
