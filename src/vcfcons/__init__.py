"""
vcfcons - SNV filtering and reference consensus from per-position VCF calls.

This package provides a command-line interface and Python API for filtering
candidate SNVs by quality, consensus, depth, strand support, genotype and
masking, and for substituting the survivors into the reference sequence.

Example usage:
    $ vcfcons filter calls.vcf -f reference.fa --output consensus.fa
"""

__version__ = "1.0.0"

from .models.core import ConsensusConfig, FilterConfig, FilterStats, MaskIndex, ReferenceCatalog
from .pipeline import ConsensusResult, Pipeline, build_consensus

__all__ = [
    "__version__",
    "ConsensusConfig",
    "ConsensusResult",
    "FilterConfig",
    "FilterStats",
    "MaskIndex",
    "Pipeline",
    "ReferenceCatalog",
    "build_consensus",
]
