"""
Exception hierarchy for vcfcons.

Fatal conditions abort the run before any consensus is written. Data-quality
problems are not exceptions; they are collected as diagnostics.
"""


class VcfConsError(Exception):
    """Base class for all vcfcons errors."""


class ConfigurationError(VcfConsError):
    """Raised when inputs cannot support a run (empty reference, no coverage)."""


class UnknownSequenceError(ConfigurationError, KeyError):
    """Raised when a call or lookup names a sequence absent from the reference."""

    def __init__(self, chrom: str):
        super().__init__(f"Sequence '{chrom}' not found in reference")
        self.chrom = chrom

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class NoDepthError(ConfigurationError):
    """Raised when no non-zero depth was observed, leaving the median undefined."""


class ZeroDepthError(VcfConsError, ValueError):
    """Raised when a consensus percentage is requested for a zero-depth record."""


class CallOrderError(VcfConsError, ValueError):
    """Raised when call records are not sorted by (sequence, position)."""


class InvalidPositionError(VcfConsError, ValueError):
    """Raised when a call position lies outside its reference sequence."""
