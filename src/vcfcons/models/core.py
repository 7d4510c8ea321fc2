"""
Core data models for vcfcons.
"""

from collections.abc import Iterable, Iterator
from enum import Enum, IntEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from ..errors import ConfigurationError, UnknownSequenceError, ZeroDepthError

HOMOZYGOUS_GENOTYPES = frozenset({"1/1", "1"})
NO_ALT = "."
GAP = "-"


class FilterReason(str, Enum):
    """Reason a candidate SNV was rejected."""
    BELOW_MIN_QUAL = "below_min_qual"
    BELOW_MIN_CONSENSUS = "below_min_consensus"
    BELOW_MIN_DEPTH = "below_min_depth"
    ABOVE_MAX_DEPTH = "above_max_depth"
    UNIDIRECTIONAL = "unidirectional"
    NON_HOMOZYGOUS = "non_homozygous"
    MASKED = "masked"


class PositionStatus(IntEnum):
    """Final state of one reference position."""
    REFERENCE = 0
    ACCEPTED = 1
    MISSING = 2


class FilterConfig(BaseModel):
    """
    Thresholds applied to every candidate SNV.

    min_qual defaults to 200. Older usage text for the same filter advertised
    a default of 1; callers that relied on that must set it explicitly.
    """
    min_qual: float = Field(default=200, ge=0, description="Minimum SNV quality score")
    min_consensus_pct: float = Field(
        default=75, ge=0, le=100, description="Minimum percent of reads supporting ALT"
    )
    min_depth: int = Field(default=5, ge=0, description="Minimum total read depth")
    max_fold: float = Field(default=3, gt=0, description="Maximum depth, in fold of median")
    min_dir_depth: int = Field(default=1, ge=0, description="Minimum ALT reads per strand")
    require_homozygous: bool = True


class ConsensusConfig(BaseModel):
    """
    Global configuration for a vcfcons run.
    """
    # Input
    calls_file: Path  # "-" reads stdin
    reference_fasta: Path
    mask_file: Path | None = None

    # Output
    output_file: Path | None = None  # stdout when unset
    stats_file: Path | None = None
    output_id: str | None = None
    line_width: int = Field(default=0, ge=0)

    filters: FilterConfig = Field(default_factory=FilterConfig)

    @field_validator("calls_file")
    @classmethod
    def validate_calls_file(cls, v: Path) -> Path:
        if str(v) != "-" and not v.exists():
            raise ValueError(f"File not found: {v}")
        return v

    @field_validator("reference_fasta", "mask_file")
    @classmethod
    def validate_file_exists(cls, v: Path | None) -> Path | None:
        if v is not None and not v.exists():
            raise ValueError(f"File not found: {v}")
        return v

    @field_validator("output_id")
    @classmethod
    def validate_output_id(cls, v: str | None) -> str | None:
        if v is not None and (not v or any(c.isspace() for c in v)):
            raise ValueError("Output ID must be non-empty and contain no whitespace")
        return v


class ReferenceSequence(BaseModel):
    """One reference sequence. Bases keep their original case."""
    model_config = ConfigDict(frozen=True)

    id: str
    bases: str
    length: int = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def fill_length(cls, data):
        if isinstance(data, dict) and data.get("length") is None and "bases" in data:
            data = {**data, "length": len(data["bases"])}
        return data

    @model_validator(mode="after")
    def validate_length(self) -> "ReferenceSequence":
        if self.length != len(self.bases):
            raise ValueError(
                f"Length of '{self.id}' ({self.length}) does not match its bases ({len(self.bases)})"
            )
        return self


class ReferenceCatalog:
    """
    Ordered, read-only collection of reference sequences.
    """

    def __init__(self, sequences: Iterable[ReferenceSequence]):
        self._sequences = tuple(sequences)
        if not self._sequences:
            raise ConfigurationError("Reference catalog is empty")
        self._by_id: dict[str, ReferenceSequence] = {}
        for seq in self._sequences:
            if seq.id in self._by_id:
                raise ConfigurationError(f"Duplicate reference sequence ID: {seq.id}")
            self._by_id[seq.id] = seq

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "ReferenceCatalog":
        return cls(ReferenceSequence(id=seq_id, bases=bases) for seq_id, bases in pairs)

    def __iter__(self) -> Iterator[ReferenceSequence]:
        return iter(self._sequences)

    def __len__(self) -> int:
        return len(self._sequences)

    def __contains__(self, seq_id: object) -> bool:
        return seq_id in self._by_id

    def __getitem__(self, seq_id: str) -> ReferenceSequence:
        try:
            return self._by_id[seq_id]
        except KeyError:
            raise UnknownSequenceError(seq_id) from None

    @property
    def ids(self) -> list[str]:
        return [seq.id for seq in self._sequences]

    def length_of(self, seq_id: str) -> int:
        return self[seq_id].length

    @property
    def total_length(self) -> int:
        return sum(seq.length for seq in self._sequences)


class MaskIndex:
    """
    Externally masked 1-based positions, per sequence id.
    """

    def __init__(self):
        self._positions: dict[str, set[int]] = {}

    def add(self, seq_id: str, pos: int) -> None:
        self._positions.setdefault(seq_id, set()).add(pos)

    def add_interval(self, seq_id: str, start: int, stop: int) -> None:
        """Mask the closed interval [start, stop]."""
        if stop < start:
            raise ValueError(f"Mask interval end ({stop}) must be >= start ({start})")
        self._positions.setdefault(seq_id, set()).update(range(start, stop + 1))

    def is_masked(self, seq_id: str, pos: int) -> bool:
        positions = self._positions.get(seq_id)
        return positions is not None and pos in positions

    def positions(self, seq_id: str) -> frozenset[int]:
        return frozenset(self._positions.get(seq_id, ()))

    def __len__(self) -> int:
        return sum(len(p) for p in self._positions.values())


class CallRecord(BaseModel):
    """
    One position of caller output, already parsed.

    dp4 holds (forward ref, reverse ref, forward alt, reverse alt) read counts.
    """
    model_config = ConfigDict(frozen=True)

    chrom: str
    pos: int = Field(ge=1, description="1-based position")
    alt: str = NO_ALT
    qual: float = 0.0
    dp4: tuple[int, int, int, int] = (0, 0, 0, 0)
    total_depth: int = Field(default=0, ge=0)
    genotype: str | None = None

    @property
    def is_variant(self) -> bool:
        return self.alt != NO_ALT

    @property
    def substitution_base(self) -> str:
        """First listed ALT allele; further alleles of a multi-allelic site are ignored."""
        return self.alt.split(",")[0]

    @property
    def forward_alt(self) -> int:
        return self.dp4[2]

    @property
    def reverse_alt(self) -> int:
        return self.dp4[3]

    @property
    def consensus_pct(self) -> float:
        if self.total_depth == 0:
            raise ZeroDepthError(
                f"Cannot compute consensus at {self.chrom}:{self.pos}: total depth is 0"
            )
        return 100 * (self.forward_alt + self.reverse_alt) / self.total_depth


class Diagnostic(BaseModel):
    """A non-fatal data-quality warning raised while reading calls."""
    kind: str
    chrom: str
    pos: int
    message: str


class FilterStats(BaseModel):
    """
    Per-reason filter counts.

    A record may raise several reason counters but contributes at most once to
    total_filtered and at most once to missing_or_uncovered.
    """
    below_min_qual: int = 0
    below_min_consensus: int = 0
    below_min_depth: int = 0
    above_max_depth: int = 0
    unidirectional: int = 0
    non_homozygous: int = 0
    masked: int = 0
    missing_or_uncovered: int = 0
    total_filtered: int = 0

    def record_filtered(self, reasons: Iterable[FilterReason]) -> None:
        for reason in reasons:
            setattr(self, reason.value, getattr(self, reason.value) + 1)
        self.total_filtered += 1

    def count(self, reason: FilterReason) -> int:
        return getattr(self, reason.value)


class ConsensusRecord(BaseModel):
    """One emitted consensus sequence."""
    id: str
    source_id: str
    sequence: str


class ConsensusSummary(BaseModel):
    """Run statistics, available without parsing any printed report."""
    stats: FilterStats
    filters: FilterConfig
    total_length: int
    total_snvs: int
    num_depths: int
    median_depth: float
    max_observed_depth: int
    max_depth_threshold: float

    @computed_field
    @property
    def percent_covered(self) -> float:
        if self.total_length == 0:
            return 0.0
        covered = self.total_length - self.stats.missing_or_uncovered
        return min(100.0, max(0.0, 100 * covered / self.total_length))
