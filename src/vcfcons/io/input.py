"""
Input Adapters: reference FASTA, mask intervals and call VCFs.

Readers turn files into the immutable inputs of the core: a ReferenceCatalog,
a MaskIndex and a stream of CallRecords.
"""

import logging
import re
from collections.abc import Iterator
from pathlib import Path

import pysam

from ..models.core import (
    NO_ALT,
    CallRecord,
    Diagnostic,
    MaskIndex,
    ReferenceCatalog,
    ReferenceSequence,
)

logger = logging.getLogger(__name__)

_MASK_INTERVAL = re.compile(r"^(\d+) - (\d+)")


def read_reference(path: Path) -> ReferenceCatalog:
    """
    Load an ordered reference catalog from a FASTA file.

    The ID of each sequence is its name up to the first whitespace; bases
    keep their case.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Reference FASTA not found: {path}")

    sequences = []
    with pysam.FastxFile(str(path)) as fasta:
        for entry in fasta:
            seq = ReferenceSequence(id=entry.name, bases=entry.sequence or "")
            logger.info("%s: %d bp", seq.id, seq.length)
            sequences.append(seq)

    catalog = ReferenceCatalog(sequences)
    logger.info("Total sequence length: %d", catalog.total_length)
    return catalog


def read_mask_file(path: Path) -> MaskIndex:
    """
    Load masked intervals in NCBI dustmaker interval format.

    >chromosome_name
    209 - 215
    415 - 421
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Mask file not found: {path}")

    mask = MaskIndex()
    seq_id: str | None = None
    intervals = 0
    with open(path) as f:
        for line in f:
            line = line.rstrip("\n")
            if line.startswith(">"):
                seq_id = line[1:].split(maxsplit=1)[0] if line[1:].strip() else ""
                continue
            match = _MASK_INTERVAL.match(line)
            if match is None:
                continue
            if seq_id is None:
                raise ValueError(f"Mask interval before any sequence header in {path}: {line}")
            intervals += 1
            mask.add_interval(seq_id, int(match.group(1)), int(match.group(2)))

    logger.info("Total of %d masked positions in %d intervals.", len(mask), intervals)
    return mask


class VcfCallReader:
    """
    Reads per-position calls from a single-sample VCF.

    Depth comes from INFO/DP4 when its sum is non-zero, else FORMAT/DP. Depth
    inconsistencies and missing fields are collected in ``diagnostics`` and
    logged; they never stop the stream.
    """

    def __init__(self, path: Path | str):
        self.path = path
        self._vcf = pysam.VariantFile(str(path))
        self.diagnostics: list[Diagnostic] = []

    def __iter__(self) -> Iterator[CallRecord]:
        for record in self._vcf:
            yield self._to_call(record)

    def __enter__(self) -> "VcfCallReader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self):
        self._vcf.close()

    def _warn(self, kind: str, record, message: str) -> None:
        diagnostic = Diagnostic(kind=kind, chrom=record.chrom, pos=record.pos, message=message)
        self.diagnostics.append(diagnostic)
        logger.warning("%s\n%s", message, str(record).rstrip("\n"))

    def _to_call(self, record) -> CallRecord:
        sample = record.samples[list(record.samples)[0]] if len(record.samples) else None

        dp4 = _dp4(record)
        fmt_dp = None
        if sample is not None and "DP" in record.format:
            fmt_dp = sample["DP"]

        if any(dp4):
            total_depth = sum(dp4)
            if fmt_dp is None or fmt_dp != total_depth:
                self._warn("dp4_dp_mismatch", record, "DP4 does not match DP")
        else:
            if fmt_dp is None:
                self._warn("missing_dp", record, "No DP value in FORMAT section")
            total_depth = fmt_dp or 0

        genotype = None
        if sample is not None and "GT" in record.format:
            genotype = _render_genotype(sample["GT"], sample.phased)

        return CallRecord(
            chrom=record.chrom,
            pos=record.pos,
            alt=",".join(record.alts) if record.alts else NO_ALT,
            qual=record.qual if record.qual is not None else 0.0,
            dp4=dp4,
            total_depth=total_depth,
            genotype=genotype,
        )


def _dp4(record) -> tuple[int, int, int, int]:
    if "DP4" not in record.info:
        return (0, 0, 0, 0)
    value = record.info["DP4"]
    if isinstance(value, str):
        value = value.split(",")
    counts = tuple(int(v) if v is not None else 0 for v in value)
    if len(counts) != 4:
        raise ValueError(f"Malformed DP4 at {record.chrom}:{record.pos}: {value}")
    return counts


def _render_genotype(alleles, phased: bool) -> str | None:
    if alleles is None or all(a is None for a in alleles):
        return None
    sep = "|" if phased else "/"
    return sep.join("." if a is None else str(a) for a in alleles)
