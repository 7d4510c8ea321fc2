"""Pytest configuration and fixtures."""

import sys
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Add src directory to path so tests use local code, not installed package
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from vcfcons.models.core import CallRecord, FilterConfig, ReferenceCatalog  # noqa: E402

VCF_HEADER = [
    "##fileformat=VCFv4.1",
    '##INFO=<ID=DP4,Number=4,Type=Integer,Description="# high-quality ref-forward bases, ref-reverse, alt-forward and alt-reverse bases">',
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
    '##FORMAT=<ID=DP,Number=1,Type=Integer,Description="# high-quality bases">',
]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_call() -> Callable[..., CallRecord]:
    """
    Factory for call records. Defaults describe an SNV passing every default
    filter: QUAL 222, DP4 0,0,5,5, homozygous ALT.
    """

    def _make(pos: int, chrom: str = "chr1", **kwargs) -> CallRecord:
        values = {
            "alt": "T",
            "qual": 222.0,
            "dp4": (0, 0, 5, 5),
            "total_depth": 10,
            "genotype": "1/1",
        }
        values.update(kwargs)
        return CallRecord(chrom=chrom, pos=pos, **values)

    return _make


@pytest.fixture
def make_ref_call() -> Callable[..., CallRecord]:
    """Factory for non-variant (ALT=.) call records."""

    def _make(pos: int, chrom: str = "chr1", depth: int = 10) -> CallRecord:
        return CallRecord(
            chrom=chrom,
            pos=pos,
            alt=".",
            qual=50.0,
            dp4=(depth // 2, depth - depth // 2, 0, 0),
            total_depth=depth,
            genotype="0/0",
        )

    return _make


@pytest.fixture
def catalog() -> ReferenceCatalog:
    return ReferenceCatalog.from_pairs([("chr1", "ACGTACGT")])


@pytest.fixture
def filter_config() -> FilterConfig:
    return FilterConfig()


@pytest.fixture
def write_vcf(temp_dir: Path) -> Callable[..., Path]:
    """
    Write a single-sample VCF. Each row is
    (chrom, pos, ref, alt, qual, info, format, sample).
    """

    def _write(rows, contigs=(("chr1", 8),), name="calls.vcf") -> Path:
        path = temp_dir / name
        lines = list(VCF_HEADER)
        lines.extend(f"##contig=<ID={cid},length={length}>" for cid, length in contigs)
        lines.append("#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tsample1")
        for chrom, pos, ref, alt, qual, info, fmt, sample in rows:
            lines.append(f"{chrom}\t{pos}\t.\t{ref}\t{alt}\t{qual}\t.\t{info}\t{fmt}\t{sample}")
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write


@pytest.fixture
def write_fasta(temp_dir: Path) -> Callable[..., Path]:
    def _write(records, name="ref.fa") -> Path:
        path = temp_dir / name
        with open(path, "w") as f:
            for header, seq in records:
                f.write(f">{header}\n{seq}\n")
        return path

    return _write
