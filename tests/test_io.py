"""Tests for reference, mask and call readers and the output writers."""

import json

import pytest

from vcfcons.io.input import VcfCallReader, read_mask_file, read_reference
from vcfcons.io.output import FastaWriter, write_summary_json
from vcfcons.models.core import ConsensusRecord, ConsensusSummary, FilterConfig, FilterStats


def test_read_reference(write_fasta):
    path = write_fasta([("chr1 some description", "ACGT\nacgt"), ("plasmid", "NNNN")])
    catalog = read_reference(path)
    assert catalog.ids == ["chr1", "plasmid"]
    assert catalog["chr1"].bases == "ACGTacgt"
    assert catalog.length_of("chr1") == 8
    assert catalog.total_length == 12


def test_read_reference_missing(temp_dir):
    with pytest.raises(FileNotFoundError):
        read_reference(temp_dir / "nope.fa")


def test_read_mask_file(temp_dir):
    path = temp_dir / "mask.txt"
    path.write_text(">chr1 dust\n2 - 4\n7 - 7\n>chr2\n1 - 2\n\n")
    mask = read_mask_file(path)
    assert mask.positions("chr1") == {2, 3, 4, 7}
    assert mask.positions("chr2") == {1, 2}
    assert len(mask) == 6


def test_read_mask_file_missing(temp_dir):
    with pytest.raises(FileNotFoundError):
        read_mask_file(temp_dir / "nope.txt")


def test_vcf_reader_parses_records(write_vcf):
    path = write_vcf(
        [
            ("chr1", 1, "A", ".", 50, "DP4=3,4,0,0", "GT:DP", "0/0:7"),
            ("chr1", 2, "C", "G,T", 222, "DP4=0,0,5,6", "GT:DP", "1/1:11"),
            ("chr1", 3, "G", "A", ".", "DP4=0,0,2,2", "GT:DP", "1:4"),
        ]
    )
    with VcfCallReader(path) as reader:
        records = list(reader)
        assert reader.diagnostics == []

    ref_call, snv, haploid = records
    assert ref_call.chrom == "chr1"
    assert ref_call.pos == 1
    assert not ref_call.is_variant
    assert ref_call.total_depth == 7
    assert ref_call.genotype == "0/0"

    assert snv.alt == "G,T"
    assert snv.qual == 222
    assert snv.dp4 == (0, 0, 5, 6)
    assert snv.total_depth == 11
    assert snv.genotype == "1/1"

    assert haploid.qual == 0.0
    assert haploid.genotype == "1"


def test_vcf_reader_dp4_mismatch_warns(write_vcf):
    path = write_vcf([("chr1", 1, "A", "T", 222, "DP4=0,0,5,5", "GT:DP", "1/1:8")])
    with VcfCallReader(path) as reader:
        [record] = list(reader)
    assert record.total_depth == 10
    assert [d.kind for d in reader.diagnostics] == ["dp4_dp_mismatch"]


def test_vcf_reader_falls_back_to_format_dp(write_vcf):
    path = write_vcf([("chr1", 1, "A", ".", 40, ".", "GT:DP", "0/0:12")])
    with VcfCallReader(path) as reader:
        [record] = list(reader)
    assert record.dp4 == (0, 0, 0, 0)
    assert record.total_depth == 12
    assert reader.diagnostics == []


def test_vcf_reader_missing_dp_warns(write_vcf):
    path = write_vcf([("chr1", 1, "A", ".", 40, "DP4=0,0,0,0", "GT", "0/0")])
    with VcfCallReader(path) as reader:
        [record] = list(reader)
    assert record.total_depth == 0
    assert [d.kind for d in reader.diagnostics] == ["missing_dp"]


def test_vcf_reader_missing_genotype(write_vcf):
    path = write_vcf([("chr1", 1, "A", "T", 222, "DP4=0,0,5,5", "DP", "10")])
    with VcfCallReader(path) as reader:
        [record] = list(reader)
    assert record.genotype is None


def test_fasta_writer_single_line(temp_dir):
    path = temp_dir / "out.fa"
    with FastaWriter(path) as writer:
        writer.write(ConsensusRecord(id="s1", source_id="chr1", sequence="AC-T"))
        writer.write(ConsensusRecord(id="s2", source_id="chr2", sequence="GG"))
    assert path.read_text() == ">s1\nAC-T\n>s2\nGG\n"


def test_fasta_writer_wraps(temp_dir):
    path = temp_dir / "out.fa"
    with FastaWriter(path, line_width=3) as writer:
        writer.write(ConsensusRecord(id="s1", source_id="chr1", sequence="ACGTACG"))
    assert path.read_text() == ">s1\nACG\nTAC\nG\n"


def test_write_summary_json(temp_dir):
    summary = ConsensusSummary(
        stats=FilterStats(masked=2, total_filtered=2, missing_or_uncovered=5),
        filters=FilterConfig(),
        total_length=50,
        total_snvs=3,
        num_depths=45,
        median_depth=12.5,
        max_observed_depth=40,
        max_depth_threshold=37.5,
    )
    path = temp_dir / "stats.json"
    write_summary_json(summary, path)
    data = json.loads(path.read_text())
    assert data["stats"]["masked"] == 2
    assert data["percent_covered"] == 90.0
    assert data["filters"]["min_qual"] == 200
