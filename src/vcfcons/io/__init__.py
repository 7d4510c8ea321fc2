"""
I/O module for vcfcons.

Provides readers for reference, mask and call files, and writers for
consensus FASTA and summary JSON.
"""

from .input import VcfCallReader, read_mask_file, read_reference
from .output import FastaWriter, OutputWriter, write_summary_json

__all__ = [
    "FastaWriter",
    "OutputWriter",
    "VcfCallReader",
    "read_mask_file",
    "read_reference",
    "write_summary_json",
]
