"""
Output Writers: consensus FASTA and the run summary.
"""

import sys
from pathlib import Path
from typing import TextIO

from ..models.core import ConsensusRecord, ConsensusSummary


class OutputWriter:
    """Abstract base class for output writers."""

    def write(self, record: ConsensusRecord):
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class FastaWriter(OutputWriter):
    """
    Writes consensus records as FASTA.

    line_width of 0 keeps each sequence on a single line.
    """

    def __init__(self, path: Path | None = None, line_width: int = 0):
        self.path = path
        self.line_width = line_width
        self._owns_file = path is not None
        self.file: TextIO = open(path, "w") if path is not None else sys.stdout

    def write(self, record: ConsensusRecord):
        self.file.write(f">{record.id}\n")
        seq = record.sequence
        if self.line_width and seq:
            for i in range(0, len(seq), self.line_width):
                self.file.write(seq[i : i + self.line_width] + "\n")
        else:
            self.file.write(seq + "\n")

    def close(self):
        if self._owns_file:
            self.file.close()
        else:
            self.file.flush()


def write_summary_json(summary: ConsensusSummary, path: Path) -> None:
    """Write the run summary as indented JSON."""
    with open(path, "w") as f:
        f.write(summary.model_dump_json(indent=2))
        f.write("\n")
