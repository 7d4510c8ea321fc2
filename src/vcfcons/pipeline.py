"""
Pipeline Orchestrator: Manages the execution flow of vcfcons.

This module handles:
1. Loading the mask intervals and the reference catalog.
2. Streaming call records through the position classifier.
3. Running the depth-outlier pass once the median depth is known.
4. Emitting consensus sequences and writing FASTA and summary output.

Nothing is written until every stage has succeeded.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from rich.console import Console

from .core.classifier import PositionClassifier
from .core.consensus import ConsensusEmitter
from .io.input import VcfCallReader, read_mask_file, read_reference
from .io.output import FastaWriter, write_summary_json
from .models.core import (
    CallRecord,
    ConsensusConfig,
    ConsensusRecord,
    ConsensusSummary,
    Diagnostic,
    FilterConfig,
    MaskIndex,
    ReferenceCatalog,
)
from .utils.logging import get_console, timed

logger = logging.getLogger(__name__)


@dataclass
class ConsensusResult:
    records: list[ConsensusRecord]
    summary: ConsensusSummary
    diagnostics: list[Diagnostic] = field(default_factory=list)


def build_consensus(
    catalog: ReferenceCatalog,
    calls: Iterable[CallRecord],
    filters: FilterConfig | None = None,
    mask: MaskIndex | None = None,
    output_id: str | None = None,
) -> ConsensusResult:
    """
    Run the classification and consensus stages on already-parsed inputs.

    Raises:
        UnknownSequenceError: a call names a sequence absent from the catalog.
        NoDepthError: no call carried a non-zero depth.
        ZeroDepthError: a variant call had zero total depth.
        CallOrderError: calls are not sorted.
    """
    filters = filters or FilterConfig()
    classifier = PositionClassifier(catalog, filters, mask)

    with timed("Classifying positions", logger):
        classifier.process_all(calls)
        classifier.finish()

    outliers = classifier.finalize()
    median = classifier.coverage.median()
    logger.info("Median depth: %s", median)
    logger.info("Maximum depth: %d", classifier.coverage.max_observed())
    logger.info("Maximum depth threshold: %s", outliers.threshold)

    with timed("Emitting consensus", logger):
        records = ConsensusEmitter(catalog, output_id).emit(classifier.status, classifier.candidates)

    summary = ConsensusSummary(
        stats=classifier.stats,
        filters=filters,
        total_length=catalog.total_length,
        total_snvs=classifier.total_snvs,
        num_depths=classifier.coverage.count,
        median_depth=median,
        max_observed_depth=classifier.coverage.max_observed(),
        max_depth_threshold=outliers.threshold,
    )
    return ConsensusResult(records, summary, list(classifier.diagnostics))


class Pipeline:
    def __init__(self, config: ConsensusConfig, console: Console | None = None):
        self.config = config
        self.console = console or get_console()

    def run(self) -> ConsensusResult:
        """Execute the pipeline."""
        config = self.config

        mask = None
        if config.mask_file is not None:
            with self.console.status("[bold green]Loading mask intervals...[/bold green]"):
                mask = read_mask_file(config.mask_file)

        with self.console.status("[bold green]Loading reference...[/bold green]"):
            catalog = read_reference(config.reference_fasta)

        with self.console.status("[bold green]Filtering calls...[/bold green]"):
            with VcfCallReader(config.calls_file) as reader:
                result = build_consensus(
                    catalog,
                    reader,
                    filters=config.filters,
                    mask=mask,
                    output_id=config.output_id,
                )
                result.diagnostics = reader.diagnostics + result.diagnostics

        self._write_output(result)
        return result

    def _write_output(self, result: ConsensusResult):
        logger.info("Outputting replaced sequence")
        with FastaWriter(self.config.output_file, self.config.line_width) as writer:
            for record in result.records:
                writer.write(record)

        if self.config.stats_file is not None:
            write_summary_json(result.summary, self.config.stats_file)
