"""
CLI Entry Point: Exposes the vcfcons functionality via command line.
"""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from . import __version__
from .errors import VcfConsError
from .models.core import ConsensusConfig, ConsensusSummary, FilterConfig
from .pipeline import Pipeline
from .utils.logging import get_console, setup_logging

app = typer.Typer(help="vcfcons: SNV filtering and reference consensus from VCF calls")


@app.callback()
def main():
    """
    vcfcons: SNV filtering and reference consensus from VCF calls
    """
    pass


@app.command()
def version():
    """Show the version and exit."""
    typer.echo(f"py-vcfcons {__version__}")


@app.command("filter")
def filter_calls(
    calls_file: Path = typer.Argument(
        ..., help="Per-position VCF from the caller (all sites, not variants only); '-' for stdin"
    ),
    reference: Path = typer.Option(..., "--fasta", "-f", help="Reference FASTA the calls were made against"),
    min_qual: float = typer.Option(200, "--min-qual", "-q", help="Minimum SNV quality score"),
    min_consensus: float = typer.Option(
        75, "--min-consensus", "-c", help="Minimum read consensus, in percent"
    ),
    min_depth: int = typer.Option(5, "--min-depth", "-d", help="Minimum read depth"),
    max_fold: float = typer.Option(
        3, "--max-fold", "-D", help="Maximum read depth, in fold of the median depth"
    ),
    min_dir_depth: int = typer.Option(
        1, "--min-dir", "-r", help="Minimum number of ALT reads in each direction"
    ),
    no_homozygous: bool = typer.Option(
        False, "--no-homozygous", "-H", help="Do not require homozygous (GT=1/1) SNVs"
    ),
    mask_file: Path | None = typer.Option(
        None, "--mask", "-m", help="Masking intervals in NCBI dustmaker interval format"
    ),
    output_id: str | None = typer.Option(
        None,
        "--output-id",
        "-o",
        help="Output sequence ID; replaces a single reference ID, prefixes several",
    ),
    output_file: Path | None = typer.Option(
        None, "--output", help="Consensus FASTA path (default: stdout)"
    ),
    stats_file: Path | None = typer.Option(None, "--stats", help="Write the run summary as JSON"),
    line_width: int = typer.Option(0, "--line-width", help="Wrap sequences (0 = single line)"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose debug logging"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    """
    Substitute filtered SNVs into the reference; gap missing and rejected positions.
    """
    setup_logging(verbose=verbose, log_file=str(log_file) if log_file else None)
    console = get_console()

    try:
        config = ConsensusConfig(
            calls_file=calls_file,
            reference_fasta=reference,
            mask_file=mask_file,
            output_file=output_file,
            stats_file=stats_file,
            output_id=output_id,
            line_width=line_width,
            filters=FilterConfig(
                min_qual=min_qual,
                min_consensus_pct=min_consensus,
                min_depth=min_depth,
                max_fold=max_fold,
                min_dir_depth=min_dir_depth,
                require_homozygous=not no_homozygous,
            ),
        )
        result = Pipeline(config, console=console).run()

    except (ValidationError, VcfConsError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    console.print(summary_table(result.summary))
    if result.diagnostics:
        console.print(f"[yellow]{len(result.diagnostics)} data-quality warning(s)[/yellow]")


def summary_table(summary: ConsensusSummary) -> Table:
    """Render the run statistics for the terminal."""
    stats = summary.stats
    filters = summary.filters

    table = Table(title="Filter summary", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    table.add_row(f"Missing or below minimum depth ({filters.min_depth})", str(stats.missing_or_uncovered))
    table.add_row("Percent aligned", f"{summary.percent_covered:.4f}")
    table.add_row("Total filtered SNVs", str(stats.total_filtered))
    table.add_row(f"  Below minimum quality ({filters.min_qual:g})", str(stats.below_min_qual))
    table.add_row(
        f"  Below minimum consensus ({filters.min_consensus_pct:g}%)", str(stats.below_min_consensus)
    )
    table.add_row(f"  Below minimum depth ({filters.min_depth})", str(stats.below_min_depth))
    table.add_row(
        f"  Above maximum depth ({filters.max_fold:g} x {summary.median_depth:g})",
        str(stats.above_max_depth),
    )
    table.add_row(f"  Unidirectional ({filters.min_dir_depth})", str(stats.unidirectional))
    if filters.require_homozygous:
        table.add_row("  Non-homozygous", str(stats.non_homozygous))
    table.add_row("  Masked", str(stats.masked))
    table.add_row("Total SNVs", str(summary.total_snvs))
    return table


if __name__ == "__main__":
    app()
