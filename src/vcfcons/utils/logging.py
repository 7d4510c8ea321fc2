"""
Logging utilities for vcfcons.

Provides centralized logging configuration with dual output:
- Structured logging via Python logging module
- Rich console output for interactive use

Consensus FASTA may be written to stdout, so all log output goes to stderr.
"""

import logging
import time
from contextlib import contextmanager

from rich.console import Console
from rich.logging import RichHandler

__all__ = [
    "get_console",
    "get_logger",
    "setup_logging",
    "timed",
]

# Module-level console for rich output
_console = Console(stderr=True)


def get_console() -> Console:
    """Return the shared stderr console."""
    return _console


def setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """
    Configure logging for vcfcons.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise INFO.
        log_file: Optional path to write logs to file.
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            console=_console,
            rich_tracebacks=True,
            markup=False,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,  # Override existing config
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name."""
    return logging.getLogger(name)


@contextmanager
def timed(operation: str, logger: logging.Logger | None = None):
    """
    Context manager for timing operations.

    Args:
        operation: Description of the operation being timed.
        logger: Logger to use. If None, uses root logger.

    Example:
        with timed("Loading reference", logger):
            catalog = read_reference(path)
    """
    log = logger or logging.getLogger(__name__)
    start = time.perf_counter()
    log.debug("Starting: %s", operation)
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        log.debug("Completed: %s (%.3fs)", operation, elapsed)
