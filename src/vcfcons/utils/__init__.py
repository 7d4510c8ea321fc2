"""
Utility modules for vcfcons.

Provides logging, timing, and other shared utilities.
"""

from .logging import get_console, get_logger, setup_logging, timed

__all__ = [
    "get_console",
    "get_logger",
    "setup_logging",
    "timed",
]
