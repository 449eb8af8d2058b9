"""Command-line interface module for markup-tree.

Provides the ``markup-tree`` command for printing token listings, tree dumps,
parse summaries and profiling reports.
"""

from .main import main

__all__ = ["main"]
