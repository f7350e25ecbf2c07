"""Command-line interface."""

from clipmulti.cli.main import main, run

__all__ = ["main", "run"]
