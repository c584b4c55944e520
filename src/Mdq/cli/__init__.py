"""CLI package for mdq command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from Mdq.cli.runner import CommandRunner
from Mdq.cli.ui import cli


def main() -> None:
    """Run the mdq CLI.

    Entry point referenced by the console script in pyproject.toml.
    """
    cli()
