"""Command runner for coordinating CLI execution.

Manages component lifecycle, index cleanup, logging configuration and error
handling for command execution.
"""

from __future__ import annotations

from typing import Sequence

import click

from Mdq.cli.commands import ExplainCommand, InteractiveCommand, QueryCommand, UpdateCommand
from Mdq.config import AppConfig
from Mdq.core.errors import CompileError
from Mdq.engine import IndexManager, create_index
from Mdq.interactive import create_query_session
from Mdq.query.compiler import QueryCompiler
from Mdq.renderers import create_hit_renderer
from Mdq.services import IngestReport, create_ingestion_service, create_query_service
from Mdq.utils.log import configure_logging, console_muted, log

COMPILE_ERROR_EXIT_CODE = 2


class CommandRunner:
    """Orchestrates command execution with proper resource management.

    Handles logging configuration, component creation, index lifetime and
    error handling for CLI commands.
    """

    def __init__(self, config: AppConfig, *, verbose: bool = False) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
            verbose: Show compiled queries in the interactive loop.
        """
        self.config = config
        self.verbose = verbose

    def run_update(self, action: str, paths: Sequence[str]) -> IngestReport:
        """Execute a bulk update.

        Args:
            action: The CLI command name (e.g., 'update').
            paths: Paths or glob patterns; the configured `source_glob` when
                empty.

        Raises:
            click.Abort: When the index cannot be opened or the update fails.
        """
        self._configure_logging(action)
        patterns = list(paths) or list(self.config.ingest.source_glob)
        try:
            with self._open_index() as manager:
                command = UpdateCommand(
                    ingest_service=create_ingestion_service(self.config, manager),
                    patterns=patterns,
                )
                report = command.execute()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Update failed: %s", e)
            raise click.Abort from e
        click.echo(
            f"Indexed {report.indexed} documents "
            f"(failed {report.failed}, skipped {report.skipped})"
        )
        return report

    def run_query(
        self,
        action: str,
        text: str,
        *,
        output_format: str = "text",
        limit: int | None = None,
    ) -> None:
        """Run one query and print its hits.

        Raises:
            click.exceptions.Exit: With code 2 when the query does not compile.
            click.Abort: When the index cannot be opened or the search fails.
        """
        self._configure_logging(action)
        try:
            with self._open_index() as manager:
                command = QueryCommand(
                    query_service=create_query_service(self.config, manager),
                    text=text,
                    limit=limit or self.config.query.limit,
                    renderer=create_hit_renderer(output_format),
                )
                output = command.execute()
        except CompileError as e:
            log.error("Query failed: %s", e)
            raise click.exceptions.Exit(COMPILE_ERROR_EXIT_CODE) from e
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Query failed: %s", e)
            raise click.Abort from e
        click.echo(output, nl=False)

    def run_explain(self, action: str, text: str) -> None:
        """Print the compiled form of a query without touching the index.

        Raises:
            click.exceptions.Exit: With code 2 when the query does not compile.
        """
        self._configure_logging(action)
        try:
            command = ExplainCommand(
                compiler=QueryCompiler(),
                text=text,
            )
            output = command.execute()
        except CompileError as e:
            log.error("Query failed: %s", e)
            raise click.exceptions.Exit(COMPILE_ERROR_EXIT_CODE) from e
        click.echo(output, nl=False)

    def run_interactive(self, action: str, text: str = "") -> None:
        """Run the interactive loop and print the chosen paths.

        Raises:
            click.Abort: When the index cannot be opened or the loop fails.
        """
        self._configure_logging(action)
        try:
            with self._open_index() as manager:
                command = InteractiveCommand(
                    session=create_query_session(self.config, manager, verbose=self.verbose),
                    initial_query=text,
                )
                with console_muted():
                    selection = command.execute()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Interactive query failed: %s", e)
            raise click.Abort from e
        for path in selection:
            click.echo(path)

    def _configure_logging(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )

    def _open_index(self) -> IndexManager:
        return create_index(self.config)
