"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands to their
runners.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from dotenv import load_dotenv

from Mdq.cli.runner import CommandRunner
from Mdq.config import load_config
from Mdq.renderers import OUTPUT_FORMATS


@click.group(
    help="mdq: index Markdown notes and search them with a small query language.",
    invoke_without_command=True,
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to YAML config file (default: ~/.config/mdq/config.yml).",
)
@click.option(
    "--db-path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Index database, overriding index.db_path.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, db_path: Path | None, verbose: bool) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.
    Without a subcommand, starts the interactive query loop.

    Args:
        ctx: Click context.
        config_path: Path to YAML config file.
        db_path: Index database override.
        verbose: Whether to log at DEBUG level.
    """
    load_dotenv()

    overrides: dict[str, Any] = {}
    if db_path is not None:
        overrides["index"] = {"db_path": str(db_path)}
    if verbose:
        overrides["log"] = {"level": "DEBUG"}

    try:
        cfg = load_config(config_path, overrides=overrides)
    except (OSError, TypeError, ValueError) as e:
        raise click.UsageError(f"Invalid configuration: {e}") from e
    ctx.obj = CommandRunner(cfg, verbose=verbose)

    if ctx.invoked_subcommand is None:
        ctx.obj.run_interactive(action="query")


@cli.command("update")
@click.argument("paths", nargs=-1)
@click.pass_context
def update_cmd(ctx: click.Context, paths: tuple[str, ...]) -> None:
    """Index Markdown files, directories or glob patterns.

    Without PATHS, the configured ingest.source_glob is used. Files that
    fail to parse are logged and skipped.

    Raises:
        click.Abort: When the index cannot be opened.
    """
    runner: CommandRunner = ctx.obj
    runner.run_update(action=ctx.command.name, paths=paths)


@cli.command("query")
@click.argument("text", nargs=-1)
@click.option("--print", "print_mode", is_flag=True, help="Print hits instead of starting the interactive loop.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    show_default=True,
    help="Output format for --print.",
)
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Maximum number of hits.")
@click.option("--explain", is_flag=True, help="Print the compiled query and exit.")
@click.pass_context
def query_cmd(
    ctx: click.Context,
    text: tuple[str, ...],
    print_mode: bool,
    output_format: str,
    limit: int | None,
    explain: bool,
) -> None:
    """Search the index.

    TEXT seeds the interactive loop, or is run once with --print.
    """
    runner: CommandRunner = ctx.obj
    query_text = " ".join(text)
    if explain:
        runner.run_explain(action=ctx.command.name, text=query_text)
    elif print_mode:
        runner.run_query(
            action=ctx.command.name,
            text=query_text,
            output_format=output_format,
            limit=limit,
        )
    else:
        runner.run_interactive(action=ctx.command.name, text=query_text)
