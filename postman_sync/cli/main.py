"""Main CLI entry point for the postman-sync command.

This module provides the Typer application that serves as the entry point
for the postman-sync command-line tool. It uses options on the main command
rather than subcommands for a simpler user experience.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from postman_sync import __version__
from postman_sync.cli.config import ConfigLoader
from postman_sync.cli.errors import ConfigError
from postman_sync.cli.models import ExitCode
from postman_sync.cli.output import OutputHandler
from postman_sync.cli.sync_command import SyncCommand

app = typer.Typer(
    name="postman-sync",
    help="""Sync a Postman collection with the OpenAPI specifications of your services.

QUICK START:
  postman-sync --uid <collection_uid>             # Replace, preserving scripts/auth
  postman-sync --uid <collection_uid> --merge     # Merge, never remove anything
  postman-sync --dry-run                          # Preview removals and payload""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'postman_sync' namespace logger to avoid affecting
    third-party libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("postman_sync")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"postman-sync_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


@app.command()
def main_command(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="YAML config file (default: .postman-sync/config.yaml if present)",
        metavar="FILE",
    ),
    uid: Optional[str] = typer.Option(
        None,
        "--uid",
        help="Postman collection UID (overrides POSTMAN_TARGET_UID)",
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        help="Collection name (overrides POSTMAN_COLLECTION_NAME)",
    ),
    source: Optional[str] = typer.Option(
        None,
        "--source",
        help="Glob pattern for specification files (overrides POSTMAN_SOURCE_GLOB)",
        metavar="PATTERN",
    ),
    prune: Optional[bool] = typer.Option(
        None,
        "--prune/--merge",
        help="Replace the collection (removals propagate) or merge into it",
    ),
    converter: Optional[str] = typer.Option(
        None,
        "--converter",
        help="Converter command (overrides POSTMAN_CONVERTER)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Preview removals and payload without writing to Postman",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Sync a Postman collection with the OpenAPI specifications of your services.

    \b
    Environment:
      POSTMAN_API_KEY          - Postman API key (required)
      POSTMAN_TARGET_UID       - Collection UID
      POSTMAN_COLLECTION_NAME  - Collection name
      POSTMAN_SOURCE_GLOB      - Specification glob pattern
      POSTMAN_PRUNE            - true to replace, false to merge
    """
    if version:
        typer.echo(f"postman-sync version {__version__}")
        raise typer.Exit()

    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        config = ConfigLoader.load(
            config_path=config_path,
            overrides={
                'collection_uid': uid,
                'collection_name': name,
                'source_glob_pattern': source,
                'prune_mode': prune,
                'converter_command': converter,
            },
        )
    except ConfigError as e:
        logger.error(f"Failed to load config: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.info(f"Collection: {config.collection_name} ({config.collection_uid})")
    output.info(f"Sources: {config.source_glob_pattern}")
    output.info(f"Strategy: {'replace' if config.prune_mode else 'merge'}")

    sync_cmd = SyncCommand(config, output_handler=output)
    exit_code = sync_cmd.run(dry_run=dry_run)

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application."""
    app()


# Allow running as: python -m postman_sync.cli.main
if __name__ == "__main__":
    main()
