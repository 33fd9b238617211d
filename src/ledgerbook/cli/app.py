"""Main Typer application."""

import logging
from dataclasses import replace
from pathlib import Path

import typer
from rich.logging import RichHandler

from ledgerbook.cli.config import CLIConfig, default_config_dir
from ledgerbook.cli.formatters import error_console, print_error
from ledgerbook.config import LedgerbookConfig
from ledgerbook.exceptions import ConfigError

# Create main app
app = typer.Typer(
    name="ledgerbook",
    help="Personal double-entry bookkeeping.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
    book: str = typer.Option(
        "default",
        "--book",
        "-b",
        help="Book to operate on.",
        envvar="LEDGERBOOK_BOOK",
    ),
    data_dir: Path | None = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: ~/.local/share/ledgerbook).",
    ),
    config_dir: Path | None = typer.Option(
        None,
        "--config-dir",
        "-c",
        help="Config directory (default: ~/.config/ledgerbook).",
        envvar="LEDGERBOOK_CONFIG_DIR",
    ),
) -> None:
    """Personal double-entry bookkeeping.

    Books are stored as JSON under the data directory. Every command
    works on the book selected with --book (default: "default").
    """
    _configure_logging(verbose)

    config_dir = config_dir or default_config_dir()
    config_file = config_dir / "config.json"
    try:
        if config_file.exists():
            settings = LedgerbookConfig.load(config_file)
        else:
            settings = LedgerbookConfig.from_env()
    except ConfigError as e:
        print_error(e.message)
        raise typer.Exit(1) from e

    if data_dir is not None:
        settings = replace(settings, data_dir=data_dir)

    ctx.obj = CLIConfig(
        verbose=verbose,
        book_id=book,
        config_dir=config_dir,
        settings=settings,
    )
