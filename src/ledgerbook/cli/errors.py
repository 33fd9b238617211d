"""Error handling for Typer commands."""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

import typer

from ledgerbook.cli.formatters import print_error
from ledgerbook.exceptions import LedgerbookError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def ledger_command(f: Callable[..., T]) -> Callable[..., T]:
    """Decorator turning ledgerbook errors into a clean CLI failure.

    Prints the error message to stderr and exits with status 1 instead
    of dumping a traceback.

    Usage:
        @app.command()
        @ledger_command
        def my_command(ctx: typer.Context):
            book = ctx.obj.load_book()
            ...
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return f(*args, **kwargs)
        except LedgerbookError as e:
            logger.debug("Command %s failed", f.__name__, exc_info=True)
            print_error(e.message)
            raise typer.Exit(1) from e

    return wrapper
