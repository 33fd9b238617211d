"""Ledger commands."""

import typer

from ledgerbook.cli.config import CLIConfig, OutputFormat
from ledgerbook.cli.errors import ledger_command
from ledgerbook.cli.formatters import format_output, print_success
from ledgerbook.cli.parsing import parse_currency
from ledgerbook.doubleentry.book import add_ledger, remove_ledger
from ledgerbook.models.ledgers import LedgerType

app = typer.Typer(no_args_is_help=True)


@app.command("list")
@ledger_command
def list_ledgers(
    ctx: typer.Context,
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """List all ledgers in the book."""
    config: CLIConfig = ctx.obj
    book = config.load_book()

    ledgers_data = [
        {
            "id": ledger.id,
            "name": ledger.name,
            "type": ledger.type.value,
            "currency": ledger.default_currency.value,
            "accounts": len(ledger.accounts),
            "entries": len(ledger.entries),
            "main": "yes" if ledger.id == book.main_ledger_id else "",
            "archived": "yes" if ledger.archived else "",
        }
        for ledger in book.ledgers
    ]

    format_output(ledgers_data, output, title="Ledgers")


@app.command("add")
@ledger_command
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Ledger name."),
    ledger_type: LedgerType = typer.Option(
        LedgerType.DAILY,
        "--type",
        "-t",
        help="Ledger type.",
    ),
    currency: str | None = typer.Option(
        None,
        "--currency",
        help="Default currency (default: the main ledger's).",
    ),
    description: str | None = typer.Option(
        None,
        "--description",
        help="Optional description.",
    ),
) -> None:
    """Add a ledger to the book."""
    config: CLIConfig = ctx.obj
    book = config.load_book()

    book = add_ledger(
        book,
        name,
        type=ledger_type,
        description=description,
        default_currency=parse_currency(currency) if currency else None,
    )
    config.save_book(book)

    print_success(f"Added ledger {name} ({book.ledgers[-1].id})")


@app.command("remove")
@ledger_command
def remove(
    ctx: typer.Context,
    ledger_id: str = typer.Argument(..., help="Ledger ID (from 'ledgers list')."),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation.",
    ),
) -> None:
    """Remove a ledger and all of its entries. The main ledger cannot be removed."""
    config: CLIConfig = ctx.obj
    book = config.load_book()

    if not yes:
        typer.confirm(f"Remove ledger {ledger_id} and all its entries?", abort=True)

    book = remove_ledger(book, ledger_id)
    config.save_book(book)

    print_success(f"Removed ledger {ledger_id}")
