"""Book commands."""

import typer
from rich.console import Console

from ledgerbook.cli.config import CLIConfig, OutputFormat
from ledgerbook.cli.errors import ledger_command
from ledgerbook.cli.formatters import format_output, print_error, print_success, print_warning
from ledgerbook.cli.parsing import parse_currency
from ledgerbook.doubleentry.book import create_book, get_all_book_tags, get_main_ledger
from ledgerbook.doubleentry.validation import validate_book

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.command("init")
@ledger_command
def init_book(
    ctx: typer.Context,
    currency: str | None = typer.Option(
        None,
        "--currency",
        help="Default currency (default: from config, CNY if unset).",
    ),
    main_name: str = typer.Option(
        "Main",
        "--main-name",
        help="Name of the main ledger.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing book.",
    ),
) -> None:
    """Create a new book with a main ledger and its root accounts."""
    config: CLIConfig = ctx.obj

    if config.store.exists(config.book_id) and not force:
        print_error(f"Book '{config.book_id}' already exists. Use --force to overwrite.")
        raise typer.Exit(1)

    default_currency = parse_currency(currency) if currency else config.settings.default_currency
    book = create_book(main_ledger_name=main_name, default_currency=default_currency)
    config.save_book(book)

    print_success(
        f"Created book '{config.book_id}' (main ledger {book.main_ledger_id}, {default_currency})"
    )


@app.command("show")
@ledger_command
def show_book(
    ctx: typer.Context,
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Show a summary of the book."""
    config: CLIConfig = ctx.obj
    book = config.load_book()
    main = get_main_ledger(book)

    summary = {
        "book": config.book_id,
        "main_ledger": f"{main.name} ({main.id})",
        "ledgers": len(book.ledgers),
        "entries": sum(len(ledger.entries) for ledger in book.ledgers),
        "exchange_rates": len(book.exchange_rates),
        "tags": ", ".join(get_all_book_tags(book)),
        "updated_at": book.updated_at.isoformat(timespec="seconds"),
    }

    format_output(summary, output, title="Book")


@app.command("validate")
@ledger_command
def validate(ctx: typer.Context) -> None:
    """Check every ledger for structural and accounting problems."""
    config: CLIConfig = ctx.obj
    book = config.load_book()

    result = validate_book(book, max_tags=config.settings.max_tags)

    for warning in result.warnings:
        print_warning(warning)
    for error in result.errors:
        print_error(error)

    if not result.valid:
        console.print(f"[red]{len(result.errors)} problem(s) found[/red]")
        raise typer.Exit(1)

    print_success(f"Book '{config.book_id}' is valid")
