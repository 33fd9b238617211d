"""Journal entry commands."""

import typer
from rich.console import Console

from ledgerbook import clock
from ledgerbook.cli.config import CLIConfig, OutputFormat
from ledgerbook.cli.errors import ledger_command
from ledgerbook.cli.formatters import format_output, print_error, print_success
from ledgerbook.cli.parsing import parse_amount, parse_date, resolve_account
from ledgerbook.doubleentry.book import update_ledger_in_book
from ledgerbook.doubleentry.entry import create_simple_entry
from ledgerbook.doubleentry.ledger import add_entry, remove_entry
from ledgerbook.doubleentry.query import query_entries
from ledgerbook.doubleentry.view import build_entry_rows
from ledgerbook.models.reports import AmountRange, DateRange, EntryQuery

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.command("add")
@ledger_command
def add(
    ctx: typer.Context,
    description: str = typer.Argument(..., help="What the entry is for."),
    debit: str = typer.Option(
        ...,
        "--debit",
        help="Account path or ID to debit (e.g. 'expenses:food').",
    ),
    credit: str = typer.Option(
        ...,
        "--credit",
        help="Account path or ID to credit (e.g. 'assets:cash').",
    ),
    amount: str = typer.Option(
        ...,
        "--amount",
        "-a",
        help="Amount in main units (e.g. 12.50).",
    ),
    entry_date: str | None = typer.Option(
        None,
        "--date",
        help="Entry date (YYYY-MM-DD, default: today).",
    ),
    tags: list[str] | None = typer.Option(
        None,
        "--tag",
        help="Tag (repeatable).",
    ),
    payee: str | None = typer.Option(
        None,
        "--payee",
        help="Counterparty.",
    ),
    note: str | None = typer.Option(
        None,
        "--note",
        help="Optional note.",
    ),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
) -> None:
    """Record a two-line entry moving an amount between two accounts.

    Example:
        ledgerbook entries add "Lunch" --debit expenses:food --credit assets:cash -a 35
    """
    config: CLIConfig = ctx.obj
    book = config.load_book()
    ledger = config.resolve_ledger(book, ledger_id)

    debit_account = resolve_account(ledger, debit)
    credit_account = resolve_account(ledger, credit)

    entry = create_simple_entry(
        date=parse_date(entry_date, "entry") or clock.today(),
        description=description,
        debit_account_id=debit_account.id,
        credit_account_id=credit_account.id,
        amount=parse_amount(amount, debit_account.currency),
        accounts=ledger.accounts,
        tags=tags or None,
        payee=payee,
        note=note,
    )

    book = update_ledger_in_book(book, ledger.id, lambda lg: add_entry(lg, entry))
    config.save_book(book)

    print_success(f"Recorded entry {entry.id} on {entry.date}")


@app.command("list")
@ledger_command
def list_entries(
    ctx: typer.Context,
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    from_date: str | None = typer.Option(
        None,
        "--from",
        help="Start date (YYYY-MM-DD).",
    ),
    to_date: str | None = typer.Option(
        None,
        "--to",
        help="End date (YYYY-MM-DD).",
    ),
    account: str | None = typer.Option(
        None,
        "--account",
        help="Only entries touching this account (path or ID).",
    ),
    tags: list[str] | None = typer.Option(
        None,
        "--tag",
        help="Only entries with any of these tags (repeatable).",
    ),
    payee: str | None = typer.Option(
        None,
        "--payee",
        help="Payee substring (case-insensitive).",
    ),
    keyword: str | None = typer.Option(
        None,
        "--keyword",
        "-k",
        help="Search description, note and payee.",
    ),
    min_amount: str | None = typer.Option(
        None,
        "--min",
        help="Minimum amount in main units.",
    ),
    max_amount: str | None = typer.Option(
        None,
        "--max",
        help="Maximum amount in main units.",
    ),
    limit: int | None = typer.Option(
        None,
        "--limit",
        "-n",
        help="Maximum entries to show.",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """List entries, newest first."""
    config: CLIConfig = ctx.obj
    book = config.load_book()
    ledger = config.resolve_ledger(book, ledger_id)

    start = parse_date(from_date, "from")
    end = parse_date(to_date, "to")
    date_range = None
    if start or end:
        start = start or min((e.date for e in ledger.entries), default=clock.today())
        end = end or clock.today()
        if start > end:
            print_error(f"--from {start} is after --to {end}.")
            raise typer.Exit(1)
        date_range = DateRange(start=start, end=end)

    currency = ledger.default_currency
    amount_range = None
    if min_amount is not None or max_amount is not None:
        amount_range = AmountRange(
            min=parse_amount(min_amount, currency) if min_amount is not None else None,
            max=parse_amount(max_amount, currency) if max_amount is not None else None,
        )

    query = EntryQuery(
        date_range=date_range,
        account_ids=(resolve_account(ledger, account).id,) if account else None,
        tags=tuple(tags) if tags else None,
        payee=payee,
        amount_range=amount_range,
        keyword=keyword,
    )
    entries = query_entries(ledger, query)
    if limit is not None:
        entries = entries[:limit]

    entries_data = [
        {
            "date": row.date,
            "description": row.description,
            "amount": row.formatted_amount,
            "category": row.category.value,
            "accounts": ", ".join(row.accounts),
            "payee": row.payee or "",
            "tags": ", ".join(row.tags or ()),
            "id": row.id,
        }
        for row in build_entry_rows(ledger, entries)
    ]

    format_output(entries_data, output, title=f"Entries: {ledger.name}")


@app.command("remove")
@ledger_command
def remove(
    ctx: typer.Context,
    entry_id: str = typer.Argument(..., help="Entry ID (from 'entries list')."),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
) -> None:
    """Delete an entry and reverse its effect on balances."""
    config: CLIConfig = ctx.obj
    book = config.load_book()
    ledger = config.resolve_ledger(book, ledger_id)

    book = update_ledger_in_book(book, ledger.id, lambda lg: remove_entry(lg, entry_id))
    config.save_book(book)

    print_success(f"Removed entry {entry_id}")
