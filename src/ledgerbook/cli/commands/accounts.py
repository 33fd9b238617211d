"""Account commands."""

import typer
from rich.console import Console
from rich.tree import Tree

from ledgerbook import clock
from ledgerbook.cli.config import CLIConfig, OutputFormat
from ledgerbook.cli.errors import ledger_command
from ledgerbook.cli.formatters import format_output, money, print_success
from ledgerbook.cli.parsing import parse_amount, parse_currency, parse_date, resolve_account
from ledgerbook.doubleentry.book import update_ledger_in_book
from ledgerbook.doubleentry.entry import create_opening_balance_entry
from ledgerbook.doubleentry.ledger import (
    add_account,
    add_entry,
    archive_account,
    get_account_total_balance,
    get_root_account,
)
from ledgerbook.doubleentry.query import get_account_tree, get_active_accounts
from ledgerbook.doubleentry.view import build_account_groups
from ledgerbook.exceptions import InvariantError
from ledgerbook.models.accounts import AccountType
from ledgerbook.models.ledgers import Ledger
from ledgerbook.models.reports import AccountNode

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.command("list")
@ledger_command
def list_accounts(
    ctx: typer.Context,
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    account_type: AccountType | None = typer.Option(
        None,
        "--type",
        "-t",
        help="Only show accounts of this type.",
    ),
    active: bool = typer.Option(
        False,
        "--active",
        "-a",
        help="Only show accounts with a balance or recent entries.",
    ),
    show_archived: bool = typer.Option(
        False,
        "--archived",
        help="Include archived accounts.",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """List accounts, grouped by type and sorted by path."""
    config: CLIConfig = ctx.obj
    book = config.load_book()
    ledger = config.resolve_ledger(book, ledger_id)

    types = [account_type] if account_type else list(AccountType)
    active_ids = (
        {a.id for a in get_active_accounts(ledger, days=config.settings.active_days)}
        if active
        else None
    )

    accounts_data = [
        {
            "path": row.path,
            "name": row.name,
            "currency": row.currency.value,
            "balance": row.formatted_balance,
            "archived": "yes" if row.archived else "",
            "id": row.id,
        }
        for group in build_account_groups(ledger, types)
        for row in group.rows
        if (show_archived or not row.archived) and (active_ids is None or row.id in active_ids)
    ]

    format_output(accounts_data, output, title=f"Accounts: {ledger.name}")


@app.command("add")
@ledger_command
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Account name."),
    parent: str = typer.Option(
        ...,
        "--parent",
        "-p",
        help="Parent account path or ID (e.g. 'assets' or 'expenses:food').",
    ),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    currency: str | None = typer.Option(
        None,
        "--currency",
        help="Account currency (default: the parent's).",
    ),
    note: str | None = typer.Option(
        None,
        "--note",
        help="Optional note.",
    ),
    opening: str | None = typer.Option(
        None,
        "--opening",
        help="Opening balance in main units, posted against the equity root.",
    ),
    opening_date: str | None = typer.Option(
        None,
        "--opening-date",
        help="Date of the opening balance (YYYY-MM-DD, default: today).",
    ),
) -> None:
    """Add a sub-account, optionally with an opening balance."""
    config: CLIConfig = ctx.obj
    book = config.load_book()
    ledger = config.resolve_ledger(book, ledger_id)

    parent_account = resolve_account(ledger, parent)
    account_currency = parse_currency(currency) if currency else parent_account.currency
    opening_amount = parse_amount(opening, account_currency) if opening is not None else None
    on = parse_date(opening_date, "opening") or clock.today()

    def add_with_opening(current: Ledger) -> Ledger:
        updated = add_account(
            current,
            name=name,
            parent_id=parent_account.id,
            currency=account_currency,
            note=note,
        )
        if opening_amount is None:
            return updated

        account = updated.accounts[-1]
        equity = get_root_account(updated, AccountType.EQUITY)
        if equity is None:
            raise InvariantError("Ledger has no equity root account")
        entry = create_opening_balance_entry(
            date=on,
            account=account,
            equity_account=equity,
            amount=opening_amount,
        )
        return add_entry(updated, entry)

    book = update_ledger_in_book(book, ledger.id, add_with_opening)
    config.save_book(book)

    added = config.resolve_ledger(book, ledger.id).accounts[-1]
    print_success(f"Added account {added.path} ({added.id})")


@app.command("archive")
@ledger_command
def archive(
    ctx: typer.Context,
    account: str = typer.Argument(..., help="Account path or ID."),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
) -> None:
    """Archive an account. Root accounts cannot be archived."""
    config: CLIConfig = ctx.obj
    book = config.load_book()
    ledger = config.resolve_ledger(book, ledger_id)
    target = resolve_account(ledger, account)

    book = update_ledger_in_book(book, ledger.id, lambda lg: archive_account(lg, target.id))
    config.save_book(book)

    print_success(f"Archived account {target.path}")


def _add_branch(tree: Tree, node: AccountNode, ledger: Ledger) -> None:
    account = node.account
    total = get_account_total_balance(ledger, account.id)
    style = "dim" if account.archived else "cyan"
    branch = tree.add(
        f"[{style}]{account.name}[/{style}]  {money(total, account.currency)}"
    )
    for child in node.children:
        _add_branch(branch, child, ledger)


@app.command("tree")
@ledger_command
def tree(
    ctx: typer.Context,
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    account_type: AccountType | None = typer.Option(
        None,
        "--type",
        "-t",
        help="Only show accounts of this type.",
    ),
) -> None:
    """Show the account hierarchy with rolled-up balances."""
    config: CLIConfig = ctx.obj
    book = config.load_book()
    ledger = config.resolve_ledger(book, ledger_id)

    root = Tree(f"[bold]{ledger.name}[/bold]")
    for current_type in [account_type] if account_type else list(AccountType):
        for node in get_account_tree(ledger, current_type):
            _add_branch(root, node, ledger)

    console.print(root)
