"""Report commands."""

import typer
from rich.console import Console
from rich.table import Table

from ledgerbook.cli.config import CLIConfig, OutputFormat
from ledgerbook.cli.errors import ledger_command
from ledgerbook.cli.formatters import format_output, money, print_error, print_warning
from ledgerbook.cli.parsing import parse_currency, parse_date, parse_date_range
from ledgerbook.doubleentry.report import (
    generate_balance_snapshot,
    generate_balance_snapshot_in_currency,
    generate_category_summary,
    generate_net_worth_trend,
    generate_tag_summary,
    generate_time_series,
    generate_trial_balance,
)
from ledgerbook.doubleentry.view import build_period_summary
from ledgerbook.models.accounts import AccountType
from ledgerbook.models.reports import TimeGranularity

app = typer.Typer(no_args_is_help=True)
console = Console()

_FROM_HELP = "Start date (YYYY-MM-DD, default: first of this month)."
_TO_HELP = "End date (YYYY-MM-DD, default: today)."


@app.command("summary")
@ledger_command
def summary(
    ctx: typer.Context,
    from_date: str | None = typer.Option(None, "--from", help=_FROM_HELP),
    to_date: str | None = typer.Option(None, "--to", help=_TO_HELP),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Income, expenses and net change for a period."""
    config: CLIConfig = ctx.obj
    ledger = config.resolve_ledger(config.load_book(), ledger_id)
    date_range = parse_date_range(from_date, to_date)

    view = build_period_summary(ledger, date_range)
    summary_data = {
        "from": date_range.start.isoformat(),
        "to": date_range.end.isoformat(),
        "income": view.income.formatted,
        "expenses": view.expenses.formatted,
        "net_change": view.net_change.formatted,
    }

    format_output(summary_data, output, title=f"Summary: {ledger.name}")


@app.command("series")
@ledger_command
def series(
    ctx: typer.Context,
    granularity: TimeGranularity = typer.Option(
        TimeGranularity.MONTH,
        "--by",
        "-g",
        help="Bucket size.",
    ),
    from_date: str | None = typer.Option(None, "--from", help=_FROM_HELP),
    to_date: str | None = typer.Option(None, "--to", help=_TO_HELP),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Income and expenses per period."""
    config: CLIConfig = ctx.obj
    ledger = config.resolve_ledger(config.load_book(), ledger_id)
    currency = ledger.default_currency

    points = generate_time_series(ledger, parse_date_range(from_date, to_date), granularity)
    series_data = [
        {
            "period": p.period,
            "income": money(p.income, currency),
            "expenses": money(p.expenses, currency),
            "net_change": money(p.net_change, currency),
        }
        for p in points
    ]

    format_output(series_data, output, title=f"Income & Expenses by {granularity.value}")


@app.command("categories")
@ledger_command
def categories(
    ctx: typer.Context,
    account_type: AccountType = typer.Option(
        AccountType.EXPENSES,
        "--type",
        "-t",
        help="expenses or income.",
    ),
    from_date: str | None = typer.Option(None, "--from", help=_FROM_HELP),
    to_date: str | None = typer.Option(None, "--to", help=_TO_HELP),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Totals per expense or income account, largest first."""
    config: CLIConfig = ctx.obj
    ledger = config.resolve_ledger(config.load_book(), ledger_id)
    currency = ledger.default_currency

    if account_type not in (AccountType.EXPENSES, AccountType.INCOME):
        print_error("--type must be expenses or income.")
        raise typer.Exit(1)

    rows = generate_category_summary(
        ledger, parse_date_range(from_date, to_date), account_type
    )
    category_data = [
        {"name": c.name, "amount": money(c.amount, currency), "share": f"{c.percentage:.1f}%"}
        for c in rows
    ]

    format_output(category_data, output, title=f"{account_type.value.capitalize()} by Category")


@app.command("tags")
@ledger_command
def tags(
    ctx: typer.Context,
    from_date: str | None = typer.Option(None, "--from", help=_FROM_HELP),
    to_date: str | None = typer.Option(None, "--to", help=_TO_HELP),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Totals per tag, largest first."""
    config: CLIConfig = ctx.obj
    ledger = config.resolve_ledger(config.load_book(), ledger_id)
    currency = ledger.default_currency

    rows = generate_tag_summary(ledger, parse_date_range(from_date, to_date))
    tag_data = [
        {"tag": c.name, "amount": money(c.amount, currency), "share": f"{c.percentage:.1f}%"}
        for c in rows
    ]

    format_output(tag_data, output, title="By Tag")


@app.command("balance")
@ledger_command
def balance(
    ctx: typer.Context,
    as_of: str | None = typer.Option(
        None,
        "--as-of",
        help="Snapshot date (YYYY-MM-DD, default: today).",
    ),
    currency: str | None = typer.Option(
        None,
        "--currency",
        help="Convert every balance to this currency using recorded rates.",
    ),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Assets, liabilities and net worth as of a date.

    Balances are rebuilt from entries dated on or before the snapshot
    date, so past snapshots never change.
    """
    config: CLIConfig = ctx.obj
    book = config.load_book()
    ledger = config.resolve_ledger(book, ledger_id)
    snapshot_date = parse_date(as_of, "as-of")

    if currency:
        target = parse_currency(currency)
        snapshot = generate_balance_snapshot_in_currency(ledger, book, target, snapshot_date)
        if not snapshot.is_fully_converted:
            print_warning(
                f"No {target} rate for {len(snapshot.unconverted_account_ids)} account(s); "
                "their native balances were used."
            )
    else:
        target = ledger.default_currency
        snapshot = generate_balance_snapshot(ledger, snapshot_date)

    if output != OutputFormat.TABLE:
        format_output(snapshot, output)
        return

    table = Table(title=f"Balance as of {snapshot.date}")
    table.add_column("", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_row("Total assets", money(snapshot.total_assets, target))
    table.add_row("Total liabilities", money(snapshot.total_liabilities, target))
    table.add_row("[bold]Net worth[/bold]", f"[bold]{money(snapshot.net_worth, target)}[/bold]")
    if len(snapshot.assets_by_currency) > 1:
        table.add_row("", "", style="dim")
        for code, amount in snapshot.assets_by_currency.items():
            table.add_row(f"Assets in {code}", money(amount, code))

    console.print(table)


@app.command("trend")
@ledger_command
def trend(
    ctx: typer.Context,
    granularity: TimeGranularity = typer.Option(
        TimeGranularity.MONTH,
        "--by",
        "-g",
        help="Bucket size.",
    ),
    from_date: str | None = typer.Option(None, "--from", help=_FROM_HELP),
    to_date: str | None = typer.Option(None, "--to", help=_TO_HELP),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Net worth at the end of each period."""
    config: CLIConfig = ctx.obj
    ledger = config.resolve_ledger(config.load_book(), ledger_id)
    currency = ledger.default_currency

    points = generate_net_worth_trend(
        ledger, parse_date_range(from_date, to_date), granularity
    )
    trend_data = [{"period": p.period, "net_worth": money(p.net_worth, currency)} for p in points]

    format_output(trend_data, output, title="Net Worth")


@app.command("trial-balance")
@ledger_command
def trial_balance(
    ctx: typer.Context,
    as_of: str | None = typer.Option(
        None,
        "--as-of",
        help="Include entries up to this date (YYYY-MM-DD, default: today).",
    ),
    ledger_id: str | None = typer.Option(
        None,
        "--ledger",
        "-l",
        help="Ledger ID (default: main ledger).",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Show net debit or credit per account.

    In a balanced ledger, total debits equal total credits.
    """
    config: CLIConfig = ctx.obj
    ledger = config.resolve_ledger(config.load_book(), ledger_id)

    rows = generate_trial_balance(ledger, parse_date(as_of, "as-of"))

    if output != OutputFormat.TABLE:
        format_output(rows, output, title="Trial Balance")
        return

    if not rows:
        console.print("[dim]No entries[/dim]")
        return

    table = Table(title="Trial Balance")
    table.add_column("Account", style="cyan")
    table.add_column("Debit", justify="right", style="green")
    table.add_column("Credit", justify="right", style="red")

    for row in rows:
        table.add_row(
            row.path,
            money(row.debit, row.currency, blank_zero=True),
            money(row.credit, row.currency, blank_zero=True),
        )

    total_debits = sum(row.debit for row in rows)
    total_credits = sum(row.credit for row in rows)
    currency = ledger.default_currency

    table.add_row("", "", "", style="dim")
    table.add_row(
        "[bold]TOTALS[/bold]",
        f"[bold]{money(total_debits, currency)}[/bold]",
        f"[bold]{money(total_credits, currency)}[/bold]",
    )

    console.print()
    console.print(table)
    console.print()

    diff = total_debits - total_credits
    if diff == 0:
        console.print("[green]Balanced[/green]")
    else:
        console.print(f"[red]Imbalance: {money(diff, currency)}[/red]")
