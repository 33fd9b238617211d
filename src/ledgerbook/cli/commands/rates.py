"""Exchange rate commands."""

from decimal import Decimal, InvalidOperation

import typer

from ledgerbook.cli.config import CLIConfig, OutputFormat
from ledgerbook.cli.errors import ledger_command
from ledgerbook.cli.formatters import format_output, print_error, print_success
from ledgerbook.cli.parsing import parse_currency, parse_date
from ledgerbook.doubleentry.book import get_exchange_rate_history, set_exchange_rate

app = typer.Typer(no_args_is_help=True)


@app.command("set")
@ledger_command
def set_rate(
    ctx: typer.Context,
    from_currency: str = typer.Argument(..., help="Source currency (e.g. USD)."),
    to_currency: str = typer.Argument(..., help="Target currency (e.g. CNY)."),
    rate: str = typer.Argument(..., help="Units of target per unit of source."),
    on: str | None = typer.Option(
        None,
        "--date",
        help="Effective date (YYYY-MM-DD, default: today).",
    ),
) -> None:
    """Record an exchange rate, replacing any rate for the same pair and date."""
    config: CLIConfig = ctx.obj
    book = config.load_book()

    try:
        value = Decimal(rate)
    except InvalidOperation:
        print_error(f"Invalid rate: {rate}")
        raise typer.Exit(1) from None
    if not value.is_finite() or value <= 0:
        print_error(f"Rate must be a positive number, got {rate}")
        raise typer.Exit(1)

    src = parse_currency(from_currency)
    dst = parse_currency(to_currency)
    book = set_exchange_rate(book, src, dst, value, parse_date(on, "rate"))
    config.save_book(book)

    print_success(f"Set {src}->{dst} = {value}")


@app.command("list")
@ledger_command
def list_rates(
    ctx: typer.Context,
    from_currency: str | None = typer.Option(
        None,
        "--from",
        help="Only this source currency (requires --to).",
    ),
    to_currency: str | None = typer.Option(
        None,
        "--to",
        help="Only this target currency (requires --from).",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """List recorded exchange rates, newest first."""
    config: CLIConfig = ctx.obj
    book = config.load_book()

    if bool(from_currency) != bool(to_currency):
        print_error("Options --from and --to must be used together.")
        raise typer.Exit(1)

    if from_currency and to_currency:
        rates = get_exchange_rate_history(
            book, parse_currency(from_currency), parse_currency(to_currency)
        )
    else:
        rates = sorted(
            book.exchange_rates,
            key=lambda r: (r.date, r.from_currency, r.to_currency),
            reverse=True,
        )

    rates_data = [
        {
            "date": r.date.isoformat(),
            "from": r.from_currency.value,
            "to": r.to_currency.value,
            "rate": str(r.rate),
        }
        for r in rates
    ]

    format_output(rates_data, output, title="Exchange Rates")
