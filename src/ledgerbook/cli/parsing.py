"""Parsing of command-line values into domain types."""

from datetime import date
from decimal import Decimal, InvalidOperation

import typer

from ledgerbook import clock
from ledgerbook.cli.formatters import print_error
from ledgerbook.doubleentry.account import find_account_by_id, find_account_by_path
from ledgerbook.doubleentry.money import from_main_unit
from ledgerbook.exceptions import AccountNotFoundError
from ledgerbook.models.accounts import Account
from ledgerbook.models.currency import CurrencyCode
from ledgerbook.models.ledgers import Ledger
from ledgerbook.models.reports import DateRange


def parse_date(value: str | None, option: str) -> date | None:
    """Parse a YYYY-MM-DD option value, exiting with an error if malformed."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        print_error(f"Invalid {option} date format. Use YYYY-MM-DD.")
        raise typer.Exit(1) from None


def parse_date_range(from_date: str | None, to_date: str | None) -> DateRange:
    """Build an inclusive range; defaults to the current month up to today."""
    today = clock.today()
    start = parse_date(from_date, "from") or today.replace(day=1)
    end = parse_date(to_date, "to") or today
    if start > end:
        print_error(f"--from {start} is after --to {end}.")
        raise typer.Exit(1)
    return DateRange(start=start, end=end)


def parse_amount(value: str, currency: CurrencyCode) -> int:
    """Parse a main-unit amount such as ``12.50`` into minor units."""
    try:
        decimal_value = Decimal(value.replace(",", ""))
    except InvalidOperation:
        print_error(f"Invalid amount: {value}")
        raise typer.Exit(1) from None
    if not decimal_value.is_finite():
        print_error(f"Invalid amount: {value}")
        raise typer.Exit(1)
    return from_main_unit(decimal_value, currency).amount


def parse_currency(value: str) -> CurrencyCode:
    try:
        return CurrencyCode(value.upper())
    except ValueError:
        supported = ", ".join(c.value for c in CurrencyCode)
        print_error(f"Unsupported currency: {value}. Use one of {supported}.")
        raise typer.Exit(1) from None


def resolve_account(ledger: Ledger, ref: str) -> Account:
    """Find an account by id or by path.

    Raises:
        AccountNotFoundError: If neither matches
    """
    account = find_account_by_id(ledger.accounts, ref) or find_account_by_path(
        ledger.accounts, ref.lower()
    )
    if account is None:
        msg = f"Account {ref} not found in ledger {ledger.name}"
        raise AccountNotFoundError(msg, identifier=ref)
    return account
