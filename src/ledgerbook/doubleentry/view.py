"""Display-ready rows for account lists, entry lists and summaries.

These helpers only read a ledger snapshot; amounts are kept in minor
units next to a formatted string so callers can sort on one and show
the other.
"""

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, Field

from ledgerbook.doubleentry.entry import get_entry_amount, get_entry_category, get_entry_currency
from ledgerbook.doubleentry.money import create_money, format_money
from ledgerbook.doubleentry.report import calculate_period_summary
from ledgerbook.models.accounts import Account, AccountType
from ledgerbook.models.currency import CurrencyCode
from ledgerbook.models.entries import EntryCategory, JournalEntry
from ledgerbook.models.ledgers import Ledger
from ledgerbook.models.reports import DateRange


class CurrencyAmount(BaseModel):
    """A minor-unit amount with its formatted form."""

    currency: CurrencyCode
    amount: int
    formatted: str

    model_config = {"frozen": True}


class AccountRow(BaseModel):
    """One line of an indented account list."""

    id: str
    name: str
    type: AccountType
    currency: CurrencyCode
    balance: int
    formatted_balance: str = Field(alias="formattedBalance")
    level: int
    path: str
    is_root: bool = Field(alias="isRoot")
    archived: bool = False

    model_config = {"populate_by_name": True, "frozen": True}


class AccountGroup(BaseModel):
    """All accounts of one type with per-currency totals."""

    type: AccountType
    rows: tuple[AccountRow, ...]
    totals: tuple[CurrencyAmount, ...]

    model_config = {"frozen": True}


class EntryRow(BaseModel):
    """One line of an entry list."""

    id: str
    date: str
    description: str
    payee: str | None = None
    tags: tuple[str, ...] | None = None
    category: EntryCategory
    currency: CurrencyCode | None = None
    amount: int
    formatted_amount: str = Field(alias="formattedAmount")
    accounts: tuple[str, ...]
    line_count: int = Field(alias="lineCount")

    model_config = {"populate_by_name": True, "frozen": True}


class AssetsOverview(BaseModel):
    """Assets, liabilities and net worth, one amount per currency."""

    assets: tuple[CurrencyAmount, ...]
    liabilities: tuple[CurrencyAmount, ...]
    net_worth: tuple[CurrencyAmount, ...] = Field(alias="netWorth")

    model_config = {"populate_by_name": True, "frozen": True}


class PeriodSummaryView(BaseModel):
    """Formatted income, expenses and net change in the ledger currency."""

    income: CurrencyAmount
    expenses: CurrencyAmount
    net_change: CurrencyAmount = Field(alias="netChange")

    model_config = {"populate_by_name": True, "frozen": True}


def format_amount(amount: int, currency: CurrencyCode) -> str:
    return format_money(create_money(amount, currency))


def _currency_amount(amount: int, currency: CurrencyCode) -> CurrencyAmount:
    return CurrencyAmount(currency=currency, amount=amount, formatted=format_amount(amount, currency))


def sum_by_currency(accounts: Iterable[Account]) -> tuple[CurrencyAmount, ...]:
    """Balance totals per currency, in first-seen currency order."""
    totals: dict[CurrencyCode, int] = {}
    for account in accounts:
        totals[account.currency] = totals.get(account.currency, 0) + account.balance
    return tuple(_currency_amount(amount, currency) for currency, amount in totals.items())


def build_assets_overview(ledger: Ledger) -> AssetsOverview:
    assets = sum_by_currency(a for a in ledger.accounts if a.type == AccountType.ASSETS)
    liabilities = sum_by_currency(
        a for a in ledger.accounts if a.type == AccountType.LIABILITIES
    )

    asset_totals = {item.currency: item.amount for item in assets}
    liability_totals = {item.currency: item.amount for item in liabilities}
    currencies = dict.fromkeys([*asset_totals, *liability_totals])
    net_worth = tuple(
        _currency_amount(asset_totals.get(c, 0) - liability_totals.get(c, 0), c)
        for c in currencies
    )
    return AssetsOverview(assets=assets, liabilities=liabilities, net_worth=net_worth)


def build_account_groups(
    ledger: Ledger, types: Sequence[AccountType] = tuple(AccountType)
) -> list[AccountGroup]:
    """One group per type, rows sorted by path."""
    groups = []
    for account_type in types:
        accounts = [a for a in ledger.accounts if a.type == account_type]
        rows = tuple(
            AccountRow(
                id=a.id,
                name=a.name,
                type=a.type,
                currency=a.currency,
                balance=a.balance,
                formatted_balance=format_amount(a.balance, a.currency),
                level=a.depth,
                path=a.path,
                is_root=a.is_root,
                archived=a.archived,
            )
            for a in sorted(accounts, key=lambda a: a.path)
        )
        groups.append(
            AccountGroup(type=account_type, rows=rows, totals=sum_by_currency(accounts))
        )
    return groups


def _signed(formatted: str, category: EntryCategory) -> str:
    if category == EntryCategory.EXPENSE:
        return f"-{formatted}"
    if category == EntryCategory.INCOME:
        return f"+{formatted}"
    return formatted


def build_entry_rows(
    ledger: Ledger, entries: Iterable[JournalEntry] | None = None
) -> list[EntryRow]:
    """Rows for ``entries`` (default: all of the ledger's), newest first.

    Expenses are shown negative and income positive.
    """
    accounts = {a.id: a for a in ledger.accounts}
    rows = []
    selected = ledger.entries if entries is None else entries
    for entry in sorted(selected, key=lambda e: e.date, reverse=True):
        currency = get_entry_currency(entry, accounts)
        amount = get_entry_amount(entry)
        category = get_entry_category(entry, accounts)
        formatted = format_amount(amount, currency) if currency else str(amount)
        names = dict.fromkeys(
            accounts[line.account_id].name if line.account_id in accounts else line.account_id
            for line in entry.lines
        )
        rows.append(
            EntryRow(
                id=entry.id,
                date=entry.date.isoformat(),
                description=entry.description,
                payee=entry.payee,
                tags=entry.tags,
                category=category,
                currency=currency,
                amount=amount,
                formatted_amount=_signed(formatted, category),
                accounts=tuple(names),
                line_count=len(entry.lines),
            )
        )
    return rows


def build_period_summary(ledger: Ledger, date_range: DateRange) -> PeriodSummaryView:
    currency = ledger.default_currency
    summary = calculate_period_summary(ledger, date_range)
    return PeriodSummaryView(
        income=_currency_amount(summary.income, currency),
        expenses=_currency_amount(summary.expenses, currency),
        net_change=_currency_amount(summary.net_change, currency),
    )
