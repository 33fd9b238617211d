"""Time-bucketed aggregation, point-in-time snapshots and net-worth trend.

Snapshots never read live balances. They replay every entry dated on or
before the as-of date onto a zero-balance copy of the chart, so a
snapshot for a given date is the same whenever it is requested.
"""

import calendar
import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from typing import assert_never

from ledgerbook import clock
from ledgerbook.doubleentry.currency import convert_currency
from ledgerbook.doubleentry.entry import get_total_debit, post_entry
from ledgerbook.doubleentry.ledger import get_net_worth
from ledgerbook.doubleentry.query import get_entries_by_date_range
from ledgerbook.models.accounts import Account, AccountType
from ledgerbook.models.currency import CurrencyCode
from ledgerbook.models.entries import EntryLineType, JournalEntry
from ledgerbook.models.ledgers import Book, Ledger
from ledgerbook.models.reports import (
    BalanceSnapshot,
    CategorySummary,
    DateRange,
    NetWorthPoint,
    PeriodSummary,
    SummaryPoint,
    TimeGranularity,
    TrialBalanceRow,
)

logger = logging.getLogger(__name__)


# =============================================================================
# PERIODS
# =============================================================================


def get_period_range(year: int, granularity: TimeGranularity, period: int = 1) -> DateRange:
    """Concrete date range for a month, quarter or year.

    ``period`` is the 1-based month or quarter number and is ignored for
    years.

    Raises:
        ValueError: For day or week granularity, or an out-of-range period
    """
    match granularity:
        case TimeGranularity.MONTH:
            last_day = calendar.monthrange(year, period)[1]
            return DateRange(start=date(year, period, 1), end=date(year, period, last_day))
        case TimeGranularity.QUARTER:
            if not 1 <= period <= 4:
                msg = f"Quarter must be between 1 and 4, got {period}"
                raise ValueError(msg)
            first_month = (period - 1) * 3 + 1
            last_month = period * 3
            last_day = calendar.monthrange(year, last_month)[1]
            return DateRange(
                start=date(year, first_month, 1), end=date(year, last_month, last_day)
            )
        case TimeGranularity.YEAR:
            return DateRange(start=date(year, 1, 1), end=date(year, 12, 31))
        case _:
            msg = f"Unsupported granularity: {granularity}"
            raise ValueError(msg)


def get_period_label(day: date, granularity: TimeGranularity) -> str:
    """Bucket label for a date.

    Labels sort chronologically within one granularity:
    ``2024-01-15``, ``2024-W03``, ``2024-01``, ``2024-Q1``, ``2024``.
    Weeks use the ISO year, so 2024-12-30 is ``2025-W01``.
    """
    match granularity:
        case TimeGranularity.DAY:
            return day.isoformat()
        case TimeGranularity.WEEK:
            iso = day.isocalendar()
            return f"{iso.year}-W{iso.week:02d}"
        case TimeGranularity.MONTH:
            return f"{day.year}-{day.month:02d}"
        case TimeGranularity.QUARTER:
            return f"{day.year}-Q{(day.month - 1) // 3 + 1}"
        case TimeGranularity.YEAR:
            return str(day.year)
        case _:
            assert_never(granularity)


# =============================================================================
# INCOME AND EXPENSES
# =============================================================================


def _income_and_expenses(
    entries: Iterable[JournalEntry], accounts: dict[str, Account]
) -> tuple[int, int]:
    income = 0
    expenses = 0
    for entry in entries:
        for line in entry.lines:
            account = accounts.get(line.account_id)
            if account is None:
                continue
            if account.type == AccountType.INCOME and line.type == EntryLineType.CREDIT:
                income += line.amount
            elif account.type == AccountType.EXPENSES and line.type == EntryLineType.DEBIT:
                expenses += line.amount
    return income, expenses


def calculate_period_summary(ledger: Ledger, date_range: DateRange) -> PeriodSummary:
    """Income (credits to income) and expenses (debits to expenses) in a range."""
    accounts = {a.id: a for a in ledger.accounts}
    income, expenses = _income_and_expenses(
        get_entries_by_date_range(ledger, date_range), accounts
    )
    return PeriodSummary(income=income, expenses=expenses, net_change=income - expenses)


def generate_time_series(
    ledger: Ledger, date_range: DateRange, granularity: TimeGranularity
) -> list[SummaryPoint]:
    """Income, expenses and net change per period, oldest first.

    Periods without entries are omitted.
    """
    accounts = {a.id: a for a in ledger.accounts}
    buckets: dict[str, list[JournalEntry]] = defaultdict(list)
    for entry in get_entries_by_date_range(ledger, date_range):
        buckets[get_period_label(entry.date, granularity)].append(entry)

    points = []
    for period in sorted(buckets):
        income, expenses = _income_and_expenses(buckets[period], accounts)
        points.append(
            SummaryPoint(
                period=period, income=income, expenses=expenses, net_change=income - expenses
            )
        )
    return points


def _with_percentages(totals: dict[str, tuple[str, int]]) -> list[CategorySummary]:
    grand_total = sum(amount for _, amount in totals.values())
    summaries = [
        CategorySummary(
            id=key,
            name=name,
            amount=amount,
            percentage=amount / grand_total * 100 if grand_total > 0 else 0.0,
        )
        for key, (name, amount) in totals.items()
    ]
    return sorted(summaries, key=lambda s: s.amount, reverse=True)


def generate_category_summary(
    ledger: Ledger, date_range: DateRange, account_type: AccountType
) -> list[CategorySummary]:
    """Totals per account for expenses (debits) or income (credits), largest first.

    Raises:
        ValueError: For any type other than expenses or income
    """
    match account_type:
        case AccountType.EXPENSES:
            direction = EntryLineType.DEBIT
        case AccountType.INCOME:
            direction = EntryLineType.CREDIT
        case _:
            msg = f"Category summary needs expenses or income, got {account_type}"
            raise ValueError(msg)

    accounts = {a.id: a for a in ledger.accounts}
    totals: dict[str, tuple[str, int]] = {}
    for entry in get_entries_by_date_range(ledger, date_range):
        for line in entry.lines:
            account = accounts.get(line.account_id)
            if account is None or account.type != account_type or line.type != direction:
                continue
            _, running = totals.get(account.id, (account.name, 0))
            totals[account.id] = (account.name, running + line.amount)

    return _with_percentages(totals)


def generate_tag_summary(ledger: Ledger, date_range: DateRange) -> list[CategorySummary]:
    """Debit total of each tagged entry, summed per tag, largest first."""
    totals: dict[str, tuple[str, int]] = {}
    for entry in get_entries_by_date_range(ledger, date_range):
        if not entry.tags:
            continue
        amount = get_total_debit(entry)
        for tag in entry.tags:
            _, running = totals.get(tag, (tag, 0))
            totals[tag] = (tag, running + amount)

    return _with_percentages(totals)


# =============================================================================
# SNAPSHOTS
# =============================================================================


def _entries_up_to(ledger: Ledger, as_of: date) -> list[JournalEntry]:
    return sorted((e for e in ledger.entries if e.date <= as_of), key=lambda e: e.date)


def get_accounts_as_of(ledger: Ledger, as_of: date) -> tuple[Account, ...]:
    """Account snapshot rebuilt from entries dated on or before ``as_of``."""
    accounts = tuple(a.model_copy(update={"balance": 0}) for a in ledger.accounts)
    for entry in _entries_up_to(ledger, as_of):
        accounts = post_entry(entry, accounts)
    return accounts


def generate_balance_snapshot(ledger: Ledger, as_of: date | None = None) -> BalanceSnapshot:
    """Assets, liabilities and net worth as of a date (default today).

    Amounts of different currencies are summed as-is; use
    ``generate_balance_snapshot_in_currency`` for a converted total.
    """
    snapshot_date = as_of or clock.today()
    total_assets = 0
    total_liabilities = 0
    assets_by_currency: dict[CurrencyCode, int] = {}

    for account in get_accounts_as_of(ledger, snapshot_date):
        if account.type == AccountType.ASSETS:
            total_assets += account.balance
            assets_by_currency[account.currency] = (
                assets_by_currency.get(account.currency, 0) + account.balance
            )
        elif account.type == AccountType.LIABILITIES:
            total_liabilities += account.balance

    return BalanceSnapshot(
        date=snapshot_date,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        net_worth=total_assets - total_liabilities,
        assets_by_currency=assets_by_currency,
    )


def generate_balance_snapshot_in_currency(
    ledger: Ledger,
    book: Book,
    target: CurrencyCode,
    as_of: date | None = None,
) -> BalanceSnapshot:
    """Like ``generate_balance_snapshot`` with every balance converted to ``target``.

    Each account converts at the rate in effect on the snapshot date. An
    account with a non-zero balance and no usable rate is added in its
    native currency and listed in ``unconverted_account_ids``.
    ``assets_by_currency`` always holds native, unconverted amounts.
    """
    snapshot_date = as_of or clock.today()
    total_assets = 0
    total_liabilities = 0
    assets_by_currency: dict[CurrencyCode, int] = {}
    unconverted: list[str] = []

    for account in get_accounts_as_of(ledger, snapshot_date):
        if account.type not in (AccountType.ASSETS, AccountType.LIABILITIES):
            continue

        amount = account.balance
        if account.currency != target and account.balance != 0:
            converted = convert_currency(
                account.balance, account.currency, target, book.exchange_rates, snapshot_date
            )
            if converted is None:
                unconverted.append(account.id)
            else:
                amount = converted

        if account.type == AccountType.ASSETS:
            total_assets += amount
            assets_by_currency[account.currency] = (
                assets_by_currency.get(account.currency, 0) + account.balance
            )
        else:
            total_liabilities += amount

    if unconverted:
        logger.warning(
            "No %s rate on %s for %d account(s); using native balances: %s",
            target,
            snapshot_date,
            len(unconverted),
            ", ".join(unconverted),
        )

    return BalanceSnapshot(
        date=snapshot_date,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        net_worth=total_assets - total_liabilities,
        assets_by_currency=assets_by_currency,
        currency=target,
        unconverted_account_ids=tuple(unconverted),
    )


def generate_net_worth_trend(
    ledger: Ledger, date_range: DateRange, granularity: TimeGranularity
) -> list[NetWorthPoint]:
    """Net worth per period, oldest first.

    Starts from the current net worth on the latest period and walks
    back, subtracting each period's net change to get the one before.
    """
    series = generate_time_series(ledger, date_range, granularity)
    running = get_net_worth(ledger)
    points: list[NetWorthPoint] = []
    for point in reversed(series):
        points.append(NetWorthPoint(period=point.period, net_worth=running))
        running -= point.net_change
    points.reverse()
    return points


def generate_trial_balance(ledger: Ledger, as_of: date | None = None) -> list[TrialBalanceRow]:
    """Net debit or credit per account, sorted by path.

    Accounts whose debits and credits cancel out are omitted. Over a
    ledger of balanced entries the debit and credit columns sum equal.
    """
    snapshot_date = as_of or clock.today()
    net: dict[str, int] = defaultdict(int)
    for entry in _entries_up_to(ledger, snapshot_date):
        for line in entry.lines:
            signed = line.amount if line.type == EntryLineType.DEBIT else -line.amount
            net[line.account_id] += signed

    rows = [
        TrialBalanceRow(
            account_id=account.id,
            path=account.path,
            currency=account.currency,
            debit=max(net[account.id], 0),
            credit=max(-net[account.id], 0),
        )
        for account in ledger.accounts
        if net.get(account.id)
    ]
    return sorted(rows, key=lambda r: r.path)
