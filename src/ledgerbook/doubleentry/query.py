"""Read-only filtering of entries and accounts."""

from datetime import date, timedelta

from ledgerbook import clock
from ledgerbook.doubleentry.account import AccountIndex
from ledgerbook.models.accounts import Account, AccountType
from ledgerbook.models.entries import JournalEntry
from ledgerbook.models.ledgers import Ledger
from ledgerbook.models.reports import AccountNode, DateRange, EntryQuery

DEFAULT_ACTIVE_DAYS = 90


def _half_line_total(entry: JournalEntry) -> float:
    # Each amount is counted once as a debit and once as a credit.
    return sum(line.amount for line in entry.lines) / 2


def _contains(haystack: str | None, needle: str) -> bool:
    return haystack is not None and needle in haystack.lower()


def _matches(entry: JournalEntry, query: EntryQuery) -> bool:
    if query.date_range is not None and entry.date not in query.date_range:
        return False

    if query.account_ids:
        wanted = set(query.account_ids)
        if not any(line.account_id in wanted for line in entry.lines):
            return False

    if query.tags:
        if not set(query.tags) & set(entry.tags or ()):
            return False

    if query.payee and not _contains(entry.payee, query.payee.lower()):
        return False

    if query.amount_range is not None:
        amount = _half_line_total(entry)
        if query.amount_range.min is not None and amount < query.amount_range.min:
            return False
        if query.amount_range.max is not None and amount > query.amount_range.max:
            return False

    if query.keyword:
        keyword = query.keyword.lower()
        if not (
            _contains(entry.description, keyword)
            or _contains(entry.note, keyword)
            or _contains(entry.payee, keyword)
        ):
            return False

    return True


def query_entries(ledger: Ledger, query: EntryQuery) -> list[JournalEntry]:
    """Return the entries matching every set criterion, newest first.

    Entries sharing a date keep their insertion order.
    """
    return sorted(
        (e for e in ledger.entries if _matches(e, query)),
        key=lambda e: e.date,
        reverse=True,
    )


def get_entries_by_date_range(ledger: Ledger, date_range: DateRange) -> list[JournalEntry]:
    return query_entries(ledger, EntryQuery(date_range=date_range))


def get_entries_by_account(
    ledger: Ledger, account_id: str, date_range: DateRange | None = None
) -> list[JournalEntry]:
    return query_entries(ledger, EntryQuery(account_ids=(account_id,), date_range=date_range))


def get_entries_by_tag(
    ledger: Ledger, tag: str, date_range: DateRange | None = None
) -> list[JournalEntry]:
    return query_entries(ledger, EntryQuery(tags=(tag,), date_range=date_range))


def get_today_entries(ledger: Ledger, today: date | None = None) -> list[JournalEntry]:
    day = today or clock.today()
    return get_entries_by_date_range(ledger, DateRange(start=day, end=day))


def get_this_month_entries(ledger: Ledger, today: date | None = None) -> list[JournalEntry]:
    """Entries from the first of the current month up to today."""
    day = today or clock.today()
    return get_entries_by_date_range(ledger, DateRange(start=day.replace(day=1), end=day))


def get_this_year_entries(ledger: Ledger, today: date | None = None) -> list[JournalEntry]:
    """Entries from January 1st up to today."""
    day = today or clock.today()
    return get_entries_by_date_range(
        ledger, DateRange(start=day.replace(month=1, day=1), end=day)
    )


# =============================================================================
# ACCOUNTS
# =============================================================================


def get_account_full_name(ledger: Ledger, account_id: str) -> str:
    """Breadcrumb name, e.g. ``"Assets > Bank > Savings"``.

    Returns an empty string for an unknown account.
    """
    index = AccountIndex(ledger.accounts)
    account = index.get(account_id)
    if account is None:
        return ""
    chain = [account, *index.ancestors(account_id)]
    return " > ".join(a.name for a in reversed(chain))


def get_account_with_descendants(ledger: Ledger, account_id: str) -> list[Account]:
    """The account followed by everything under its path."""
    index = AccountIndex(ledger.accounts)
    account = index.get(account_id)
    if account is None:
        return []
    prefix = account.path + ":"
    return [a for a in ledger.accounts if a.id == account_id or a.path.startswith(prefix)]


def get_active_accounts(
    ledger: Ledger, days: int = DEFAULT_ACTIVE_DAYS, today: date | None = None
) -> list[Account]:
    """Unarchived accounts with a balance or an entry in the last ``days`` days."""
    cutoff = (today or clock.today()) - timedelta(days=days)
    recent = {
        line.account_id
        for entry in ledger.entries
        if entry.date >= cutoff
        for line in entry.lines
    }
    return [a for a in ledger.accounts if not a.archived and (a.balance != 0 or a.id in recent)]


def get_account_tree(ledger: Ledger, account_type: AccountType) -> list[AccountNode]:
    """Nested nodes for every root of ``account_type``."""
    index = AccountIndex(a for a in ledger.accounts if a.type == account_type)

    def build(account: Account) -> AccountNode:
        return AccountNode(
            account=account,
            children=tuple(build(child) for child in index.children(account.id)),
        )

    return [build(root) for root in index.roots()]
