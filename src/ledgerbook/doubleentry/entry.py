"""Journal entries and the posting algorithm.

Posting applies an entry's lines to account balances; unposting applies
the exact inverse. Both take an account snapshot and return a new one,
so a failed post leaves the caller's snapshot untouched.

Balance direction per line:

    account type         debit    credit
    assets, expenses     +amount  -amount
    liabilities, equity,
    income               -amount  +amount
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any, assert_never

from ledgerbook import clock
from ledgerbook.doubleentry.account import is_debit_increase_account, update_account_balance
from ledgerbook.exceptions import (
    AccountNotFoundError,
    BalanceError,
    CurrencyMismatchError,
    StructuralError,
)
from ledgerbook.models.accounts import Account, AccountType
from ledgerbook.models.currency import CurrencyCode
from ledgerbook.models.entries import (
    EntryCategory,
    EntryKind,
    EntryLine,
    EntryLineType,
    JournalEntry,
)

logger = logging.getLogger(__name__)

# Fields callers may change through update_entry_fields.
EDITABLE_FIELDS = frozenset({"date", "description", "lines", "tags", "payee", "note", "kind"})

TRANSFER_TYPES = frozenset({AccountType.ASSETS, AccountType.LIABILITIES})


def generate_entry_id() -> str:
    return clock.new_id()


def create_entry(
    *,
    date: date,
    description: str,
    lines: Iterable[EntryLine] = (),
    tags: Iterable[str] | None = None,
    payee: str | None = None,
    note: str | None = None,
    kind: EntryKind = EntryKind.STANDARD,
) -> JournalEntry:
    """Create an entry. Lines can be added afterwards with ``add_line``."""
    timestamp = clock.now()
    return JournalEntry(
        id=generate_entry_id(),
        date=date,
        description=description,
        lines=tuple(lines),
        tags=tuple(tags) if tags is not None else None,
        payee=payee,
        note=note,
        kind=kind,
        created_at=timestamp,
        updated_at=timestamp,
    )


def update_entry_fields(entry: JournalEntry, **updates: Any) -> JournalEntry:
    """Return a copy of ``entry`` with the given fields replaced.

    Raises:
        StructuralError: If a field outside EDITABLE_FIELDS is given
    """
    unknown = set(updates) - EDITABLE_FIELDS
    if unknown:
        msg = f"Cannot update entry fields: {', '.join(sorted(unknown))}"
        raise StructuralError(msg, field=sorted(unknown)[0])

    if "lines" in updates:
        updates["lines"] = tuple(updates["lines"])
    if updates.get("tags") is not None:
        updates["tags"] = tuple(updates["tags"])

    return entry.model_copy(update={**updates, "updated_at": clock.now()})


# =============================================================================
# TAGS
# =============================================================================


def add_tags(entry: JournalEntry, tags: Iterable[str]) -> JournalEntry:
    """Union ``tags`` into the entry's tags, keeping first-seen order."""
    merged = dict.fromkeys([*(entry.tags or ()), *tags])
    return update_entry_fields(entry, tags=tuple(merged))


def remove_tags(entry: JournalEntry, tags: Iterable[str]) -> JournalEntry:
    """Drop ``tags``; an entry left with no tags gets ``tags=None``."""
    drop = set(tags)
    remaining = tuple(t for t in entry.tags or () if t not in drop)
    return update_entry_fields(entry, tags=remaining or None)


def get_entry_tags(entry: JournalEntry) -> tuple[str, ...]:
    return entry.tags or ()


# =============================================================================
# LINES
# =============================================================================


def _require_positive(amount: int, *, position: int | None = None) -> None:
    if amount <= 0:
        where = f" (line {position + 1})" if position is not None else ""
        msg = f"Amount must be greater than 0{where}, got {amount}"
        raise StructuralError(msg, field="amount")


def add_line(
    entry: JournalEntry,
    account_id: str,
    amount: int,
    line_type: EntryLineType,
    note: str | None = None,
) -> JournalEntry:
    """Append a line. ``amount`` is in minor units and must be positive."""
    _require_positive(amount)
    line = EntryLine(account_id=account_id, amount=amount, type=line_type, note=note or None)
    return update_entry_fields(entry, lines=(*entry.lines, line))


def add_debit_line(
    entry: JournalEntry, account_id: str, amount: int, note: str | None = None
) -> JournalEntry:
    return add_line(entry, account_id, amount, EntryLineType.DEBIT, note)


def add_credit_line(
    entry: JournalEntry, account_id: str, amount: int, note: str | None = None
) -> JournalEntry:
    return add_line(entry, account_id, amount, EntryLineType.CREDIT, note)


def _check_index(entry: JournalEntry, index: int) -> None:
    if not -len(entry.lines) <= index < len(entry.lines):
        msg = f"Line index {index} out of range for entry with {len(entry.lines)} lines"
        raise StructuralError(msg, field="lines")


def replace_line(entry: JournalEntry, index: int, line: EntryLine) -> JournalEntry:
    """Replace the line at ``index``."""
    _check_index(entry, index)
    _require_positive(line.amount)
    lines = list(entry.lines)
    lines[index] = line
    return update_entry_fields(entry, lines=lines)


def remove_line(entry: JournalEntry, index: int) -> JournalEntry:
    """Remove the line at ``index``. An entry never drops below two lines."""
    _check_index(entry, index)
    if len(entry.lines) <= 2:
        msg = "Entry must keep at least two lines"
        raise StructuralError(msg, field="lines")
    lines = list(entry.lines)
    del lines[index]
    return update_entry_fields(entry, lines=lines)


def update_lines(entry: JournalEntry, lines: Sequence[EntryLine]) -> JournalEntry:
    """Replace all lines at once after checking every amount is positive."""
    for position, line in enumerate(lines):
        _require_positive(line.amount, position=position)
    return update_entry_fields(entry, lines=lines)


def get_total_debit(entry: JournalEntry) -> int:
    """Sum of all debit amounts."""
    return sum(line.amount for line in entry.lines if line.type == EntryLineType.DEBIT)


def get_total_credit(entry: JournalEntry) -> int:
    """Sum of all credit amounts."""
    return sum(line.amount for line in entry.lines if line.type == EntryLineType.CREDIT)


def is_balanced(entry: JournalEntry) -> bool:
    """Check if debits equal credits."""
    return get_total_debit(entry) == get_total_credit(entry)


def get_entry_amount(entry: JournalEntry) -> int:
    """The entry's headline amount: its debit total."""
    return get_total_debit(entry)


def get_entry_account_ids(entry: JournalEntry) -> list[str]:
    """Distinct account ids in line order."""
    return list(dict.fromkeys(line.account_id for line in entry.lines))


def clone_entry(entry: JournalEntry, *, on: date | None = None) -> JournalEntry:
    """Copy an entry under a new id, optionally re-dated."""
    timestamp = clock.now()
    return entry.model_copy(
        update={
            "id": generate_entry_id(),
            "date": on or entry.date,
            "kind": EntryKind.STANDARD,
            "created_at": timestamp,
            "updated_at": timestamp,
        }
    )


# =============================================================================
# POSTING
# =============================================================================


def balance_delta(account_type: AccountType, line_type: EntryLineType, amount: int) -> int:
    """Signed change a line makes to an account balance."""
    increases_with_debit = is_debit_increase_account(account_type)
    match line_type:
        case EntryLineType.DEBIT:
            return amount if increases_with_debit else -amount
        case EntryLineType.CREDIT:
            return -amount if increases_with_debit else amount
        case _:
            assert_never(line_type)


def _require_balanced(entry: JournalEntry) -> None:
    debit_total = get_total_debit(entry)
    credit_total = get_total_credit(entry)
    if debit_total != credit_total:
        msg = (
            f'Entry "{entry.description}" (ID: {entry.id}) is not balanced: '
            f"debits={debit_total}, credits={credit_total}"
        )
        raise BalanceError(
            msg, debit_total=debit_total, credit_total=credit_total, entry_id=entry.id
        )


def _account_map(accounts: Iterable[Account]) -> dict[str, Account]:
    return {a.id: a for a in accounts}


def _require_account(account_map: Mapping[str, Account], account_id: str) -> Account:
    account = account_map.get(account_id)
    if account is None:
        msg = f"Account {account_id} not found"
        raise AccountNotFoundError(msg, identifier=account_id)
    return account


def post_entry(entry: JournalEntry, accounts: Iterable[Account]) -> tuple[Account, ...]:
    """Apply ``entry`` to account balances.

    Returns a new account tuple in the original order.

    Raises:
        BalanceError: If debits and credits differ
        AccountNotFoundError: If a line references an unknown account
    """
    _require_balanced(entry)

    account_map = _account_map(accounts)
    for line in entry.lines:
        account = _require_account(account_map, line.account_id)
        delta = balance_delta(account.type, line.type, line.amount)
        account_map[account.id] = update_account_balance(account, delta)

    logger.debug("Posted entry %s (%d lines)", entry.id, len(entry.lines))
    return tuple(account_map.values())


def unpost_entry(entry: JournalEntry, accounts: Iterable[Account]) -> tuple[Account, ...]:
    """Reverse ``entry``'s effect on account balances.

    Lines whose account no longer exists are skipped.
    """
    account_map = _account_map(accounts)
    for line in entry.lines:
        account = account_map.get(line.account_id)
        if account is None:
            logger.debug("Unpost %s: skipping missing account %s", entry.id, line.account_id)
            continue
        delta = -balance_delta(account.type, line.type, line.amount)
        account_map[account.id] = update_account_balance(account, delta)

    logger.debug("Unposted entry %s", entry.id)
    return tuple(account_map.values())


# =============================================================================
# CONVENIENCE CONSTRUCTORS
# =============================================================================


def create_simple_entry(
    *,
    date: date,
    description: str,
    debit_account_id: str,
    credit_account_id: str,
    amount: int,
    accounts: Iterable[Account] | Mapping[str, Account],
    tags: Iterable[str] | None = None,
    payee: str | None = None,
    note: str | None = None,
    kind: EntryKind = EntryKind.STANDARD,
) -> JournalEntry:
    """Create a one-debit, one-credit entry.

    Both accounts must exist in ``accounts`` and share a currency; value
    never moves between currencies silently.

    Raises:
        StructuralError: If ``amount`` is not positive
        AccountNotFoundError: If an account id is not in ``accounts``
        CurrencyMismatchError: If the two accounts differ in currency
    """
    account_map = _as_map(accounts)
    debit_account = _require_account(account_map, debit_account_id)
    credit_account = _require_account(account_map, credit_account_id)
    if debit_account.currency != credit_account.currency:
        msg = (
            "Cross-currency entry is not supported: "
            f"{debit_account.path} is {debit_account.currency}, "
            f"{credit_account.path} is {credit_account.currency}"
        )
        raise CurrencyMismatchError(
            msg, expected=debit_account.currency, actual=credit_account.currency
        )

    entry = create_entry(
        date=date, description=description, tags=tags, payee=payee, note=note, kind=kind
    )
    entry = add_debit_line(entry, debit_account_id, amount)
    return add_credit_line(entry, credit_account_id, amount)


def create_opening_balance_entry(
    *,
    date: date,
    account: Account,
    equity_account: Account,
    amount: int,
    description: str = "Opening balance",
) -> JournalEntry:
    """Seed ``account`` with a starting balance against an equity account.

    Debit-increase accounts are debited; credit-increase accounts (a loan,
    say) are credited, so ``amount`` always raises the balance.
    """
    if is_debit_increase_account(account.type):
        debit, credit = account, equity_account
    else:
        debit, credit = equity_account, account
    return create_simple_entry(
        date=date,
        description=description,
        debit_account_id=debit.id,
        credit_account_id=credit.id,
        amount=amount,
        accounts=(account, equity_account),
        kind=EntryKind.OPENING_BALANCE,
    )


# =============================================================================
# CLASSIFICATION
# =============================================================================


def _as_map(accounts: Iterable[Account] | Mapping[str, Account]) -> Mapping[str, Account]:
    return accounts if isinstance(accounts, Mapping) else _account_map(accounts)


def get_entry_category(
    entry: JournalEntry, accounts: Iterable[Account] | Mapping[str, Account]
) -> EntryCategory:
    """Classify an entry by which account types appear on which side.

    - A debit to an expenses account makes it an expense
    - Otherwise a credit to an income account makes it income
    - Lines touching only assets/liabilities make it a transfer
    - Anything else (equity movements, unknown accounts) is unknown
    """
    account_map = _as_map(accounts)
    resolved = [(line, account_map.get(line.account_id)) for line in entry.lines]

    if any(a is not None and a.type == AccountType.EXPENSES and line.is_debit for line, a in resolved):
        return EntryCategory.EXPENSE
    if any(a is not None and a.type == AccountType.INCOME and line.is_credit for line, a in resolved):
        return EntryCategory.INCOME
    if resolved and all(a is not None and a.type in TRANSFER_TYPES for _, a in resolved):
        return EntryCategory.TRANSFER
    return EntryCategory.UNKNOWN


def get_entry_currency(
    entry: JournalEntry, accounts: Iterable[Account] | Mapping[str, Account]
) -> CurrencyCode | None:
    """Currency of the first line's account, or None if it cannot be resolved."""
    if not entry.lines:
        return None
    account = _as_map(accounts).get(entry.lines[0].account_id)
    return account.currency if account else None
