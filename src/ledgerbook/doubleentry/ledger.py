"""Ledger lifecycle, account/entry mutations and balance queries.

Every mutation takes a ``Ledger`` snapshot and returns a new one. A
mutation that raises leaves the input snapshot exactly as it was.
"""

import logging
from typing import Any

from ledgerbook import clock
from ledgerbook.doubleentry.account import (
    AccountIndex,
    create_account,
    create_account_path,
    create_root_accounts,
    find_account_by_id,
    find_account_by_path,
)
from ledgerbook.doubleentry.entry import post_entry, unpost_entry
from ledgerbook.exceptions import (
    AccountNotFoundError,
    EntryNotFoundError,
    InvariantError,
    StructuralError,
)
from ledgerbook.models.accounts import Account, AccountType
from ledgerbook.models.currency import CurrencyCode
from ledgerbook.models.entries import JournalEntry
from ledgerbook.models.ledgers import Ledger, LedgerType

logger = logging.getLogger(__name__)

LEDGER_EDITABLE_FIELDS = frozenset({"name", "description", "icon", "archived"})
ACCOUNT_EDITABLE_FIELDS = frozenset({"name", "icon", "note", "archived"})


def generate_ledger_id() -> str:
    return clock.new_id()


def create_ledger(
    name: str,
    *,
    type: LedgerType = LedgerType.MAIN,
    description: str | None = None,
    default_currency: CurrencyCode = CurrencyCode.CNY,
    icon: str | None = None,
) -> Ledger:
    """Create a ledger with its five root accounts in ``default_currency``."""
    timestamp = clock.now()
    ledger = Ledger(
        id=generate_ledger_id(),
        name=name,
        type=type,
        description=description,
        accounts=create_root_accounts(default_currency),
        entries=(),
        default_currency=default_currency,
        icon=icon,
        created_at=timestamp,
        updated_at=timestamp,
    )
    logger.debug("Created ledger %s (%s, %s)", ledger.id, ledger.type, default_currency)
    return ledger


def _touch(ledger: Ledger, **updates: Any) -> Ledger:
    return ledger.model_copy(update={**updates, "updated_at": clock.now()})


def _reject_unknown(fields: set[str], allowed: frozenset[str], what: str) -> None:
    unknown = fields - allowed
    if unknown:
        msg = f"Cannot update {what} fields: {', '.join(sorted(unknown))}"
        raise StructuralError(msg, field=sorted(unknown)[0])


def update_ledger(ledger: Ledger, **updates: Any) -> Ledger:
    """Update name, description, icon or archived flag."""
    _reject_unknown(set(updates), LEDGER_EDITABLE_FIELDS, "ledger")
    return _touch(ledger, **updates)


# =============================================================================
# ACCOUNTS
# =============================================================================


def _require_account(ledger: Ledger, account_id: str, *, role: str = "Account") -> Account:
    account = find_account_by_id(ledger.accounts, account_id)
    if account is None:
        msg = f"{role} {account_id} not found"
        raise AccountNotFoundError(msg, identifier=account_id)
    return account


def add_account(
    ledger: Ledger,
    *,
    name: str,
    parent_id: str,
    currency: CurrencyCode | None = None,
    icon: str | None = None,
    note: str | None = None,
) -> Ledger:
    """Add a child account under ``parent_id``.

    The account inherits its parent's type; its currency defaults to the
    parent's.

    Raises:
        AccountNotFoundError: If the parent does not exist
        StructuralError: If the name is blank
        InvariantError: If the derived path is already taken
    """
    if not name.strip():
        raise StructuralError("Account name must not be empty", field="name")

    parent = _require_account(ledger, parent_id, role="Parent account")
    path = create_account_path(parent.path, name)
    if find_account_by_path(ledger.accounts, path) is not None:
        msg = f"Account path {path} already exists"
        raise InvariantError(msg)

    account = create_account(
        name=name,
        type=parent.type,
        currency=currency or parent.currency,
        parent=parent,
        icon=icon,
        note=note,
    )
    logger.debug("Added account %s (%s)", account.path, account.id)
    return _touch(ledger, accounts=(*ledger.accounts, account))


def update_account(ledger: Ledger, account_id: str, **updates: Any) -> Ledger:
    """Update an account's name, icon, note or archived flag.

    The path is an identity index and is not rewritten on rename.
    """
    _reject_unknown(set(updates), ACCOUNT_EDITABLE_FIELDS, "account")
    _require_account(ledger, account_id)

    timestamp = clock.now()
    accounts = tuple(
        a.model_copy(update={**updates, "updated_at": timestamp}) if a.id == account_id else a
        for a in ledger.accounts
    )
    return _touch(ledger, accounts=accounts)


def archive_account(ledger: Ledger, account_id: str) -> Ledger:
    """Archive an account (see ``can_archive_account``)."""
    from ledgerbook.doubleentry.validation import can_archive_account

    check = can_archive_account(ledger, account_id)
    if not check:
        raise StructuralError(check.reason or "Account cannot be archived", field="archived")
    return update_account(ledger, account_id, archived=True)


def delete_account(ledger: Ledger, account_id: str) -> Ledger:
    """Hard-delete an unused leaf account (see ``can_delete_account``)."""
    from ledgerbook.doubleentry.validation import can_delete_account

    check = can_delete_account(ledger, account_id)
    if not check:
        raise StructuralError(check.reason or "Account cannot be deleted", field="id")
    logger.debug("Deleted account %s", account_id)
    return _touch(ledger, accounts=tuple(a for a in ledger.accounts if a.id != account_id))


def move_account(ledger: Ledger, account_id: str, new_parent_id: str) -> Ledger:
    """Re-parent an account, rewriting the paths of it and its descendants.

    Raises:
        AccountNotFoundError: If either account does not exist
        StructuralError: If ``can_move_account`` refuses the move
        InvariantError: If the new path collides with an existing account
    """
    from ledgerbook.doubleentry.validation import can_move_account

    account = _require_account(ledger, account_id)
    new_parent = _require_account(ledger, new_parent_id, role="Parent account")
    check = can_move_account(ledger, account_id, new_parent_id)
    if not check:
        raise StructuralError(check.reason or "Account cannot be moved", field="parent_id")

    index = AccountIndex(ledger.accounts)

    old_prefix = account.path
    new_prefix = create_account_path(new_parent.path, account.path.rsplit(":", 1)[-1])
    moved_ids = {account_id, *(a.id for a in index.descendants(account_id))}

    taken = {a.path for a in ledger.accounts if a.id not in moved_ids}
    if new_prefix in taken:
        msg = f"Account path {new_prefix} already exists"
        raise InvariantError(msg)

    timestamp = clock.now()

    def rebase(a: Account) -> Account:
        if a.id not in moved_ids:
            return a
        update: dict[str, Any] = {
            "path": new_prefix + a.path[len(old_prefix):],
            "updated_at": timestamp,
        }
        if a.id == account_id:
            update["parent_id"] = new_parent_id
        return a.model_copy(update=update)

    return _touch(ledger, accounts=tuple(rebase(a) for a in ledger.accounts))


# =============================================================================
# ENTRIES
# =============================================================================


def _require_well_formed(entry: JournalEntry) -> None:
    if not entry.description.strip():
        raise StructuralError("Entry description must not be empty", field="description")
    if len(entry.lines) < 2:
        msg = f"Entry must have at least two lines, got {len(entry.lines)}"
        raise StructuralError(msg, field="lines")
    for position, line in enumerate(entry.lines, start=1):
        if line.amount <= 0:
            msg = f"Line {position} amount must be greater than 0, got {line.amount}"
            raise StructuralError(msg, field="amount")


def _find_entry(ledger: Ledger, entry_id: str) -> JournalEntry:
    entry = next((e for e in ledger.entries if e.id == entry_id), None)
    if entry is None:
        msg = f"Entry {entry_id} not found"
        raise EntryNotFoundError(msg, identifier=entry_id)
    return entry


def add_entry(ledger: Ledger, entry: JournalEntry) -> Ledger:
    """Record ``entry`` and post it to account balances.

    Raises:
        StructuralError: Blank description, fewer than two lines,
            non-positive amount or a duplicate entry id
        BalanceError: If debits and credits differ
        AccountNotFoundError: If a line references an unknown account
    """
    _require_well_formed(entry)
    if any(e.id == entry.id for e in ledger.entries):
        msg = f"Entry {entry.id} already exists"
        raise StructuralError(msg, field="id")

    accounts = post_entry(entry, ledger.accounts)
    logger.debug("Added entry %s on %s", entry.id, entry.date)
    return _touch(ledger, accounts=accounts, entries=(*ledger.entries, entry))


def remove_entry(ledger: Ledger, entry_id: str) -> Ledger:
    """Delete an entry and reverse its effect on balances.

    Raises:
        EntryNotFoundError: If no entry has this id
        StructuralError: If ``can_delete_entry`` refuses, as for opening balances
    """
    from ledgerbook.doubleentry.validation import can_delete_entry

    entry = _find_entry(ledger, entry_id)
    check = can_delete_entry(ledger, entry_id)
    if not check:
        raise StructuralError(check.reason or "Entry cannot be deleted", field="kind")
    accounts = unpost_entry(entry, ledger.accounts)
    logger.debug("Removed entry %s", entry_id)
    return _touch(
        ledger,
        accounts=accounts,
        entries=tuple(e for e in ledger.entries if e.id != entry_id),
    )


def update_entry(ledger: Ledger, updated: JournalEntry) -> Ledger:
    """Replace the entry with ``updated.id``: unpost the old, post the new.

    Both steps run on copies, so if the new version fails to post the
    ledger is returned to the caller unchanged (by raising).

    Raises:
        EntryNotFoundError: If no entry has this id
        StructuralError, BalanceError, AccountNotFoundError: As ``add_entry``
    """
    old = _find_entry(ledger, updated.id)
    _require_well_formed(updated)

    accounts = unpost_entry(old, ledger.accounts)
    accounts = post_entry(updated, accounts)
    logger.debug("Updated entry %s", updated.id)
    return _touch(
        ledger,
        accounts=accounts,
        entries=tuple(updated if e.id == updated.id else e for e in ledger.entries),
    )


# =============================================================================
# BALANCES
# =============================================================================


def get_account_balance(ledger: Ledger, account_id: str) -> int:
    """Own balance of one account (0 if unknown)."""
    account = find_account_by_id(ledger.accounts, account_id)
    return account.balance if account else 0


def get_account_total_balance(ledger: Ledger, account_id: str) -> int:
    """Balance of an account plus all of its descendants (0 if unknown)."""
    account = find_account_by_id(ledger.accounts, account_id)
    if account is None:
        return 0
    prefix = account.path + ":"
    return account.balance + sum(a.balance for a in ledger.accounts if a.path.startswith(prefix))


def get_type_balance(ledger: Ledger, account_type: AccountType) -> int:
    """Sum of every account balance of one type."""
    return sum(a.balance for a in ledger.accounts if a.type == account_type)


def get_net_worth(ledger: Ledger) -> int:
    """Assets minus liabilities."""
    return get_type_balance(ledger, AccountType.ASSETS) - get_type_balance(
        ledger, AccountType.LIABILITIES
    )


def get_profit(ledger: Ledger) -> int:
    """Income minus expenses."""
    return get_type_balance(ledger, AccountType.INCOME) - get_type_balance(
        ledger, AccountType.EXPENSES
    )


def verify_accounting_equation(ledger: Ledger) -> bool:
    """Check assets + expenses == liabilities + equity + income."""
    debit_side = get_type_balance(ledger, AccountType.ASSETS) + get_type_balance(
        ledger, AccountType.EXPENSES
    )
    credit_side = (
        get_type_balance(ledger, AccountType.LIABILITIES)
        + get_type_balance(ledger, AccountType.EQUITY)
        + get_type_balance(ledger, AccountType.INCOME)
    )
    return debit_side == credit_side


def get_root_account(ledger: Ledger, account_type: AccountType) -> Account | None:
    return next(
        (a for a in ledger.accounts if a.type == account_type and a.parent_id is None), None
    )


def get_all_tags(ledger: Ledger) -> list[str]:
    """Every tag used by any entry, sorted."""
    return sorted({tag for entry in ledger.entries for tag in entry.tags or ()})
