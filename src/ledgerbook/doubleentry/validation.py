"""Non-raising checks over entries, accounts, ledgers and books.

``validate_*`` functions collect every problem into a ``ValidationResult``;
``can_*`` functions answer a single yes/no question with a reason.
"""

from collections import Counter
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ledgerbook import clock
from ledgerbook.doubleentry.account import AccountIndex
from ledgerbook.doubleentry.entry import get_total_credit, get_total_debit
from ledgerbook.doubleentry.ledger import verify_accounting_equation
from ledgerbook.models.accounts import AccountType
from ledgerbook.models.entries import EntryKind, EntryLine, JournalEntry
from ledgerbook.models.ledgers import Book, Ledger
from ledgerbook.models.validation import Check, ValidationResult

DEFAULT_MAX_TAGS = 10


# =============================================================================
# ENTRIES
# =============================================================================


def _entry_errors(entry: JournalEntry) -> list[str]:
    errors: list[str] = []

    if not entry.id.strip():
        errors.append("Entry ID must not be empty")
    if not entry.description.strip():
        errors.append("Entry description must not be empty")

    if not entry.lines:
        errors.append("Entry must contain at least one line")
    elif len(entry.lines) < 2:
        errors.append("Entry needs at least two lines (a debit and a credit)")
    else:
        debit_total = get_total_debit(entry)
        credit_total = get_total_credit(entry)
        if debit_total != credit_total:
            errors.append(f"Entry is not balanced: debits {debit_total} != credits {credit_total}")

    for position, line in enumerate(entry.lines, start=1):
        if line.amount <= 0:
            errors.append(f"Line {position} amount must be greater than 0 (got {line.amount})")

    return errors


def validate_entry(entry: JournalEntry, max_tags: int = DEFAULT_MAX_TAGS) -> ValidationResult:
    """Check an entry for structural problems without raising.

    Errors cover empty id or description, fewer than two lines, an
    imbalance and non-positive amounts. More than ``max_tags`` tags is a
    warning only.
    """
    warnings: list[str] = []
    if entry.tags and len(entry.tags) > max_tags:
        warnings.append(f"Entry has {len(entry.tags)} tags (more than {max_tags})")
    return ValidationResult.from_messages(_entry_errors(entry), warnings)


def _format_pydantic_error(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else str(error["msg"])


def validate_entry_data(
    data: Mapping[str, Any], max_tags: int = DEFAULT_MAX_TAGS
) -> ValidationResult:
    """Validate a raw entry mapping, e.g. parsed JSON or form input.

    Type and format problems (a malformed date, a non-integer amount, an
    unknown line type) are reported as errors instead of raising. Missing
    timestamps are filled in with the current time.
    """
    payload = dict(data)
    timestamp = clock.now()
    for name, alias in (("created_at", "createdAt"), ("updated_at", "updatedAt")):
        if name not in payload and alias not in payload:
            payload[alias] = timestamp

    try:
        entry = JournalEntry.model_validate(payload)
    except ValidationError as exc:
        errors = [_format_pydantic_error(error) for error in exc.errors()]
        return ValidationResult.from_messages(errors, [])

    return validate_entry(entry, max_tags=max_tags)


def validate_entry_line(line: EntryLine) -> ValidationResult:
    errors: list[str] = []
    if not line.account_id.strip():
        errors.append("Account ID must not be empty")
    if line.amount <= 0:
        errors.append("Amount must be greater than 0")
    return ValidationResult.from_messages(errors, [])


def can_delete_entry(ledger: Ledger, entry_id: str) -> Check:
    """Opening-balance entries cannot be deleted; adjust the opening balance instead."""
    entry = next((e for e in ledger.entries if e.id == entry_id), None)
    if entry is None:
        return Check.failed("Entry does not exist")
    if entry.kind == EntryKind.OPENING_BALANCE:
        return Check.failed(
            "Opening balance entries cannot be deleted; adjust the account's opening balance"
        )
    return Check.passed()


# =============================================================================
# ACCOUNTS
# =============================================================================


def can_delete_account(ledger: Ledger, account_id: str) -> Check:
    """Only leaf accounts that no entry references can be hard-deleted."""
    index = AccountIndex(ledger.accounts)
    if account_id not in index:
        return Check.failed("Account does not exist")
    if index.children(account_id):
        return Check.failed("Account has sub-accounts; delete or move them first")
    in_use = any(line.account_id == account_id for e in ledger.entries for line in e.lines)
    if in_use:
        return Check.failed("Account is used by entries; delete them or archive the account")
    return Check.passed()


def can_archive_account(ledger: Ledger, account_id: str) -> Check:
    """Root accounts and already-archived accounts cannot be archived."""
    index = AccountIndex(ledger.accounts)
    account = index.get(account_id)
    if account is None:
        return Check.failed("Account does not exist")
    if account.archived:
        return Check.failed("Account is already archived")
    if account.is_root:
        return Check.failed("Root accounts cannot be archived")
    return Check.passed()


def can_move_account(ledger: Ledger, account_id: str, new_parent_id: str) -> Check:
    """A move must stay within one type and currency and must not create a cycle."""
    index = AccountIndex(ledger.accounts)
    account = index.get(account_id)
    if account is None:
        return Check.failed("Account does not exist")
    new_parent = index.get(new_parent_id)
    if new_parent is None:
        return Check.failed("Target parent account does not exist")
    if account_id == new_parent_id:
        return Check.failed("Cannot move an account under itself")
    if account.is_root:
        return Check.failed("Root accounts cannot be moved")
    if any(a.id == new_parent_id for a in index.descendants(account_id)):
        return Check.failed("Cannot move an account under one of its sub-accounts")
    if account.type != new_parent.type:
        return Check.failed(f"Account type mismatch ({account.type} -> {new_parent.type})")
    if account.currency != new_parent.currency:
        return Check.failed(
            f"Currency mismatch ({account.currency} -> {new_parent.currency})"
        )
    return Check.passed()


# =============================================================================
# LEDGERS AND BOOKS
# =============================================================================


def validate_ledger(ledger: Ledger, max_tags: int = DEFAULT_MAX_TAGS) -> ValidationResult:
    """Check the whole ledger for structural and accounting problems.

    Covers the five roots, path uniqueness, parent references, type
    inheritance, every entry, line account references and the
    accounting equation.
    """
    errors: list[str] = []
    warnings: list[str] = []
    index = AccountIndex(ledger.accounts)

    root_counts = Counter(a.type for a in index.roots())
    for account_type in AccountType:
        count = root_counts[account_type]
        if count == 0:
            errors.append(f"Missing root account: {account_type}")
        elif count > 1:
            errors.append(f"Duplicate root account: {account_type} ({count} roots)")

    path_counts = Counter(a.path for a in ledger.accounts)
    for path, count in path_counts.items():
        if count > 1:
            errors.append(f"Duplicate account path: {path}")

    for account in ledger.accounts:
        if account.parent_id is None:
            continue
        parent = index.get(account.parent_id)
        if parent is None:
            errors.append(f"Parent {account.parent_id} of account {account.name} does not exist")
        elif parent.type != account.type:
            errors.append(
                f"Account {account.path} is {account.type} but its parent is {parent.type}"
            )

    for entry in ledger.entries:
        label = f'Entry "{entry.description}" (ID: {entry.id})'
        result = validate_entry(entry, max_tags=max_tags)
        if result.errors:
            errors.append(f"{label}: {', '.join(result.errors)}")
        if result.warnings:
            warnings.append(f"{label}: {', '.join(result.warnings)}")
        missing = sorted({line.account_id for line in entry.lines if line.account_id not in index})
        if missing:
            errors.append(f"{label}: unknown account(s) {', '.join(missing)}")

    if not verify_accounting_equation(ledger):
        errors.append(
            "Accounting equation does not hold: "
            "assets + expenses != liabilities + equity + income"
        )

    return ValidationResult.from_messages(errors, warnings)


def validate_book(book: Book, max_tags: int = DEFAULT_MAX_TAGS) -> ValidationResult:
    """Validate every ledger and check the main ledger reference."""
    errors: list[str] = []
    warnings: list[str] = []

    ids = [ledger.id for ledger in book.ledgers]
    if book.main_ledger_id not in ids:
        errors.append(f"Main ledger {book.main_ledger_id} does not exist")
    for ledger_id, count in Counter(ids).items():
        if count > 1:
            errors.append(f"Duplicate ledger ID: {ledger_id}")

    for ledger in book.ledgers:
        result = validate_ledger(ledger, max_tags=max_tags)
        errors.extend(f"Ledger {ledger.name}: {message}" for message in result.errors)
        warnings.extend(f"Ledger {ledger.name}: {message}" for message in result.warnings)

    return ValidationResult.from_messages(errors, warnings)
