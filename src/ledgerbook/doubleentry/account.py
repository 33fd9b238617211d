"""Chart-of-accounts construction and lookup."""

import re
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from typing import assert_never

from ledgerbook import clock
from ledgerbook.models.accounts import Account, AccountType
from ledgerbook.models.currency import CurrencyCode

# Root accounts, one per type, in display order.
ROOT_ACCOUNTS: tuple[tuple[str, AccountType], ...] = (
    ("Assets", AccountType.ASSETS),
    ("Liabilities", AccountType.LIABILITIES),
    ("Equity", AccountType.EQUITY),
    ("Income", AccountType.INCOME),
    ("Expenses", AccountType.EXPENSES),
)

_WHITESPACE = re.compile(r"\s+")


def generate_account_id() -> str:
    return clock.new_id()


def create_account_path(parent_path: str | None, name: str) -> str:
    """Build the colon-delimited path for a new account.

    The name is lowercased and whitespace runs become hyphens:
        create_account_path("liabilities", "Credit Card") -> "liabilities:credit-card"
    """
    slug = _WHITESPACE.sub("-", name.strip().lower())
    return f"{parent_path}:{slug}" if parent_path else slug


def create_account(
    *,
    name: str,
    type: AccountType,
    currency: CurrencyCode,
    parent: Account | None = None,
    icon: str | None = None,
    note: str | None = None,
) -> Account:
    """Create a zero-balance account.

    Non-root accounts inherit their type from ``parent``; the ``type``
    argument only matters for roots.
    """
    timestamp = clock.now()
    return Account(
        id=generate_account_id(),
        name=name,
        type=parent.type if parent else type,
        currency=currency,
        parent_id=parent.id if parent else None,
        path=create_account_path(parent.path if parent else None, name),
        balance=0,
        icon=icon,
        note=note,
        created_at=timestamp,
        updated_at=timestamp,
    )


def create_root_accounts(currency: CurrencyCode) -> tuple[Account, ...]:
    """Create the five root accounts; each root's path is its type value."""
    timestamp = clock.now()
    return tuple(
        Account(
            id=generate_account_id(),
            name=name,
            type=account_type,
            currency=currency,
            parent_id=None,
            path=account_type.value,
            created_at=timestamp,
            updated_at=timestamp,
        )
        for name, account_type in ROOT_ACCOUNTS
    )


# =============================================================================
# LOOKUP
# =============================================================================


def find_account(
    accounts: Iterable[Account], predicate: Callable[[Account], bool]
) -> Account | None:
    return next((a for a in accounts if predicate(a)), None)


def find_account_by_id(accounts: Iterable[Account], account_id: str) -> Account | None:
    return find_account(accounts, lambda a: a.id == account_id)


def find_account_by_path(accounts: Iterable[Account], path: str) -> Account | None:
    return find_account(accounts, lambda a: a.path == path)


def find_accounts_by_type(accounts: Iterable[Account], account_type: AccountType) -> list[Account]:
    return [a for a in accounts if a.type == account_type]


def find_child_accounts(accounts: Iterable[Account], parent_id: str) -> list[Account]:
    """Direct children only."""
    return [a for a in accounts if a.parent_id == parent_id]


def find_descendant_accounts(accounts: Sequence[Account], parent_id: str) -> list[Account]:
    """All accounts below ``parent_id``: direct children first, then each child's subtree."""
    children = find_child_accounts(accounts, parent_id)
    descendants = list(children)
    for child in children:
        descendants.extend(find_descendant_accounts(accounts, child.id))
    return descendants


def update_account_balance(account: Account, delta: int) -> Account:
    """Return a copy of ``account`` with ``delta`` added to its balance.

    Only the posting functions call this.
    """
    return account.model_copy(update={"balance": account.balance + delta})


def is_debit_increase_account(account_type: AccountType) -> bool:
    """Return True if debits increase balances of this account type."""
    match account_type:
        case AccountType.ASSETS | AccountType.EXPENSES:
            return True
        case AccountType.LIABILITIES | AccountType.EQUITY | AccountType.INCOME:
            return False
        case _:
            assert_never(account_type)


class AccountIndex:
    """Id map and parent-to-children index over one account snapshot.

    Build once per snapshot when walking the tree repeatedly:

        index = AccountIndex(ledger.accounts)
        for child in index.children(root.id):
            ...
    """

    def __init__(self, accounts: Iterable[Account]) -> None:
        self._by_id: dict[str, Account] = {}
        self._children: dict[str | None, list[Account]] = defaultdict(list)
        for account in accounts:
            self._by_id[account.id] = account
            self._children[account.parent_id].append(account)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, account_id: str) -> Account | None:
        return self._by_id.get(account_id)

    def roots(self) -> list[Account]:
        return list(self._children.get(None, ()))

    def children(self, account_id: str) -> list[Account]:
        return list(self._children.get(account_id, ()))

    def descendants(self, account_id: str) -> list[Account]:
        result: list[Account] = []
        stack = list(reversed(self.children(account_id)))
        while stack:
            account = stack.pop()
            result.append(account)
            stack.extend(reversed(self.children(account.id)))
        return result

    def ancestors(self, account_id: str) -> list[Account]:
        """Parent chain from the immediate parent up to the root.

        Stops at a dangling parent reference or a cycle.
        """
        chain: list[Account] = []
        seen = {account_id}
        current = self.get(account_id)
        while current is not None and current.parent_id is not None:
            if current.parent_id in seen:
                break
            seen.add(current.parent_id)
            current = self.get(current.parent_id)
            if current is not None:
                chain.append(current)
        return chain
