"""Chart-of-accounts models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from ledgerbook.models.currency import CurrencyCode


class AccountType(StrEnum):
    """Classification of accounts in double-entry bookkeeping.

    Debit increases: ASSETS, EXPENSES
    Credit increases: LIABILITIES, EQUITY, INCOME
    """

    ASSETS = "assets"
    LIABILITIES = "liabilities"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSES = "expenses"


class Account(BaseModel):
    """A node in a ledger's chart of accounts.

    Attributes:
        id: Opaque unique identifier
        name: Display name (free text)
        type: The type classification, shared with the parent
        currency: Currency every amount on this account is denominated in
        parent_id: Parent account id, None for the five root accounts
        path: Colon-delimited slug lineage, e.g. "assets:bank:cmb"
        balance: Current balance in minor units, signed by the normal side

    ``balance`` is only ever changed by posting or unposting journal
    entries; see ``ledgerbook.doubleentry.entry.post_entry``.
    """

    id: str
    name: str
    type: AccountType
    currency: CurrencyCode
    parent_id: str | None = Field(default=None, alias="parentId")
    path: str
    balance: int = 0
    icon: str | None = None
    note: str | None = None
    archived: bool = False
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def is_root(self) -> bool:
        """Return True for the top-of-hierarchy account of its type."""
        return self.parent_id is None

    @property
    def depth(self) -> int:
        """Return the nesting depth (0 for root accounts)."""
        return self.path.count(":")

    def is_descendant_of(self, other: Account) -> bool:
        """Check if this account sits anywhere below ``other``."""
        return self.path.startswith(other.path + ":")
