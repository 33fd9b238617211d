"""Journal entry models."""

from __future__ import annotations

import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class EntryLineType(StrEnum):
    """Side of a journal line."""

    DEBIT = "debit"
    CREDIT = "credit"


class EntryKind(StrEnum):
    """What produced a journal entry.

    Opening-balance entries seed an account's starting balance and are
    protected from deletion.
    """

    STANDARD = "standard"
    OPENING_BALANCE = "opening_balance"


class EntryCategory(StrEnum):
    """Coarse classification of an entry by the account types it touches."""

    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"
    UNKNOWN = "unknown"


class EntryLine(BaseModel):
    """A single debit or credit against one account.

    ``amount`` is a positive integer in the account currency's minor unit;
    the side is carried by ``type``, never by the sign.
    """

    account_id: str = Field(alias="accountId")
    amount: int
    type: EntryLineType
    note: str | None = None

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def is_debit(self) -> bool:
        """Return True if this is a debit line."""
        return self.type == EntryLineType.DEBIT

    @property
    def is_credit(self) -> bool:
        """Return True if this is a credit line."""
        return self.type == EntryLineType.CREDIT


class JournalEntry(BaseModel):
    """An atomic, balanced, multi-line transaction.

    Attributes:
        id: Opaque unique identifier
        date: Transaction date
        description: Human-readable summary
        lines: Debit/credit lines (must balance)
        tags: Optional free-form classification tags
        payee: Optional counterparty
        kind: Standard entry or opening balance
    """

    id: str
    date: datetime.date
    description: str
    lines: tuple[EntryLine, ...] = ()
    tags: tuple[str, ...] | None = None
    payee: str | None = None
    note: str | None = None
    kind: EntryKind = EntryKind.STANDARD
    created_at: datetime.datetime = Field(alias="createdAt")
    updated_at: datetime.datetime = Field(alias="updatedAt")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def debit_lines(self) -> tuple[EntryLine, ...]:
        """Lines on the debit side."""
        return tuple(line for line in self.lines if line.is_debit)

    @property
    def credit_lines(self) -> tuple[EntryLine, ...]:
        """Lines on the credit side."""
        return tuple(line for line in self.lines if line.is_credit)
