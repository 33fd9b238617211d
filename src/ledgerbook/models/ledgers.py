"""Ledger and book models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from ledgerbook.models.accounts import Account
from ledgerbook.models.currency import CurrencyCode, ExchangeRate
from ledgerbook.models.entries import JournalEntry


class LedgerType(StrEnum):
    """Purpose of a ledger within a book."""

    MAIN = "main"  # asset management
    DAILY = "daily"  # day-to-day spending
    TOPIC = "topic"  # a trip, a renovation...


class Ledger(BaseModel):
    """One account forest plus its entry history."""

    id: str
    name: str
    type: LedgerType = LedgerType.MAIN
    description: str | None = None
    accounts: tuple[Account, ...] = ()
    entries: tuple[JournalEntry, ...] = ()
    default_currency: CurrencyCode = Field(default=CurrencyCode.CNY, alias="defaultCurrency")
    icon: str | None = None
    archived: bool = False
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = {"populate_by_name": True, "frozen": True}


class Book(BaseModel):
    """A multi-ledger envelope.

    Holds one non-removable main ledger, a shared exchange-rate table and
    a vocabulary of common tags (distinct from per-entry tags).
    """

    ledgers: tuple[Ledger, ...] = ()
    main_ledger_id: str = Field(alias="mainLedgerId")
    exchange_rates: tuple[ExchangeRate, ...] = Field(default=(), alias="exchangeRates")
    common_tags: tuple[str, ...] = Field(default=(), alias="commonTags")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = {"populate_by_name": True, "frozen": True}
