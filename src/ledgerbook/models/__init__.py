"""Pydantic models for ledgerbook snapshots and reports."""

from ledgerbook.models.accounts import Account, AccountType
from ledgerbook.models.currency import CurrencyCode, CurrencyConfig, ExchangeRate, Money
from ledgerbook.models.entries import (
    EntryCategory,
    EntryKind,
    EntryLine,
    EntryLineType,
    JournalEntry,
)
from ledgerbook.models.ledgers import Book, Ledger, LedgerType
from ledgerbook.models.reports import (
    AccountNode,
    AmountRange,
    BalanceSnapshot,
    CategorySummary,
    DateRange,
    EntryQuery,
    NetWorthPoint,
    PeriodSummary,
    SummaryPoint,
    TimeGranularity,
    TrialBalanceRow,
)
from ledgerbook.models.validation import Check, ValidationResult

__all__ = [
    # Accounts
    "Account",
    "AccountType",
    # Currency
    "CurrencyCode",
    "CurrencyConfig",
    "ExchangeRate",
    "Money",
    # Entries
    "EntryCategory",
    "EntryKind",
    "EntryLine",
    "EntryLineType",
    "JournalEntry",
    # Ledgers
    "Book",
    "Ledger",
    "LedgerType",
    # Reports
    "AccountNode",
    "AmountRange",
    "BalanceSnapshot",
    "CategorySummary",
    "DateRange",
    "EntryQuery",
    "NetWorthPoint",
    "PeriodSummary",
    "SummaryPoint",
    "TimeGranularity",
    "TrialBalanceRow",
    # Validation
    "Check",
    "ValidationResult",
]
