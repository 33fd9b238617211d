"""Personal multi-ledger double-entry bookkeeping."""

from ledgerbook.config import LedgerbookConfig
from ledgerbook.exceptions import (
    AccountNotFoundError,
    BalanceError,
    BookNotFoundError,
    ConfigError,
    CurrencyMismatchError,
    EntryNotFoundError,
    InvariantError,
    LedgerbookError,
    LedgerNotFoundError,
    NotFoundError,
    StorageError,
    StructuralError,
)
from ledgerbook.models import (
    Account,
    AccountType,
    Book,
    CurrencyCode,
    EntryLine,
    EntryLineType,
    JournalEntry,
    Ledger,
    LedgerType,
    Money,
)

__version__ = "0.1.0"

__all__ = [
    # Config
    "LedgerbookConfig",
    # Models
    "Account",
    "AccountType",
    "Book",
    "CurrencyCode",
    "EntryLine",
    "EntryLineType",
    "JournalEntry",
    "Ledger",
    "LedgerType",
    "Money",
    # Exceptions
    "AccountNotFoundError",
    "BalanceError",
    "BookNotFoundError",
    "ConfigError",
    "CurrencyMismatchError",
    "EntryNotFoundError",
    "InvariantError",
    "LedgerNotFoundError",
    "LedgerbookError",
    "NotFoundError",
    "StorageError",
    "StructuralError",
]
