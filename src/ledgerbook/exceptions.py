"""Typed exceptions for ledgerbook."""


class LedgerbookError(Exception):
    """Base exception for all ledgerbook errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class BalanceError(LedgerbookError):
    """Journal entry debits and credits do not match."""

    def __init__(
        self,
        message: str,
        *,
        debit_total: int,
        credit_total: int,
        entry_id: str | None = None,
    ) -> None:
        self.debit_total = debit_total
        self.credit_total = credit_total
        self.entry_id = entry_id
        super().__init__(message)

    @property
    def imbalance(self) -> int:
        """Debit total minus credit total, in minor units."""
        return self.debit_total - self.credit_total


class NotFoundError(LedgerbookError):
    """A referenced account, entry or ledger does not exist."""

    kind = "object"

    def __init__(self, message: str, *, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(message)


class AccountNotFoundError(NotFoundError):
    """Referenced account id is not in the ledger."""

    kind = "account"


class EntryNotFoundError(NotFoundError):
    """Referenced entry id is not in the ledger."""

    kind = "entry"


class LedgerNotFoundError(NotFoundError):
    """Referenced ledger id is not in the book."""

    kind = "ledger"


class BookNotFoundError(NotFoundError):
    """No stored book has this id."""

    kind = "book"


class CurrencyMismatchError(LedgerbookError):
    """Two amounts or accounts in different currencies were combined."""

    def __init__(self, message: str, *, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class StructuralError(LedgerbookError):
    """Malformed request: too few lines, non-positive amount, bad field."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvariantError(LedgerbookError):
    """A book-level invariant would be, or already is, violated."""


class ConfigError(LedgerbookError):
    """Configuration could not be loaded."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)


class StorageError(LedgerbookError):
    """A stored book could not be read or written."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)
