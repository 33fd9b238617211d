"""Tests for the exception hierarchy."""

import pytest

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


class TestHierarchy:
    """Tests for base classes and attributes."""

    @pytest.mark.parametrize(
        "error",
        [
            BalanceError("x", debit_total=1, credit_total=2),
            AccountNotFoundError("x", identifier="a"),
            CurrencyMismatchError("x", expected="CNY", actual="USD"),
            StructuralError("x"),
            InvariantError("x"),
            ConfigError("x"),
            StorageError("x"),
        ],
    )
    def test_all_derive_from_base(self, error) -> None:
        """Every error can be caught as LedgerbookError and carries its message."""
        assert isinstance(error, LedgerbookError)
        assert error.message == "x"
        assert str(error) == "x"

    @pytest.mark.parametrize(
        ("cls", "kind"),
        [
            (AccountNotFoundError, "account"),
            (EntryNotFoundError, "entry"),
            (LedgerNotFoundError, "ledger"),
            (BookNotFoundError, "book"),
        ],
    )
    def test_not_found_kinds(self, cls, kind) -> None:
        """Each not-found error names what was missing."""
        error = cls("missing", identifier="id-1")

        assert isinstance(error, NotFoundError)
        assert error.kind == kind
        assert error.identifier == "id-1"

    def test_balance_error_imbalance(self) -> None:
        """Imbalance is debits minus credits."""
        error = BalanceError("x", debit_total=500, credit_total=700, entry_id="e1")

        assert error.imbalance == -200
        assert error.entry_id == "e1"

    def test_context_attributes(self) -> None:
        """Optional context attributes default to None."""
        assert StructuralError("x").field is None
        assert StructuralError("x", field="lines").field == "lines"
        assert ConfigError("x", path="/tmp/c.json").path == "/tmp/c.json"
        assert StorageError("x").path is None
