"""Tests for the JSON book store."""

import json
import stat
from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.doubleentry.account import find_account_by_path
from ledgerbook.doubleentry.book import (
    create_book,
    get_main_ledger,
    set_exchange_rate,
    update_ledger_in_book,
)
from ledgerbook.doubleentry.entry import (
    create_opening_balance_entry,
    create_simple_entry,
    update_entry_fields,
)
from ledgerbook.doubleentry.ledger import add_account
from ledgerbook.exceptions import BookNotFoundError, StorageError, StructuralError
from ledgerbook.models.currency import CurrencyCode
from ledgerbook.storage import BookRepository, JsonBookStore


@pytest.fixture
def store(tmp_path) -> JsonBookStore:
    return JsonBookStore(tmp_path / "books")


@pytest.fixture
def book():
    """A book with cash and food accounts and one USD rate."""
    book = create_book()

    def setup(ledger):
        assets = find_account_by_path(ledger.accounts, "assets")
        expenses = find_account_by_path(ledger.accounts, "expenses")
        ledger = add_account(ledger, name="Cash", parent_id=assets.id)
        return add_account(ledger, name="Food", parent_id=expenses.id)

    book = update_ledger_in_book(book, book.main_ledger_id, setup)
    return set_exchange_rate(book, CurrencyCode.USD, CurrencyCode.CNY, "7.1234", date(2024, 1, 1))


def _lunch(ledger, amount: int = 3_500):
    return create_simple_entry(
        date=date(2024, 3, 10),
        description="Lunch",
        debit_account_id=find_account_by_path(ledger.accounts, "expenses:food").id,
        credit_account_id=find_account_by_path(ledger.accounts, "assets:cash").id,
        amount=amount,
        accounts=ledger.accounts,
    )


class TestJsonBookStore:
    """Tests for loading and saving whole books."""

    def test_is_a_book_repository(self, store) -> None:
        """The JSON store satisfies the repository protocol."""
        assert isinstance(store, BookRepository)

    def test_round_trip(self, store, book) -> None:
        """A saved book should load back equal."""
        store.save("home", book)

        assert store.load("home") == book

    def test_file_format(self, store, book) -> None:
        """Keys are camelCase, rates are decimal strings, the file is private."""
        store.save("home", book)
        path = store.path_for("home")

        data = json.loads(path.read_text())

        assert data["mainLedgerId"] == book.main_ledger_id
        assert data["exchangeRates"][0]["from"] == "USD"
        assert Decimal(data["exchangeRates"][0]["rate"]) == Decimal("7.1234")
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_missing_book_loads_as_none(self, store) -> None:
        """Should return None when no file exists."""
        assert store.load("nope") is None
        assert not store.exists("nope")

    def test_corrupt_file_raises(self, store) -> None:
        """Unparseable content should raise StorageError."""
        store.directory.mkdir(parents=True)
        store.path_for("broken").write_text("{}")

        with pytest.raises(StorageError, match="Failed to read book broken"):
            store.load("broken")

    def test_rejects_unsafe_ids(self, store) -> None:
        """Book ids cannot escape the store directory."""
        with pytest.raises(StorageError, match="Invalid book id"):
            store.path_for("../etc/passwd")

    def test_list_and_delete(self, store, book) -> None:
        """Should list stored ids sorted and delete them."""
        assert store.list_books() == []

        store.save("work", book)
        store.save("home", book)
        assert store.list_books() == ["home", "work"]

        store.delete("work")
        store.delete("work")
        assert store.list_books() == ["home"]


class TestEntryOperations:
    """Tests for per-entry persistence."""

    def test_append_update_remove(self, store, book) -> None:
        """Each operation should post, save and return the new book."""
        store.save("home", book)
        ledger = get_main_ledger(book)
        entry = _lunch(ledger)

        saved = store.append_entry("home", ledger.id, entry)
        cash = find_account_by_path(get_main_ledger(saved).accounts, "assets:cash")
        assert cash.balance == -3_500
        assert store.load("home") == saved

        saved = store.update_entry(
            "home", ledger.id, update_entry_fields(entry, lines=_lunch(ledger, 4_000).lines)
        )
        cash = find_account_by_path(get_main_ledger(saved).accounts, "assets:cash")
        assert cash.balance == -4_000

        saved = store.remove_entry("home", ledger.id, entry.id)
        assert get_main_ledger(saved).entries == ()
        assert store.load("home") == saved

    def test_append_to_missing_book(self, store, book) -> None:
        """Should raise BookNotFoundError."""
        ledger = get_main_ledger(book)

        with pytest.raises(BookNotFoundError, match="Book home not found"):
            store.append_entry("home", ledger.id, _lunch(ledger))

    def test_opening_balance_removal_is_refused(self, store, book) -> None:
        """The stored book is left untouched when removal is refused."""
        ledger = get_main_ledger(book)
        entry = create_opening_balance_entry(
            date=date(2024, 1, 1),
            account=find_account_by_path(ledger.accounts, "assets:cash"),
            equity_account=find_account_by_path(ledger.accounts, "equity"),
            amount=10_000,
        )
        store.save("home", book)
        saved = store.append_entry("home", ledger.id, entry)

        with pytest.raises(StructuralError, match="Opening balance entries cannot be deleted"):
            store.remove_entry("home", ledger.id, entry.id)

        assert store.load("home") == saved
