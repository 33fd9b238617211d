"""Persistence interface for books."""

from typing import Protocol, runtime_checkable

from ledgerbook.models.entries import JournalEntry
from ledgerbook.models.ledgers import Book


@runtime_checkable
class BookRepository(Protocol):
    """Where books live between runs.

    The engine never calls a repository itself; callers load a book,
    run pure mutations on it and hand the result back. The per-entry
    methods exist so a backend can persist one change without rewriting
    the whole book; they must post and unpost exactly as
    ``ledgerbook.doubleentry.ledger`` does.
    """

    def load(self, book_id: str) -> Book | None:
        """Return the stored book, or None if there is none."""
        ...

    def save(self, book_id: str, book: Book) -> None:
        """Store ``book`` under ``book_id``, replacing any previous version."""
        ...

    def delete(self, book_id: str) -> None: ...

    def list_books(self) -> list[str]: ...

    def append_entry(self, book_id: str, ledger_id: str, entry: JournalEntry) -> Book: ...

    def remove_entry(self, book_id: str, ledger_id: str, entry_id: str) -> Book: ...

    def update_entry(self, book_id: str, ledger_id: str, entry: JournalEntry) -> Book: ...
