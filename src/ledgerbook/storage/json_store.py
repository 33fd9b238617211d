"""JSON file storage for books."""

import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from ledgerbook.doubleentry.book import update_ledger_in_book
from ledgerbook.doubleentry.ledger import add_entry, remove_entry, update_entry
from ledgerbook.exceptions import BookNotFoundError, StorageError
from ledgerbook.models.entries import JournalEntry
from ledgerbook.models.ledgers import Book

logger = logging.getLogger(__name__)

_BOOK_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def _get_books_dir() -> Path:
    """Get default book storage directory."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"
    return base / "ledgerbook" / "books"


@dataclass
class JsonBookStore:
    """Stores each book as one JSON document, ``<directory>/<book_id>.json``.

    Writes go to a temporary file in the same directory which then
    replaces the target, so a crash never leaves a half-written book.
    Amounts are stored as integers in minor units and exchange rates as
    decimal strings.
    """

    directory: Path

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory or _get_books_dir()

    def path_for(self, book_id: str) -> Path:
        if not _BOOK_ID.match(book_id):
            msg = f"Invalid book id: {book_id!r}"
            raise StorageError(msg)
        return self.directory / f"{book_id}.json"

    def load(self, book_id: str) -> Book | None:
        """Load a book. Returns None if no file exists for ``book_id``.

        Raises:
            StorageError: If the file exists but cannot be read or parsed
        """
        path = self.path_for(book_id)
        if not path.exists():
            return None

        try:
            book = Book.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            msg = f"Failed to read book {book_id} from {path}: {e}"
            raise StorageError(msg, path=str(path)) from e

        logger.debug("Loaded book %s from %s", book_id, path)
        return book

    def save(self, book_id: str, book: Book) -> None:
        """Write a book atomically."""
        path = self.path_for(book_id)
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = book.model_dump_json(by_alias=True, indent=2)

        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{book_id}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            msg = f"Failed to write book {book_id} to {path}: {e}"
            raise StorageError(msg, path=str(path)) from e

        logger.info("Saved book %s to %s", book_id, path)

    def delete(self, book_id: str) -> None:
        """Remove a stored book if present."""
        path = self.path_for(book_id)
        if path.exists():
            path.unlink()
            logger.info("Deleted book %s", book_id)

    def exists(self, book_id: str) -> bool:
        return self.path_for(book_id).exists()

    def list_books(self) -> list[str]:
        """Ids of all stored books, sorted."""
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))

    def _require(self, book_id: str) -> Book:
        book = self.load(book_id)
        if book is None:
            msg = f"Book {book_id} not found"
            raise BookNotFoundError(msg, identifier=book_id)
        return book

    def append_entry(self, book_id: str, ledger_id: str, entry: JournalEntry) -> Book:
        """Add and post one entry to a stored ledger, then save."""
        book = update_ledger_in_book(
            self._require(book_id), ledger_id, lambda ledger: add_entry(ledger, entry)
        )
        self.save(book_id, book)
        return book

    def remove_entry(self, book_id: str, ledger_id: str, entry_id: str) -> Book:
        """Remove and unpost one entry from a stored ledger, then save."""
        book = update_ledger_in_book(
            self._require(book_id), ledger_id, lambda ledger: remove_entry(ledger, entry_id)
        )
        self.save(book_id, book)
        return book

    def update_entry(self, book_id: str, ledger_id: str, entry: JournalEntry) -> Book:
        """Replace one entry in a stored ledger, reposting it, then save."""
        book = update_ledger_in_book(
            self._require(book_id), ledger_id, lambda ledger: update_entry(ledger, entry)
        )
        self.save(book_id, book)
        return book
