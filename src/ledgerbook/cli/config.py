"""CLI configuration with XDG-compliant paths and environment variable overrides."""

import os
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from ledgerbook.config import LedgerbookConfig
from ledgerbook.doubleentry.book import get_ledger, get_main_ledger
from ledgerbook.exceptions import BookNotFoundError, LedgerNotFoundError
from ledgerbook.models.ledgers import Book, Ledger
from ledgerbook.storage import JsonBookStore


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def default_config_dir() -> Path:
    """Get XDG-compliant config directory.

    Uses XDG_CONFIG_HOME if set, otherwise ~/.config/ledgerbook.
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "ledgerbook"
    return Path.home() / ".config" / "ledgerbook"


@dataclass
class CLIConfig:
    """Configuration passed through Typer context.

    Attributes:
        verbose: Enable debug logging.
        book_id: Which stored book commands operate on.
        config_dir: Directory holding config.json.
        settings: Library settings (currency, data directory, windows).

    Directory Structure:
        config_dir/
        └── config.json         # LedgerbookConfig values

        settings.data_dir/
        └── books/
            ├── default.json    # One JSON document per book
            └── travel.json
    """

    verbose: bool = False
    book_id: str = "default"
    config_dir: Path = field(default_factory=default_config_dir)
    settings: LedgerbookConfig = field(default_factory=LedgerbookConfig)

    @property
    def books_dir(self) -> Path:
        return self.settings.data_dir / "books"

    @property
    def store(self) -> JsonBookStore:
        return JsonBookStore(self.books_dir)

    def load_book(self) -> Book:
        """Load the selected book.

        Raises:
            BookNotFoundError: If it has not been created yet
        """
        book = self.store.load(self.book_id)
        if book is None:
            msg = f"Book '{self.book_id}' not found. Run 'ledgerbook book init' first."
            raise BookNotFoundError(msg, identifier=self.book_id)
        return book

    def save_book(self, book: Book) -> None:
        self.store.save(self.book_id, book)

    def resolve_ledger(self, book: Book, ledger_id: str | None) -> Ledger:
        """Pick a ledger by id, or the main ledger when none is given."""
        if ledger_id is None:
            return get_main_ledger(book)
        ledger = get_ledger(book, ledger_id)
        if ledger is None:
            msg = f"Ledger {ledger_id} not found"
            raise LedgerNotFoundError(msg, identifier=ledger_id)
        return ledger
