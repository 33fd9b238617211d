"""Book persistence."""

from ledgerbook.storage.base import BookRepository
from ledgerbook.storage.json_store import JsonBookStore

__all__ = ["BookRepository", "JsonBookStore"]
