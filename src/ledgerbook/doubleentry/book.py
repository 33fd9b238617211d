"""Book management: the multi-ledger envelope."""

import logging
from collections.abc import Callable, Iterable
from datetime import date
from decimal import Decimal
from typing import Any

from ledgerbook import clock
from ledgerbook.doubleentry.currency import create_exchange_rate, upsert_exchange_rate
from ledgerbook.doubleentry.ledger import create_ledger
from ledgerbook.exceptions import InvariantError, LedgerNotFoundError
from ledgerbook.models.currency import CurrencyCode, ExchangeRate
from ledgerbook.models.ledgers import Book, Ledger, LedgerType

logger = logging.getLogger(__name__)

DEFAULT_MAIN_LEDGER_NAME = "Main"


def _touch(book: Book, **updates: Any) -> Book:
    return book.model_copy(update={**updates, "updated_at": clock.now()})


def create_book(
    *,
    main_ledger_name: str = DEFAULT_MAIN_LEDGER_NAME,
    default_currency: CurrencyCode = CurrencyCode.CNY,
) -> Book:
    """Create a book holding a single main ledger."""
    main = create_ledger(main_ledger_name, type=LedgerType.MAIN, default_currency=default_currency)
    return Book(
        ledgers=(main,),
        main_ledger_id=main.id,
        exchange_rates=(),
        common_tags=(),
        updated_at=clock.now(),
    )


# =============================================================================
# LEDGERS
# =============================================================================


def add_ledger(
    book: Book,
    name: str,
    *,
    type: LedgerType = LedgerType.DAILY,
    description: str | None = None,
    default_currency: CurrencyCode | None = None,
    icon: str | None = None,
) -> Book:
    """Add a new ledger. Its currency defaults to the main ledger's."""
    currency = default_currency or get_main_ledger(book).default_currency
    ledger = create_ledger(
        name, type=type, description=description, default_currency=currency, icon=icon
    )
    logger.debug("Added ledger %s (%s)", ledger.id, name)
    return _touch(book, ledgers=(*book.ledgers, ledger))


def update_ledger_in_book(
    book: Book, ledger_id: str, updater: Callable[[Ledger], Ledger]
) -> Book:
    """Replace a ledger with ``updater(ledger)``.

    Typical use is feeding a ledger mutation through:

        book = update_ledger_in_book(book, ledger_id, lambda ledger: add_entry(ledger, entry))

    Raises:
        LedgerNotFoundError: If ``ledger_id`` is not in the book
    """
    ledger = _require_ledger(book, ledger_id)
    updated = updater(ledger)
    if updated.id != ledger_id:
        msg = f"Ledger updater changed id {ledger_id} to {updated.id}"
        raise InvariantError(msg)
    return _touch(book, ledgers=tuple(updated if item.id == ledger_id else item for item in book.ledgers))


def remove_ledger(book: Book, ledger_id: str) -> Book:
    """Remove a ledger. The main ledger can never be removed.

    Raises:
        InvariantError: If ``ledger_id`` is the main ledger
        LedgerNotFoundError: If ``ledger_id`` is not in the book
    """
    if ledger_id == book.main_ledger_id:
        raise InvariantError("Cannot remove main ledger")
    _require_ledger(book, ledger_id)
    logger.debug("Removed ledger %s", ledger_id)
    return _touch(book, ledgers=tuple(item for item in book.ledgers if item.id != ledger_id))


def get_ledger(book: Book, ledger_id: str) -> Ledger | None:
    return next((item for item in book.ledgers if item.id == ledger_id), None)


def _require_ledger(book: Book, ledger_id: str) -> Ledger:
    ledger = get_ledger(book, ledger_id)
    if ledger is None:
        msg = f"Ledger {ledger_id} not found"
        raise LedgerNotFoundError(msg, identifier=ledger_id)
    return ledger


def get_main_ledger(book: Book) -> Ledger:
    """Return the main ledger.

    Raises:
        InvariantError: If the designated main ledger is missing, which
            means the book itself is corrupt
    """
    main = get_ledger(book, book.main_ledger_id)
    if main is None:
        msg = f"Main ledger {book.main_ledger_id} not found"
        raise InvariantError(msg)
    return main


def get_ledgers_by_type(book: Book, ledger_type: LedgerType) -> list[Ledger]:
    return [item for item in book.ledgers if item.type == ledger_type]


def get_active_ledgers(book: Book) -> list[Ledger]:
    """Ledgers that are not archived."""
    return [item for item in book.ledgers if not item.archived]


# =============================================================================
# EXCHANGE RATES
# =============================================================================


def set_exchange_rate(
    book: Book,
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
    rate: Decimal | int | str,
    on: date | None = None,
) -> Book:
    """Add a rate, replacing any existing one for the same pair and date."""
    new_rate = create_exchange_rate(from_currency, to_currency, rate, on)
    logger.debug(
        "Set rate %s->%s = %s on %s",
        new_rate.from_currency,
        new_rate.to_currency,
        new_rate.rate,
        new_rate.date,
    )
    return _touch(book, exchange_rates=upsert_exchange_rate(book.exchange_rates, new_rate))


def get_exchange_rate_history(
    book: Book, from_currency: CurrencyCode, to_currency: CurrencyCode
) -> list[ExchangeRate]:
    """Rates recorded for one direction of a pair, newest first."""
    return sorted(
        (
            r
            for r in book.exchange_rates
            if r.from_currency == from_currency and r.to_currency == to_currency
        ),
        key=lambda r: r.date,
        reverse=True,
    )


# =============================================================================
# TAGS
# =============================================================================


def add_common_tags(book: Book, tags: Iterable[str]) -> Book:
    """Union ``tags`` into the common vocabulary, keeping first-seen order."""
    merged = tuple(dict.fromkeys([*book.common_tags, *tags]))
    return _touch(book, common_tags=merged)


def remove_common_tags(book: Book, tags: Iterable[str]) -> Book:
    drop = set(tags)
    return _touch(book, common_tags=tuple(t for t in book.common_tags if t not in drop))


def get_all_book_tags(book: Book) -> list[str]:
    """Common tags plus every tag used in any ledger, sorted."""
    tags = set(book.common_tags)
    for ledger in book.ledgers:
        for entry in ledger.entries:
            tags.update(entry.tags or ())
    return sorted(tags)
