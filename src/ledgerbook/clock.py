"""Clock and identity collaborators.

Everything in ledgerbook that needs "now" or a fresh identifier goes
through this module, so tests can pin both:

    with frozen_clock(datetime(2024, 3, 15, 12, 0, tzinfo=UTC)):
        entries = get_today_entries(ledger)
"""

import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, date, datetime

_now_factory: Callable[[], datetime] = lambda: datetime.now(UTC)  # noqa: E731
_id_factory: Callable[[], str] = lambda: str(uuid.uuid4())  # noqa: E731


def now() -> datetime:
    """Return the current timestamp (timezone-aware)."""
    return _now_factory()


def today() -> date:
    """Return the current calendar date."""
    return now().date()


def new_id() -> str:
    """Return a globally unique opaque identifier."""
    return _id_factory()


def set_clock(factory: Callable[[], datetime] | None) -> None:
    """Replace the clock. Pass None to restore the system clock."""
    global _now_factory
    _now_factory = factory or (lambda: datetime.now(UTC))


def set_id_factory(factory: Callable[[], str] | None) -> None:
    """Replace the identifier factory. Pass None to restore uuid4."""
    global _id_factory
    _id_factory = factory or (lambda: str(uuid.uuid4()))


@contextmanager
def frozen_clock(at: datetime | date) -> Iterator[datetime]:
    """Pin now() and today() to a fixed instant for the duration of the block."""
    fixed = at if isinstance(at, datetime) else datetime(at.year, at.month, at.day, tzinfo=UTC)
    previous = _now_factory
    set_clock(lambda: fixed)
    try:
        yield fixed
    finally:
        set_clock(previous)
