"""Shared fixtures: a pinned clock, predictable ids and a small sample ledger."""

import itertools
from collections.abc import Iterator
from datetime import UTC, datetime

import pytest

from ledgerbook import clock
from ledgerbook.doubleentry.account import find_account_by_path
from ledgerbook.doubleentry.ledger import add_account, create_ledger
from ledgerbook.models.ledgers import Ledger

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)

# (parent path, child name) for the sample chart
SAMPLE_ACCOUNTS = [
    ("assets", "Cash"),
    ("assets", "Bank"),
    ("liabilities", "Credit Card"),
    ("expenses", "Food"),
    ("expenses", "Rent"),
    ("income", "Salary"),
]


@pytest.fixture(autouse=True)
def fixed_clock() -> Iterator[datetime]:
    """Pin the clock to NOW and hand out ids id-1, id-2, ..."""
    counter = itertools.count(1)
    clock.set_id_factory(lambda: f"id-{next(counter)}")
    with clock.frozen_clock(NOW) as now:
        yield now
    clock.set_id_factory(None)


@pytest.fixture
def ledger() -> Ledger:
    """A CNY ledger with cash, bank, credit card, food, rent and salary accounts."""
    result = create_ledger("Main")
    for parent_path, name in SAMPLE_ACCOUNTS:
        parent = find_account_by_path(result.accounts, parent_path)
        assert parent is not None
        result = add_account(result, name=name, parent_id=parent.id)
    return result


@pytest.fixture
def ids(ledger: Ledger) -> dict[str, str]:
    """Account ids of the sample ledger keyed by path."""
    return {a.path: a.id for a in ledger.accounts}
