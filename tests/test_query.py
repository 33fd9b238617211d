"""Tests for entry queries and account lookups."""

from datetime import date

import pytest

from ledgerbook.doubleentry.entry import create_simple_entry
from ledgerbook.doubleentry.ledger import add_account, add_entry, archive_account
from ledgerbook.doubleentry.query import (
    get_account_full_name,
    get_account_tree,
    get_account_with_descendants,
    get_active_accounts,
    get_entries_by_account,
    get_entries_by_tag,
    get_this_month_entries,
    get_this_year_entries,
    get_today_entries,
    query_entries,
)
from ledgerbook.models.accounts import AccountType
from ledgerbook.models.reports import AmountRange, DateRange, EntryQuery


@pytest.fixture
def history(ledger, ids):
    """Entries across two years; the clock is pinned to 2024-03-15."""
    rows = [
        ("Old salary", date(2023, 11, 30), "assets:bank", "income:salary", 900_000, None, None, None),
        ("Rent", date(2024, 1, 5), "expenses:rent", "assets:bank", 300_000, ["home"], "Landlord", None),
        ("Coffee", date(2024, 3, 1), "expenses:food", "assets:cash", 3_500, ["coffee"], "Blue Bottle", None),
        ("Groceries", date(2024, 3, 15), "expenses:food", "liabilities:credit-card", 25_000, ["home", "food"], "Market", "weekly shop"),
        ("Lunch", date(2024, 3, 15), "expenses:food", "assets:cash", 4_800, None, None, None),
    ]
    for description, day, debit, credit, amount, tags, payee, note in rows:
        entry = create_simple_entry(
            date=day,
            description=description,
            debit_account_id=ids[debit],
            credit_account_id=ids[credit],
            amount=amount,
            accounts=ledger.accounts,
            tags=tags,
            payee=payee,
            note=note,
        )
        ledger = add_entry(ledger, entry)
    return ledger


def _descriptions(entries) -> list[str]:
    return [e.description for e in entries]


class TestQueryEntries:
    """Tests for query_entries and its shortcuts."""

    def test_empty_query_returns_everything_newest_first(self, history) -> None:
        """Same-day entries should keep their insertion order."""
        result = query_entries(history, EntryQuery())

        assert _descriptions(result) == ["Groceries", "Lunch", "Coffee", "Rent", "Old salary"]

    def test_date_range_is_inclusive(self, history) -> None:
        """Both range ends should be included."""
        query = EntryQuery(date_range=DateRange(start=date(2024, 1, 5), end=date(2024, 3, 1)))

        assert _descriptions(query_entries(history, query)) == ["Coffee", "Rent"]

    def test_account_filter(self, history, ids) -> None:
        """Should keep entries with any line on the account."""
        result = get_entries_by_account(history, ids["assets:cash"])

        assert _descriptions(result) == ["Lunch", "Coffee"]

    def test_tag_filter_matches_any_tag(self, history) -> None:
        """An entry matches if it carries any requested tag."""
        assert _descriptions(get_entries_by_tag(history, "home")) == ["Groceries", "Rent"]

        query = EntryQuery(tags=("coffee", "food"))
        assert _descriptions(query_entries(history, query)) == ["Groceries", "Coffee"]

    def test_payee_is_case_insensitive_substring(self, history) -> None:
        """Should match part of the payee in any case."""
        query = EntryQuery(payee="BOTTLE")

        assert _descriptions(query_entries(history, query)) == ["Coffee"]

    def test_amount_range(self, history) -> None:
        """Should compare the entry amount against inclusive bounds."""
        query = EntryQuery(amount_range=AmountRange(min=4_800, max=25_000))

        assert _descriptions(query_entries(history, query)) == ["Groceries", "Lunch"]

    def test_keyword_searches_description_note_and_payee(self, history) -> None:
        """The keyword can hit any of the three text fields."""
        assert _descriptions(query_entries(history, EntryQuery(keyword="weekly"))) == ["Groceries"]
        assert _descriptions(query_entries(history, EntryQuery(keyword="landlord"))) == ["Rent"]
        assert _descriptions(query_entries(history, EntryQuery(keyword="lunch"))) == ["Lunch"]

    def test_criteria_combine(self, history, ids) -> None:
        """Every set criterion must match."""
        query = EntryQuery(account_ids=(ids["expenses:food"],), tags=("home",))

        assert _descriptions(query_entries(history, query)) == ["Groceries"]

    def test_relative_windows_use_the_clock(self, history) -> None:
        """Today, this month and this year follow the pinned clock."""
        assert _descriptions(get_today_entries(history)) == ["Groceries", "Lunch"]
        assert len(get_this_month_entries(history)) == 3
        assert len(get_this_year_entries(history)) == 4
        assert _descriptions(get_today_entries(history, date(2024, 1, 5))) == ["Rent"]


class TestAccountQueries:
    """Tests for account lookups."""

    def test_full_name_walks_ancestors(self, ledger, ids) -> None:
        """Should join names from the root down."""
        ledger = add_account(ledger, name="Savings", parent_id=ids["assets:bank"])
        savings = next(a for a in ledger.accounts if a.path == "assets:bank:savings")

        assert get_account_full_name(ledger, savings.id) == "Assets > Bank > Savings"
        assert get_account_full_name(ledger, "missing") == ""

    def test_account_with_descendants(self, ledger, ids) -> None:
        """Should return the account and everything under its path."""
        result = get_account_with_descendants(ledger, ids["assets"])

        assert [a.path for a in result] == ["assets", "assets:cash", "assets:bank"]
        assert get_account_with_descendants(ledger, "missing") == []

    def test_active_accounts(self, history, ids) -> None:
        """Accounts with a balance or recent activity count as active."""
        active = {a.path for a in get_active_accounts(history)}

        assert "assets:cash" in active
        assert "income:salary" in active
        assert "equity" not in active

    def test_archived_accounts_are_not_active(self, history, ids) -> None:
        """Archived accounts are excluded even with a balance."""
        history = archive_account(history, ids["assets:cash"])

        active = {a.path for a in get_active_accounts(history)}

        assert "assets:cash" not in active

    def test_account_tree(self, ledger, ids) -> None:
        """Should nest children under the root of one type."""
        ledger = add_account(ledger, name="Savings", parent_id=ids["assets:bank"])

        (root,) = get_account_tree(ledger, AccountType.ASSETS)

        assert root.account.path == "assets"
        assert [c.account.path for c in root.children] == ["assets:cash", "assets:bank"]
        assert [c.account.path for c in root.children[1].children] == ["assets:bank:savings"]
