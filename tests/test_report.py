"""Tests for period reports, snapshots and the trial balance."""

import logging
from datetime import date

import pytest

from ledgerbook.doubleentry.account import find_account_by_path
from ledgerbook.doubleentry.book import create_book, set_exchange_rate, update_ledger_in_book
from ledgerbook.doubleentry.entry import create_simple_entry
from ledgerbook.doubleentry.ledger import add_account, add_entry, get_net_worth
from ledgerbook.doubleentry.report import (
    calculate_period_summary,
    generate_balance_snapshot,
    generate_balance_snapshot_in_currency,
    generate_category_summary,
    generate_net_worth_trend,
    generate_tag_summary,
    generate_time_series,
    generate_trial_balance,
    get_accounts_as_of,
    get_period_label,
    get_period_range,
)
from ledgerbook.models.accounts import AccountType
from ledgerbook.models.currency import CurrencyCode
from ledgerbook.models.reports import DateRange, TimeGranularity

Q1 = DateRange(start=date(2024, 1, 1), end=date(2024, 3, 31))


def _add(ledger, ids, day, debit, credit, amount, tags=None):
    entry = create_simple_entry(
        date=day,
        description=f"{debit} <- {credit}",
        debit_account_id=ids[debit],
        credit_account_id=ids[credit],
        amount=amount,
        accounts=ledger.accounts,
        tags=tags,
    )
    return add_entry(ledger, entry)


@pytest.fixture
def quarter(ledger, ids):
    """Two salaries, rent, food on card and one payment of the card."""
    ledger = _add(ledger, ids, date(2024, 1, 31), "assets:bank", "income:salary", 1_000_000)
    ledger = _add(ledger, ids, date(2024, 2, 1), "expenses:rent", "assets:bank", 300_000, ["home"])
    ledger = _add(ledger, ids, date(2024, 2, 10), "expenses:food", "liabilities:credit-card", 60_000, ["home", "food"])
    ledger = _add(ledger, ids, date(2024, 2, 29), "assets:bank", "income:salary", 1_000_000)
    ledger = _add(ledger, ids, date(2024, 3, 5), "liabilities:credit-card", "assets:bank", 60_000)
    return ledger


class TestPeriods:
    """Tests for period ranges and labels."""

    def test_month_range_handles_leap_years(self) -> None:
        """February 2024 has 29 days."""
        result = get_period_range(2024, TimeGranularity.MONTH, 2)

        assert result.start == date(2024, 2, 1)
        assert result.end == date(2024, 2, 29)

    def test_quarter_and_year_ranges(self) -> None:
        """Should cover the whole quarter or year."""
        q4 = get_period_range(2024, TimeGranularity.QUARTER, 4)
        year = get_period_range(2024, TimeGranularity.YEAR)

        assert (q4.start, q4.end) == (date(2024, 10, 1), date(2024, 12, 31))
        assert (year.start, year.end) == (date(2024, 1, 1), date(2024, 12, 31))

    def test_invalid_periods(self) -> None:
        """Out-of-range quarters and day or week buckets are rejected."""
        with pytest.raises(ValueError, match="Quarter must be between 1 and 4"):
            get_period_range(2024, TimeGranularity.QUARTER, 5)
        with pytest.raises(ValueError, match="Unsupported granularity"):
            get_period_range(2024, TimeGranularity.WEEK)

    @pytest.mark.parametrize(
        ("day", "granularity", "expected"),
        [
            (date(2024, 1, 15), TimeGranularity.DAY, "2024-01-15"),
            (date(2024, 1, 15), TimeGranularity.WEEK, "2024-W03"),
            (date(2024, 12, 30), TimeGranularity.WEEK, "2025-W01"),
            (date(2024, 1, 15), TimeGranularity.MONTH, "2024-01"),
            (date(2024, 8, 1), TimeGranularity.QUARTER, "2024-Q3"),
            (date(2024, 8, 1), TimeGranularity.YEAR, "2024"),
        ],
    )
    def test_labels(self, day, granularity, expected) -> None:
        """Week labels follow the ISO calendar."""
        assert get_period_label(day, granularity) == expected


class TestIncomeAndExpenses:
    """Tests for period summaries, time series and breakdowns."""

    def test_period_summary(self, quarter) -> None:
        """Transfers and card payments do not count as income or expense."""
        summary = calculate_period_summary(quarter, Q1)

        assert summary.income == 2_000_000
        assert summary.expenses == 360_000
        assert summary.net_change == 1_640_000

    def test_time_series_skips_empty_periods(self, quarter) -> None:
        """Buckets are sorted oldest first and only exist for periods with entries."""
        points = generate_time_series(quarter, Q1, TimeGranularity.MONTH)

        assert [p.period for p in points] == ["2024-01", "2024-02", "2024-03"]
        assert [p.net_change for p in points] == [1_000_000, 640_000, 0]

    def test_category_summary(self, quarter, ids) -> None:
        """Should rank expense accounts by amount with percentages."""
        rows = generate_category_summary(quarter, Q1, AccountType.EXPENSES)

        assert [r.id for r in rows] == [ids["expenses:rent"], ids["expenses:food"]]
        assert rows[0].name == "Rent"
        assert rows[0].percentage == pytest.approx(300_000 / 360_000 * 100)

    def test_category_summary_needs_income_or_expenses(self, quarter) -> None:
        """Other account types are rejected."""
        with pytest.raises(ValueError, match="expenses or income"):
            generate_category_summary(quarter, Q1, AccountType.ASSETS)

    def test_tag_summary(self, quarter) -> None:
        """Each tagged entry adds its debit total to every tag it carries."""
        rows = generate_tag_summary(quarter, Q1)

        assert [(r.name, r.amount) for r in rows] == [("home", 360_000), ("food", 60_000)]

    def test_empty_breakdown(self, ledger) -> None:
        """No entries means no rows."""
        assert generate_category_summary(ledger, Q1, AccountType.INCOME) == []


class TestSnapshots:
    """Tests for point-in-time balances."""

    def test_snapshot_replays_entries_up_to_date(self, quarter) -> None:
        """Later entries must not leak into an earlier snapshot."""
        snapshot = generate_balance_snapshot(quarter, date(2024, 2, 10))

        assert snapshot.total_assets == 700_000
        assert snapshot.total_liabilities == 60_000
        assert snapshot.net_worth == 640_000
        assert snapshot.assets_by_currency == {CurrencyCode.CNY: 700_000}
        assert snapshot.is_fully_converted

    def test_snapshot_defaults_to_today(self, quarter) -> None:
        """Without a date the snapshot matches the live balances."""
        snapshot = generate_balance_snapshot(quarter)

        assert snapshot.date == date(2024, 3, 15)
        assert snapshot.net_worth == get_net_worth(quarter)

    def test_accounts_as_of_before_any_entry(self, quarter) -> None:
        """Every balance is zero before the first entry."""
        accounts = get_accounts_as_of(quarter, date(2023, 12, 31))

        assert all(a.balance == 0 for a in accounts)

    def test_net_worth_trend_ends_at_current_net_worth(self, quarter) -> None:
        """Should walk back from today's net worth by each period's net change."""
        points = generate_net_worth_trend(quarter, Q1, TimeGranularity.MONTH)

        assert [(p.period, p.net_worth) for p in points] == [
            ("2024-01", 1_000_000),
            ("2024-02", 1_640_000),
            ("2024-03", 1_640_000),
        ]


class TestConvertedSnapshot:
    """Tests for multi-currency snapshots."""

    @pytest.fixture
    def book(self):
        """A CNY book with a funded USD account."""
        book = create_book()

        def setup(ledger):
            assets = find_account_by_path(ledger.accounts, "assets")
            equity = find_account_by_path(ledger.accounts, "equity")
            ledger = add_account(ledger, name="USD", parent_id=assets.id, currency=CurrencyCode.USD)
            ledger = add_account(ledger, name="Opening USD", parent_id=equity.id, currency=CurrencyCode.USD)
            ledger = add_account(ledger, name="Cash", parent_id=assets.id)
            ledger = add_account(ledger, name="Opening", parent_id=equity.id)
            usd = find_account_by_path(ledger.accounts, "assets:usd")
            cash = find_account_by_path(ledger.accounts, "assets:cash")
            ledger = add_entry(
                ledger,
                create_simple_entry(
                    date=date(2024, 1, 1),
                    description="USD savings",
                    debit_account_id=usd.id,
                    credit_account_id=find_account_by_path(ledger.accounts, "equity:opening-usd").id,
                    amount=10_000,
                    accounts=ledger.accounts,
                ),
            )
            return add_entry(
                ledger,
                create_simple_entry(
                    date=date(2024, 1, 1),
                    description="Cash",
                    debit_account_id=cash.id,
                    credit_account_id=find_account_by_path(ledger.accounts, "equity:opening").id,
                    amount=50_000,
                    accounts=ledger.accounts,
                ),
            )

        return update_ledger_in_book(book, book.main_ledger_id, setup)

    def test_converts_at_rate_on_snapshot_date(self, book) -> None:
        """$100.00 at 7.2 should add 720.00 yuan."""
        book = set_exchange_rate(book, CurrencyCode.USD, CurrencyCode.CNY, "7.2", date(2024, 1, 1))
        ledger = book.ledgers[0]

        snapshot = generate_balance_snapshot_in_currency(
            ledger, book, CurrencyCode.CNY, date(2024, 2, 1)
        )

        assert snapshot.total_assets == 50_000 + 72_000
        assert snapshot.currency == CurrencyCode.CNY
        assert snapshot.assets_by_currency == {CurrencyCode.CNY: 50_000, CurrencyCode.USD: 10_000}
        assert snapshot.is_fully_converted

    def test_missing_rate_falls_back_to_native_and_flags(self, book, caplog) -> None:
        """Unconvertible accounts are summed natively, listed and logged."""
        ledger = book.ledgers[0]
        usd = find_account_by_path(ledger.accounts, "assets:usd")

        with caplog.at_level(logging.WARNING, logger="ledgerbook.doubleentry.report"):
            snapshot = generate_balance_snapshot_in_currency(
                ledger, book, CurrencyCode.CNY, date(2024, 2, 1)
            )

        assert snapshot.total_assets == 60_000
        assert snapshot.unconverted_account_ids == (usd.id,)
        assert not snapshot.is_fully_converted
        assert "No CNY rate" in caplog.text

    def test_rate_after_snapshot_date_is_not_used(self, book) -> None:
        """A rate recorded later than the snapshot does not apply."""
        book = set_exchange_rate(book, CurrencyCode.USD, CurrencyCode.CNY, "7.2", date(2024, 3, 1))

        snapshot = generate_balance_snapshot_in_currency(
            book.ledgers[0], book, CurrencyCode.CNY, date(2024, 2, 1)
        )

        assert len(snapshot.unconverted_account_ids) == 1


class TestTrialBalance:
    """Tests for the trial balance."""

    def test_columns_balance(self, quarter) -> None:
        """Debit and credit columns should sum equal."""
        rows = generate_trial_balance(quarter)

        assert sum(r.debit for r in rows) == sum(r.credit for r in rows)

    def test_rows_are_net_and_sorted(self, quarter) -> None:
        """Each account appears once on its net side; settled accounts are omitted."""
        rows = generate_trial_balance(quarter)

        assert [(r.path, r.debit, r.credit) for r in rows] == [
            ("assets:bank", 1_640_000, 0),
            ("expenses:food", 60_000, 0),
            ("expenses:rent", 300_000, 0),
            ("income:salary", 0, 2_000_000),
        ]

    def test_as_of_limits_entries(self, quarter) -> None:
        """Only entries dated on or before as_of are counted."""
        rows = generate_trial_balance(quarter, date(2024, 1, 31))

        assert [(r.path, r.debit, r.credit) for r in rows] == [
            ("assets:bank", 1_000_000, 0),
            ("income:salary", 0, 1_000_000),
        ]
