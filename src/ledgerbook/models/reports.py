"""Query and report value types."""

from __future__ import annotations

import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

from ledgerbook.models.accounts import Account
from ledgerbook.models.currency import CurrencyCode


class TimeGranularity(StrEnum):
    """Bucket size for time-series reports."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class DateRange(BaseModel):
    """Inclusive calendar date range."""

    start: datetime.date
    end: datetime.date

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> DateRange:
        if self.start > self.end:
            msg = f"Date range start {self.start} is after end {self.end}"
            raise ValueError(msg)
        return self

    def __contains__(self, day: datetime.date) -> bool:
        return self.start <= day <= self.end


class AmountRange(BaseModel):
    """Optional bounds on an entry amount, in minor units."""

    min: int | None = None
    max: int | None = None

    model_config = {"frozen": True}


class EntryQuery(BaseModel):
    """Filter criteria for ``query_entries``. Unset fields match everything."""

    date_range: DateRange | None = None
    account_ids: tuple[str, ...] | None = None
    tags: tuple[str, ...] | None = None
    payee: str | None = None
    amount_range: AmountRange | None = None
    keyword: str | None = None

    model_config = {"frozen": True}


class PeriodSummary(BaseModel):
    """Income and expense totals for a date range."""

    income: int = 0
    expenses: int = 0
    net_change: int = Field(default=0, alias="netChange")

    model_config = {"populate_by_name": True, "frozen": True}


class SummaryPoint(BaseModel):
    """One bucket of a time-series report."""

    period: str
    income: int = 0
    expenses: int = 0
    net_change: int = Field(default=0, alias="netChange")

    model_config = {"populate_by_name": True, "frozen": True}


class CategorySummary(BaseModel):
    """Aggregated amount for one account or tag."""

    id: str
    name: str
    amount: int
    percentage: float

    model_config = {"frozen": True}


class BalanceSnapshot(BaseModel):
    """Point-in-time assets, liabilities and net worth.

    ``unconverted_account_ids`` lists accounts whose balance could not be
    converted to the target currency and were summed in their native
    currency instead. It is always empty for single-currency snapshots.
    """

    date: datetime.date
    total_assets: int = Field(alias="totalAssets")
    total_liabilities: int = Field(alias="totalLiabilities")
    net_worth: int = Field(alias="netWorth")
    assets_by_currency: dict[CurrencyCode, int] = Field(
        default_factory=dict, alias="assetsByCurrency"
    )
    currency: CurrencyCode | None = None
    unconverted_account_ids: tuple[str, ...] = Field(default=(), alias="unconvertedAccountIds")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def is_fully_converted(self) -> bool:
        """Return True if no account fell back to its native currency."""
        return not self.unconverted_account_ids


class NetWorthPoint(BaseModel):
    """Net worth at the end of one period."""

    period: str
    net_worth: int = Field(alias="netWorth")

    model_config = {"populate_by_name": True, "frozen": True}


class TrialBalanceRow(BaseModel):
    """Debit and credit column totals for one account."""

    account_id: str = Field(alias="accountId")
    path: str
    currency: CurrencyCode
    debit: int = 0
    credit: int = 0

    model_config = {"populate_by_name": True, "frozen": True}


class AccountNode(BaseModel):
    """An account with its sub-tree, as built by ``get_account_tree``."""

    account: Account
    children: tuple[AccountNode, ...] = ()

    model_config = {"frozen": True}


AccountNode.model_rebuild()
