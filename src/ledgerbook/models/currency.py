"""Currency, money and exchange-rate models."""

import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field


class CurrencyCode(StrEnum):
    """Supported ISO 4217 currency codes."""

    CNY = "CNY"
    USD = "USD"
    HKD = "HKD"
    JPY = "JPY"
    EUR = "EUR"
    GBP = "GBP"
    SGD = "SGD"


class CurrencyConfig(BaseModel):
    """Display metadata for a currency."""

    code: CurrencyCode
    symbol: str
    name: str
    decimals: int = Field(ge=0, description="Digits in the minor unit")

    model_config = {"frozen": True}


class Money(BaseModel):
    """An amount in a currency's minor unit (cents, fen, yen...).

    The amount is always an integer. Use ``from_main_unit`` to build one
    from a human-readable decimal value.
    """

    amount: int
    currency: CurrencyCode

    model_config = {"frozen": True}


class ExchangeRate(BaseModel):
    """A dated conversion rate: 1 unit of ``from`` = ``rate`` units of ``to``."""

    from_currency: CurrencyCode = Field(alias="from")
    to_currency: CurrencyCode = Field(alias="to")
    rate: Decimal = Field(gt=0)
    date: datetime.date

    model_config = {"populate_by_name": True, "frozen": True}
