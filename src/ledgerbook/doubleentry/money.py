"""Money arithmetic on integer minor units."""

from collections.abc import Iterable
from decimal import Decimal

from ledgerbook.doubleentry.currency import get_currency, get_currency_multiplier, round_minor
from ledgerbook.exceptions import CurrencyMismatchError
from ledgerbook.models.currency import CurrencyCode, Money


def create_money(amount: int | Decimal, currency: CurrencyCode) -> Money:
    """Create money from a minor-unit amount (rounded to an integer)."""
    if isinstance(amount, Decimal):
        amount = round_minor(amount)
    return Money(amount=amount, currency=currency)


def from_main_unit(value: int | float | Decimal | str, currency: CurrencyCode) -> Money:
    """Create money from a main-unit value, e.g. 100.50 yuan -> 10050 fen.

    Floats go through ``str`` first so their shortest repr, not their
    binary expansion, is what gets scaled.
    """
    decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
    return create_money(decimal_value * get_currency_multiplier(currency), currency)


def to_main_unit(money: Money) -> Decimal:
    """Convert to the main unit, e.g. 10050 fen -> Decimal('100.5')."""
    return Decimal(money.amount) / get_currency_multiplier(money.currency)


def format_money(money: Money) -> str:
    """Format with the currency symbol and its fixed number of decimals."""
    config = get_currency(money.currency)
    value = to_main_unit(money)
    sign = "-" if value < 0 else ""
    return f"{sign}{config.symbol}{abs(value):,.{config.decimals}f}"


def _require_same_currency(a: Money, b: Money, operation: str) -> None:
    if a.currency != b.currency:
        msg = f"Cannot {operation} different currencies: {a.currency} and {b.currency}"
        raise CurrencyMismatchError(msg, expected=a.currency, actual=b.currency)


def add_money(a: Money, b: Money) -> Money:
    """Add two amounts of the same currency."""
    _require_same_currency(a, b, "add")
    return create_money(a.amount + b.amount, a.currency)


def subtract_money(a: Money, b: Money) -> Money:
    """Subtract ``b`` from ``a`` (same currency)."""
    _require_same_currency(a, b, "subtract")
    return create_money(a.amount - b.amount, a.currency)


def negate_money(money: Money) -> Money:
    return create_money(-money.amount, money.currency)


def is_zero(money: Money) -> bool:
    return money.amount == 0


def is_equal(a: Money, b: Money) -> bool:
    return a.currency == b.currency and a.amount == b.amount


def zero(currency: CurrencyCode) -> Money:
    return create_money(0, currency)


def sum_money(items: Iterable[Money], currency: CurrencyCode) -> Money:
    """Sum amounts that must all be in ``currency``."""
    total = zero(currency)
    for item in items:
        total = add_money(total, item)
    return total
