"""Currency registry and exchange-rate handling.

Rates are supplied by the caller; nothing here fetches them.
"""

from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from ledgerbook import clock
from ledgerbook.models.currency import CurrencyCode, CurrencyConfig, ExchangeRate

# =============================================================================
# CURRENCY REGISTRY
# =============================================================================

CURRENCIES: dict[CurrencyCode, CurrencyConfig] = {
    CurrencyCode.CNY: CurrencyConfig(code=CurrencyCode.CNY, symbol="¥", name="Chinese Yuan", decimals=2),
    CurrencyCode.USD: CurrencyConfig(code=CurrencyCode.USD, symbol="$", name="US Dollar", decimals=2),
    CurrencyCode.HKD: CurrencyConfig(code=CurrencyCode.HKD, symbol="HK$", name="Hong Kong Dollar", decimals=2),
    CurrencyCode.JPY: CurrencyConfig(code=CurrencyCode.JPY, symbol="¥", name="Japanese Yen", decimals=0),
    CurrencyCode.EUR: CurrencyConfig(code=CurrencyCode.EUR, symbol="€", name="Euro", decimals=2),
    CurrencyCode.GBP: CurrencyConfig(code=CurrencyCode.GBP, symbol="£", name="British Pound", decimals=2),
    CurrencyCode.SGD: CurrencyConfig(code=CurrencyCode.SGD, symbol="S$", name="Singapore Dollar", decimals=2),
}


def get_currency(code: CurrencyCode | str) -> CurrencyConfig:
    """Get the display metadata for a currency.

    Raises:
        ValueError: If the code is not a supported currency
    """
    return CURRENCIES[CurrencyCode(code)]


def get_currency_multiplier(code: CurrencyCode | str) -> int:
    """Minor units per main unit, e.g. 100 for CNY, 1 for JPY."""
    return 10 ** get_currency(code).decimals


def round_minor(value: Decimal) -> int:
    """Round a Decimal to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


# =============================================================================
# EXCHANGE RATES
# =============================================================================


def create_exchange_rate(
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
    rate: Decimal | int | str,
    on: date | None = None,
) -> ExchangeRate:
    """Create a rate record dated ``on`` (today by default)."""
    return ExchangeRate(
        from_currency=from_currency,
        to_currency=to_currency,
        rate=Decimal(str(rate)),
        date=on or clock.today(),
    )


def _latest(rates: Iterable[ExchangeRate], src: CurrencyCode, dst: CurrencyCode, on: date) -> ExchangeRate | None:
    candidates = [
        r for r in rates if r.from_currency == src and r.to_currency == dst and r.date <= on
    ]
    return max(candidates, key=lambda r: r.date, default=None)


def get_exchange_rate(
    rates: Iterable[ExchangeRate],
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
    on: date | None = None,
) -> Decimal | None:
    """Look up the rate effective on ``on``.

    Lookup order:
    1. Same currency: 1
    2. Most recent ``from -> to`` rate dated on or before ``on``
    3. Inverse of the most recent ``to -> from`` rate
    4. None
    """
    if from_currency == to_currency:
        return Decimal(1)

    target = on or clock.today()
    rates = tuple(rates)

    direct = _latest(rates, from_currency, to_currency, target)
    if direct is not None:
        return direct.rate

    reverse = _latest(rates, to_currency, from_currency, target)
    if reverse is not None:
        return 1 / reverse.rate

    return None


def convert_currency(
    amount: int,
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
    rates: Iterable[ExchangeRate],
    on: date | None = None,
) -> int | None:
    """Convert a minor-unit amount between currencies.

    Rebases minor-unit digits (e.g. CNY fen to JPY yen), applies the rate
    and rounds to the nearest target minor unit. Returns None when no rate
    resolves.
    """
    rate = get_exchange_rate(rates, from_currency, to_currency, on)
    if rate is None:
        return None

    main_unit = Decimal(amount) / get_currency_multiplier(from_currency)
    return round_minor(main_unit * rate * get_currency_multiplier(to_currency))


def upsert_exchange_rate(
    rates: Iterable[ExchangeRate], new_rate: ExchangeRate
) -> tuple[ExchangeRate, ...]:
    """Add a rate, replacing any record for the same pair and date."""
    kept = tuple(
        r
        for r in rates
        if not (
            r.from_currency == new_rate.from_currency
            and r.to_currency == new_rate.to_currency
            and r.date == new_rate.date
        )
    )
    return (*kept, new_rate)


def get_available_currency_pairs(
    rates: Iterable[ExchangeRate],
) -> list[tuple[CurrencyCode, CurrencyCode]]:
    """List every convertible pair; each stored rate works in both directions."""
    pairs: dict[tuple[CurrencyCode, CurrencyCode], None] = {}
    for rate in rates:
        pairs[(rate.from_currency, rate.to_currency)] = None
        pairs[(rate.to_currency, rate.from_currency)] = None
    return list(pairs)
