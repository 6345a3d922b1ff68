from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from expense_tracker.core.errors import UnknownCurrencyError
from expense_tracker.models.constants import BASE_CURRENCY
from expense_tracker.models.currency import CURRENCIES
from .money import quantize

if TYPE_CHECKING:  # pragma: no cover
    from expense_tracker.core.config import Settings

"""Currency conversion & formatting over the static currency table.

Every rate is expressed as units of the currency per 1 unit of the base
(USD), so a conversion divides by the source rate and multiplies by the
target rate. No rounding happens here; display rounding is confined to
`format_currency`.

Unknown codes raise `UnknownCurrencyError` unless `strict=False`, in which
case the rate defaults to 1 and formatting returns the bare number.
"""

logger = logging.getLogger("expense_tracker.currency")


@dataclass(frozen=True)
class ConversionResult:
    original_amount: float
    from_currency: str
    to_currency: str
    rate: float
    converted_amount: float


def _rate(code: str, strict: bool) -> float:
    currency = CURRENCIES.get(code)
    if currency is None:
        if strict:
            raise UnknownCurrencyError(code)
        logger.debug("unknown currency %s, using identity rate", code)
        return 1.0
    return currency.exchange_rate


def convert_currency(
    amount: float, from_currency: str, to_currency: str, *, strict: bool = True
) -> float:
    from_rate = _rate(from_currency, strict)
    to_rate = _rate(to_currency, strict)
    # Route through the base currency
    return amount / from_rate * to_rate


def conversion_rate(from_currency: str, to_currency: str, *, strict: bool = True) -> float:
    """How many `to_currency` units one `from_currency` unit buys."""
    return convert_currency(1.0, from_currency, to_currency, strict=strict)


def plain_number(amount: float) -> str:
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return repr(amount) if isinstance(amount, float) else str(amount)


def _literal(amount: float) -> str:
    if math.isnan(amount):
        return "NaN"
    return "Infinity" if amount > 0 else "-Infinity"


def format_currency(amount: float, currency_code: str, *, strict: bool = True) -> str:
    """Render `amount` with the currency's symbol, precision and en-US grouping.

    >>> format_currency(1234.5, "USD")
    '$1,234.50'
    >>> format_currency(492000, "KHR")
    '៛492,000'
    """
    if not math.isfinite(amount):
        return _literal(amount)
    currency = CURRENCIES.get(currency_code)
    if currency is None:
        if strict:
            raise UnknownCurrencyError(currency_code)
        return plain_number(amount)
    value = quantize(amount, currency.decimals)
    if value == 0:
        value = abs(value)
    return f"{currency.symbol}{value:,.{currency.decimals}f}"


def counterpart_currency(code: str) -> str:
    """The other side of the two-currency table (KHR <-> USD)."""
    return next((c for c in CURRENCIES if c != code), code)


class CurrencyService:
    """Conversion/formatting bound to the configured strictness and base.

    Routers depend on this so the `strict_currency` setting applies uniformly.
    """

    def __init__(self, strict: bool = True, base_currency: str = BASE_CURRENCY):
        self.strict = strict
        self.base_currency = base_currency

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        return convert_currency(amount, from_currency, to_currency, strict=self.strict)

    def to_base(self, amount: float, currency: str) -> float:
        return self.convert(amount, currency, self.base_currency)

    def rate(self, from_currency: str, to_currency: str) -> float:
        return conversion_rate(from_currency, to_currency, strict=self.strict)

    def format(self, amount: float, currency: str) -> str:
        return format_currency(amount, currency, strict=self.strict)

    def conversion(self, amount: float, from_currency: str, to_currency: str) -> ConversionResult:
        converted = self.convert(amount, from_currency, to_currency)
        logger.debug("converted %s %s -> %s %s", amount, from_currency, converted, to_currency)
        return ConversionResult(
            original_amount=amount,
            from_currency=from_currency,
            to_currency=to_currency,
            rate=self.rate(from_currency, to_currency),
            converted_amount=converted,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "CurrencyService":
        return cls(strict=settings.strict_currency, base_currency=settings.base_currency)
