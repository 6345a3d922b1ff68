"""Conversion and display formatting over the static currency table."""

from __future__ import annotations

import math

import pytest

from expense_tracker.core.errors import UnknownCurrencyError
from expense_tracker.services.currency import (
    CurrencyService,
    conversion_rate,
    convert_currency,
    counterpart_currency,
    format_currency,
)
from expense_tracker.services.money import round2


@pytest.mark.parametrize("code", ["USD", "KHR"])
@pytest.mark.parametrize("amount", [0.0, 1.0, 45.5, 492000.0, -12.34])
def test_convert_same_currency_is_identity(code: str, amount: float) -> None:
    assert convert_currency(amount, code, code) == amount


@pytest.mark.parametrize("amount", [0.01, 45.5, 89.99, 1234567.89])
def test_convert_round_trip(amount: float) -> None:
    there = convert_currency(amount, "USD", "KHR")
    back = convert_currency(there, "KHR", "USD")
    assert back == pytest.approx(amount, rel=1e-12)


def test_convert_routes_through_base_rate() -> None:
    assert convert_currency(100, "USD", "KHR") == pytest.approx(410000.0)
    assert convert_currency(492000, "KHR", "USD") == pytest.approx(120.0)
    assert conversion_rate("USD", "KHR") == pytest.approx(4100.0)


def test_convert_does_not_round() -> None:
    assert convert_currency(1, "KHR", "USD") == pytest.approx(1 / 4100)


def test_unknown_currency_is_rejected_by_default() -> None:
    with pytest.raises(UnknownCurrencyError) as info:
        convert_currency(10, "EUR", "USD")
    assert info.value.code == "EUR"
    with pytest.raises(UnknownCurrencyError):
        format_currency(10, "EUR")


def test_unknown_currency_lenient_falls_back() -> None:
    assert convert_currency(10, "EUR", "USD", strict=False) == 10
    assert convert_currency(4100, "KHR", "EUR", strict=False) == pytest.approx(1.0)
    assert format_currency(45.5, "EUR", strict=False) == "45.5"
    assert format_currency(100.0, "EUR", strict=False) == "100"


def test_format_examples() -> None:
    assert format_currency(1234.5, "USD") == "$1,234.50"
    assert format_currency(492000, "KHR") == "៛492,000"
    assert format_currency(6150000, "KHR") == "៛6,150,000"
    assert format_currency(0, "USD") == "$0.00"
    assert format_currency(0.005, "USD") == "$0.01"
    assert format_currency(1234.5, "KHR") == "៛1,235"


@pytest.mark.parametrize("amount", [0, 0.4, 1.5, 999.99, 12345.678, 6150000, -2500.5])
def test_zero_decimal_currency_has_no_separator(amount: float) -> None:
    assert "." not in format_currency(amount, "KHR")


@pytest.mark.parametrize("amount", [0, 0.4, 1.5, 999.999, 12345.678, 1800, -2500.5])
def test_two_decimal_currency_has_two_fraction_digits(amount: float) -> None:
    text = format_currency(amount, "USD")
    assert text.count(".") == 1
    assert len(text.rsplit(".", 1)[1]) == 2


def test_non_finite_amounts_render_as_text() -> None:
    assert format_currency(math.nan, "USD") == "NaN"
    assert format_currency(math.inf, "KHR") == "Infinity"
    assert format_currency(-math.inf, "USD") == "-Infinity"


def test_counterpart_currency() -> None:
    assert counterpart_currency("USD") == "KHR"
    assert counterpart_currency("KHR") == "USD"


def test_service_binds_strictness_and_base() -> None:
    strict = CurrencyService()
    lenient = CurrencyService(strict=False)
    assert strict.to_base(4100, "KHR") == pytest.approx(1.0)
    with pytest.raises(UnknownCurrencyError):
        strict.to_base(1, "XYZ")
    assert lenient.to_base(7, "XYZ") == 7

    result = strict.conversion(2, "USD", "KHR")
    assert result.converted_amount == pytest.approx(8200.0)
    assert result.rate == pytest.approx(4100.0)
    assert result.from_currency == "USD" and result.to_currency == "KHR"


def test_rounding_passes_non_finite_values_through() -> None:
    assert round2(math.inf) == math.inf
    assert round2(-math.inf) == -math.inf
    assert math.isnan(round2(math.nan))
    # an overflowing sum must not break balance arithmetic
    assert round2(1e308 + 1e308) == math.inf
    assert round2(2.675) == 2.68
