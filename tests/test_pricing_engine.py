import math

import pytest

from pydantic_models.data.currency import Currency
from pydantic_models.data.line_item_model import LineItem
from quotes.modules.pricing_engine import compute_quote, convert, price_line_item


def _item(hours, cost, code="creacion_web"):
    return LineItem(service_code=code, hours=hours, hourly_cost=cost)


def test_subtotal_is_hours_times_hourly_cost():
    priced = price_line_item(_item(12.5, 40))
    assert priced.subtotal == 500.0
    assert priced.hours == 12.5
    assert priced.hourly_cost == 40.0


@pytest.mark.parametrize("hours, cost", [
    ("abc", 60),
    (10, None),
    (float("nan"), 60),
    (10, float("inf")),
    ("", ""),
    ([1, 2], 60),
])
def test_invalid_numbers_give_zero_subtotal(hours, cost):
    assert price_line_item(_item(hours, cost)).subtotal == 0.0


def test_numeric_strings_from_input_fields_are_accepted():
    assert price_line_item(_item("8", "50.5")).subtotal == 404.0


def test_totals_example():
    items = [_item(20, 60), _item(8, 50), _item(12, 55)]
    totals = compute_quote(items, 0.18, 3.5, Currency.PEN)

    assert [i.subtotal for i in totals.items] == [1200.0, 400.0, 660.0]
    assert totals.subtotal == 2260.0
    assert math.isclose(totals.tax, 406.8)
    assert math.isclose(totals.total, 2666.8)
    assert totals.total == totals.subtotal + totals.tax


def test_item_order_is_preserved():
    items = [_item(1, 1, "a"), _item(2, 2, "b"), _item(3, 3, "c")]
    totals = compute_quote(items, 0.18, 3.5, Currency.USD)
    assert [i.service_code for i in totals.items] == ["a", "b", "c"]
    assert [i.id for i in totals.items] == [i.id for i in items]


def test_conversion_from_pen_divides_by_rate():
    totals = compute_quote([_item(10, 35)], 0.0, 3.5, Currency.PEN)
    assert totals.other_currency is Currency.USD
    assert math.isclose(totals.subtotal_other, 100.0)
    assert math.isclose(totals.total_other, 100.0)
    assert totals.tax_other == 0.0


def test_conversion_from_usd_multiplies_by_rate():
    totals = compute_quote([_item(10, 10)], 0.1, 3.5, Currency.USD)
    assert totals.other_currency is Currency.PEN
    assert math.isclose(totals.subtotal_other, 350.0)
    assert math.isclose(totals.tax_other, 35.0)
    assert math.isclose(totals.total_other, 385.0)


def test_conversion_does_not_change_primary_figures():
    items = [_item(10, 10)]
    usd = compute_quote(items, 0.18, 3.5, Currency.USD)
    pen = compute_quote(items, 0.18, 3.5, Currency.PEN)
    assert usd.subtotal == pen.subtotal == 100.0
    assert usd.total == pen.total


@pytest.mark.parametrize("rate", [0.01, 0.37, 1.0, 3.5, 3.7512, 1234.5])
@pytest.mark.parametrize("amount", [0.0, 1.0, 2666.8, 123456.789])
def test_currency_round_trip(rate, amount):
    there = convert(amount, Currency.USD, rate)
    back = convert(there, Currency.PEN, rate)
    assert math.isclose(back, amount, rel_tol=1e-12, abs_tol=1e-9)


@pytest.mark.parametrize("rate", [0, -3.5, "abc", None, float("nan")])
def test_invalid_exchange_rate_never_raises(rate):
    totals = compute_quote([_item(10, 10)], 0.18, rate, Currency.PEN)
    assert totals.total_other == 0.0
    assert math.isclose(totals.total, 118.0)


def test_tax_rate_is_not_clamped():
    over = compute_quote([_item(1, 100)], 1.5, 3.5, Currency.PEN)
    negative = compute_quote([_item(1, 100)], -0.1, 3.5, Currency.PEN)
    assert over.tax == 150.0
    assert over.total == 250.0
    assert math.isclose(negative.tax, -10.0)
    assert math.isclose(negative.total, 90.0)


def test_non_numeric_tax_rate_counts_as_zero():
    totals = compute_quote([_item(1, 100)], "x", 3.5, Currency.PEN)
    assert totals.tax == 0.0
    assert totals.total == 100.0


def test_empty_quote():
    totals = compute_quote([], 0.18, 3.5, Currency.PEN)
    assert totals.items == []
    assert totals.subtotal == totals.tax == totals.total == 0.0


def test_no_rounding_is_applied():
    totals = compute_quote([_item(1, 0.1), _item(1, 0.2)], 0.0, 3.5, Currency.USD)
    assert totals.subtotal == 0.1 + 0.2


def test_recomputation_is_deterministic():
    items = [_item(3, 33.33), _item("1,5", 20)]
    first = compute_quote(items, 0.18, 3.5, Currency.PEN)
    second = compute_quote(items, 0.18, 3.5, Currency.PEN)
    assert first == second
