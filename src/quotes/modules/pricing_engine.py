"""
Preisberechnung für Angebote.

Reine Funktionen ohne Seiteneffekte: Positionen -> Zwischentotal -> Steuer -> Total
-> informative Umrechnung in die zweite Währung. Ungültige Zahlen werden als 0
behandelt, es wird nie eine Exception ausgelöst und nie gerundet.
"""
import math
from typing import Any, Iterable

from pydantic_models.data.currency import REFERENCE_CURRENCY, Currency
from pydantic_models.data.line_item_model import LineItem, PricedLineItem
from pydantic_models.data.quote_totals_model import QuoteTotals
from shared_modules.utils import coerce_numeric


def convert(amount: Any, from_currency: Currency, exchange_rate: Any) -> float:
    """
    Rechnet einen Betrag in die jeweils andere Währung um.
    exchange_rate gibt PEN pro 1 USD an: USD -> PEN multipliziert, PEN -> USD dividiert.
    Ein nicht positiver Kurs ergibt 0.
    """
    value = coerce_numeric(amount)
    rate = coerce_numeric(exchange_rate)
    if rate <= 0:
        return 0.0
    if Currency(from_currency) is REFERENCE_CURRENCY:
        return value * rate
    return value / rate


def price_line_item(item: LineItem) -> PricedLineItem:
    hours = coerce_numeric(item.hours)
    hourly_cost = coerce_numeric(item.hourly_cost)
    subtotal = hours * hourly_cost
    if not math.isfinite(subtotal):
        subtotal = 0.0
    return PricedLineItem(
        id=item.id,
        service_code=item.service_code,
        detail=item.detail,
        hours=hours,
        hourly_cost=hourly_cost,
        subtotal=subtotal,
    )


def compute_quote(
    line_items: Iterable[LineItem],
    tax_rate: Any,
    exchange_rate: Any,
    primary_currency: Currency,
) -> QuoteTotals:
    """
    Berechnet alle Summen eines Angebots.

    Args:
        line_items: Positionen in Anzeigereihenfolge; die Reihenfolge bleibt erhalten.
        tax_rate: Steuersatz als Anteil. Werte außerhalb [0, 1] werden nicht begrenzt.
        exchange_rate: PEN pro 1 USD.
        primary_currency: Währung, in der die Positionen erfasst sind.

    Returns:
        QuoteTotals: ungerundete Summen inkl. Umrechnung in die andere Währung.
    """
    currency = Currency(primary_currency)
    items = [price_line_item(item) for item in line_items]

    subtotal = sum(item.subtotal for item in items)
    tax = subtotal * coerce_numeric(tax_rate)
    total = subtotal + tax

    return QuoteTotals(
        currency=currency,
        items=items,
        subtotal=subtotal,
        tax=tax,
        total=total,
        other_currency=currency.other,
        subtotal_other=convert(subtotal, currency, exchange_rate),
        tax_other=convert(tax, currency, exchange_rate),
        total_other=convert(total, currency, exchange_rate),
    )
