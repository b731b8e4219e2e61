from typing import List

from pydantic import BaseModel, Field

from .currency import Currency
from .line_item_model import PricedLineItem


class QuoteTotals(BaseModel):
    """
    Ergebnis der Preisberechnung. Enthält nur rohe, ungerundete Werte;
    formatiert wird erst bei Anzeige und Export.
    """
    currency: Currency
    items: List[PricedLineItem] = Field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    other_currency: Currency
    subtotal_other: float = 0.0
    tax_other: float = 0.0
    total_other: float = 0.0
