import math
from datetime import date, datetime
from typing import Any, Dict, Optional

from babel.dates import format_date
from babel.numbers import format_currency, format_decimal
from jinja2 import Environment, Undefined
from pydantic import BaseModel, Field

from .utils import to_date

DEFAULT_LOCALES: Dict[str, str] = {"PEN": "es_PE", "USD": "en_US"}


class FilterConfig(BaseModel):
    """
    Pydantic-Modell für die Filter-Konfiguration.
    Sorgt für Typsicherheit und Validierung der Formatierungsoptionen.
    """
    locale: str = "es_PE"
    locales: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_LOCALES))
    currency: str = "PEN"
    currency_format: Optional[str] = None
    date_format: Optional[str] = None
    numeric_format: Optional[str] = None

    def locale_for(self, currency: str) -> str:
        return self.locales.get(currency, self.locale)


def format_money(
    amount: Any,
    currency: str,
    locale: Optional[str] = None,
    currency_format: Optional[str] = None,
) -> str:
    """
    Formatiert einen Betrag mit Symbol und Dezimalregeln der Währung.
    Nicht endliche oder nicht numerische Beträge werden als 0 ausgegeben.
    """
    currency = getattr(currency, "value", currency)
    try:
        value = float(amount)
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value):
        value = 0.0
    locale = locale or DEFAULT_LOCALES.get(currency, "en_US")
    return format_currency(value, currency, format=currency_format, locale=locale)


def babel_decimal(
    value: Any,
    locale: str = "es_PE",
    numeric_format: Optional[str] = None
) -> str:
    """Jinja2-Filter für numerische Formatierung mit Babel."""
    if value is None or isinstance(value, Undefined):
        return ""
    return format_decimal(value, format=numeric_format, locale=locale)


def babel_date(
    value: Any,
    locale: str = "es_PE",
    date_format: Optional[str] = None
) -> str:
    """Jinja2-Filter für Datumsformatierung mit Babel."""
    if value is None or isinstance(value, Undefined):
        return ""
    if isinstance(value, str):
        parsed = to_date(value)
        if parsed is None:
            return value  # Fallback: gib den String zurück
        value = parsed
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        return str(value)
    return format_date(value, format=date_format or "medium", locale=locale)


def register_filters(env: Environment, config: FilterConfig) -> None:
    """
    Registriert alle Babel-Filter im Jinja2-Environment.
    Der currency-Filter nimmt optional eine abweichende Währung entgegen:
    {{ total | currency }} oder {{ total_other | currency("USD") }}.
    """
    env.filters["currency"] = lambda v, currency=None: format_money(
        v,
        currency or config.currency,
        config.locale_for(currency or config.currency),
        config.currency_format,
    )
    env.filters["decimal"] = lambda v: babel_decimal(
        v,
        config.locale,
        config.numeric_format
    )
    env.filters["date"] = lambda v: babel_date(
        v,
        config.locale,
        config.date_format
    )
