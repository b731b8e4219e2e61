from typing import Any, Dict, List, Tuple

from jinja2 import Environment
from loguru import logger

from pydantic_models.data.export_row_model import ExportRow
from pydantic_models.data.quote_meta_model import QuoteMeta
from pydantic_models.data.quote_totals_model import QuoteTotals
from shared_modules.config import Config
from shared_modules.filters import FilterConfig, babel_decimal, format_money, register_filters
from shared_modules.utils import sanitize_filename

from .quote_context import QuoteContext
from .quote_session import QuoteSession
from .service_catalog import ServiceCatalog


class QuoteFactory:
    """
    Factory zur Erstellung des Export-Kontexts eines Angebots.
    Nutzt Babel/Jinja2-Filter für die Formatierung; die Texte kommen aus templates in der Config.
    """

    def __init__(self, config: Config):
        """
        Initialisiert die Factory mit der Pydantic-basierten Konfiguration.
        Args:
            config (Config): Singleton-Konfiguration.
        """
        self.config: Config = config

    def filter_config(self, currency: str) -> FilterConfig:
        formatting = self.config.formatting
        return FilterConfig(
            locale=formatting.locale or "es_PE",
            locales=formatting.locales,
            currency=currency,
            currency_format=formatting.currency_format,
            date_format=formatting.date_format,
            numeric_format=formatting.numeric_format,
        )

    def create_jinja_env(self, currency: str) -> Environment:
        jinja_env = Environment()
        register_filters(jinja_env, self.filter_config(currency))
        return jinja_env

    @staticmethod
    def render_text(jinja_env: Environment, template: str, values: Dict[str, Any]) -> str:
        return jinja_env.from_string(template).render(**values)

    def build_export_rows(self, totals: QuoteTotals, catalog: ServiceCatalog) -> List[ExportRow]:
        """
        Projiziert die berechneten Positionen auf die Tabellenzeilen des Dokuments.
        Nur Bezeichnung, Detail und formatiertes Zwischentotal werden übernommen.
        """
        filters = self.filter_config(totals.currency.value)
        locale = filters.locale_for(totals.currency.value)
        return [
            ExportRow(
                label=catalog.label_for(item.service_code),
                detail=item.detail,
                amount=format_money(item.subtotal, totals.currency, locale, filters.currency_format),
            )
            for item in totals.items
        ]

    def create_file_name(self, meta: QuoteMeta, jinja_env: Environment = None) -> str:
        """
        Erstellt den Dateinamen aus dem Template, z. B. 'COT-001_Cliente_boleta.pdf'.
        """
        jinja_env = jinja_env or Environment()
        raw_name = self.render_text(jinja_env, self.config.templates.file_name_template, meta.model_dump())
        return f"{sanitize_filename(raw_name)}.pdf"

    def create_context(self, session: QuoteSession, totals: QuoteTotals = None) -> QuoteContext:
        """
        Baut den vollständigen Kontext für den Export.

        Args:
            session (QuoteSession): aktueller Zustand des Angebots.
            totals (QuoteTotals, optional): bereits berechnete Summen; sonst wird neu berechnet.

        Returns:
            QuoteContext: formatierte Werte und Texte für den Renderer.
        """
        totals = totals or session.compute()
        currency = totals.currency.value
        templates = self.config.templates
        jinja_env = self.create_jinja_env(currency)
        filters = self.filter_config(currency)
        locale = filters.locale_for(currency)

        def money(amount: float) -> str:
            return format_money(amount, currency, locale, filters.currency_format)

        settings = session.settings
        values: Dict[str, Any] = {
            **session.meta.model_dump(),
            "currency": currency,
            "other_currency": totals.other_currency.value,
            "exchange_rate": settings.exchange_rate,
            "tax_rate": settings.tax_rate,
            "tax_percent": babel_decimal(settings.tax_rate * 100, filters.locale, "#,##0.##"),
            "company": settings.company_profile,
            "subtotal": totals.subtotal,
            "tax": totals.tax,
            "total": totals.total,
            "total_other": totals.total_other,
        }

        total_lines: List[Tuple[str, str]] = [
            (self.render_text(jinja_env, templates.subtotal_label, values), money(totals.subtotal)),
            (self.render_text(jinja_env, templates.tax_label, values), money(totals.tax)),
            (self.render_text(jinja_env, templates.total_label, values), money(totals.total)),
        ]

        context = QuoteContext(
            data={
                "document_title": self.render_text(jinja_env, templates.document_title, values),
                "company_lines": settings.company_profile.header_lines(),
                "quote_lines": [self.render_text(jinja_env, line, values) for line in templates.quote_lines],
                "column_headers": list(templates.column_headers),
                "rows": self.build_export_rows(totals, session.catalog),
                "total_lines": total_lines,
                "footer_notes": [self.render_text(jinja_env, note, values) for note in templates.footer_notes],
                "file_name": self.create_file_name(session.meta, jinja_env),
                "quote_number": session.meta.quote_number,
                "client_name": session.meta.client_name,
                "currency": currency,
            }
        )
        logger.debug(f"Export-Kontext für {context['quote_number']} mit {len(context['rows'])} Zeilen erstellt.")
        return context


if __name__ == "__main__":
    print("QuoteFactory Modul. Nicht direkt ausführbar.")
