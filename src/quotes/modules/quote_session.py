from __future__ import annotations

from typing import Any, List, Optional

from loguru import logger
from pydantic import BaseModel, ValidationError

from pydantic_models.data.currency import Currency
from pydantic_models.data.line_item_model import LineItem
from pydantic_models.data.quote_meta_model import QuoteMeta
from pydantic_models.data.quote_totals_model import QuoteTotals
from pydantic_models.data.settings_model import Settings
from shared_modules.config import Config
from shared_modules.entity import CompanyProfile
from shared_modules.storage import KeyValueStorage
from shared_modules.utils import coerce_numeric

from . import line_items as line_item_ops
from .exceptions import SettingsValidationError
from .pricing_engine import compute_quote
from .service_catalog import ConfirmDelete, ServiceCatalog, reconcile_line_items
from .settings_store import (
    CATALOG_KEY,
    SETTINGS_KEY,
    load_catalog,
    load_settings,
    save_catalog,
    save_settings,
)


class NewServiceDraft(BaseModel):
    """Eingabefelder für eine neue Leistung im Admin-Bereich."""
    label: str = ""
    code: str = ""
    suggestion: str = ""
    default_hourly_cost: Any = 0.0


def default_settings(config: Config) -> Settings:
    """Standardeinstellungen aus der Konfiguration (Abschnitte quote_defaults und service_provider)."""
    provider = config.service_provider
    return Settings(
        tax_rate=config.quote_defaults.tax_rate,
        exchange_rate=config.quote_defaults.exchange_rate,
        company_profile=CompanyProfile(
            name=provider.name,
            tax_id=provider.tax_id,
            email=provider.email,
            phone=provider.phone,
        ),
    )


class QuoteSession:
    """
    Zustand eines Angebots samt Einstellungen und Leistungskatalog.

    Ersetzt globale Zustände: alle Operationen arbeiten auf dieser Instanz.
    Änderungen an Einstellungen und Katalog werden sofort gespeichert; nach jeder
    Katalogänderung werden verwaiste Positionen dem ersten Katalogeintrag zugewiesen.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        settings: Settings,
        catalog: ServiceCatalog,
        line_items: Optional[List[LineItem]] = None,
        meta: Optional[QuoteMeta] = None,
        currency: Currency = Currency.PEN,
        default_hours: Any = 10.0,
        settings_key: str = SETTINGS_KEY,
        catalog_key: str = CATALOG_KEY,
    ):
        self.storage = storage
        self.settings = settings
        self.catalog = catalog
        self.line_items: List[LineItem] = list(line_items or [])
        self.meta = meta or QuoteMeta()
        self.currency = Currency(currency)
        self.default_hours = default_hours
        self.settings_key = settings_key
        self.catalog_key = catalog_key
        self.new_service_draft = NewServiceDraft()
        reconcile_line_items(self.line_items, self.catalog)

    @classmethod
    def load(cls, config: Config, storage: KeyValueStorage) -> "QuoteSession":
        """
        Startet eine Sitzung: Einstellungen und Katalog aus der Ablage (mit Rückfall auf die
        Standardwerte), je eine Beispielposition pro Katalogeintrag und Standard-Metadaten.
        """
        defaults = config.quote_defaults
        settings = load_settings(storage, default_settings(config), key=config.database.settings_key)
        catalog = load_catalog(storage, defaults.services, key=config.database.catalog_key)
        line_items = [
            line_item_ops.new_line_item(catalog, service.code, hours=defaults.default_hours)
            for service in catalog
        ]
        meta = QuoteMeta(
            client_name=defaults.client_name,
            quote_number=defaults.quote_number,
            validity_days=defaults.validity_days,
        )
        logger.info(f"Sitzung gestartet mit {len(catalog)} Leistungen und {len(line_items)} Positionen.")
        return cls(
            storage=storage,
            settings=settings,
            catalog=catalog,
            line_items=line_items,
            meta=meta,
            currency=defaults.currency,
            default_hours=defaults.default_hours,
            settings_key=config.database.settings_key,
            catalog_key=config.database.catalog_key,
        )

    # ------------------------------------------------------------------
    # Berechnung
    # ------------------------------------------------------------------
    def compute(self) -> QuoteTotals:
        return compute_quote(
            self.line_items,
            self.settings.tax_rate,
            self.settings.exchange_rate,
            self.currency,
        )

    def set_currency(self, currency: Currency) -> None:
        """Wechselt die Hauptwährung. Gespeicherte Beträge werden nicht umgerechnet."""
        self.currency = Currency(currency)

    def update_meta(self, **patch: Any) -> QuoteMeta:
        self.meta = QuoteMeta.model_validate({**self.meta.model_dump(), **patch})
        return self.meta

    # ------------------------------------------------------------------
    # Positionen
    # ------------------------------------------------------------------
    def add_line_item(self, service_code: Optional[str] = None) -> LineItem:
        item = line_item_ops.new_line_item(self.catalog, service_code, hours=self.default_hours)
        self.line_items.append(item)
        return item

    def update_line_item(self, item_id: str, **patch: Any) -> Optional[LineItem]:
        return line_item_ops.update_line_item(self.line_items, item_id, **patch)

    def change_service(self, item_id: str, service_code: str) -> Optional[LineItem]:
        return line_item_ops.change_service(self.line_items, item_id, service_code, self.catalog)

    def remove_line_item(self, item_id: str) -> bool:
        return line_item_ops.remove_line_item(self.line_items, item_id)

    # ------------------------------------------------------------------
    # Leistungskatalog
    # ------------------------------------------------------------------
    def _after_catalog_change(self) -> None:
        reassigned = reconcile_line_items(self.line_items, self.catalog)
        if reassigned:
            logger.info(f"{len(reassigned)} Positionen auf '{self.catalog.first().code}' umgestellt.")
        save_catalog(self.storage, self.catalog, key=self.catalog_key)

    def add_service(self, label: str, code: Optional[str] = None, suggestion: str = "",
                    default_hourly_cost: Any = 0.0):
        service = self.catalog.add_service(label, code, suggestion, default_hourly_cost)
        self._after_catalog_change()
        return service

    def add_service_from_draft(self):
        """
        Legt die Leistung aus den Eingabefeldern an und leert diese nach Erfolg.
        Bei einem Validierungsfehler bleiben die Eingaben erhalten.
        """
        draft = self.new_service_draft
        service = self.add_service(
            draft.label,
            draft.code or None,
            draft.suggestion,
            draft.default_hourly_cost,
        )
        self.new_service_draft = NewServiceDraft()
        return service

    def update_service(self, service_id: str, **patch: Any):
        service = self.catalog.update_service(service_id, **patch)
        if service is not None:
            self._after_catalog_change()
        return service

    def delete_service(self, service_id: str, confirm: ConfirmDelete) -> bool:
        deleted = self.catalog.delete_service(service_id, confirm)
        if deleted:
            self._after_catalog_change()
        return deleted

    def replace_catalog(self, entries: Any) -> None:
        self.catalog.replace(entries)
        self._after_catalog_change()

    # ------------------------------------------------------------------
    # Einstellungen
    # ------------------------------------------------------------------
    def update_settings(self, **patch: Any) -> Settings:
        """
        Übernimmt tax_rate und/oder exchange_rate.
        Nicht numerische Eingaben werden als 0 übernommen; ein Steuersatz blockiert nie.

        Raises:
            SettingsValidationError: Wechselkurs nicht positiv oder unbekanntes Feld;
                der bisherige Stand bleibt erhalten.
        """
        unknown = set(patch) - {"tax_rate", "exchange_rate"}
        if unknown:
            raise SettingsValidationError(f"Unbekannte Einstellungen: {', '.join(sorted(unknown))}")
        patch = {field: coerce_numeric(value) for field, value in patch.items()}
        try:
            settings = Settings.model_validate({**self.settings.model_dump(), **patch})
        except ValidationError as e:
            raise SettingsValidationError(f"Ungültige Einstellungen: {e}") from e
        self.settings = settings
        save_settings(self.storage, self.settings, key=self.settings_key)
        return self.settings

    def update_company_profile(self, **patch: Any) -> CompanyProfile:
        profile = CompanyProfile.model_validate({**self.settings.company_profile.model_dump(), **patch})
        self.settings = self.settings.model_copy(update={"company_profile": profile})
        save_settings(self.storage, self.settings, key=self.settings_key)
        return profile
