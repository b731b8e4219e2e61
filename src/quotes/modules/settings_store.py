"""
Laden und Speichern der Einstellungen und des Leistungskatalogs.

Beide Bereiche liegen als JSON-Snapshot in einer KeyValueStorage. Beim Laden werden
fehlende oder unlesbare Werte still durch Standardwerte ersetzt, beim Speichern
führen Schreibfehler nie zu einer Exception.
"""
import json
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from pydantic_models.config.quote_defaults_config import DefaultService
from pydantic_models.data.service_definition_model import ServiceDefinition
from pydantic_models.data.settings_model import Settings
from shared_modules.storage import KeyValueStorage
from shared_modules.utils import log_exceptions, parse_or_default

from .service_catalog import ServiceCatalog, validate_entries

SETTINGS_KEY = "quote_builder.settings"
CATALOG_KEY = "quote_builder.services"


def _merge_company_profile(defaults: Settings, loaded: Dict[str, Any]) -> Dict[str, Any]:
    profile = loaded.get("companyProfile")
    if not isinstance(profile, dict):
        return loaded
    merged_profile = {**defaults.company_profile.model_dump(by_alias=True), **_camel_keys(profile)}
    return {**loaded, "companyProfile": merged_profile}


def _camel_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {to_camel(key) if "_" in key else key: value for key, value in data.items()}


def merge_settings(defaults: Settings, loaded: Any) -> Settings:
    """
    Legt geladene Felder flach über die Standardwerte.
    Felder, die sich nicht validieren lassen, behalten einzeln ihren Standardwert.
    """
    if not isinstance(loaded, dict):
        logger.debug("Gespeicherte Einstellungen ohne Objektstruktur, verwende Standardwerte.")
        return defaults.model_copy(deep=True)
    loaded = _camel_keys(loaded)

    candidate = {**defaults.snapshot(), **_merge_company_profile(defaults, loaded)}
    for _ in range(len(candidate) + 1):
        try:
            return Settings.model_validate(candidate)
        except ValidationError as e:
            invalid = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
            logger.debug(f"Ungültige Einstellungen verworfen: {sorted(invalid)}")
            fallback = defaults.snapshot()
            reset = {key for key in invalid if key in fallback}
            if not reset:
                break
            for key in reset:
                candidate[key] = fallback[key]
    return defaults.model_copy(deep=True)


def load_settings(storage: KeyValueStorage, defaults: Settings, key: str = SETTINGS_KEY) -> Settings:
    """
    Liest die Einstellungen aus der Ablage. Fehlender Schlüssel, unlesbarer Inhalt oder eine
    falsche Struktur führen zu Standardwerten, nur für die betroffenen Felder.
    """
    loaded = parse_or_default(storage.get(key), default=None)
    settings = merge_settings(defaults, loaded)
    logger.debug(f"Einstellungen geladen: Steuersatz {settings.tax_rate}, Kurs {settings.exchange_rate}")
    return settings


def _write(storage: KeyValueStorage, key: str, payload: Any) -> bool:
    written = False
    with log_exceptions(f"Speichern von '{key}' fehlgeschlagen"):
        written = storage.set(key, json.dumps(payload, ensure_ascii=False))
    if not written:
        logger.warning(f"'{key}' wurde nicht gespeichert, Änderungen gelten nur für diese Sitzung.")
    return written


def save_settings(storage: KeyValueStorage, settings: Settings, key: str = SETTINGS_KEY) -> bool:
    """Schreibt den vollständigen Stand der Einstellungen; Fehler werden nur geloggt."""
    return _write(storage, key, settings.snapshot())


def default_catalog(default_services: List[DefaultService]) -> ServiceCatalog:
    return ServiceCatalog(
        ServiceDefinition(
            code=service.code,
            label=service.label,
            suggestion=service.suggestion,
            default_hourly_cost=service.default_hourly_cost,
        )
        for service in default_services
    )


def load_catalog(
    storage: KeyValueStorage,
    default_services: List[DefaultService],
    key: str = CATALOG_KEY,
) -> ServiceCatalog:
    """
    Liest den Leistungskatalog. Ungültige Einträge werden verworfen; bleibt kein
    gültiger Eintrag übrig, wird der eingebaute Katalog verwendet.
    """
    loaded: Optional[Any] = parse_or_default(storage.get(key), default=None)
    services = validate_entries(loaded)
    if not services:
        if loaded is not None:
            logger.warning("Gespeicherter Leistungskatalog unbrauchbar, verwende Standardkatalog.")
        return default_catalog(default_services)
    logger.debug(f"Leistungskatalog mit {len(services)} Einträgen geladen.")
    return ServiceCatalog(services)


def save_catalog(storage: KeyValueStorage, catalog: ServiceCatalog, key: str = CATALOG_KEY) -> bool:
    """Schreibt den vollständigen Katalog; Fehler werden nur geloggt."""
    return _write(storage, key, catalog.snapshot())
