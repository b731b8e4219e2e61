from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Optional

from loguru import logger
from pydantic import ValidationError

from pydantic_models.data.line_item_model import LineItem
from pydantic_models.data.service_definition_model import ServiceDefinition, new_id
from shared_modules.utils import slugify

from .exceptions import CatalogValidationError

CODE_MAX_LENGTH = 40

# Felder, die nach dem Anlegen geändert werden dürfen. id und code sind unveränderlich.
UPDATABLE_FIELDS = ("label", "suggestion", "default_hourly_cost")

ConfirmDelete = Callable[[ServiceDefinition], bool]


def validate_entries(entries: Any) -> List[ServiceDefinition]:
    """
    Prüft rohe Katalogeinträge (z. B. aus einem gespeicherten Snapshot oder einem Import).
    Einträge ohne code oder label werden verworfen, doppelte Codes ebenfalls (der erste gewinnt).
    Doppelte IDs erhalten eine neue ID.
    Zahlenfelder fallen bei ungültigen Werten auf 0 zurück.
    """
    if not isinstance(entries, (list, tuple)):
        return []
    services: List[ServiceDefinition] = []
    seen_codes = set()
    seen_ids = set()
    for raw in entries:
        if isinstance(raw, ServiceDefinition):
            raw = raw.model_dump()
        if not isinstance(raw, dict):
            logger.debug(f"Katalogeintrag ohne Objektstruktur verworfen: {raw!r}")
            continue
        try:
            service = ServiceDefinition.model_validate(raw)
        except ValidationError as e:
            logger.debug(f"Katalogeintrag verworfen: {e}")
            continue
        if not service.code or not service.label:
            logger.debug(f"Katalogeintrag ohne code oder label verworfen: {raw!r}")
            continue
        if service.code in seen_codes:
            logger.debug(f"Doppelter Leistungscode verworfen: {service.code}")
            continue
        if service.id in seen_ids:
            logger.debug(f"Doppelte ID {service.id} bei {service.code} ersetzt.")
            service = service.model_copy(update={"id": new_id()})
        seen_codes.add(service.code)
        seen_ids.add(service.id)
        services.append(service)
    return services


class ServiceCatalog:
    """
    Geordneter Leistungskatalog mit eindeutigen Codes und mindestens einem Eintrag.
    Alle ändernden Operationen prüfen zuerst und ändern erst danach; bei einem
    Validierungsfehler bleibt der Katalog unverändert.
    """

    def __init__(self, services: Iterable[ServiceDefinition]):
        services = list(services)
        if not services:
            raise CatalogValidationError("Der Leistungskatalog braucht mindestens einen Eintrag.")
        codes = [service.code for service in services]
        if len(set(codes)) != len(codes):
            raise CatalogValidationError("Leistungscodes müssen eindeutig sein.")
        ids = [service.id for service in services]
        if len(set(ids)) != len(ids):
            raise CatalogValidationError("Katalog-IDs müssen eindeutig sein.")
        self._services: List[ServiceDefinition] = services

    def __iter__(self) -> Iterator[ServiceDefinition]:
        return iter(list(self._services))

    def __len__(self) -> int:
        return len(self._services)

    @property
    def services(self) -> List[ServiceDefinition]:
        return list(self._services)

    def first(self) -> ServiceDefinition:
        return self._services[0]

    def codes(self) -> List[str]:
        return [service.code for service in self._services]

    def get(self, service_id: str) -> Optional[ServiceDefinition]:
        return next((s for s in self._services if s.id == service_id), None)

    def find_by_code(self, code: str) -> Optional[ServiceDefinition]:
        return next((s for s in self._services if s.code == code), None)

    def label_for(self, code: str) -> str:
        """Anzeigename eines Codes; unbekannte Codes werden unverändert angezeigt."""
        service = self.find_by_code(code)
        return service.label if service else code

    def add_service(
        self,
        label: str,
        code: Optional[str] = None,
        suggestion: str = "",
        default_hourly_cost: Any = 0.0,
    ) -> ServiceDefinition:
        """
        Legt einen neuen Eintrag am Ende des Katalogs an.
        Ohne code wird er aus der Bezeichnung abgeleitet.

        Raises:
            CatalogValidationError: leere Bezeichnung, leerer oder bereits vorhandener Code.
        """
        label = (label or "").strip()
        if not label:
            raise CatalogValidationError("Bitte eine Bezeichnung für die Leistung angeben.")

        resolved_code = slugify(code if code and code.strip() else label, CODE_MAX_LENGTH)
        if not resolved_code:
            raise CatalogValidationError("Aus der Bezeichnung lässt sich kein gültiger Code ableiten.")
        if self.find_by_code(resolved_code):
            raise CatalogValidationError(f"Der Code '{resolved_code}' existiert bereits.")

        service = ServiceDefinition(
            code=resolved_code,
            label=label,
            suggestion=suggestion or "",
            default_hourly_cost=default_hourly_cost,
        )
        self._services.append(service)
        logger.info(f"Leistung '{service.label}' ({service.code}) angelegt.")
        return service

    def update_service(self, service_id: str, **patch: Any) -> Optional[ServiceDefinition]:
        """
        Übernimmt label, suggestion und default_hourly_cost in den Eintrag mit der ID.
        Unbekannte IDs werden ignoriert.

        Raises:
            CatalogValidationError: wenn id/code geändert werden sollen oder die Bezeichnung leer wird.
        """
        forbidden = set(patch) - set(UPDATABLE_FIELDS)
        if forbidden:
            raise CatalogValidationError(f"Nicht änderbare Felder: {', '.join(sorted(forbidden))}")

        index = next((i for i, s in enumerate(self._services) if s.id == service_id), None)
        if index is None:
            logger.debug(f"Leistung {service_id} nicht gefunden, keine Änderung.")
            return None

        current = self._services[index]
        try:
            updated = ServiceDefinition.model_validate({**current.model_dump(), **patch})
        except ValidationError as e:
            raise CatalogValidationError(f"Ungültige Angaben für die Leistung: {e}") from e
        if not updated.label:
            raise CatalogValidationError("Die Bezeichnung darf nicht leer sein.")

        self._services[index] = updated
        logger.debug(f"Leistung {updated.code} aktualisiert: {sorted(patch)}")
        return updated

    def delete_service(self, service_id: str, confirm: ConfirmDelete) -> bool:
        """
        Entfernt einen Eintrag nach ausdrücklicher Bestätigung.

        Args:
            service_id: ID des Eintrags.
            confirm: Rückfrage an den Benutzer; der Eintrag wird nur bei True entfernt.

        Returns:
            bool: True, wenn der Eintrag entfernt wurde; False bei abgelehnter Bestätigung.

        Raises:
            CatalogValidationError: Eintrag nicht gefunden oder letzter verbleibender Eintrag.
        """
        service = self.get(service_id)
        if service is None:
            raise CatalogValidationError("Die Leistung wurde nicht gefunden.")
        if len(self._services) <= 1:
            raise CatalogValidationError("Der letzte Eintrag des Katalogs kann nicht gelöscht werden.")
        if not confirm(service):
            logger.debug(f"Löschen von {service.code} nicht bestätigt.")
            return False

        index = next(i for i, s in enumerate(self._services) if s is service)
        del self._services[index]
        logger.info(f"Leistung '{service.label}' ({service.code}) gelöscht.")
        return True

    def replace(self, entries: Any) -> None:
        """
        Ersetzt den gesamten Katalog (Import). Ungültige Einträge werden verworfen.

        Raises:
            CatalogValidationError: wenn kein gültiger Eintrag übrig bleibt.
        """
        services = validate_entries(entries)
        if not services:
            raise CatalogValidationError("Der importierte Katalog enthält keinen gültigen Eintrag.")
        self._services = services
        logger.info(f"Leistungskatalog mit {len(services)} Einträgen ersetzt.")

    def snapshot(self) -> list:
        """Serialisierbarer Stand mit camelCase-Schlüsseln."""
        return [service.model_dump(by_alias=True) for service in self._services]


def reconcile_line_items(line_items: Iterable[LineItem], catalog: ServiceCatalog) -> List[str]:
    """
    Weist Positionen, deren Leistungscode nicht mehr im Katalog existiert, dem ersten
    Katalogeintrag zu. Muss nach jeder Änderung am Katalog aufgerufen werden.

    Returns:
        List[str]: IDs der umgehängten Positionen.
    """
    valid_codes = set(catalog.codes())
    fallback = catalog.first().code
    reassigned: List[str] = []
    for item in line_items:
        if item.service_code not in valid_codes:
            logger.debug(f"Position {item.id}: Code '{item.service_code}' -> '{fallback}'")
            item.service_code = fallback
            reassigned.append(item.id)
    return reassigned
