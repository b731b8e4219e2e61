from typing import Any, List, Optional

from loguru import logger

from pydantic_models.data.line_item_model import LineItem
from shared_modules.utils import safe_str

from .service_catalog import ServiceCatalog

# Felder, die über die Eingabemaske direkt geändert werden
EDITABLE_FIELDS = ("detail", "hours", "hourly_cost")


def new_line_item(
    catalog: ServiceCatalog,
    service_code: Optional[str] = None,
    hours: Any = 10.0,
) -> LineItem:
    """
    Erzeugt eine neue Position. Ohne (gültigen) Code wird der erste Katalogeintrag verwendet;
    der Stundensatz wird aus dem Katalog übernommen.
    """
    service = (service_code and catalog.find_by_code(service_code)) or catalog.first()
    return LineItem(
        service_code=service.code,
        detail="",
        hours=hours,
        hourly_cost=service.default_hourly_cost,
    )


def find_line_item(line_items: List[LineItem], item_id: str) -> Optional[LineItem]:
    return next((item for item in line_items if item.id == item_id), None)


def update_line_item(line_items: List[LineItem], item_id: str, **patch: Any) -> Optional[LineItem]:
    """
    Übernimmt detail, hours und hourly_cost in die Position mit der ID.
    Andere Felder werden ignoriert; unbekannte IDs führen zu keiner Änderung.
    """
    item = find_line_item(line_items, item_id)
    if item is None:
        logger.debug(f"Position {item_id} nicht gefunden, keine Änderung.")
        return None
    for field, value in patch.items():
        if field not in EDITABLE_FIELDS:
            logger.debug(f"Feld '{field}' der Position ist nicht direkt änderbar, ignoriert.")
            continue
        setattr(item, field, safe_str(value) if field == "detail" else value)
    return item


def change_service(
    line_items: List[LineItem],
    item_id: str,
    service_code: str,
    catalog: ServiceCatalog,
) -> Optional[LineItem]:
    """
    Wechselt die Leistung einer Position.
    Der Stundensatz wird aus dem Katalog übernommen; die Detailbeschreibung wird nur
    dann mit dem Vorschlag der Leistung gefüllt, wenn sie noch leer ist.
    """
    item = find_line_item(line_items, item_id)
    service = catalog.find_by_code(service_code)
    if item is None or service is None:
        logger.debug(f"Leistungswechsel ignoriert: Position {item_id}, Code {service_code}")
        return None

    item.service_code = service.code
    item.hourly_cost = service.default_hourly_cost
    if not item.detail.strip():
        item.detail = service.suggestion
    return item


def remove_line_item(line_items: List[LineItem], item_id: str) -> bool:
    """Entfernt die Position mit der ID; liefert False, wenn sie nicht existiert."""
    for index, item in enumerate(line_items):
        if item.id == item_id:
            del line_items[index]
            return True
    return False
