from typing import List
from pydantic import BaseModel, Field

from pydantic_models.data.currency import Currency


class DefaultService(BaseModel):
    code: str
    label: str
    suggestion: str = ""
    default_hourly_cost: float = 0.0


def _builtin_services() -> List[DefaultService]:
    return [
        DefaultService(
            code="creacion_web",
            label="Creación de página web",
            suggestion="Incluye estructura, secciones, responsive, performance básico, "
            "formularios y puesta en producción.",
            default_hourly_cost=60.0,
        ),
        DefaultService(
            code="mantenimiento_web",
            label="Mantenimiento de página web",
            suggestion="Actualizaciones, backups, monitoreo, correcciones, seguridad básica, "
            "soporte mensual.",
            default_hourly_cost=50.0,
        ),
        DefaultService(
            code="diseno_figma",
            label="Diseño UI en Figma",
            suggestion="Wireframes + UI final, componentes, estilos, prototipo navegable "
            "y handoff a desarrollo.",
            default_hourly_cost=55.0,
        ),
    ]


class QuoteDefaultsConfig(BaseModel):
    """
    Voreinstellungen für Steuersatz, Wechselkurs, Währungen und Leistungskatalog.

    Attribute:
        tax_rate (float): Steuersatz als Anteil (0.18 = 18 %).
        exchange_rate (float): Einheiten PEN pro 1 USD.
        currency (Currency): Währung, in der neue Angebote erstellt werden.
        default_hours (float): Stunden einer neu angelegten Position.
        services (List[DefaultService]): Eingebauter Leistungskatalog.
    """
    tax_rate: float = 0.18
    exchange_rate: float = 3.5
    currency: Currency = Currency.PEN
    default_hours: float = 10.0
    validity_days: int = 7
    quote_number: str = "COT-001"
    client_name: str = "Cliente"
    services: List[DefaultService] = Field(default_factory=_builtin_services)
