from typing import List, Optional
from pydantic import BaseModel, Field

class TemplatesConfig(BaseModel):
    """
    Texte für das exportierte Angebot. Alle Werte sind Jinja2-Templates
    mit den Filtern currency, decimal und date.
    """
    document_title: str = "BOLETA DE SERVICIOS"
    file_name_template: str = "{{ quote_number }}_{{ client_name }}_boleta"
    logo_file: Optional[str] = "logo.png"
    column_headers: List[str] = Field(default_factory=lambda: ["Servicio", "Detalle", "Importe"])
    quote_lines: List[str] = Field(
        default_factory=lambda: [
            "N°: {{ quote_number }}",
            "Fecha: {{ issue_date | date }}",
            "Cliente: {{ client_name }}",
            "Moneda: {{ currency }}",
            "TC: 1 USD = {{ exchange_rate | decimal }} PEN",
        ]
    )
    subtotal_label: str = "Subtotal"
    tax_label: str = "IGV ({{ tax_percent }}%)"
    total_label: str = "TOTAL"
    footer_notes: List[str] = Field(
        default_factory=lambda: [
            "Observación: Este comprobante no muestra costos internos por hora.",
            "Validez: {{ validity_days }} días.",
            "Gracias por su preferencia.",
        ]
    )
