from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared_modules.utils import safe_str

from .service_definition_model import new_id


class LineItem(BaseModel):
    """
    Eine verrechenbare Angebotsposition.

    hours und hourly_cost werden so gespeichert, wie sie eingegeben wurden
    (z. B. "12.5" aus einem Eingabefeld). Die Umwandlung in Zahlen erfolgt erst
    in der Preisberechnung. hourly_cost ist intern und wird nie exportiert.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_id)
    service_code: str
    detail: str = ""
    hours: Any = 10.0
    hourly_cost: Any = 60.0

    @field_validator("detail", mode="before")
    @classmethod
    def detail_as_str(cls, v):
        return safe_str(v)


class PricedLineItem(BaseModel):
    """Position mit bereinigten Zahlen und berechnetem Zwischentotal."""
    id: str
    service_code: str
    detail: str = ""
    hours: float
    hourly_cost: float
    subtotal: float
