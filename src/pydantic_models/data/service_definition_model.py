from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared_modules.utils import coerce_numeric, safe_str


def new_id() -> str:
    """Erzeugt eine neue, nicht wiederverwendete ID."""
    return uuid.uuid4().hex


class ServiceDefinition(BaseModel):
    """
    Eintrag im Leistungskatalog.
    `code` ist der Fremdschlüssel der Angebotspositionen und wird nach dem Anlegen nicht mehr geändert.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_id)
    code: str
    label: str
    suggestion: str = ""
    default_hourly_cost: float = 0.0

    @field_validator("code", "label", mode="before")
    @classmethod
    def strip_text(cls, v):
        return safe_str(v).strip()

    @field_validator("suggestion", mode="before")
    @classmethod
    def suggestion_as_str(cls, v):
        return safe_str(v)

    @field_validator("default_hourly_cost", mode="before")
    @classmethod
    def coerce_cost(cls, v):
        """
        Ungültige oder negative Stundensätze werden zu 0.
        """
        return max(0.0, coerce_numeric(v))
