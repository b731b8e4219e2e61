import math

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared_modules.entity import CompanyProfile


class Settings(BaseModel):
    """
    Persistierte Einstellungen aus dem Admin-Bereich.

    Attribute:
        tax_rate (float): Steuersatz als Anteil. Wird bewusst nicht auf [0, 1] begrenzt.
        exchange_rate (float): PEN pro 1 USD, muss positiv sein.
        company_profile (CompanyProfile): Anzeigefelder der eigenen Firma.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tax_rate: float = 0.18
    exchange_rate: float = 3.5
    company_profile: CompanyProfile = Field(default_factory=CompanyProfile)

    @field_validator("tax_rate")
    @classmethod
    def tax_rate_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("Steuersatz muss eine endliche Zahl sein.")
        return v

    @field_validator("exchange_rate")
    @classmethod
    def exchange_rate_positive(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError("Wechselkurs muss eine positive Zahl sein.")
        return v

    def snapshot(self) -> dict:
        """Serialisierbarer Stand mit camelCase-Schlüsseln."""
        return self.model_dump(by_alias=True)
