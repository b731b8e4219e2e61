from datetime import date

from pydantic import BaseModel, Field, field_validator

from shared_modules.utils import coerce_numeric, safe_str, to_date


class QuoteMeta(BaseModel):
    """
    Beschreibende Angaben zum Angebot. Keine Berechnungen außer der Anzeige.
    """
    client_name: str = "Cliente"
    quote_number: str = "COT-001"
    issue_date: date = Field(default_factory=date.today)
    validity_days: int = 7

    @field_validator("client_name", "quote_number", mode="before")
    @classmethod
    def text_as_str(cls, v):
        return safe_str(v)

    @field_validator("issue_date", mode="before")
    @classmethod
    def parse_issue_date(cls, v):
        return to_date(v) or date.today()

    @field_validator("validity_days", mode="before")
    @classmethod
    def at_least_one_day(cls, v):
        """
        Gültigkeit in Tagen, mindestens 1. Leere oder ungültige Eingaben ergeben 1.
        """
        days = int(coerce_numeric(v, default=1.0))
        return max(1, days)
