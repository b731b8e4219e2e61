from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from .utils import safe_str  # Nutze zentrale Hilfsfunktion für String-Konvertierung


class Entity(BaseModel):
    """
    Basisklasse für Personen und Firmen auf dem Angebot.
    Alle Felder werden beim Initialisieren auf str gecastet, um Typfehler durch z.B. numerische
    Telefonnummern oder Steuernummern zu vermeiden.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = ""

    @model_validator(mode="before")
    @classmethod
    def ensure_str_fields(cls, data):
        """
        Sorgt dafür, dass alle Felder wirklich als str vorliegen.
        """
        if not isinstance(data, dict):
            return data
        return {key: safe_str(value) for key, value in data.items()}

    def as_dict(self) -> dict:
        """
        Gibt die Felder als Dictionary zurück.
        """
        return self.model_dump()


class CompanyProfile(Entity):
    """
    Firmenprofil des Anbieters. Reine Anzeigefelder ohne berechnete Regeln.
    """
    tax_id: str = ""
    email: str = ""
    phone: str = ""

    def header_lines(self) -> list[str]:
        """
        Zeilen für den Briefkopf; leere Angaben entfallen.
        """
        contact = " • ".join(part for part in (self.email, self.phone) if part)
        return [line for line in (self.name, self.tax_id, contact) if line]
