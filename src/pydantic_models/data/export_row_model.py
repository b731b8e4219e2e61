from pydantic import BaseModel, ConfigDict


class ExportRow(BaseModel):
    """
    Tabellenzeile des exportierten Angebots.
    Stunden und Stundensatz sind absichtlich nicht Teil dieses Modells.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str
    detail: str = ""
    amount: str
