from typing import Optional
from pydantic import BaseModel

class DatabaseConfig(BaseModel):
    """
    Lokale Ablage der Einstellungen und des Leistungskatalogs.
    Beide Bereiche liegen als JSON-Snapshot unter einem eigenen Schlüssel.
    """
    sqlite_db_name: Optional[str] = "quote_builder.sqlite3"
    settings_key: str = "quote_builder.settings"
    catalog_key: str = "quote_builder.services"
