from typing import Optional
from pydantic import BaseModel

class StructureConfig(BaseModel):
    """
    Modell für die Struktur-Konfiguration des Projekts.

    Attribute:
        prj_root (str): Wurzelverzeichnis des Projekts.
        output_path (Optional[str]): Pfad für erzeugte Angebote (Standard: "output").
        assets_path (Optional[str]): Pfad für Logo und weitere Assets (Standard: "assets").
        log_path (Optional[str]): Pfad zum Log-Verzeichnis relativ zu prj_root (Standard: ".logs").
        local_data_path (Optional[str]): Pfad zum lokalen Datenverzeichnis (Standard: "data").
    """
    prj_root: str = "."
    output_path: Optional[str] = "output"
    assets_path: Optional[str] = "assets"
    log_path: Optional[str] = ".logs"
    local_data_path: Optional[str] = "data"
