import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Type

import yaml
from loguru import logger
from pydantic import BaseModel

from pydantic_models.config.database_config import DatabaseConfig
from pydantic_models.config.formatting_config import FormattingConfig
from pydantic_models.config.logging_config import LoggingConfig
from pydantic_models.config.quote_defaults_config import QuoteDefaultsConfig
from pydantic_models.config.service_provider_config import ServiceProviderConfig
from pydantic_models.config.structure_config import StructureConfig
from pydantic_models.config.templates_config import TemplatesConfig

from .utils import ensure_dir


class Config:
    """
    Singleton für das Laden und Prüfen der Konfiguration.
    Nutzt statische Pydantic-Modelle für alle Abschnitte.
    Fehlende Abschnitte werden mit den Standardwerten der Modelle belegt.
    """

    _instance: Optional["Config"] = None

    def __new__(cls, config_path: Path):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Path):
        # Fallback-Logger für Fehler beim Laden der Config
        logger.remove()
        logger.add(sys.stderr, level="WARNING")
        self.config_path = config_path
        try:
            self.raw_config: Dict[str, Any] = self._load_config()
            self.structure = self._parse_section(self.raw_config, "structure", StructureConfig)
            self.logging = self._parse_section(self.raw_config, "logging", LoggingConfig)
            self._setup_logging()
            logger.debug(f"Lade Konfiguration von {config_path}")
        except Exception as e:
            logger.error(f"Fehler beim Laden der Konfiguration: {e}")
            raise

        self.database = self._parse_section(self.raw_config, "database", DatabaseConfig)
        self.formatting = self._parse_section(self.raw_config, "formatting", FormattingConfig)
        self.service_provider = self._parse_section(self.raw_config, "service_provider", ServiceProviderConfig)
        self.templates = self._parse_section(self.raw_config, "templates", TemplatesConfig)
        self.quote_defaults = self._parse_section(self.raw_config, "quote_defaults", QuoteDefaultsConfig)

        self._validate_structure_and_paths()
        self._validate_quote_defaults()
        logger.debug("Konfiguration erfolgreich geladen und validiert.")
        self._initialized = True

    @property
    def prj_root(self) -> Path:
        root = Path(self.structure.prj_root).expanduser()
        if not root.is_absolute():
            root = self.config_path.parent / root
        return root.resolve()

    @property
    def data_dir(self) -> Path:
        return self.prj_root / (self.structure.local_data_path or "data")

    @property
    def output_dir(self) -> Path:
        return self.prj_root / (self.structure.output_path or "output")

    @property
    def assets_dir(self) -> Path:
        return self.prj_root / (self.structure.assets_path or "assets")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.database.sqlite_db_name

    @property
    def logo_path(self) -> Optional[Path]:
        if not self.templates.logo_file:
            return None
        return self.assets_dir / self.templates.logo_file

    def _setup_logging(self) -> None:
        """
        Initialisiert loguru mit den Einstellungen aus der Config-Datei.
        """
        logger.remove()
        log_file = getattr(self.logging, "log_file", None)
        log_level = getattr(self.logging, "log_level", "INFO")
        if log_file:
            log_dir = ensure_dir(self.prj_root / (self.structure.log_path or ".logs"))
            logger.add(str(log_dir / log_file), level=log_level, rotation="10 MB", retention="10 days")
        logger.add(sys.stderr, level=log_level)

    def _load_config(self) -> Dict[str, Any]:
        """
        Lädt die YAML-Konfigurationsdatei. Eine leere Datei ergibt eine leere Konfiguration.
        """
        with open(self.config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _parse_section(self, config: Dict[str, Any], section: str, model: Type[BaseModel]) -> Any:
        """
        Parst einen Abschnitt der Config mit dem passenden Pydantic-Modell.
        """
        data = config.get(section) or {}
        logger.debug(f"Parsiere Abschnitt '{section}': {data}")
        return model(**data)

    def _validate_structure_and_paths(self) -> None:
        """
        Prüft einmalig alle Pfadangaben. Daten- und Ausgabeverzeichnis werden bei Bedarf angelegt.
        """
        if not self.structure.prj_root:
            logger.error("structure.prj_root ist nicht gesetzt.")
            raise ValueError("structure.prj_root ist Pflicht.")

        if not self.prj_root.exists():
            logger.error(f"Projektwurzel existiert nicht: {self.prj_root}")
            raise FileNotFoundError(f"Projektwurzel nicht gefunden: {self.prj_root}")

        if not self.database.sqlite_db_name:
            logger.error("database.sqlite_db_name ist nicht gesetzt.")
            raise ValueError("database.sqlite_db_name ist Pflicht.")

        if self.database.settings_key == self.database.catalog_key:
            logger.error("database.settings_key und database.catalog_key sind identisch.")
            raise ValueError("Einstellungen und Leistungskatalog brauchen getrennte Schlüssel.")

        ensure_dir(self.data_dir)
        ensure_dir(self.output_dir)

        # optionales Logo prüfen, Warnung statt Fehler
        if self.logo_path and not self.logo_path.exists():
            logger.warning(f"Logo nicht gefunden, Angebote werden ohne Logo erstellt: {self.logo_path}")

    def _validate_quote_defaults(self) -> None:
        """
        Prüft die Voreinstellungen für Angebote und den eingebauten Leistungskatalog.
        """
        defaults: QuoteDefaultsConfig = self.quote_defaults
        if defaults.exchange_rate <= 0:
            logger.error(f"Ungültiger Wechselkurs: {defaults.exchange_rate}")
            raise ValueError("quote_defaults.exchange_rate muss positiv sein.")

        if not defaults.services:
            logger.error("quote_defaults.services ist leer.")
            raise ValueError("Der Leistungskatalog braucht mindestens einen Eintrag.")

        codes = [service.code for service in defaults.services]
        duplicates = {code for code in codes if codes.count(code) > 1}
        if duplicates:
            logger.error(f"Doppelte Leistungscodes im Standardkatalog: {sorted(duplicates)}")
            raise ValueError(f"Doppelte Leistungscodes: {sorted(duplicates)}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Allgemeiner Getter für beliebige Felder (dot-notation für verschachtelte Felder).
        """
        parts = key.split(".")
        val = self.raw_config
        for part in parts:
            if isinstance(val, dict) and part in val:
                val = val[part]
            else:
                logger.debug(f"Feld '{key}' nicht gefunden, Rückgabe Default: {default}")
                return default
        return val

    def get_secret(self, key: str, default: Any = None) -> Optional[str]:
        """
        Gibt ein Secret (z. B. Pfad-Overrides) aus Umgebungsvariablen zurück.
        """
        logger.debug(f"Lese Secret '{key}' aus Umgebungsvariablen.")
        return os.getenv(key, default)


if __name__ == "__main__":
    config_path = Path(__file__).parent.parent.parent / "config" / "quote_builder.yaml"
    config = Config(config_path)
    logger.info("Projektwurzel: {}", config.prj_root)
    # Validierung erfolgt beim Laden automatisch
