from pathlib import Path

import pytest
import yaml

from pydantic_models.config.quote_defaults_config import QuoteDefaultsConfig
from pydantic_models.data.settings_model import Settings
from quotes.modules.quote_session import QuoteSession
from quotes.modules.settings_store import default_catalog
from shared_modules.config import Config
from shared_modules.entity import CompanyProfile
from shared_modules.storage import MemoryStorage


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Minimale Konfiguration in einem temporären Projektverzeichnis."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    path = config_dir / "quote_builder.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "structure": {"prj_root": str(tmp_path)},
                "logging": {"log_file": None, "log_level": "WARNING"},
                "templates": {"logo_file": None},
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def config(config_path: Path) -> Config:
    return Config(config_path)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def catalog():
    return default_catalog(QuoteDefaultsConfig().services)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        tax_rate=0.18,
        exchange_rate=3.5,
        company_profile=CompanyProfile(name="TU EMPRESA WEB", tax_id="RUC: 00000000000"),
    )


@pytest.fixture
def session(config: Config, storage: MemoryStorage) -> QuoteSession:
    return QuoteSession.load(config, storage)
