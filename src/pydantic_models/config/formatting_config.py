from typing import Dict, Optional
from pydantic import BaseModel, Field

class FormattingConfig(BaseModel):
    # Gebietsschema je Währung, Fallback ist locale
    locale: Optional[str] = "es_PE"
    locales: Dict[str, str] = Field(default_factory=lambda: {"PEN": "es_PE", "USD": "en_US"})
    currency_format: Optional[str] = None
    date_format: Optional[str] = "yyyy-MM-dd"
    numeric_format: Optional[str] = "#,##0.##"
