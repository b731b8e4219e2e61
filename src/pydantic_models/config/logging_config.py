from typing import Optional
from pydantic import BaseModel

class LoggingConfig(BaseModel):
    log_file: Optional[str] = "quote_builder.log"   # Defaultwert, relativ zu structure.log_path
    log_level: Optional[str] = "INFO"               # Defaultwert
