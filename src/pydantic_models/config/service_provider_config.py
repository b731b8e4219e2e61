from typing import Optional
from pydantic import BaseModel

class ServiceProviderConfig(BaseModel):
    """
    Standardwerte für das Firmenprofil, solange keine gespeicherten Einstellungen vorliegen.
    """
    name: Optional[str] = "TU EMPRESA WEB"
    tax_id: Optional[str] = "RUC: 00000000000"
    email: Optional[str] = "correo@tuempresa.com"
    phone: Optional[str] = "+51 999 999 999"
