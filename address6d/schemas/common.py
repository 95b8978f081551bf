from pydantic import BaseModel
from typing import Optional


class AddressContext(BaseModel):
    """Best-effort locality names for a coordinate."""
    sublocality: Optional[str] = None
    locality: Optional[str] = None
    error: Optional[str] = None
