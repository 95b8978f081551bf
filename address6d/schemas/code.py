from pydantic import BaseModel
from typing import Optional
from address6d.utils.codes import BoundingBox


class CodeResponse(BaseModel):
    code: str
    scheme: str
    latitude: float
    longitude: float
    bounds: Optional[BoundingBox] = None
