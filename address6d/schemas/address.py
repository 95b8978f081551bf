from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from address6d.schemas.common import AddressContext
from address6d.utils.codes import BoundingBox


class RegistrationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    mobile: str
    code: str = Field(..., alias="code6D")
    latitude: float = Field(..., strict=True, allow_inf_nan=False)
    longitude: float = Field(..., strict=True, allow_inf_nan=False)
    context: Optional[AddressContext] = None

    @field_validator("name", "mobile", "code")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class RegistrationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    address_id: int = Field(..., alias="addressId")
    code: str = Field(..., alias="code6D")


class AddressResponse(BaseModel):
    """Public view of a registered address. The mobile number is never exposed."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    code: str = Field(..., alias="code6D")
    name: str
    latitude: float
    longitude: float
    sublocality: Optional[str] = None
    locality: Optional[str] = None
    bounds: Optional[BoundingBox] = None
