from pydantic import BaseModel, Field
from typing import Optional


class SendCodeRequest(BaseModel):
    phone_number: str = Field(..., min_length=1)
    recaptcha_token: str = Field(..., min_length=1)


class SendCodeResponse(BaseModel):
    phone_number: str
    session_info: str


class ConfirmCodeRequest(BaseModel):
    session_info: str = Field(..., min_length=1)
    code: str = Field(..., min_length=4, max_length=8)


class VerifiedPhone(BaseModel):
    """Result of a successful phone verification."""
    id_token: str
    phone_number: str
    uid: Optional[str] = None
    refresh_token: Optional[str] = None
