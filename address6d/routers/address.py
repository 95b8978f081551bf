from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from address6d.database import get_db
from address6d.dependencies import get_current_identity, get_registration_service
from address6d.core.logging_config import logger
from address6d.core.security import IdentityClaims
from address6d.schemas.address import AddressResponse, RegistrationRequest, RegistrationResponse
from address6d.services import RegistrationService

router = APIRouter()


@router.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def register_address(
    data: RegistrationRequest,
    db: Session = Depends(get_db),
    identity: IdentityClaims = Depends(get_current_identity),
    service: RegistrationService = Depends(get_registration_service)
):
    """
    Register an address for a phone-verified user.

    The identity token must come from a completed phone verification; its
    phone number takes precedence over the one in the body.

    Args:
        data: Name, mobile, code and coordinates with optional locality context
        db: Database session
        identity: Verified identity (from the Authorization header)

    Returns:
        Identifier and code of the stored address

    Raises:
        HTTPException 400: If fields are missing or the code does not match
        HTTPException 409: If the mobile number or code is already registered
    """
    logger.info(f"Registering code {data.code} for uid={identity.uid}")
    address = service.register(db=db, data=data, identity=identity)
    logger.info(f"Registration successful for uid={identity.uid}: address id={address.id}")
    return RegistrationResponse(
        message="Registration successful!",
        address_id=address.id,
        code=address.code
    )


@router.get("/addresses/{code}", response_model=AddressResponse)
def get_address(
    code: str,
    db: Session = Depends(get_db),
    service: RegistrationService = Depends(get_registration_service)
):
    """
    Look up the address registered under a code.

    Raises:
        HTTPException 404: If no address has this code
    """
    return service.get_by_code(db=db, code=code)
