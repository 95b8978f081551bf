from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from address6d.core.exceptions import ConflictError
from address6d.core.logging_config import logger
from address6d.core.security import IdentityClaims
from address6d.crud import address as address_crud
from address6d.models.address import Address
from address6d.schemas.address import AddressResponse, RegistrationRequest
from address6d.services.code import CodeService
from address6d.services.verification import SOMALI_MOBILE_PATTERN, normalize_phone_number

MOBILE_CONFLICT = "This mobile number is already registered."
CODE_CONFLICT = "This 6D Code already exists. Please select a slightly different location."


class RegistrationService:
    """
    Business rules for registering and looking up addresses.
    """

    def __init__(self, code_service: CodeService, phone_pattern: str = SOMALI_MOBILE_PATTERN):
        self.crud = address_crud
        self.codes = code_service
        self.phone_pattern = phone_pattern

    def register(
        self,
        db: Session,
        data: RegistrationRequest,
        identity: IdentityClaims
    ) -> Address:
        """
        Register an address for a verified phone number.

        Args:
            db: Database session
            data: Registration payload
            identity: Claims of the verified identity token

        Returns:
            Created Address instance

        Raises:
            HTTPException 400: If the mobile number or code is invalid
            HTTPException 409: If the mobile number or code is already registered
        """
        mobile = identity.phone_number or self._normalize_mobile(data.mobile)

        code = self.codes.normalize(data.code)
        if not self.codes.matches(code, data.latitude, data.longitude):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Code does not match the selected location."
            )

        if self.crud.get_by_mobile(db, mobile):
            logger.info(f"Mobile number already registered: uid={identity.uid}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=MOBILE_CONFLICT)

        if self.crud.get_by_code(db, code):
            logger.info(f"Code {code} already registered: uid={identity.uid}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=CODE_CONFLICT)

        context = data.context
        try:
            return self.crud.create(
                db,
                name=data.name,
                mobile=mobile,
                code=code,
                latitude=data.latitude,
                longitude=data.longitude,
                firebase_uid=identity.uid,
                sublocality=context.sublocality if context else None,
                locality=context.locality if context else None
            )
        except ConflictError as e:
            logger.warning(f"Uniqueness conflict on insert ({e.field}): uid={identity.uid}")
            detail = MOBILE_CONFLICT if e.field == "mobile" else CODE_CONFLICT
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)

    def get_by_code(self, db: Session, code: str) -> AddressResponse:
        """
        Public view of the address registered under a code.

        Raises:
            HTTPException 404: If no address has this code
        """
        code = self.codes.normalize(code)

        address = self.crud.get_by_code(db, code)
        if not address:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Address not found"
            )

        return AddressResponse(
            code=address.code,
            name=address.name,
            latitude=address.latitude,
            longitude=address.longitude,
            sublocality=address.sublocality,
            locality=address.locality,
            bounds=self.codes.bounds(address.latitude, address.longitude)
        )

    def _normalize_mobile(self, mobile: str) -> str:
        try:
            return normalize_phone_number(mobile, pattern=self.phone_pattern)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
