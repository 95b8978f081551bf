from fastapi import APIRouter, Depends, HTTPException, status
from address6d.dependencies import get_verification_service
from address6d.core.exceptions import UpstreamUnavailableError, VerificationRejectedError
from address6d.core.logging_config import logger
from address6d.schemas.verification import (
    ConfirmCodeRequest,
    SendCodeRequest,
    SendCodeResponse,
    VerifiedPhone,
)
from address6d.services import PhoneVerificationService

router = APIRouter()


@router.post("/send", response_model=SendCodeResponse)
def send_verification_code(
    request: SendCodeRequest,
    service: PhoneVerificationService = Depends(get_verification_service)
):
    """
    Text a verification code to the given phone number.

    Raises:
        HTTPException 400: If the number is invalid or the provider refuses it
        HTTPException 503: If the provider cannot be reached
    """
    try:
        phone_number = service.normalize(request.phone_number)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        session_info = service.send_code(phone_number, request.recaptcha_token)
    except VerificationRejectedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UpstreamUnavailableError as e:
        logger.error(f"Error sending verification code: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Phone verification is temporarily unavailable"
        )

    return SendCodeResponse(phone_number=phone_number, session_info=session_info)


@router.post("/confirm", response_model=VerifiedPhone)
def confirm_verification_code(
    request: ConfirmCodeRequest,
    service: PhoneVerificationService = Depends(get_verification_service)
):
    """
    Confirm the code the user received and return an identity token.

    Raises:
        HTTPException 400: If the code is wrong or the session expired
        HTTPException 503: If the provider cannot be reached
    """
    try:
        return service.confirm_code(request.session_info, request.code)
    except VerificationRejectedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UpstreamUnavailableError as e:
        logger.error(f"Error confirming verification code: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Phone verification is temporarily unavailable"
        )
