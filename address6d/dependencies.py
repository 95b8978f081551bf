from fastapi import HTTPException, status, Request
from address6d.core.logging_config import logger
from address6d.core.security import (
    FirebaseTokenVerifier,
    IdentityClaims,
    InvalidIdentityToken,
    extract_bearer_token,
)
from address6d.services import (
    CodeService,
    GeocodingService,
    PhoneVerificationService,
    RegistrationService,
)


def get_code_service(request: Request) -> CodeService:
    return request.app.state.code_service


def get_geocoding_service(request: Request) -> GeocodingService:
    return request.app.state.geocoding_service


def get_verification_service(request: Request) -> PhoneVerificationService:
    return request.app.state.verification_service


def get_registration_service(request: Request) -> RegistrationService:
    return request.app.state.registration_service


def get_token_verifier(request: Request) -> FirebaseTokenVerifier:
    return request.app.state.token_verifier


def get_current_identity(request: Request) -> IdentityClaims:
    """
    Verify the bearer identity token and return its claims.

    Args:
        request: FastAPI Request to extract Authorization header

    Returns:
        IdentityClaims of the phone-verified user

    Raises:
        HTTPException 401: If no token was sent
        HTTPException 403: If the token is invalid or expired
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: No token provided.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return get_token_verifier(request).verify(token)
    except InvalidIdentityToken as e:
        logger.warning(f"Identity token rejected: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: Invalid or expired token."
        )
