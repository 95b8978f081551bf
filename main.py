from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from address6d.core.config import Settings
from address6d.core.logging_config import logger, setup_logging
from address6d.core.security import FirebaseTokenVerifier
from address6d.database import Base, build_engine, build_session_factory, get_db
from address6d.models.address import Address  # noqa: F401  registers the table
from address6d.routers import address, codes, geocoding, verification
from address6d.services import (
    CodeService,
    GeocodingService,
    PhoneVerificationService,
    RegistrationService,
)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API with every collaborator wired from explicit settings.

    The engine, session factory, provider clients and services live on
    app.state and are handed to request handlers through dependencies.
    No app is built at import time; serve with
    `uvicorn main:create_app --factory`.
    """
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL)

    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.CREATE_TABLES:
            Base.metadata.create_all(bind=engine)
        logger.info(f"Database ready ({engine.dialect.name}), code scheme={settings.CODE_SCHEME}")
        yield
        engine.dispose()

    app = FastAPI(
        title="Somali 6D Address API",
        version="1.0.0",
        redirect_slashes=False,
        lifespan=lifespan
    )

    code_service = CodeService(settings.CODE_SCHEME)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.code_service = code_service
    app.state.registration_service = RegistrationService(
        code_service, phone_pattern=settings.MOBILE_NUMBER_PATTERN
    )
    app.state.geocoding_service = GeocodingService(
        api_key=settings.GOOGLE_MAPS_API_KEY,
        language=settings.GEOCODING_LANGUAGE,
        timeout=settings.GEOCODING_TIMEOUT,
        retry_timeout=settings.GEOCODING_RETRY_TIMEOUT
    )
    app.state.verification_service = PhoneVerificationService(
        api_key=settings.FIREBASE_WEB_API_KEY,
        timeout=settings.HTTP_TIMEOUT,
        max_retries=settings.HTTP_MAX_RETRIES,
        phone_pattern=settings.MOBILE_NUMBER_PATTERN
    )
    app.state.token_verifier = FirebaseTokenVerifier(
        project_id=settings.FIREBASE_PROJECT_ID,
        certs_url=settings.FIREBASE_CERTS_URL,
        timeout=settings.HTTP_TIMEOUT
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "message": "Missing or invalid fields.",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    app.include_router(address.router, prefix="/api", tags=["Addresses"])
    app.include_router(codes.router, prefix="/api/codes", tags=["Codes"])
    app.include_router(geocoding.router, prefix="/api/geocode", tags=["Geocoding"])
    app.include_router(verification.router, prefix="/api/verification", tags=["Verification"])

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "Somali 6D Address backend is running"

    @app.get("/health")
    def health_check(db: Session = Depends(get_db)):
        try:
            db.execute(text("SELECT 1"))
            return {
                "status": "healthy",
                "database": "connected"
            }
        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Service unhealthy"
            )

    return app
