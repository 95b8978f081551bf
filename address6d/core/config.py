from typing import List, Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./address6d.db"
    CREATE_TABLES: bool = True

    LOG_LEVEL: str = "INFO"

    # Only one scheme may ever issue codes for a given database
    CODE_SCHEME: Literal["decimal", "geohash"] = "decimal"

    GOOGLE_MAPS_API_KEY: Optional[str] = None
    GEOCODING_LANGUAGE: str = "so"
    GEOCODING_TIMEOUT: float = 10.0
    GEOCODING_RETRY_TIMEOUT: float = 20.0

    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_WEB_API_KEY: Optional[str] = None
    FIREBASE_CERTS_URL: str = (
        "https://www.googleapis.com/robot/v1/metadata/x509/"
        "securetoken@system.gserviceaccount.com"
    )

    HTTP_TIMEOUT: float = 10.0
    HTTP_MAX_RETRIES: int = 2

    # Somali mobile operators: Hormuud, Somtel, Telesom, Golis, SomNet, NationLink
    MOBILE_NUMBER_PATTERN: str = r"^\+252(61|62|63|65|68|90)\d{7}$"

    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
