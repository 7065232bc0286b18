"""Centralizes application settings sourced from environment variables."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./placewiki.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:8000"]

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Entries
    DUPLICATE_ENTRY_RADIUS_METERS: float = 50.0
    REVISION_INSERT_MAX_RETRIES: int = 3

    # City directory (bundled list covers the larger US cities only)
    CITY_DATA_PATH: str = str(Path(__file__).resolve().parent / "data" / "us_cities.json")
    CITY_MATCH_LIMIT: int = 3

    # Geocoding (TomTom compatible search API)
    GEOCODER_BASE_URL: str = "https://api.tomtom.com"
    GEOCODER_API_KEY: str = ""
    GEOCODER_COUNTRY_SET: str = "US"
    GEOCODER_RESULT_LIMIT: int = 3
    GEOCODER_TIMEOUT_SECONDS: float = 10.0

    class Config:
        # load backend/.env regardless of the working directory
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
