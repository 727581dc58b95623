"""
Application settings loaded from environment variables (.env supported)
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Runtime configuration, read once at import time"""

    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./movies.db")
    DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 5))
    DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 10))
    DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", 30))
    DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", 3600))
    DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

    # Pagination
    DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", 10))
    MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", 50))

    # Homepage sections (upcoming releases / in theaters)
    HOMEPAGE_SECTION_SIZE = int(os.getenv("HOMEPAGE_SECTION_SIZE", 5))

    # Local asset storage
    ASSET_ROOT = os.getenv("ASSET_ROOT", "./media")
    ASSET_BASE_URL = os.getenv("ASSET_BASE_URL", "http://localhost:8000/media").rstrip("/")

    FRONTEND_URL = os.getenv("FRONTEND_URL")


settings = Settings()
