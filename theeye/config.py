"""
The Eye Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

# Render sets RENDER=true automatically
_ON_RENDER = os.getenv("RENDER", "").lower() == "true"
_DEFAULT_AUDIT_PATH = "/data/theeye_audit.db" if _ON_RENDER else "theeye_audit.db"

ANALYZER_VERSION = "1.0.0"


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Versioning ---
    ANALYZER_VERSION: str = ANALYZER_VERSION
    API_VERSION: str = "1"

    # --- Corroboration ---
    CORROBORATION_TIMEOUT: float = float(
        os.getenv("THEEYE_CORROBORATION_TIMEOUT", "5.0")
    )
    LOOKUP_BACKEND: str = os.getenv("THEEYE_LOOKUP_BACKEND", "null")
    LOOKUP_FIXTURES: str = os.getenv("THEEYE_LOOKUP_FIXTURES", "")
    LOOKUP_CACHE_TTL: int = int(os.getenv("THEEYE_LOOKUP_CACHE_TTL", "3600"))
    LOOKUP_CACHE_SIZE: int = int(os.getenv("THEEYE_LOOKUP_CACHE_SIZE", "500"))

    # --- Audit ---
    AUDIT_DB_PATH: str = os.getenv("THEEYE_AUDIT_DB", _DEFAULT_AUDIT_PATH)

    # --- Server ---
    HOST: str = os.getenv("THEEYE_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("THEEYE_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("THEEYE_CORS_ORIGINS", "*")


settings = Settings()
