# medprep/core/config.py
"""Environment-driven configuration for the MedPrep API."""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

# ===== APPLICATION =====

APPLICATION_ID = os.getenv("APPLICATION_ID", "medprep-api")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ALLOWED_ORIGINS",
        "http://localhost:3000,https://www.nextgenmedprep.com,https://nextgenmedprep.com",
    ).split(",")
    if origin.strip()
]

# Shared secret for administrative endpoints. Unset means no admin access at all.
ADMIN_API_TOKEN = os.getenv("ADMIN_API_TOKEN") or None

# ===== DATABASE =====

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./medprep.db")

# ===== OBJECT STORAGE (signed download URLs) =====

STORAGE_ENDPOINT_URL = os.getenv("STORAGE_ENDPOINT_URL")
STORAGE_ACCESS_KEY_ID = os.getenv("STORAGE_ACCESS_KEY_ID")
STORAGE_SECRET_ACCESS_KEY = os.getenv("STORAGE_SECRET_ACCESS_KEY")
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "resources")
STORAGE_REGION = os.getenv("STORAGE_REGION")
STORAGE_ADDRESSING_STYLE = os.getenv("STORAGE_ADDRESSING_STYLE", "path").lower()

# Lifetime of issued download URLs, also reported to callers as `expiresIn`.
SIGNED_URL_EXPIRES_IN = 3600

# ===== PAGINATION =====

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


def configure_logging() -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
