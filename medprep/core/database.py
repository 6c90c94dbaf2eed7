# medprep/core/database.py
"""Database configuration for subscriptions, resources and request logs."""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from medprep.core.config import DATABASE_URL

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    """SQLite needs cross-thread access; in-memory SQLite must share one connection."""
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options: dict = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# ===== SESSION GENERATOR =====


def get_db():
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ===== TABLE CREATION =====


def create_all_tables():
    """Create all tables."""
    # Import models to ensure they're registered with Base
    from medprep.subscriptions.models import Subscription  # noqa: F401
    from medprep.resources.models import Resource, ResourceTier, ResourceDownload  # noqa: F401
    from medprep.logging.models import Log  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


def init_db():
    """Initialize database."""
    create_all_tables()
