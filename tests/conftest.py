"""
Test configuration and shared fixtures for the MedPrep API test suite.
Provides database setup, admin authentication, a fake URL issuer and seed data.
"""

import os

# Must be set before medprep.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_API_TOKEN"] = "test-admin-token"

import pytest
from datetime import datetime
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from medprep.app import create_app
from medprep.core.config import SIGNED_URL_EXPIRES_IN
from medprep.core.database import Base, SessionLocal, engine, get_db
from medprep.core.storage import SignedUrlIssuer, get_signed_url_issuer
from medprep.resources.models import Resource
from medprep.subscriptions.models import Subscription

ADMIN_TOKEN = "test-admin-token"


class FakeSignedUrlIssuer(SignedUrlIssuer):
    """Issues a distinct URL per call and remembers what it signed."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    async def create_signed_url(self, file_path: str, expires_in: int = SIGNED_URL_EXPIRES_IN) -> str:
        self.calls.append((file_path, expires_in))
        return f"https://storage.test/{file_path}?expires={expires_in}&n={len(self.calls)}"


# ===== DATABASE SETUP =====


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Database session on the shared in-memory engine, emptied after each test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)


@pytest.fixture
def url_issuer() -> FakeSignedUrlIssuer:
    return FakeSignedUrlIssuer()


@pytest.fixture
def client(db_session, url_issuer) -> Generator[TestClient, None, None]:
    """Create FastAPI test client with database and storage overrides"""
    app = create_app()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_signed_url_issuer] = lambda: url_issuer

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return {"X-Admin-Token": ADMIN_TOKEN}


# ===== SEED DATA =====


def make_subscription(
    email: str,
    tier: str = "free",
    unsubscribed_at: Optional[datetime] = None,
    opt_in_newsletter: bool = True,
) -> Subscription:
    return Subscription(
        email=email,
        subscription_tier=tier,
        opt_in_newsletter=opt_in_newsletter,
        unsubscribed_at=unsubscribed_at,
    )


def make_resource(resource_id: str, tiers: List[str], is_active: bool = True, name: Optional[str] = None) -> Resource:
    resource = Resource(
        id=resource_id,
        name=name or resource_id.replace("-", " ").title(),
        description=f"{resource_id} guide",
        file_path=f"guides/{resource_id}.pdf",
        is_active=is_active,
    )
    resource.set_allowed_tiers(tiers)
    return resource


@pytest.fixture
def sample_subscriptions(db_session) -> List[Subscription]:
    subscriptions = [
        make_subscription("free@example.com", "free"),
        make_subscription("basic@example.com", "premium_basic"),
        make_subscription("plus@example.com", "premium_plus", opt_in_newsletter=False),
        make_subscription("gone@example.com", "premium_plus", unsubscribed_at=datetime(2024, 1, 1)),
    ]
    db_session.add_all(subscriptions)
    db_session.commit()
    return subscriptions


@pytest.fixture
def sample_resources(db_session) -> List[Resource]:
    resources = [
        make_resource("ucat-guide", ["free", "premium_basic", "premium_plus"]),
        make_resource("interview-pack", ["premium_basic", "premium_plus"]),
        make_resource("mock-exams", ["premium_plus"]),
        make_resource("old-guide", ["free", "premium_plus"], is_active=False),
    ]
    db_session.add_all(resources)
    db_session.commit()
    return resources
