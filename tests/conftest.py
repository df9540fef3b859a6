"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from marketplace import models
from marketplace.api.dependencies import get_exchange_rate_service
from marketplace.config import get_settings
from marketplace.database import Base, build_engine, get_db
from marketplace.main import app
from marketplace.models.category import Category
from marketplace.models.enums import CategoryStatus, UserRole
from marketplace.services.category_service import slugify
from marketplace.services.currency import ExchangeRateService, TTLCache
from marketplace.services.skills import add_category_skills


class AuthHeaders(dict):
    """Dict subclass that also stores the signed-in user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/marketplace", "/marketplace_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = build_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


class FakeExchangeRateService(ExchangeRateService):
    """Exchange rate service with a fixed rate and no network access."""

    def __init__(self, rate: float = 4000.0):
        super().__init__(cache=TTLCache(ttl_seconds=60), url="", fallback_rate=rate)
        self.rate = rate

    async def get_rate(self) -> float:
        return self.rate


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_exchange_rate_service] = lambda: FakeExchangeRateService()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def sign_in(client, email: str, name: str | None = None) -> AuthHeaders:
    """Sign a user in through the OAuth callback endpoint."""
    response = client.post(
        "/api/v1/auth/sign-in",
        json={"email": email, "name": name},
        headers={"X-Auth-Callback-Secret": get_settings().auth_callback_secret},
    )
    assert response.status_code == 200
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=email,
    )


@pytest.fixture
def auth_headers(client):
    """Signed-in employer."""
    return sign_in(client, "employer@example.com", "Employer")


@pytest.fixture
def other_headers(client):
    """Signed-in freelancer."""
    return sign_in(client, "freelancer@example.com", "Freelancer")


@pytest.fixture
def stranger_headers(client):
    """Signed-in user unrelated to the other fixtures."""
    return sign_in(client, "stranger@example.com", "Stranger")


@pytest.fixture
def admin_headers(client, db):
    """Signed-in user holding the admin role."""
    headers = sign_in(client, "admin@example.com", "Admin")
    user = db.get(models.User, headers.user_id)
    user.role = UserRole.ADMIN.value
    db.commit()
    return headers


@pytest.fixture
def approved_category(db):
    """An approved category with two skills."""

    def _create(name: str = "Desarrollo Web", skills: tuple[str, ...] = ("React", "Python")):
        category = Category(name=name, slug=slugify(name), status=CategoryStatus.APPROVED.value)
        db.add(category)
        db.flush()
        add_category_skills(db, category.id, skills)
        db.commit()
        db.refresh(category)
        return category

    return _create


PROJECT_PAYLOAD = {
    "title": "Build a landing page",
    "description": "Landing page for a small bakery with a contact form.",
    "category": "Desarrollo Web",
    "budget": 1500000,
    "budget_currency": "COP",
    "skills_required": ["React", "CSS"],
}

PROPOSAL = (
    "I have five years of experience building landing pages for small businesses "
    "and can deliver in two weeks."
)


@pytest.fixture
def project_payload():
    """A valid project creation payload."""
    return dict(PROJECT_PAYLOAD, skills_required=list(PROJECT_PAYLOAD["skills_required"]))


@pytest.fixture
def proposal():
    """A proposal long enough to be accepted."""
    return PROPOSAL


@pytest.fixture
def create_project(client, auth_headers, project_payload):
    """Create a project as the employer and return its JSON."""

    def _create(headers=None, **overrides):
        payload = dict(project_payload, **overrides)
        response = client.post("/api/v1/projects", headers=headers or auth_headers, json=payload)
        assert response.status_code == 200, response.text
        return response.json()["project"]

    return _create
