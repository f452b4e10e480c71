"""
Test configuration and fixtures.

Provides:
- Fresh in-memory SQLite schema per test
- Users for each role and Bearer tokens for them
- HTTPX AsyncClient bound to the app with get_db overridden
"""
import os
import tempfile
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Must be set before anything imports recovery_crm.core.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["TESTING"] = "1"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="recovery-crm-uploads-")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.core.security import create_access_token, hash_password
from recovery_crm.db.base import Base
from recovery_crm.db.enums import Role
from recovery_crm.db.models import User
from recovery_crm.db.session import SessionLocal, engine
from recovery_crm.main import app


TEST_PASSWORD = "secret123"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Session over a freshly created schema.

    App code commits freely; the schema is dropped after each test.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def make_user(db: Session, role: Role, **overrides) -> User:
    suffix = uuid.uuid4().hex[:8]
    values = {
        "username": f"{role.value}_{suffix}",
        "email": f"{role.value}-{suffix}@test.com",
        "password_hash": hash_password(TEST_PASSWORD),
        "first_name": role.value.title(),
        "last_name": "Tester",
        "phone": "9000000000",
        "role": role.value,
    }
    values.update(overrides)
    user = User(**values)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db: Session) -> User:
    return make_user(db, Role.ADMIN)


@pytest.fixture
def agent(db: Session) -> User:
    return make_user(db, Role.AGENT)


@pytest.fixture
def telecaller(db: Session) -> User:
    return make_user(db, Role.TELECALLER)


@pytest.fixture
def marketing(db: Session) -> User:
    return make_user(db, Role.MARKETING)


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def auth_for(user: User) -> TestAuth:
    return TestAuth(user=user, token=create_access_token(user.id, user.role))


@pytest.fixture
def admin_auth(admin: User) -> TestAuth:
    return auth_for(admin)


@pytest.fixture
def agent_auth(agent: User) -> TestAuth:
    return auth_for(agent)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient sharing the test session with the app."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


# =============================================================================
# Data helpers
# =============================================================================

@pytest.fixture
def new_customer(client: AsyncClient):
    """Factory: POST a customer as multipart form data and return the JSON body."""
    async def _create(**fields) -> dict:
        data = {
            "name": "Ramesh Kumar",
            "phone": "9876543210",
            "problem": "Recovery agents calling after settlement",
        }
        data.update(fields)
        response = await client.post("/api/customers", data=data)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
