"""
Test configuration and fixtures.

Provides:
- Fresh in-memory SQLite schema per test
- Registered users and bearer headers for authenticated requests
- HTTPX AsyncClient wired to the test session
"""
import os
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncGenerator, Callable, Generator

# Configure before the application (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ENV"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from slotswapper.core.deps import get_db
from slotswapper.core.security import create_session_token
from slotswapper.db.base import Base
from slotswapper.db.enums import SlotStatus
from slotswapper.db.models import Slot, User
from slotswapper.db.repository import RecordStore
from slotswapper.db.session import SessionLocal, engine
from slotswapper.main import app
from slotswapper.services import auth_service

TEST_PASSWORD = "password123"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Creates all tables, yields a session, then drops everything."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def store(db: Session) -> RecordStore:
    return RecordStore(db)


# =============================================================================
# User Fixtures
# =============================================================================

def _register(store: RecordStore, name: str) -> User:
    return auth_service.register_user(
        store, name, f"{name.lower()}@test.com", TEST_PASSWORD
    )


@pytest.fixture(scope="function")
def alice(store: RecordStore) -> User:
    return _register(store, "Alice")


@pytest.fixture(scope="function")
def bob(store: RecordStore) -> User:
    return _register(store, "Bob")


@pytest.fixture(scope="function")
def carol(store: RecordStore) -> User:
    return _register(store, "Carol")


@pytest.fixture(scope="function")
def make_slot(store: RecordStore) -> Callable[..., Slot]:
    """Insert a slot directly through the record store."""

    def _make_slot(
        owner: User,
        title: str = "Team Meeting",
        start: datetime = datetime(2025, 11, 10, 10, 0),
        end: datetime = datetime(2025, 11, 10, 11, 0),
        status: SlotStatus = SlotStatus.SWAPPABLE,
    ) -> Slot:
        with store.transaction():
            slot = store.add_slot(
                Slot(
                    user_id=owner.id,
                    title=title,
                    start_time=start,
                    end_time=end,
                    status=status.value,
                )
            )
        return slot

    return _make_slot


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


@pytest.fixture(scope="function")
def alice_auth(alice: User) -> TestAuth:
    return TestAuth(user=alice, token=create_session_token(alice.id))


@pytest.fixture(scope="function")
def bob_auth(bob: User) -> TestAuth:
    return TestAuth(user=bob, token=create_session_token(bob.id))


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient bound to the test session.

    Pass ``headers=auth.headers`` per request to act as a given user.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()
