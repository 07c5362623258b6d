"""Shared test fixtures and configuration."""
import io
from datetime import datetime, timezone, timedelta

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.models import CheckIn, Contact, Event, Invite
from app.db.session import enable_sqlite_foreign_keys
from app.api.deps import get_db
from app.core.security import create_access_token


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    from app.core.rate_limit import limiter

    # Check if this is a rate limiting test (marked with @pytest.mark.rate_limit)
    if "rate_limit" in request.keywords:
        limiter.reset()
        yield
        limiter.reset()
    else:
        limiter.enabled = False
        yield
        limiter.enabled = True


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a new database session for a test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with a test database."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token():
    """Generate a valid organizer JWT token."""
    return create_access_token({"is_admin": True})


@pytest.fixture
def admin_client(client, admin_token):
    """Create a test client with the organizer cookie already set."""
    client.cookies.set("admin_token", admin_token)
    return client


def make_image_bytes(width=200, height=100, color=(200, 30, 30), image_format="PNG"):
    """Encode a solid-colour image."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def background_png():
    return make_image_bytes(400, 200)


@pytest.fixture
def event(db_session):
    """An upcoming event without a card background."""
    event = Event(
        title="Spring Gala",
        date=datetime.now(timezone.utc) + timedelta(days=7),
    )
    db_session.add(event)
    db_session.commit()
    db_session.refresh(event)
    return event


@pytest.fixture
def contact(db_session):
    contact = Contact(name="Ada Lovelace", email="ada@example.com")
    db_session.add(contact)
    db_session.commit()
    db_session.refresh(contact)
    return contact


@pytest.fixture
def make_invite(db_session):
    """Factory for invites on an event, optionally with prior check-ins."""
    def _make(event, contact=None, max_checkins=None, contact_name=None, checkins=0):
        invite = Invite(
            event=event,
            contact=contact,
            contact_name=contact_name if contact_name is not None else (contact.name if contact else None),
            max_checkins=max_checkins,
        )
        for i in range(checkins):
            invite.checkins.append(
                CheckIn(created=datetime.now(timezone.utc) - timedelta(minutes=checkins - i))
            )
        db_session.add(invite)
        db_session.commit()
        db_session.refresh(invite)
        return invite

    return _make


@pytest.fixture
def image_bytes():
    """Factory fixture wrapping make_image_bytes."""
    return make_image_bytes
