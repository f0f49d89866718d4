"""Pytest fixtures — SQLite database for fast, isolated tests."""
import os
from datetime import datetime, timezone, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.auth import create_access_token
from app.database import Base, get_db
from app.main import app

# Import all models so they register with Base.metadata
from app.models.user import User                  # noqa: F401
from app.models.event import Event, Task          # noqa: F401
from app.models.attendee import EventAttendee     # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def auth_headers(user_id: int) -> dict:
    """Bearer header identifying ``user_id`` as the caller."""
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def future_date(days: int = 7, hours: int = 0) -> str:
    """RFC3339 timestamp ``days`` days from now, whole seconds, UTC."""
    when = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(days=days, hours=hours)
    return when.strftime("%Y-%m-%dT%H:%M:%SZ")


def create_test_user(client: TestClient, name: str = "alice") -> dict:
    """Helper — POST /api/users and return response JSON."""
    resp = client.post("/api/users/", json={"username": name, "email": f"{name}@example.com"})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_event(client: TestClient, organizer_id: int, title: str = "Test Event",
                      date: str = None, description: str = "", location: str = "") -> dict:
    """Helper — POST /api/events as ``organizer_id`` and return response JSON."""
    resp = client.post("/api/events/", headers=auth_headers(organizer_id), json={
        "title": title,
        "description": description,
        "location": location,
        "date": date or future_date(),
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_task(client: TestClient, organizer_id: int, event_id: int,
                     title: str = "Test Task", description: str = "") -> dict:
    """Helper — POST /api/events/{id}/tasks and return response JSON."""
    resp = client.post(f"/api/events/{event_id}/tasks", headers=auth_headers(organizer_id), json={
        "title": title,
        "description": description,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def invite(client: TestClient, inviter_id: int, event_id: int, user_id: int, role: str = "attendee"):
    return client.post(f"/api/events/{event_id}/invite", headers=auth_headers(inviter_id), json={
        "user_id": user_id,
        "role": role,
    })
