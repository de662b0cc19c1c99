"""Shared fixtures.

Required settings are placed in the environment BEFORE the application is
imported. Every test gets its own in-memory SQLite store and a TestClient
whose ``get_session`` dependency is bound to it.
"""

import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin-password")
os.environ.setdefault("SECRET_KEY", "test-jwt-secret-key-256-bits-minimum-length-required")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("MAIL_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import models  # noqa: F401
from core.config import settings
from database import get_session
from main import app
from models.message import Message


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {settings.ADMIN_TOKEN}"}


@pytest.fixture
def make_message(session):
    """Insert a message directly, with an explicit creation time."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _make(index: int = 0, **overrides) -> Message:
        values = {
            "name": f"Sender {index}",
            "email": f"sender{index}@example.com",
            "subject": f"Subject {index}",
            "message": f"Body {index}",
            "created_at": base + timedelta(minutes=index),
        }
        values.update(overrides)
        message = Message(**values)
        session.add(message)
        session.commit()
        session.refresh(message)
        return message

    return _make


@pytest.fixture
def valid_submission():
    return {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "subject": "Hi",
        "message": "Hello there",
    }
