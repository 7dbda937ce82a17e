"""Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import os
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set required environment variables for tests BEFORE importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test_secret_key_for_testing_only")
os.environ.setdefault("SESSION_TOKEN_SALT", "test_salt_for_hashing_tokens")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("ADMIN_PASSWORD", "correct-horse")
os.environ.setdefault("ENVIRONMENT", "development")

from survey_studio.models.database import Base, get_db
from survey_studio.schemas.survey import SurveyWithQuestionsIn
from survey_studio.services.data_client import DataClient
from survey_studio.services.survey_admin import SurveyAdminService

ADMIN_EMAIL = os.environ["ADMIN_EMAIL"]
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine with SQLite in-memory database.

    Yields:
        Engine: SQLAlchemy engine for testing

    Note:
        StaticPool keeps a single connection so the API test client, which
        runs requests on another thread, sees the same in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign key support for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine) -> sessionmaker:
    return sessionmaker(
        bind=db_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a test database session.

    Yields:
        Session: SQLAlchemy session for testing
    """
    session = session_factory()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def data_client(db_session) -> DataClient:
    """Data client over the test session."""
    return DataClient(db_session)


@pytest.fixture
def admin_service(data_client) -> SurveyAdminService:
    return SurveyAdminService(data_client)


def survey_payload(**overrides) -> dict:
    """Valid editor payload with three questions; override any field."""
    payload = {
        "title": "Team Feedback",
        "description": "Quarterly pulse check",
        "slug": "team-feedback",
        "status": "active",
        "questions": [
            {
                "question_text": "What is your name?",
                "question_type": "short_answer",
                "required": True,
            },
            {
                "question_text": "Favorite color?",
                "question_type": "multiple_choice",
                "options": ["Red", "Blue", "Green"],
                "required": True,
            },
            {
                "question_text": "Anything else?",
                "question_type": "long_answer",
                "required": False,
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload_factory() -> Callable:
    """Factory for valid editor payloads (see survey_payload)."""
    return survey_payload


@pytest.fixture
def make_survey(admin_service) -> Callable:
    """Factory creating a stored survey from an editor payload.

    Usage:
        survey = make_survey(status="draft", slug="other")
    """
    def _make(**overrides):
        data = SurveyWithQuestionsIn.model_validate(survey_payload(**overrides))
        return admin_service.create_survey(data, created_by=ADMIN_EMAIL)

    return _make


@pytest.fixture
def api_client(session_factory) -> Generator[TestClient, None, None]:
    """FastAPI test client wired to the test database."""
    from survey_studio.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app, raise_server_exceptions=False)

    yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(api_client) -> dict:
    """Authorization header for a signed-in admin."""
    response = api_client.post(
        "/admin/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]
    # Keep cookie auth out of the picture so header-less requests are anonymous
    api_client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}
