"""Database models and session management.

This package contains all SQLAlchemy ORM models and database utilities.
"""

from survey_studio.models.database import (
    Base,
    create_db_engine,
    get_db,
    get_engine,
    get_session_factory,
)
from survey_studio.models.survey import Survey, Question
from survey_studio.models.response import Response, Answer
from survey_studio.models.admin_session import AdminSession

__all__ = [
    "Base",
    "create_db_engine",
    "get_db",
    "get_engine",
    "get_session_factory",
    "Survey",
    "Question",
    "Response",
    "Answer",
    "AdminSession",
]
