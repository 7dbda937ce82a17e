"""Error taxonomy shared across services and routes."""

from typing import Dict, List, Optional


class SurveyStudioError(Exception):
    """Base class for all application errors."""
    pass


class NotFoundError(SurveyStudioError):
    """Raised when a survey is missing, or not active for a public route."""
    pass


class ValidationError(SurveyStudioError):
    """Raised on a schema violation or a missing required answer.

    Attributes:
        violations: Dotted field path -> human-readable messages
        missing_questions: Texts of required questions left unanswered
    """

    def __init__(
        self,
        message: str,
        violations: Optional[Dict[str, List[str]]] = None,
        missing_questions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.violations = violations or {}
        self.missing_questions = missing_questions or []


class PersistenceError(SurveyStudioError):
    """Raised when any backend call fails (network, constraint, auth)."""
    pass
