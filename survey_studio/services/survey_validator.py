"""Survey form validation for admin writes.

Runs the survey schemas against raw editor payloads and reports every
violation keyed by field path, so the editor can show each message next to
its field and block saving until all of them clear.
"""

import re
from typing import Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from survey_studio.errors import ValidationError
from survey_studio.schemas.auth import LoginForm
from survey_studio.schemas.survey import SurveyWithQuestionsIn
from survey_studio.logging_config import get_logger

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def collect_violations(error: PydanticValidationError) -> dict[str, list[str]]:
    """Flatten a Pydantic error into field path -> messages.

    Custom rule messages are reported as written, without Pydantic's
    "Value error, " prefix.

    Example:
        >>> collect_violations(err)
        {'questions.0.options': ['Multiple choice questions must have at least 2 options']}
    """
    violations: dict[str, list[str]] = {}
    for item in error.errors():
        path = ".".join(str(part) for part in item["loc"]) or "__root__"
        if item["type"] == "value_error" and "error" in item.get("ctx", {}):
            message = str(item["ctx"]["error"])
        else:
            message = item["msg"]
        violations.setdefault(path, []).append(message)
    return violations


def generate_slug(title: str) -> str:
    """Derive a URL slug from a survey title.

    Example:
        >>> generate_slug("Customer Feedback: Q3!")
        'customer-feedback-q3'
    """
    slug = title.lower()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug.strip())
    slug = re.sub(r'-+', '-', slug)
    return slug


class SurveyFormValidator:
    """Service for validating admin payloads against the survey schemas."""

    @staticmethod
    def _validate(schema: Type[SchemaT], data: dict) -> SchemaT:
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            violations = collect_violations(e)
            logger.info(f"{schema.__name__} rejected: {sorted(violations)}")
            raise ValidationError(
                "Please fix the highlighted fields",
                violations=violations,
            ) from e

    @staticmethod
    def validate_survey(data: dict) -> SurveyWithQuestionsIn:
        """Validate a full editor payload (survey fields plus questions).

        Raises:
            ValidationError: With every violation keyed by field path
        """
        return SurveyFormValidator._validate(SurveyWithQuestionsIn, data)

    @staticmethod
    def validate_login(data: dict) -> LoginForm:
        """Validate admin login credentials shape."""
        return SurveyFormValidator._validate(LoginForm, data)
