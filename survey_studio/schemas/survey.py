"""Pydantic schemas for authored surveys.

These schemas define the shape of surveys and questions submitted by
administrators, and the rules every admin write must satisfy. Messages are
written for display next to the offending form field.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    computed_field,
    field_validator,
)

SLUG_PATTERN = re.compile(r'^[a-z0-9-]+$')
TITLE_MAX_LENGTH = 200

# Fixed five-point scale offered for likert_scale questions
LIKERT_SCALE = (
    "Strongly Disagree",
    "Disagree",
    "Neutral",
    "Agree",
    "Strongly Agree",
)


class SurveyStatus(str, Enum):
    """Publication status of a survey."""
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class QuestionType(str, Enum):
    """Valid question types."""
    SHORT_ANSWER = "short_answer"
    LONG_ANSWER = "long_answer"
    MULTIPLE_CHOICE = "multiple_choice"
    LIKERT_SCALE = "likert_scale"
    FILE_UPLOAD = "file_upload"

    @property
    def is_choice(self) -> bool:
        """Choice-like types store JSON in answer_choice and are charted."""
        return self in (QuestionType.MULTIPLE_CHOICE, QuestionType.LIKERT_SCALE)


class QuestionIn(BaseModel):
    """A question as submitted by the survey editor.

    Attributes:
        question_text: Prompt shown to the taker
        question_type: Question type
        options: Choices for multiple_choice questions (ignored otherwise)
        required: Whether the taker must answer before moving on
        order_index: Position hint; the editor renumbers on save
    """
    question_text: str
    question_type: QuestionType
    options: Optional[list[str]] = Field(default=None, validate_default=True)
    required: bool = False
    order_index: int = Field(default=0, ge=0)

    @field_validator('question_text')
    @classmethod
    def question_text_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Question text is required')
        return v

    @field_validator('options')
    @classmethod
    def options_for_multiple_choice(cls, v: Optional[list[str]], info: ValidationInfo) -> Optional[list[str]]:
        """Require at least two non-empty options for multiple choice.

        Blank entries are dropped. Options on other question types are
        cleared.
        """
        if info.data.get('question_type') != QuestionType.MULTIPLE_CHOICE:
            return None

        cleaned = [option for option in (v or []) if option and option.strip()]
        if len(cleaned) < 2:
            raise ValueError('Multiple choice questions must have at least 2 options')
        return cleaned


class SurveyIn(BaseModel):
    """Survey fields editable by an administrator."""
    title: str
    description: Optional[str] = None
    slug: str
    status: SurveyStatus = SurveyStatus.DRAFT
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @field_validator('title')
    @classmethod
    def title_length(cls, v: str) -> str:
        if not v:
            raise ValueError('Title is required')
        if len(v) > TITLE_MAX_LENGTH:
            raise ValueError('Title too long')
        return v

    @field_validator('slug')
    @classmethod
    def slug_url_safe(cls, v: str) -> str:
        if not v:
            raise ValueError('Slug is required')
        if not SLUG_PATTERN.match(v):
            raise ValueError('Slug must contain only lowercase letters, numbers, and hyphens')
        return v


class SurveyWithQuestionsIn(SurveyIn):
    """Complete editor payload: survey fields plus its ordered questions."""
    questions: list[QuestionIn]

    @field_validator('questions')
    @classmethod
    def at_least_one_question(cls, v: list[QuestionIn]) -> list[QuestionIn]:
        if not v:
            raise ValueError('At least one question is required')
        return v


class StatusUpdate(BaseModel):
    """Payload for publishing or closing a survey."""
    status: SurveyStatus


class QuestionRead(BaseModel):
    """Question as returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    survey_id: str
    question_text: str
    question_type: QuestionType
    options: Optional[list[str]] = None
    order_index: int
    required: bool

    @computed_field
    @property
    def choices(self) -> list[str]:
        """Choices the taker picks from (likert uses the fixed scale)."""
        if self.question_type == QuestionType.LIKERT_SCALE:
            return list(LIKERT_SCALE)
        return list(self.options or [])


class SurveyRead(BaseModel):
    """Survey summary as returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    slug: str
    status: SurveyStatus
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    created_by: Optional[str] = None


class SurveyDetail(SurveyRead):
    """Survey with its questions in display order."""
    questions: list[QuestionRead] = Field(default_factory=list)
