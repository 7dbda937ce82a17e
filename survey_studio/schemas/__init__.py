"""Pydantic schemas for data validation.

This package contains all Pydantic models for surveys, answers and admin
sign-in.
"""

from survey_studio.schemas.survey import (
    LIKERT_SCALE,
    SurveyStatus,
    QuestionType,
    QuestionIn,
    SurveyIn,
    SurveyWithQuestionsIn,
    StatusUpdate,
    QuestionRead,
    SurveyRead,
    SurveyDetail,
)
from survey_studio.schemas.answers import (
    TextAnswer,
    ChoiceAnswer,
    FileRefAnswer,
    AnswerPayload,
    RawAnswer,
    ResponseSubmission,
    AnswerRead,
    ResponseRead,
)
from survey_studio.schemas.auth import LoginForm, SessionRead

__all__ = [
    "LIKERT_SCALE",
    "SurveyStatus",
    "QuestionType",
    "QuestionIn",
    "SurveyIn",
    "SurveyWithQuestionsIn",
    "StatusUpdate",
    "QuestionRead",
    "SurveyRead",
    "SurveyDetail",
    "TextAnswer",
    "ChoiceAnswer",
    "FileRefAnswer",
    "AnswerPayload",
    "RawAnswer",
    "ResponseSubmission",
    "AnswerRead",
    "ResponseRead",
    "LoginForm",
    "SessionRead",
]
