"""Pydantic schemas for taker answers and response submissions.

Inside the application an answer is one of three tagged payloads; the
two-column storage form only exists at the database edge
(see services.answer_codec).
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TextAnswer(BaseModel):
    """Free-text answer (short_answer, long_answer)."""
    kind: Literal["text"] = "text"
    value: str


class ChoiceAnswer(BaseModel):
    """Selected value(s) for multiple_choice and likert_scale questions."""
    kind: Literal["choice"] = "choice"
    values: list[str]


class FileRefAnswer(BaseModel):
    """Reference to a chosen file by name; no bytes are transported."""
    kind: Literal["file"] = "file"
    name: str


AnswerPayload = Annotated[
    Union[TextAnswer, ChoiceAnswer, FileRefAnswer],
    Field(discriminator="kind"),
]

# What a taker's form holds for one question before encoding
RawAnswer = Union[str, list[str], None]


class ResponseSubmission(BaseModel):
    """Body of POST /survey/{slug}/responses.

    Attributes:
        answers: Question id -> answer value (string or list of strings)
    """
    answers: dict[str, RawAnswer] = Field(default_factory=dict)


class AnswerRead(BaseModel):
    """Stored answer with its decoded display value."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    question_id: str
    answer_text: Optional[str] = None
    answer_choice: Optional[str] = None
    file_url: Optional[str] = None
    display_value: str = ""


class ResponseRead(BaseModel):
    """Stored response with its answers."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    survey_id: str
    participant_id: Optional[str] = None
    submitted_at: datetime
    answers: list[AnswerRead] = Field(default_factory=list)
