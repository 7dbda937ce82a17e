"""Answer codec between in-memory answers and their two-column storage form.

Free-text and file questions store the raw string in ``answer_text``.
Choice-like questions (multiple_choice, likert_scale) store a JSON array of
the selected values in ``answer_choice``. Exactly one column is populated.
"""

import json
from dataclasses import dataclass
from typing import Optional, Union

from survey_studio.errors import ValidationError
from survey_studio.schemas.answers import (
    AnswerPayload,
    ChoiceAnswer,
    FileRefAnswer,
    RawAnswer,
    TextAnswer,
)
from survey_studio.schemas.survey import QuestionType
from survey_studio.logging_config import get_logger

logger = get_logger(__name__)

DecodedAnswer = Union[str, list[str], None]


@dataclass
class StoredAnswer:
    """Storage form of one answer.

    Attributes:
        answer_text: Raw text for free-text and file questions
        answer_choice: JSON array for choice questions
    """
    answer_text: Optional[str]
    answer_choice: Optional[str]

    def as_row(self) -> dict:
        return {"answer_text": self.answer_text, "answer_choice": self.answer_choice}


def is_answered(value: RawAnswer) -> bool:
    """Check whether a buffered value counts as an answer.

    ``None``, the empty string and a selection with no non-empty entry are
    all "no answer".
    Any other string, including ``"0"`` and ``"false"``, is an answer.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return any(item for item in value)


def to_payload(question_type: QuestionType, value: RawAnswer) -> AnswerPayload:
    """Tag a raw form value according to its question type.

    Args:
        question_type: Type of the question being answered
        value: String, or list of strings for multi-select

    Returns:
        TextAnswer, ChoiceAnswer or FileRefAnswer

    Raises:
        ValidationError: If the value's shape doesn't fit the question type
    """
    question_type = QuestionType(question_type)

    if value is None:
        value = "" if not question_type.is_choice else []

    if question_type.is_choice:
        values = [value] if isinstance(value, str) else list(value)
        values = [item for item in values if item]
        return ChoiceAnswer(values=values)

    if not isinstance(value, str):
        raise ValidationError(
            f"A {question_type.value} answer must be a single text value"
        )

    if question_type == QuestionType.FILE_UPLOAD:
        return FileRefAnswer(name=value)

    return TextAnswer(value=value)


def encode_payload(payload: AnswerPayload) -> StoredAnswer:
    """Serialize a tagged payload into its storage columns."""
    if isinstance(payload, ChoiceAnswer):
        return StoredAnswer(
            answer_text=None,
            answer_choice=json.dumps(payload.values, ensure_ascii=False, separators=(",", ":")),
        )
    if isinstance(payload, FileRefAnswer):
        return StoredAnswer(answer_text=payload.name, answer_choice=None)
    return StoredAnswer(answer_text=payload.value, answer_choice=None)


def encode(question_type: QuestionType, value: RawAnswer) -> StoredAnswer:
    """Encode a form value for storage.

    Example:
        >>> encode(QuestionType.SHORT_ANSWER, "hello")
        StoredAnswer(answer_text='hello', answer_choice=None)
        >>> encode(QuestionType.LIKERT_SCALE, ["Agree"])
        StoredAnswer(answer_text=None, answer_choice='["Agree"]')
    """
    return encode_payload(to_payload(question_type, value))


def decode(answer_text: Optional[str], answer_choice: Optional[str]) -> DecodedAnswer:
    """Decode stored columns back into a value.

    Non-empty ``answer_text`` wins. Otherwise ``answer_choice`` is parsed as
    JSON: a one-element array yields the scalar, a longer array the list.

    Returns:
        String, list of strings, or None when nothing was stored
    """
    if answer_text:
        return answer_text

    if not answer_choice:
        return None

    try:
        parsed = json.loads(answer_choice)
    except json.JSONDecodeError:
        logger.warning(f"answer_choice is not valid JSON, using raw text: {answer_choice[:50]}")
        return answer_choice

    if isinstance(parsed, list):
        if not parsed:
            return None
        if len(parsed) == 1:
            return str(parsed[0])
        return [str(item) for item in parsed]

    if parsed is None:
        return None
    return str(parsed)


def first_value(decoded: DecodedAnswer) -> Optional[str]:
    """Single display key for a decoded answer (first element if multi)."""
    if isinstance(decoded, list):
        return decoded[0] if decoded else None
    return decoded


def display_value(decoded: DecodedAnswer) -> str:
    """Flatten a decoded answer into one cell of text."""
    if decoded is None:
        return ""
    if isinstance(decoded, list):
        return ", ".join(decoded)
    return decoded
