"""Survey-taking engine.

Walks a taker through an active survey one question at a time, buffers their
answers, gates forward navigation on required questions, and writes the
finished response through the data client.
"""

import math
from enum import Enum
from typing import Any, Optional

from survey_studio.errors import NotFoundError, PersistenceError, ValidationError
from survey_studio.models.response import Answer, Response
from survey_studio.models.survey import Question, Survey
from survey_studio.schemas.answers import RawAnswer
from survey_studio.schemas.survey import SurveyStatus
from survey_studio.services.answer_codec import encode, is_answered
from survey_studio.services.data_client import DataClient
from survey_studio.logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_QUESTION_MESSAGE = "Please answer this required question before continuing"


class TakerState(str, Enum):
    """Lifecycle of a survey-taking session."""
    LOADING = "loading"
    READY = "ready"
    SUBMITTED = "submitted"
    ERROR = "error"


def load_active_survey(client: DataClient, slug: str) -> Survey:
    """Load a publicly answerable survey with its ordered questions.

    Raises:
        NotFoundError: If no survey has this slug or it isn't active
        PersistenceError: If the backend call fails
    """
    try:
        return client.fetch_one(
            Survey,
            {"slug": slug, "status": SurveyStatus.ACTIVE.value},
            with_children=("questions",),
        )
    except NotFoundError:
        logger.info(f"No active survey for slug '{slug}'")
        raise NotFoundError("Survey not found or not active")


class SurveyTakingSession:
    """Single-question-at-a-time flow over a survey's questions.

    Attributes:
        state: Current TakerState
        survey: Loaded survey (None until loaded)
        questions: Questions in display order
        current_index: Index of the visible question
        answers: Question id -> buffered answer value
        error: Pending message for the taker, cleared on navigation
        response: Stored response once submitted

    Example:
        >>> taker = SurveyTakingSession(client)
        >>> taker.load("team-feedback")
        >>> taker.record_answer(taker.current_question.id, "Great")
        >>> taker.advance()
        >>> taker.progress
        100
    """

    def __init__(self, client: DataClient):
        """Initialize an unloaded session.

        Args:
            client: Data client used to load the survey and store the response
        """
        self.client = client
        self.state = TakerState.LOADING
        self.survey: Optional[Survey] = None
        self.questions: list[Question] = []
        self.current_index = 0
        self.answers: dict[str, RawAnswer] = {}
        self.error: Optional[str] = None
        self.response: Optional[Response] = None

    @classmethod
    def for_survey(cls, client: DataClient, survey: Survey) -> "SurveyTakingSession":
        """Start a ready session over an already loaded survey."""
        session = cls(client)
        session._set_survey(survey)
        return session

    def _set_survey(self, survey: Survey) -> None:
        self.survey = survey
        self.questions = sorted(survey.questions, key=lambda q: q.order_index)
        self.current_index = 0
        self.state = TakerState.READY

    def load(self, slug: str) -> Survey:
        """Load the active survey for a slug and become ready.

        Raises:
            NotFoundError: Survey missing or not active (state becomes ERROR)
            PersistenceError: Backend failure (state becomes ERROR)
        """
        try:
            survey = load_active_survey(self.client, slug)
        except (NotFoundError, PersistenceError) as e:
            self.state = TakerState.ERROR
            self.error = str(e)
            raise

        self._set_survey(survey)
        logger.info(
            f"Loaded survey '{slug}' with {len(self.questions)} questions",
            extra={"survey_id": survey.id}
        )
        return survey

    def _require_ready(self) -> None:
        if self.state != TakerState.READY:
            raise ValidationError(f"Survey is not ready (state: {self.state.value})")

    @property
    def current_question(self) -> Optional[Question]:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def is_first(self) -> bool:
        return self.current_index == 0

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.questions) - 1

    @property
    def progress(self) -> int:
        """Percent complete counting the visible question, rounded half up."""
        if not self.questions:
            return 0
        return math.floor((self.current_index + 1) / len(self.questions) * 100 + 0.5)

    def record_answer(self, question_id: str, value: Any) -> None:
        """Overwrite the buffered answer for a question.

        No validation happens here; advance() and submit() check answers.
        """
        self.answers[question_id] = value

    def advance(self) -> None:
        """Move to the next question.

        Raises:
            ValidationError: If the current question is required and
                unanswered; the index is left unchanged
        """
        self._require_ready()
        question = self.current_question
        if question is None:
            return

        if question.required and not is_answered(self.answers.get(question.id)):
            self.error = REQUIRED_QUESTION_MESSAGE
            raise ValidationError(
                REQUIRED_QUESTION_MESSAGE,
                missing_questions=[question.question_text],
            )

        self.error = None
        if not self.is_last:
            self.current_index += 1

    def retreat(self) -> None:
        """Move to the previous question, clearing any pending error."""
        self.error = None
        if self.current_index > 0:
            self.current_index -= 1

    def missing_required(self) -> list[Question]:
        """Required questions whose buffered answer is missing or empty."""
        return [
            question for question in self.questions
            if question.required and not is_answered(self.answers.get(question.id))
        ]

    def encode_answers(self) -> list[dict]:
        """Encode the answer buffer into answer columns keyed by question.

        Buffer entries for questions not in this survey are skipped.
        """
        questions_by_id = {question.id: question for question in self.questions}
        rows = []
        for question_id, value in self.answers.items():
            question = questions_by_id.get(question_id)
            if question is None:
                logger.warning(f"Dropping answer for unknown question {question_id}")
                continue
            stored = encode(question.question_type, value)
            rows.append({
                "question_id": question_id,
                **stored.as_row(),
            })
        return rows

    def submit(self) -> Response:
        """Validate every required question and store the response.

        The response row is created first and its answers second, as two
        separate writes. If the answers fail to save, the response row stays
        behind without answers and the buffer is kept for a retry.

        Returns:
            The stored Response

        Raises:
            ValidationError: Listing every unanswered required question
            PersistenceError: If either write fails
        """
        self._require_ready()

        missing = self.missing_required()
        if missing:
            texts = [question.question_text for question in missing]
            self.error = f"Please answer all required questions: {', '.join(texts)}"
            raise ValidationError(self.error, missing_questions=texts)

        # Encode before writing so a shape error can't orphan a response
        encoded = self.encode_answers()
        self.error = None

        try:
            response = self.client.insert(
                Response,
                [{"survey_id": self.survey.id, "participant_id": None}],
            )[0]
        except PersistenceError as e:
            self.error = str(e)
            raise

        rows = [{"response_id": response.id, **row} for row in encoded]

        try:
            self.client.insert(Answer, rows)
        except PersistenceError as e:
            logger.error(
                f"Answers failed to save; response {response.id} left without answers: {e}",
                extra={"survey_id": self.survey.id, "response_id": response.id}
            )
            self.error = str(e)
            raise

        self.response = response
        self.state = TakerState.SUBMITTED
        logger.info(
            f"Stored response with {len(rows)} answers",
            extra={"survey_id": self.survey.id, "response_id": response.id}
        )
        return response
