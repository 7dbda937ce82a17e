"""Admin survey management.

Creates, edits, publishes and deletes surveys. Saving a survey rewrites its
whole question list: existing questions are deleted and the submitted ones
inserted with order_index renumbered from 0.
"""

from datetime import datetime, timezone
from typing import Optional

from survey_studio.errors import PersistenceError
from survey_studio.models.response import Response
from survey_studio.models.survey import Question, Survey
from survey_studio.schemas.survey import SurveyStatus, SurveyWithQuestionsIn
from survey_studio.services.data_client import DataClient
from survey_studio.logging_config import get_logger

logger = get_logger(__name__)


def question_rows(survey_id: str, data: SurveyWithQuestionsIn) -> list[dict]:
    """Question rows for a survey, in submitted order with dense indexes."""
    return [
        {
            "survey_id": survey_id,
            "question_text": question.question_text,
            "question_type": question.question_type.value,
            "options": question.options,
            "required": question.required,
            "order_index": index,
        }
        for index, question in enumerate(data.questions)
    ]


class SurveyAdminService:
    """Survey CRUD for administrators.

    Every method is a sequence of independent data-client calls; a failure
    partway through (e.g. questions rejected after the survey row was saved)
    leaves the earlier writes in place.
    """

    def __init__(self, client: DataClient):
        self.client = client

    def list_surveys(self) -> list[Survey]:
        """All surveys, newest first."""
        return self.client.select(Survey, order_by="created_at", descending=True)

    def get_survey(self, survey_id: str) -> Survey:
        """Survey with its questions in display order.

        Raises:
            NotFoundError: If the survey doesn't exist
        """
        return self.client.fetch_one(Survey, {"id": survey_id}, with_children=("questions",))

    def create_survey(self, data: SurveyWithQuestionsIn, created_by: Optional[str] = None) -> Survey:
        """Create a survey and its questions.

        Raises:
            PersistenceError: If either write fails (e.g. duplicate slug)
        """
        survey = self.client.insert(Survey, [{
            "title": data.title,
            "description": data.description,
            "slug": data.slug,
            "status": data.status.value,
            "start_date": data.start_date,
            "end_date": data.end_date,
            "created_by": created_by or "Unknown User",
        }])[0]

        self.client.insert(Question, question_rows(survey.id, data))

        logger.info(
            f"Created survey '{survey.slug}' with {len(data.questions)} questions",
            extra={"survey_id": survey.id}
        )
        return self.get_survey(survey.id)

    def update_survey(self, survey_id: str, data: SurveyWithQuestionsIn) -> Survey:
        """Update survey fields and replace its questions.

        Raises:
            NotFoundError: If the survey doesn't exist
            PersistenceError: If any write fails
        """
        self.client.fetch_one(Survey, {"id": survey_id})

        self.client.update(Survey, {"id": survey_id}, {
            "title": data.title,
            "description": data.description,
            "slug": data.slug,
            "status": data.status.value,
            "start_date": data.start_date,
            "end_date": data.end_date,
            "updated_at": datetime.now(timezone.utc),
        })

        self.client.delete(Question, {"survey_id": survey_id})
        self.client.insert(Question, question_rows(survey_id, data))

        logger.info(
            f"Updated survey '{data.slug}' with {len(data.questions)} questions",
            extra={"survey_id": survey_id}
        )
        return self.get_survey(survey_id)

    def set_status(self, survey_id: str, status: SurveyStatus) -> Survey:
        """Publish, close or return a survey to draft.

        Raises:
            NotFoundError: If the survey doesn't exist
        """
        self.client.fetch_one(Survey, {"id": survey_id})
        self.client.update(Survey, {"id": survey_id}, {
            "status": status.value,
            "updated_at": datetime.now(timezone.utc),
        })
        logger.info(f"Survey status set to {status.value}", extra={"survey_id": survey_id})
        return self.get_survey(survey_id)

    def delete_survey(self, survey_id: str) -> None:
        """Delete a survey with its questions, responses and answers.

        Raises:
            NotFoundError: If the survey doesn't exist
        """
        self.client.fetch_one(Survey, {"id": survey_id})
        deleted = self.client.delete(Survey, {"id": survey_id})
        if deleted != 1:
            raise PersistenceError(f"Expected to delete one survey, deleted {deleted}")
        logger.info("Deleted survey", extra={"survey_id": survey_id})

    def list_responses(self, survey_id: str) -> list[Response]:
        """Every response with its answers, newest first."""
        return self.client.select(
            Response,
            {"survey_id": survey_id},
            order_by="submitted_at",
            descending=True,
            with_children=("answers",),
        )
