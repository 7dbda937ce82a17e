"""Public survey endpoints for anonymous takers.

Only surveys whose status is ``active`` are visible here; drafts and closed
surveys answer 404 exactly like a missing slug.
"""

from fastapi import APIRouter, Depends, HTTPException

from survey_studio.errors import PersistenceError
from survey_studio.dependencies import get_data_client
from survey_studio.schemas.answers import ResponseSubmission
from survey_studio.schemas.survey import SurveyDetail
from survey_studio.services.data_client import DataClient
from survey_studio.services.survey_engine import SurveyTakingSession, load_active_survey
from survey_studio.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/survey/{slug}", response_model=SurveyDetail)
async def get_public_survey(slug: str, client: DataClient = Depends(get_data_client)):
    """Load an active survey with its questions in display order."""
    survey = load_active_survey(client, slug)
    return SurveyDetail.model_validate(survey)


@router.post("/survey/{slug}/responses", status_code=201)
async def submit_response(
    slug: str,
    submission: ResponseSubmission,
    client: DataClient = Depends(get_data_client),
) -> dict:
    """Submit a completed survey.

    Flow:
    1. Load the active survey (404 if missing or not active)
    2. Buffer every submitted answer
    3. Check all required questions (422 listing every missing one)
    4. Store the response, then its answers

    A failed write answers 502 and nothing about the taker's answers is
    lost on their side; they can submit again.
    """
    taker = SurveyTakingSession(client)
    taker.load(slug)

    for question_id, value in submission.answers.items():
        taker.record_answer(question_id, value)

    try:
        response = taker.submit()
    except PersistenceError as e:
        logger.error(f"Submission failed for survey '{slug}': {e}")
        raise HTTPException(
            status_code=502,
            detail="Failed to submit survey. Please try again."
        )

    return {
        "response_id": response.id,
        "survey_id": response.survey_id,
        "submitted_at": response.submitted_at,
        "answer_count": len(taker.encode_answers()),
    }
