"""Administrator endpoints: sign-in, survey management, results.

Every route except login requires an active admin session
(see middleware.admin_auth.require_admin).
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse

from survey_studio.config import get_settings
from survey_studio.dependencies import get_admin_service, get_auth_client
from survey_studio.middleware.admin_auth import SESSION_COOKIE, extract_token, require_admin
from survey_studio.models.admin_session import AdminSession
from survey_studio.schemas.answers import AnswerRead, ResponseRead
from survey_studio.schemas.auth import SessionRead
from survey_studio.schemas.survey import StatusUpdate, SurveyDetail, SurveyRead
from survey_studio.services.analytics import build_analytics
from survey_studio.services.answer_codec import decode, display_value
from survey_studio.services.auth import AuthClient, AuthError
from survey_studio.services.csv_export import csv_filename, export_responses_csv
from survey_studio.services.survey_admin import SurveyAdminService
from survey_studio.services.survey_loader import SurveyLoader, get_survey_loader
from survey_studio.services.survey_validator import SurveyFormValidator
from survey_studio.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/admin")


@router.post("/login", response_model=SessionRead)
async def login(
    response: Response,
    payload: dict[str, Any] = Body(...),
    auth: AuthClient = Depends(get_auth_client),
):
    """Sign in and receive a session token (also set as a cookie)."""
    form = SurveyFormValidator.validate_login(payload)
    try:
        token, session = auth.sign_in(form.email, form.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))

    response.set_cookie(
        SESSION_COOKIE,
        token,
        httponly=True,
        samesite="lax",
        secure=get_settings().is_production,
        max_age=get_settings().session_ttl_hours * 3600,
    )
    return SessionRead(access_token=token, email=session.email, expires_at=session.expires_at)


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    auth: AuthClient = Depends(get_auth_client),
    admin: AdminSession = Depends(require_admin),
) -> dict:
    auth.sign_out(extract_token(request))
    response.delete_cookie(SESSION_COOKIE)
    return {"signed_out": True}


@router.get("/surveys", response_model=list[SurveyRead])
async def list_surveys(
    admin: AdminSession = Depends(require_admin),
    service: SurveyAdminService = Depends(get_admin_service),
):
    """All surveys, newest first."""
    return [SurveyRead.model_validate(survey) for survey in service.list_surveys()]


@router.post("/surveys", response_model=SurveyDetail, status_code=201)
async def create_survey(
    payload: dict[str, Any] = Body(...),
    admin: AdminSession = Depends(require_admin),
    service: SurveyAdminService = Depends(get_admin_service),
):
    """Create a survey with its questions.

    Returns 422 with every field violation if the payload is invalid.
    """
    data = SurveyFormValidator.validate_survey(payload)
    survey = service.create_survey(data, created_by=admin.email)
    return SurveyDetail.model_validate(survey)


@router.get("/surveys/{survey_id}", response_model=SurveyDetail)
async def get_survey(
    survey_id: str,
    admin: AdminSession = Depends(require_admin),
    service: SurveyAdminService = Depends(get_admin_service),
):
    return SurveyDetail.model_validate(service.get_survey(survey_id))


@router.put("/surveys/{survey_id}", response_model=SurveyDetail)
async def update_survey(
    survey_id: str,
    payload: dict[str, Any] = Body(...),
    admin: AdminSession = Depends(require_admin),
    service: SurveyAdminService = Depends(get_admin_service),
):
    """Update a survey and replace its questions."""
    data = SurveyFormValidator.validate_survey(payload)
    return SurveyDetail.model_validate(service.update_survey(survey_id, data))


@router.patch("/surveys/{survey_id}/status", response_model=SurveyDetail)
async def set_survey_status(
    survey_id: str,
    update: StatusUpdate,
    admin: AdminSession = Depends(require_admin),
    service: SurveyAdminService = Depends(get_admin_service),
):
    return SurveyDetail.model_validate(service.set_status(survey_id, update.status))


@router.delete("/surveys/{survey_id}", status_code=204)
async def delete_survey(
    survey_id: str,
    admin: AdminSession = Depends(require_admin),
    service: SurveyAdminService = Depends(get_admin_service),
) -> Response:
    service.delete_survey(survey_id)
    return Response(status_code=204)


@router.get("/surveys/{survey_id}/responses", response_model=list[ResponseRead])
async def list_responses(
    survey_id: str,
    admin: AdminSession = Depends(require_admin),
    service: SurveyAdminService = Depends(get_admin_service),
):
    """Responses newest first, each answer with its decoded display value."""
    service.get_survey(survey_id)
    results = []
    for response in service.list_responses(survey_id):
        answers = [
            AnswerRead.model_validate(answer).model_copy(update={
                "display_value": display_value(decode(answer.answer_text, answer.answer_choice)),
            })
            for answer in response.answers
        ]
        results.append(
            ResponseRead.model_validate(response).model_copy(update={"answers": answers})
        )
    return results


@router.get("/surveys/{survey_id}/analytics")
async def survey_analytics(
    survey_id: str,
    admin: AdminSession = Depends(require_admin),
    service: SurveyAdminService = Depends(get_admin_service),
) -> dict:
    """Totals, seven-day response counts and per-question distributions."""
    survey = service.get_survey(survey_id)
    responses = service.list_responses(survey_id)
    analytics = build_analytics(survey.questions, responses)
    return {"survey_id": survey.id, **asdict(analytics)}


@router.get("/surveys/{survey_id}/export.csv")
async def export_csv(
    survey_id: str,
    include_metadata: bool = False,
    admin: AdminSession = Depends(require_admin),
    service: SurveyAdminService = Depends(get_admin_service),
) -> PlainTextResponse:
    """Download every response as CSV."""
    survey = service.get_survey(survey_id)
    responses = service.list_responses(survey_id)
    content = export_responses_csv(survey.questions, responses, include_metadata=include_metadata)

    logger.info(f"Exported {len(responses)} responses", extra={"survey_id": survey.id})
    return PlainTextResponse(
        content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{csv_filename(survey.slug)}"'},
    )


@router.get("/definitions")
async def list_definitions(
    admin: AdminSession = Depends(require_admin),
    loader: SurveyLoader = Depends(get_survey_loader),
) -> dict:
    """Names of the YAML survey definitions available for import."""
    return {"definitions": loader.list_definitions()}


@router.post("/definitions/{name}/import", response_model=SurveyDetail, status_code=201)
async def import_definition(
    name: str,
    admin: AdminSession = Depends(require_admin),
    service: SurveyAdminService = Depends(get_admin_service),
    loader: SurveyLoader = Depends(get_survey_loader),
):
    """Create a survey from a YAML definition.

    Returns 404 if the definition doesn't exist and 422 if it fails the
    survey editor's rules.
    """
    survey = loader.import_definition(service, name, created_by=admin.email)
    logger.info(f"Imported survey definition '{name}'", extra={"survey_id": survey.id})
    return SurveyDetail.model_validate(survey)
