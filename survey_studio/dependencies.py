"""FastAPI dependencies that construct request-scoped collaborators."""

from fastapi import Depends
from sqlalchemy.orm import Session

from survey_studio.config import get_settings
from survey_studio.models.database import get_db
from survey_studio.services.auth import AuthClient
from survey_studio.services.data_client import DataClient
from survey_studio.services.survey_admin import SurveyAdminService


def get_data_client(db: Session = Depends(get_db)) -> DataClient:
    """Data client bound to the request's database session."""
    return DataClient(db)


def get_auth_client(client: DataClient = Depends(get_data_client)) -> AuthClient:
    return AuthClient(client, get_settings())


def get_admin_service(client: DataClient = Depends(get_data_client)) -> SurveyAdminService:
    return SurveyAdminService(client)
