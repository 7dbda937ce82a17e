"""Admin session verification for FastAPI routes.

Every admin route checks for an active session before doing anything else.
The session token is read from an ``Authorization: Bearer`` header, or from
the ``admin_session`` cookie set at sign-in.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request

from survey_studio.dependencies import get_auth_client
from survey_studio.models.admin_session import AdminSession
from survey_studio.services.auth import AuthClient
from survey_studio.logging_config import get_logger

logger = get_logger(__name__)

SESSION_COOKIE = "admin_session"


def extract_token(request: Request) -> Optional[str]:
    """Pull the session token from the request, header first.

    Args:
        request: FastAPI request object

    Returns:
        Token string, or None if the request carries none
    """
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(SESSION_COOKIE) or None


async def require_admin(
    request: Request,
    auth: AuthClient = Depends(get_auth_client),
) -> AdminSession:
    """FastAPI dependency gating admin routes on an active session.

    Raises:
        HTTPException(401): If no valid session is presented

    Usage:
        @router.get("/admin/surveys")
        async def list_surveys(admin: AdminSession = Depends(require_admin)):
            ...
    """
    token = extract_token(request)
    session = auth.get_session(token)
    if session is None:
        client_ip = request.client.host if request.client else "unknown"
        logger.info(
            f"Unauthenticated admin request from IP: {client_ip}",
            extra={"client_ip": client_ip, "path": request.url.path}
        )
        raise HTTPException(
            status_code=401,
            detail="Admin sign-in required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session
