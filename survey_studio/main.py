"""FastAPI application entry point for Survey Studio.

This module initializes the FastAPI application, sets up logging,
registers routers, and maps application errors to HTTP responses.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from survey_studio import __version__
from survey_studio.config import get_settings
from survey_studio.errors import NotFoundError, PersistenceError, ValidationError
from survey_studio.logging_config import setup_logging, get_logger
from survey_studio.models.database import Base, get_engine
from survey_studio.routes import admin, health, public

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Startup:
    - Configure logging
    - Create missing tables
    - Log application startup information

    Shutdown:
    - Log shutdown event
    """
    settings = get_settings()
    setup_logging()
    Base.metadata.create_all(get_engine())

    logger.info(
        f"Survey Studio starting - "
        f"Environment: {settings.environment}, "
        f"Log Level: {settings.log_level}, "
        f"Database: {settings.database_url.split('@')[-1] if '@' in settings.database_url else 'configured'}, "
        f"Version: {settings.git_commit_sha}"
    )

    yield

    logger.info("Survey Studio shutting down")


app = FastAPI(
    title="Survey Studio",
    description="Survey authoring, anonymous response collection and analytics",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Tag each request with an id, echoed back in X-Request-ID."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    logger.debug(
        f"{request.method} {request.url.path}",
        extra={"request_id": request_id}
    )
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/")
async def root() -> dict:
    """Root endpoint with basic API information."""
    settings = get_settings()
    return {
        "service": "Survey Studio",
        "version": __version__,
        "environment": settings.environment,
        "status": "operational"
    }


app.include_router(health.router, tags=["Health"])
app.include_router(public.router, tags=["Survey"])
app.include_router(admin.router, tags=["Admin"])


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not found",
            "message": "The survey you're looking for doesn't exist or is not currently active."
        }
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Validation problems are shown inline next to the form, never fatal."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation failed",
            "message": exc.message,
            "violations": exc.violations,
            "missing_questions": exc.missing_questions,
        }
    )


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error(f"Backend failure for {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={
            "error": "Service unavailable",
            "message": "Could not reach the survey store. Please try again later."
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions.

    Logs all unhandled exceptions and returns a generic error response
    to prevent leaking sensitive information.
    """
    logger.error(
        f"Unhandled exception for {request.method} {request.url}: {exc}",
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later."
        }
    )
