"""Routes package for FastAPI endpoints.

This package contains all API route modules for Survey Studio.
"""

from survey_studio.routes import admin, health, public

__all__ = ["admin", "health", "public"]
