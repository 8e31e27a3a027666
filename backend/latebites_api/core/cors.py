"""
CORS configuration for the web app.

The web app calls the API with the session cookie, so origins must be listed
explicitly (no wildcard) and credentials allowed.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from latebites_shared.config.settings import settings


# Local Next.js dev server
DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


def get_cors_origins() -> list[str]:
    """Origins from ALLOWED_ORIGINS (comma-separated), else the local web app."""
    configured = [origin.strip() for origin in settings.allowed_origins.split(",")]
    return [origin for origin in configured if origin] or DEFAULT_CORS_ORIGINS


def configure_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID", "Accept"],
        expose_headers=["X-Request-ID"],
        # Preflights are not cached while developing
        max_age=0 if settings.environment == "development" else 600,
    )
