"""
Liveness and readiness probes.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from latebites_shared.config.logging import api_logger as logger
from latebites_shared.config.settings import settings
from latebites_shared.infrastructure.db import SessionLocal


router = APIRouter(prefix="/api", tags=["health"])

SERVICE_NAME = "latebites-api"


@router.get("/health")
def health_check():
    """Liveness: the process is up. Does not touch the database."""
    return {"status": "healthy", "service": SERVICE_NAME, "environment": settings.environment}


@router.get("/health/detailed")
def detailed_health_check():
    """Readiness: also runs a trivial query. 503 while the database is unreachable."""
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Readiness check failed", error=str(e))
        return JSONResponse(
            status_code=503,
            content={
                "status": "degraded",
                "service": SERVICE_NAME,
                "environment": settings.environment,
                "dependencies": {"database": {"status": "unhealthy", "error": str(e)}},
            },
        )

    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "environment": settings.environment,
        "dependencies": {"database": {"status": "healthy"}},
    }
