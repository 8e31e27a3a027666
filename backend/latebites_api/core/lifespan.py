"""
Startup and shutdown of the API process.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from latebites_shared.config.logging import api_logger as logger, setup_logging
from latebites_shared.config.settings import settings
from latebites_shared.infrastructure.db import engine
from latebites_api.models import Base


def check_configuration() -> None:
    """
    Log configuration problems; refuse to start in production if there are any.

    Raises:
        RuntimeError: Insecure production configuration.
    """
    problems = settings.validate_production_secrets()
    for problem in problems:
        logger.error("Configuration error", error=problem)
    if problems and settings.environment == "production":
        raise RuntimeError("Refusing to start with insecure configuration: " + "; ".join(problems))


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    check_configuration()

    logger.info("Latebites API starting", port=settings.rest_api_port, env=settings.environment)
    # Tables are created if missing
    Base.metadata.create_all(bind=engine)

    yield

    logger.info("Latebites API stopping")
    engine.dispose()
