"""
Infrastructure module.

Contains:
- db: Engine, session factory and FastAPI session dependency
- correlation: Request correlation IDs for logging
"""

from .db import engine, SessionLocal, get_db, get_db_context, safe_commit
from .correlation import CorrelationIdMiddleware, CorrelationIdFilter, get_request_id

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "safe_commit",
    "CorrelationIdMiddleware",
    "CorrelationIdFilter",
    "get_request_id",
]
