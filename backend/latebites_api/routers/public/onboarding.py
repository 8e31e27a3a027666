"""
Onboarding endpoints: profile creation after sign-up and e-mail verification.

Errors use the {"error": message} body the web app expects rather than
FastAPI's {"detail": ...}.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from latebites_shared.config.logging import onboarding_logger as logger
from latebites_shared.config.settings import settings
from latebites_shared.infrastructure.db import get_db
from latebites_shared.security import limiter
from latebites_shared.utils.schemas import OnboardRequest, OnboardResponse, VerifyResponse
from latebites_api.services.domain import OnboardingError, OnboardingService
from latebites_api.services.email import VerificationEmailSender, get_email_sender


router = APIRouter(prefix="/api", tags=["onboarding"])


def _error(err: OnboardingError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content={"error": err.message})


@router.post("/onboard", response_model=OnboardResponse)
@limiter.limit(settings.onboard_rate_limit)
def onboard(
    request: Request,
    body: OnboardRequest,
    db: Session = Depends(get_db),
    sender: VerificationEmailSender = Depends(get_email_sender),
):
    """Create the Customer or Restaurant profile of a freshly signed-up user."""
    try:
        OnboardingService(db, sender).onboard(body)
    except OnboardingError as e:
        logger.warning("Onboarding rejected", role=body.role, reason=e.message)
        return _error(e)
    return OnboardResponse(success=True)


@router.get("/verify", response_model=VerifyResponse, response_model_exclude_none=True)
def verify_email(token: str | None = None, db: Session = Depends(get_db)):
    """Confirm an onboarding e-mail address. Repeated calls report already_verified."""
    if not token:
        return JSONResponse(status_code=400, content={"error": "Verification token is required"})

    try:
        outcome = OnboardingService(db).verify_email(token)
    except OnboardingError as e:
        return _error(e)

    if outcome.already_verified:
        return VerifyResponse(message="Email already verified", already_verified=True)
    return VerifyResponse(message="Email verified successfully!", verified=True)
