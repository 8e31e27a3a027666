"""
Customer profile and location endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from latebites_shared.infrastructure.db import get_db
from latebites_shared.utils.exceptions import DatabaseError, ValidationError
from latebites_shared.utils.geo import Coordinates
from latebites_shared.utils.schemas import (
    CoordinatesInput,
    CustomerOutput,
    CustomerProfileUpdateRequest,
    LocationUpdateResponse,
)
from latebites_api.models import Customer
from latebites_api.routers._common import get_auth_session, require_customer
from latebites_api.services.domain import AuthSession, CustomerService
from latebites_api.services.location import FixedPositionProvider, LocationError, LocationService


router = APIRouter(prefix="/api/customer", tags=["customer"])


@router.patch("/profile", response_model=CustomerOutput)
def update_profile(
    body: CustomerProfileUpdateRequest,
    customer: Customer = Depends(require_customer),
    session: AuthSession = Depends(get_auth_session),
    db: Session = Depends(get_db),
) -> CustomerOutput:
    """Edit name or e-mail, then re-resolve the session."""
    try:
        CustomerService(db).update_profile(customer, body)
    except SQLAlchemyError:
        raise DatabaseError("profile update", customer_id=customer.id)
    session.refresh()
    return CustomerOutput.model_validate(session.customer)


@router.put("/location", response_model=LocationUpdateResponse)
async def update_location(
    body: CoordinatesInput,
    customer: Customer = Depends(require_customer),
    db: Session = Depends(get_db),
) -> LocationUpdateResponse:
    """
    Store a fresh device fix on the customer's profile.

    Saving is best-effort: the fix is echoed back even if it could not be
    persisted.
    """
    service = LocationService(db=db)
    provider = FixedPositionProvider(Coordinates(body.latitude, body.longitude))
    try:
        coords = await service.request_live_location(provider, customer_id=customer.id)
    except LocationError as e:
        raise ValidationError(e.message, code=e.code.value)

    return LocationUpdateResponse(
        latitude=coords.latitude,
        longitude=coords.longitude,
        location_updated_at=service.last_fix_at,
    )
