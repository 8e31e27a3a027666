"""
Shared Pydantic schemas used across the application.
"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


# =============================================================================
# Common Types
# =============================================================================

Role = Literal["customer", "restaurant"]
BagSize = Literal["small", "medium", "large"]
OrderStatus = Literal["pending", "confirmed", "ready", "completed", "cancelled"]
PaymentMethod = Literal["pay_at_pickup", "online"]
PaymentStatus = Literal["pending", "paid", "refunded"]
DistanceBand = Literal["near", "medium", "far"]


class CoordinatesInput(BaseModel):
    """A device position reported by a client."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


# =============================================================================
# Catalog Schemas
# =============================================================================


class BagOutput(BaseModel):
    """A rescue bag listing."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    restaurant_id: str
    title: str
    description: Optional[str] = None
    size: BagSize
    original_price_cents: int
    discounted_price_cents: int
    quantity_available: int
    pickup_start_time: str
    pickup_end_time: str
    available_date: Optional[date] = None
    image_url: Optional[str] = None
    is_active: bool


class RestaurantSummary(BaseModel):
    """Restaurant fields shown next to bags and orders."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address_line1: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    cuisine_types: list[str] = Field(default_factory=list)
    profile_image_url: Optional[str] = None


class RestaurantCard(RestaurantSummary):
    """A restaurant in the catalog with its bags and distance from the customer."""

    description: Optional[str] = None
    distance_km: Optional[float] = None
    distance_label: Optional[str] = None
    distance_band: Optional[DistanceBand] = None
    available_bag_count: int = 0
    bags: list[BagOutput] = Field(default_factory=list)


class FeaturedBagOutput(BagOutput):
    """A highlighted bag with its restaurant."""

    restaurant_name: str
    distance_km: Optional[float] = None
    distance_label: Optional[str] = None


class CatalogResponse(BaseModel):
    """Catalog listing. available=False means the listing could not be loaded."""

    available: bool = True
    message: Optional[str] = None
    location_known: bool = False
    radius_km: Optional[float] = None
    restaurants: list[RestaurantCard] = Field(default_factory=list)
    featured_bags: list[FeaturedBagOutput] = Field(default_factory=list)
    cuisine_types: list[str] = Field(default_factory=list)


class BagDetailOutput(BaseModel):
    """A single bag with its restaurant and optional distance."""

    bag: BagOutput
    restaurant: RestaurantSummary
    distance_km: Optional[float] = None
    distance_label: Optional[str] = None


# =============================================================================
# Reservation / Order Schemas
# =============================================================================


class ReservationResponse(BaseModel):
    """Result of reserving one unit of a bag."""

    order_id: str
    status: OrderStatus
    total_price_cents: int
    inventory_adjusted: bool = True
    quantity_remaining: Optional[int] = None
    warning: Optional[str] = None


class BagSummary(BaseModel):
    """Bag fields embedded in order listings."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    size: BagSize
    pickup_start_time: str
    pickup_end_time: str
    image_url: Optional[str] = None


class OrderOutput(BaseModel):
    """An order placed by a customer."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    rescue_bag_id: str
    restaurant_id: str
    quantity: int
    total_price_cents: int
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    pickup_time: Optional[str] = None
    qr_code: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    bag: Optional[BagSummary] = None
    restaurant: Optional[RestaurantSummary] = None


# =============================================================================
# Profile / Session Schemas
# =============================================================================


class CustomerOutput(BaseModel):
    """Customer profile."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone: str
    email: Optional[str] = None
    profile_image_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_updated_at: Optional[datetime] = None


class RestaurantProfileOutput(RestaurantSummary):
    """Restaurant profile as seen by its owner."""

    owner_name: str
    email: str
    phone: str
    verified: bool
    is_active: bool


class SessionRequest(BaseModel):
    """Role selected by the user at sign-in."""

    role: Role


class SessionOutput(BaseModel):
    """Resolved identity of the current principal."""

    principal_id: str
    email: Optional[str] = None
    role: Optional[Role] = None
    customer: Optional[CustomerOutput] = None
    restaurant: Optional[RestaurantProfileOutput] = None


class CustomerProfileUpdateRequest(BaseModel):
    """Editable customer profile fields."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None


class LocationUpdateResponse(BaseModel):
    """Location stored on the customer profile."""

    latitude: float
    longitude: float
    location_updated_at: datetime


# =============================================================================
# Onboarding Schemas
# =============================================================================


class OnboardRequest(BaseModel):
    """Profile creation for a freshly signed-up principal."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1, max_length=64)
    role: Role
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    city: Optional[str] = Field(None, max_length=100)


class OnboardResponse(BaseModel):
    success: bool = True


class VerifyResponse(BaseModel):
    """Outcome of an e-mail verification link."""

    message: str
    verified: Optional[bool] = None
    already_verified: Optional[bool] = None
