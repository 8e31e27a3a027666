"""
Public catalog endpoints: the nearby restaurant listing and bag details.

Anonymous callers may browse; a signed-in customer's stored location is used
as the origin when the request carries no coordinates.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from latebites_shared.config.logging import catalog_logger as logger
from latebites_shared.infrastructure.db import get_db
from latebites_shared.utils.exceptions import NotFoundError
from latebites_shared.utils.geo import Coordinates, distance_band, distance_km, format_distance
from latebites_shared.utils.schemas import (
    BagDetailOutput,
    BagOutput,
    CatalogResponse,
    FeaturedBagOutput,
    RestaurantCard,
    RestaurantSummary,
)
from latebites_api.repositories import BagRepository
from latebites_api.routers._common import get_browsing_session
from latebites_api.services.catalog import (
    CatalogEntry,
    CatalogService,
    CatalogUnavailable,
    FeaturedBag,
)
from latebites_api.services.domain import AuthSession


router = APIRouter(prefix="/api", tags=["catalog"])


def _origin(lat: float | None, lng: float | None, session: AuthSession) -> Coordinates | None:
    if lat is not None and lng is not None:
        return Coordinates(lat, lng)
    if session.customer is not None:
        return session.customer.location
    return None


def _restaurant_card(entry: CatalogEntry) -> RestaurantCard:
    restaurant = entry.restaurant
    km = entry.distance_km
    return RestaurantCard(
        **RestaurantSummary.model_validate(restaurant).model_dump(),
        description=restaurant.description,
        distance_km=km,
        distance_label=format_distance(km) if km is not None else None,
        distance_band=distance_band(km) if km is not None else None,
        available_bag_count=sum(1 for bag in entry.bags if bag.is_available),
        bags=[BagOutput.model_validate(bag) for bag in entry.bags],
    )


def _featured_bag(featured: FeaturedBag) -> FeaturedBagOutput:
    km = featured.distance_km
    return FeaturedBagOutput(
        **BagOutput.model_validate(featured.bag).model_dump(),
        restaurant_name=featured.restaurant.name,
        distance_km=km,
        distance_label=format_distance(km) if km is not None else None,
    )


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog(
    lat: float | None = Query(None, ge=-90, le=90),
    lng: float | None = Query(None, ge=-180, le=180),
    search: str | None = Query(None, max_length=200),
    cuisine: str | None = Query(None, max_length=100),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_browsing_session),
) -> CatalogResponse:
    """
    Restaurants with rescue bags near the origin, nearest first.

    A database failure yields an empty listing with available=false instead
    of an error, so clients can show a retry message.
    """
    origin = _origin(lat, lng, session)

    try:
        result = CatalogService(db).query(origin, search=search, cuisine=cuisine)
    except CatalogUnavailable as e:
        return CatalogResponse(available=False, message=e.message, location_known=origin is not None)

    logger.debug(
        "Catalog served",
        location_known=result.location_known,
        restaurants=len(result.entries),
    )
    return CatalogResponse(
        available=True,
        location_known=result.location_known,
        radius_km=result.radius_km,
        restaurants=[_restaurant_card(entry) for entry in result.entries],
        featured_bags=[_featured_bag(f) for f in result.featured_bags],
        cuisine_types=result.cuisine_types,
    )


@router.get("/bags/{bag_id}", response_model=BagDetailOutput)
def get_bag(
    bag_id: str,
    lat: float | None = Query(None, ge=-90, le=90),
    lng: float | None = Query(None, ge=-180, le=180),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_browsing_session),
) -> BagDetailOutput:
    """A listed bag with its restaurant. Unlisted bags and restaurants are 404."""
    bag = BagRepository(db).find_by_id(bag_id)
    if bag is None or not bag.is_active or not (bag.restaurant.verified and bag.restaurant.is_active):
        raise NotFoundError("Rescue bag", bag_id)

    origin = _origin(lat, lng, session)
    km = None
    if origin is not None and bag.restaurant.coordinates is not None:
        km = distance_km(origin, bag.restaurant.coordinates)

    return BagDetailOutput(
        bag=BagOutput.model_validate(bag),
        restaurant=RestaurantSummary.model_validate(bag.restaurant),
        distance_km=km,
        distance_label=format_distance(km) if km is not None else None,
    )
