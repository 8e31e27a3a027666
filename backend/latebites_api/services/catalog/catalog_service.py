"""
Catalog Query Service.

Builds the customer-facing listing: visible restaurants near the customer,
nearest first, with their rescue bags, plus a handful of featured bags.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from latebites_shared.config.constants import CATALOG_RADIUS_KM
from latebites_shared.config.logging import catalog_logger as logger
from latebites_shared.config.settings import settings
from latebites_shared.utils.geo import Coordinates, distance_km
from latebites_shared.utils.validators import sanitize_search_term
from latebites_api.models import RescueBag, Restaurant
from latebites_api.repositories import RestaurantRepository


class CatalogUnavailable(Exception):
    """The catalog could not be read from the database."""

    def __init__(self, message: str = "Unable to load restaurants right now. Please try again later."):
        self.message = message
        super().__init__(message)


@dataclass
class CatalogEntry:
    """A restaurant shown in the catalog and its distance from the origin."""

    restaurant: Restaurant
    distance_km: float | None = None

    @property
    def bags(self) -> list[RescueBag]:
        return self.restaurant.rescue_bags


@dataclass
class FeaturedBag:
    bag: RescueBag
    restaurant: Restaurant
    distance_km: float | None = None


@dataclass
class CatalogResult:
    location_known: bool
    entries: list[CatalogEntry] = field(default_factory=list)
    featured_bags: list[FeaturedBag] = field(default_factory=list)
    cuisine_types: list[str] = field(default_factory=list)
    radius_km: float | None = None


class CatalogService:
    """
    Read-only catalog queries.

    Usage:
        result = CatalogService(db).query(origin, search="dosa")
    """

    def __init__(
        self,
        db: Session,
        radius_km: float = CATALOG_RADIUS_KM,
        featured_count: int | None = None,
    ):
        self._repo = RestaurantRepository(db)
        self._radius_km = radius_km
        self._featured_count = (
            featured_count if featured_count is not None else settings.featured_bag_count
        )

    def query(
        self,
        origin: Coordinates | None,
        search: str | None = None,
        cuisine: str | None = None,
        rng: random.Random | None = None,
    ) -> CatalogResult:
        """
        List visible restaurants for a customer.

        With an origin, restaurants farther than the catalog radius or
        without coordinates are dropped and the rest are ordered nearest
        first (ties keep fetch order). Restaurants with no bags are never
        shown. Name and cuisine filters narrow the list without reordering it.

        Raises:
            CatalogUnavailable: If the restaurants could not be read.
        """
        try:
            restaurants = self._repo.find_visible_with_bags()
        except SQLAlchemyError as e:
            logger.error("Failed to load catalog", error=str(e))
            raise CatalogUnavailable() from e

        entries = self._locate(restaurants, origin)
        entries = [entry for entry in entries if entry.bags]
        entries = self._filter(entries, search, cuisine)

        return CatalogResult(
            location_known=origin is not None,
            entries=entries,
            featured_bags=self._pick_featured(entries, rng or random.Random()),
            cuisine_types=sorted({c for entry in entries for c in entry.restaurant.cuisine_types}),
            radius_km=self._radius_km if origin is not None else None,
        )

    def _locate(
        self,
        restaurants: Sequence[Restaurant],
        origin: Coordinates | None,
    ) -> list[CatalogEntry]:
        if origin is None:
            return [CatalogEntry(r) for r in restaurants]

        entries = []
        for restaurant in restaurants:
            coords = restaurant.coordinates
            if coords is None:
                continue
            km = distance_km(origin, coords)
            if km <= self._radius_km:
                entries.append(CatalogEntry(restaurant, km))

        # sorted() is stable, so equal distances keep fetch order
        return sorted(entries, key=lambda entry: entry.distance_km)

    @staticmethod
    def _filter(
        entries: list[CatalogEntry],
        search: str | None,
        cuisine: str | None,
    ) -> list[CatalogEntry]:
        term = sanitize_search_term(search)
        if term:
            needle = term.lower()
            entries = [e for e in entries if needle in e.restaurant.name.lower()]

        if cuisine and cuisine.strip():
            wanted = cuisine.strip().lower()
            entries = [
                e for e in entries
                if any(c.lower() == wanted for c in e.restaurant.cuisine_types)
            ]
        return entries

    def _pick_featured(self, entries: list[CatalogEntry], rng: random.Random) -> list[FeaturedBag]:
        candidates = [
            FeaturedBag(bag, entry.restaurant, entry.distance_km)
            for entry in entries
            for bag in entry.bags
            if bag.is_available
        ]
        if len(candidates) <= self._featured_count:
            rng.shuffle(candidates)
            return candidates
        return rng.sample(candidates, self._featured_count)
