"""
Tests for CatalogService.
"""

import random

import pytest
from hypothesis import given, settings, strategies as st
from sqlalchemy.exc import OperationalError

from latebites_api.repositories import RestaurantRepository
from latebites_api.services.catalog import CatalogService, CatalogUnavailable
from latebites_shared.utils.geo import Coordinates, distance_km
from tests.conftest import (
    ORIGIN_LAT,
    ORIGIN_LNG,
    fresh_session,
    make_restaurant,
    north_of_origin,
)

ORIGIN = Coordinates(ORIGIN_LAT, ORIGIN_LNG)


def names(result):
    return [entry.restaurant.name for entry in result.entries]


class TestCatalogRadius:
    """Radius filter and nearest-first ordering."""

    def test_coimbatore_scenario(self, db_session):
        """A at 2.0 km and C at 7.0 km are shown nearest first; B at 7.5 km is not."""
        make_restaurant(db_session, "B", location=north_of_origin(7.5))
        make_restaurant(db_session, "C", location=north_of_origin(7.0))
        make_restaurant(db_session, "A", location=north_of_origin(2.0))

        result = CatalogService(db_session).query(ORIGIN)

        assert names(result) == ["A", "C"]
        assert [entry.distance_km for entry in result.entries] == [2.0, 7.0]
        assert result.location_known is True
        assert result.radius_km == 7.0

    def test_restaurant_without_coordinates_excluded_with_origin(self, db_session):
        make_restaurant(db_session, "Nowhere", location=None)
        make_restaurant(db_session, "Here", location=north_of_origin(1.0))

        assert names(CatalogService(db_session).query(ORIGIN)) == ["Here"]

    def test_no_origin_keeps_fetch_order_without_distances(self, db_session):
        make_restaurant(db_session, "Far", location=north_of_origin(50.0))
        make_restaurant(db_session, "Nowhere", location=None)

        result = CatalogService(db_session).query(None)

        assert names(result) == ["Far", "Nowhere"]
        assert all(entry.distance_km is None for entry in result.entries)
        assert result.location_known is False
        assert result.radius_km is None

    def test_equal_distances_keep_fetch_order(self, db_session):
        make_restaurant(db_session, "First", location=north_of_origin(3.0))
        make_restaurant(db_session, "Second", location=north_of_origin(3.0))

        assert names(CatalogService(db_session).query(ORIGIN)) == ["First", "Second"]

    @given(distances=st.lists(st.floats(min_value=0.0, max_value=12.0), min_size=1, max_size=8))
    @settings(max_examples=25, deadline=None)
    def test_radius_and_order_properties(self, distances):
        """Property: nothing beyond 7.0 km, nothing within 7.0 km omitted, sorted ascending."""
        with fresh_session() as db:
            for i, km in enumerate(distances):
                make_restaurant(db, f"R{i}", location=north_of_origin(km))

            result = CatalogService(db).query(ORIGIN)
            shown = [entry.distance_km for entry in result.entries]

            assert all(d <= 7.0 for d in shown)
            assert shown == sorted(shown)
            expected = [
                d for d in (distance_km(ORIGIN, Coordinates(*north_of_origin(km))) for km in distances)
                if d <= 7.0
            ]
            assert shown == sorted(expected)


class TestCatalogVisibility:
    """Which restaurants are listed at all."""

    def test_unverified_and_inactive_restaurants_hidden(self, db_session):
        make_restaurant(db_session, "Pending", verified=False)
        make_restaurant(db_session, "Closed", is_active=False)
        make_restaurant(db_session, "Open")

        assert names(CatalogService(db_session).query(ORIGIN)) == ["Open"]

    def test_restaurant_without_bags_hidden(self, db_session):
        make_restaurant(db_session, "Empty", bags=0)
        make_restaurant(db_session, "Stocked")

        assert names(CatalogService(db_session).query(None)) == ["Stocked"]

    def test_sold_out_bags_keep_restaurant_listed(self, db_session):
        """Bags are not filtered by availability; only an empty bag list hides a restaurant."""
        make_restaurant(db_session, "Sold Out", quantity=0)

        result = CatalogService(db_session).query(ORIGIN)

        assert names(result) == ["Sold Out"]
        assert result.featured_bags == []


class TestCatalogFilters:
    """Search, cuisine filter and featured bags."""

    def test_search_is_case_insensitive_substring(self, db_session):
        make_restaurant(db_session, "Sree Annapoorna", location=north_of_origin(1.0))
        make_restaurant(db_session, "Haribhavanam", location=north_of_origin(2.0))

        result = CatalogService(db_session).query(ORIGIN, search="  annaPOORNA ")

        assert names(result) == ["Sree Annapoorna"]

    def test_filters_preserve_distance_order(self, db_session):
        make_restaurant(db_session, "Dosa Far", location=north_of_origin(5.0), cuisine_types=["South Indian"])
        make_restaurant(db_session, "Pizza", location=north_of_origin(1.0), cuisine_types=["Italian"])
        make_restaurant(db_session, "Dosa Near", location=north_of_origin(2.0), cuisine_types=["South Indian"])

        result = CatalogService(db_session).query(ORIGIN, search="dosa", cuisine="south indian")

        assert names(result) == ["Dosa Near", "Dosa Far"]
        assert result.cuisine_types == ["South Indian"]

    def test_cuisine_types_are_distinct_and_sorted(self, db_session):
        make_restaurant(db_session, "One", cuisine_types=["Italian", "Bakery"])
        make_restaurant(db_session, "Two", cuisine_types=["Bakery"])

        assert CatalogService(db_session).query(None).cuisine_types == ["Bakery", "Italian"]

    def test_featured_bags_capped_and_available(self, db_session):
        make_restaurant(db_session, "Big", bags=5, quantity=1)
        make_restaurant(db_session, "Bigger", bags=5, quantity=1)
        make_restaurant(db_session, "Gone", bags=3, quantity=0)

        result = CatalogService(db_session).query(ORIGIN, rng=random.Random(7))

        assert len(result.featured_bags) == 6
        assert all(f.bag.quantity_available > 0 for f in result.featured_bags)
        assert len({f.bag.id for f in result.featured_bags}) == 6

    def test_featured_bags_seeded_rng_is_deterministic(self, db_session):
        make_restaurant(db_session, "Big", bags=8)

        first = CatalogService(db_session).query(None, rng=random.Random(1))
        second = CatalogService(db_session).query(None, rng=random.Random(1))

        assert [f.bag.id for f in first.featured_bags] == [f.bag.id for f in second.featured_bags]


class TestCatalogFailure:
    """Database failures."""

    def test_read_failure_raises_catalog_unavailable(self, db_session, monkeypatch):
        def broken(self):
            raise OperationalError("SELECT restaurants", {}, Exception("connection lost"))

        monkeypatch.setattr(RestaurantRepository, "find_visible_with_bags", broken)

        with pytest.raises(CatalogUnavailable):
            CatalogService(db_session).query(ORIGIN)
