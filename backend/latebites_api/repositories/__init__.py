"""
Data access for the ORM models.

Each repository owns the queries for one aggregate, including the eager
loading the catalog and order views rely on.

Usage:
    from latebites_api.repositories import RestaurantRepository

    restaurants = RestaurantRepository(db).find_visible_with_bags()
"""

from .base import BaseRepository
from .restaurant import RestaurantRepository
from .bag import BagRepository
from .customer import CustomerRepository
from .order import OrderRepository

__all__ = [
    "BaseRepository",
    "RestaurantRepository",
    "BagRepository",
    "CustomerRepository",
    "OrderRepository",
]
