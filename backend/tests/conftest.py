"""
Pytest configuration and fixtures for backend tests.
"""

import itertools
import math
import os
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone

# Settings and the application engine are created at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RESEND_API_KEY", "")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from latebites_api.main import app
from latebites_api.models import Base, Customer, RescueBag, Restaurant
from latebites_api.services.auth import AuthProviderError, ProviderSession, get_auth_provider
from latebites_api.services.email import get_email_sender
from latebites_shared.infrastructure.db import enable_sqlite_savepoints, get_db
from latebites_shared.security import limiter, sign_access_token
from latebites_shared.utils.geo import EARTH_RADIUS_KM


# Explicit, increasing creation times keep fetch order deterministic
_clock = itertools.count(1)
_EPOCH = datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc)


def next_timestamp() -> datetime:
    return _EPOCH + timedelta(seconds=next(_clock))


# Coimbatore city centre
ORIGIN_LAT = 11.0168
ORIGIN_LNG = 76.9558


def _make_engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(test_engine)
    return test_engine


# SQLite in-memory database for testing
engine = _make_engine()
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def fresh_session():
    """
    A session on its own empty database.

    For property tests, where function-scoped fixtures are shared across
    generated examples.
    """
    example_engine = _make_engine()
    Base.metadata.create_all(bind=example_engine)
    session = sessionmaker(autoflush=False, bind=example_engine)()
    try:
        yield session
    finally:
        session.close()
        example_engine.dispose()


def north_of_origin(km: float) -> tuple[float, float]:
    """Coordinates `km` due north of the origin (exact along a meridian)."""
    return ORIGIN_LAT + math.degrees(km / EARTH_RADIUS_KM), ORIGIN_LNG


def make_customer(db, customer_id="customer-1", name="Asha", location=None) -> Customer:
    customer = Customer(id=customer_id, name=name, phone="+919876543210", email=f"{customer_id}@example.com")
    if location is not None:
        customer.latitude, customer.longitude = location
    db.add(customer)
    db.commit()
    return customer


def make_restaurant(
    db,
    name="Annapoorna",
    location=(ORIGIN_LAT, ORIGIN_LNG),
    bags=1,
    quantity=2,
    verified=True,
    is_active=True,
    cuisine_types=None,
    restaurant_id=None,
) -> Restaurant:
    """A restaurant with `bags` rescue bags of `quantity` units each."""
    lat, lng = location if location is not None else (None, None)
    restaurant = Restaurant(
        name=name,
        owner_name=f"{name} Owner",
        email=f"{name.lower().replace(' ', '')}@example.com",
        phone="+914222000000",
        city="Coimbatore",
        latitude=lat,
        longitude=lng,
        cuisine_types=cuisine_types if cuisine_types is not None else ["South Indian"],
        verified=verified,
        is_active=is_active,
        created_at=next_timestamp(),
    )
    if restaurant_id:
        restaurant.id = restaurant_id
    db.add(restaurant)
    db.flush()
    for i in range(bags):
        db.add(
            RescueBag(
                restaurant_id=restaurant.id,
                title=f"{name} surprise bag {i + 1}",
                size="medium",
                original_price_cents=30000,
                discounted_price_cents=12000,
                quantity_available=quantity,
                pickup_start_time="20:00",
                pickup_end_time="22:00",
                available_date=date(2026, 10, 19),
                created_at=next_timestamp(),
            )
        )
    db.commit()
    db.refresh(restaurant)
    return restaurant


def auth_headers_for(principal_id: str, email: str | None = None) -> dict[str, str]:
    token = sign_access_token(principal_id, email=email or f"{principal_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


class FakeAuthProvider:
    """Stands in for the hosted auth provider."""

    def __init__(self):
        self.exchanged: list[tuple[str, str | None]] = []
        self.signed_out: list[str] = []
        self.session = ProviderSession(
            access_token="provider-access-token",
            user_id="oauth-user-1",
            email="meera@example.com",
            full_name="Meera K",
            expires_in=3600,
        )

    def exchange_code_for_session(self, code, code_verifier):
        self.exchanged.append((code, code_verifier))
        if code == "bad-code":
            raise AuthProviderError("Authorization code was rejected")
        return self.session

    def sign_out(self, access_token):
        self.signed_out.append(access_token)
        return True


class RecordingEmailSender:
    """Captures verification e-mails instead of sending them."""

    def __init__(self):
        self.sent: list[dict] = []

    def send(self, to, restaurant_name, contact_person, token):
        self.sent.append(
            {"to": to, "restaurant_name": restaurant_name, "contact_person": contact_person, "token": token}
        )
        return True


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_provider():
    return FakeAuthProvider()


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture(scope="function")
def client(db_session, fake_provider, email_sender):
    """
    Create a test client with database, auth provider and e-mail overrides.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_provider] = lambda: fake_provider
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def seed_customer(db_session):
    """A customer without a stored location."""
    return make_customer(db_session)


@pytest.fixture
def customer_headers(seed_customer):
    return auth_headers_for(seed_customer.id)


@pytest.fixture
def seed_restaurant(db_session):
    """A verified restaurant at the origin with one bag of two units."""
    return make_restaurant(db_session)


@pytest.fixture
def seed_bag(seed_restaurant):
    return seed_restaurant.rescue_bags[0]
