"""
Tests for onboarding and e-mail verification.
"""

from sqlalchemy import select

from latebites_api.models import Customer, OnboardingSubmission, Restaurant
from tests.conftest import auth_headers_for


def onboard_body(**overrides):
    body = {
        "userId": "new-user-1",
        "role": "customer",
        "name": "Kavya",
        "email": "kavya@example.com",
        "phone": "9876543210",
    }
    body.update(overrides)
    return body


class TestOnboardCustomer:
    """POST /api/onboard with role=customer"""

    def test_creates_customer_with_prefixed_phone(self, client, db_session, email_sender):
        response = client.post("/api/onboard", json=onboard_body())

        assert response.status_code == 200
        assert response.json() == {"success": True}
        customer = db_session.get(Customer, "new-user-1")
        assert customer.phone == "+919876543210"
        assert email_sender.sent == []

    def test_duplicate_customer_is_409(self, client):
        client.post("/api/onboard", json=onboard_body())

        response = client.post("/api/onboard", json=onboard_body())

        assert response.status_code == 409
        assert "error" in response.json()

    def test_invalid_phone_is_400(self, client):
        response = client.post("/api/onboard", json=onboard_body(phone="98765-abc"))

        assert response.status_code == 400
        assert response.json()["error"] == "Phone number may only contain digits"

    def test_missing_field_is_400_with_error_body(self, client):
        body = onboard_body()
        del body["name"]

        response = client.post("/api/onboard", json=body)

        assert response.status_code == 400
        assert "error" in response.json()

    def test_blank_name_is_400(self, client):
        response = client.post("/api/onboard", json=onboard_body(name="   "))

        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"


class TestOnboardRestaurant:
    """POST /api/onboard with role=restaurant"""

    def test_creates_unverified_restaurant_and_sends_email(self, client, db_session, email_sender):
        response = client.post(
            "/api/onboard",
            json=onboard_body(userId="resto-1", role="restaurant", name="Hotel Sree", city="Coimbatore"),
        )

        assert response.status_code == 200
        restaurant = db_session.get(Restaurant, "resto-1")
        assert restaurant.verified is False
        assert restaurant.city == "Coimbatore"

        submission = db_session.scalar(select(OnboardingSubmission))
        assert submission.verified is False
        assert len(email_sender.sent) == 1
        assert email_sender.sent[0]["to"] == "kavya@example.com"
        assert email_sender.sent[0]["token"] == submission.verification_token

    def test_duplicate_email_is_409(self, client):
        client.post("/api/onboard", json=onboard_body(userId="resto-1", role="restaurant"))

        response = client.post("/api/onboard", json=onboard_body(userId="resto-2", role="restaurant"))

        assert response.status_code == 409
        assert "already registered" in response.json()["error"]


class TestOneRolePerPrincipal:
    """A principal onboarded under one role cannot add the other."""

    def test_customer_cannot_onboard_as_restaurant(self, client, db_session, email_sender):
        client.post("/api/onboard", json=onboard_body())

        response = client.post(
            "/api/onboard",
            json=onboard_body(role="restaurant", name="Kavya Mess", email="mess@example.com"),
        )

        assert response.status_code == 409
        assert response.json()["error"] == "A customer account already exists for this user"
        assert db_session.get(Restaurant, "new-user-1") is None
        assert db_session.scalar(select(OnboardingSubmission)) is None
        assert email_sender.sent == []

    def test_restaurant_cannot_onboard_as_customer(self, client, db_session):
        client.post("/api/onboard", json=onboard_body(role="restaurant", name="Kavya Mess"))

        response = client.post("/api/onboard", json=onboard_body(email="kavya.home@example.com"))

        assert response.status_code == 409
        assert db_session.get(Customer, "new-user-1") is None
        assert client.get("/api/auth/me", headers=auth_headers_for("new-user-1")).json()["role"] == "restaurant"


class TestVerifyEmail:
    """GET /api/verify"""

    def _submission_token(self, client, db_session):
        client.post("/api/onboard", json=onboard_body(userId="resto-1", role="restaurant"))
        return db_session.scalar(select(OnboardingSubmission.verification_token))

    def test_missing_token_is_400(self, client):
        response = client.get("/api/verify")

        assert response.status_code == 400
        assert response.json() == {"error": "Verification token is required"}

    def test_unknown_token_is_404(self, client, db_session):
        response = client.get("/api/verify", params={"token": "nope"})

        assert response.status_code == 404
        assert response.json() == {"error": "Invalid or expired verification token"}

    def test_verify_then_already_verified(self, client, db_session):
        token = self._submission_token(client, db_session)

        first = client.get("/api/verify", params={"token": token})
        second = client.get("/api/verify", params={"token": token})

        assert first.json() == {"message": "Email verified successfully!", "verified": True}
        assert second.json() == {"message": "Email already verified", "already_verified": True}

    def test_verification_does_not_list_restaurant(self, client, db_session):
        token = self._submission_token(client, db_session)

        client.get("/api/verify", params={"token": token})

        db_session.expire_all()
        assert db_session.get(Restaurant, "resto-1").verified is False
