"""
Tests for customer orders, profile and location endpoints.
"""

from latebites_api.models import Customer
from tests.conftest import ORIGIN_LAT, ORIGIN_LNG, auth_headers_for, make_customer, make_restaurant


class TestOrders:
    """GET /api/orders"""

    def test_orders_newest_first(self, client, db_session, customer_headers):
        first = make_restaurant(db_session, "First").rescue_bags[0].id
        second = make_restaurant(db_session, "Second").rescue_bags[0].id
        client.post(f"/api/bags/{first}/reserve", headers=customer_headers)
        client.post(f"/api/bags/{second}/reserve", headers=customer_headers)

        response = client.get("/api/orders", headers=customer_headers)

        assert response.status_code == 200
        orders = response.json()
        assert len(orders) == 2
        assert {order["rescue_bag_id"] for order in orders} == {first, second}
        assert all(order["payment_method"] == "pay_at_pickup" for order in orders)

    def test_orders_are_private(self, client, db_session, customer_headers, seed_bag):
        client.post(f"/api/bags/{seed_bag.id}/reserve", headers=customer_headers)
        make_customer(db_session, "someone-else")

        response = client.get("/api/orders", headers=auth_headers_for("someone-else"))

        assert response.json() == []

    def test_order_detail(self, client, customer_headers, seed_bag):
        order_id = client.post(f"/api/bags/{seed_bag.id}/reserve", headers=customer_headers).json()["order_id"]

        response = client.get(f"/api/orders/{order_id}", headers=customer_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == order_id
        assert data["bag"]["id"] == seed_bag.id
        assert data["restaurant"]["name"] == "Annapoorna"

    def test_other_customers_order_is_404(self, client, db_session, customer_headers, seed_bag):
        order_id = client.post(f"/api/bags/{seed_bag.id}/reserve", headers=customer_headers).json()["order_id"]
        make_customer(db_session, "someone-else")

        response = client.get(f"/api/orders/{order_id}", headers=auth_headers_for("someone-else"))

        assert response.status_code == 404

    def test_orders_require_customer(self, client):
        assert client.get("/api/orders").status_code == 401


class TestProfile:
    """PATCH /api/customer/profile"""

    def test_update_name_and_email(self, client, customer_headers):
        response = client.patch(
            "/api/customer/profile",
            json={"name": "Asha R", "email": "asha.r@example.com"},
            headers=customer_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Asha R"
        assert data["email"] == "asha.r@example.com"

    def test_partial_update_keeps_other_fields(self, client, customer_headers):
        data = client.patch("/api/customer/profile", json={"name": "Asha R"}, headers=customer_headers).json()

        assert data["email"] == "customer-1@example.com"
        assert data["phone"] == "+919876543210"

    def test_invalid_email_is_422(self, client, customer_headers):
        response = client.patch("/api/customer/profile", json={"email": "nope"}, headers=customer_headers)
        assert response.status_code == 422


class TestLocationUpdate:
    """PUT /api/customer/location"""

    def test_location_is_stored(self, client, db_session, customer_headers):
        response = client.put(
            "/api/customer/location",
            json={"latitude": ORIGIN_LAT, "longitude": ORIGIN_LNG},
            headers=customer_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["latitude"] == ORIGIN_LAT
        assert data["location_updated_at"]

        db_session.expire_all()
        assert db_session.get(Customer, "customer-1").latitude == ORIGIN_LAT

    def test_stored_location_drives_catalog(self, client, db_session, customer_headers):
        make_restaurant(db_session, "Nearby")
        client.put(
            "/api/customer/location",
            json={"latitude": ORIGIN_LAT, "longitude": ORIGIN_LNG},
            headers=customer_headers,
        )

        data = client.get("/api/catalog", headers=customer_headers).json()

        assert data["location_known"] is True
        assert data["restaurants"][0]["distance_km"] == 0.0

    def test_out_of_range_latitude_is_422(self, client, customer_headers):
        response = client.put(
            "/api/customer/location", json={"latitude": 95, "longitude": 0}, headers=customer_headers
        )
        assert response.status_code == 422
