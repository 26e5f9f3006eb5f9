import pytest
from datetime import datetime
from decimal import Decimal
from fastapi.testclient import TestClient
from types import SimpleNamespace
from unittest.mock import patch, AsyncMock, MagicMock
from uuid import uuid4

from campuseats.api.deps import current_delivery_partner, current_user, optional_user, require_token
from campuseats.main import app
from campuseats.models.order import OrderStatus
from campuseats.schemas.session import View, ViewDecision
from campuseats.services.lifecycle import InvalidTransition
from campuseats.services.order_service import OrderNotFound
from campuseats.services.session_service import AuthenticationError, get_session_provider

USER = SimpleNamespace(id=uuid4(), email="asha@example.com")
COURIER = SimpleNamespace(id=uuid4(), user_id=USER.id, name="Ravi", is_accepting_orders=True)


def fake_order(**overrides):
    data = dict(
        id=uuid4(),
        user_id=USER.id,
        outlet_id=uuid4(),
        outlet=SimpleNamespace(name="Main Canteen"),
        customer_name="Asha",
        customer_phone="9876543210",
        delivery_address="Hostel 4, Room 12",
        total_amount=Decimal("250.00"),
        status=OrderStatus.PENDING,
        delivery_partner_id=None,
        delivery_partner=None,
        items=[SimpleNamespace(menu_item_id=uuid4(), item_name="Veg Thali", quantity=2, price=Decimal("125.00"))],
        created_at=datetime(2024, 1, 15, 12, 30),
    )
    data.update(overrides)
    return SimpleNamespace(**data)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def signed_in():
    app.dependency_overrides[current_user] = lambda: USER
    app.dependency_overrides[optional_user] = lambda: USER
    app.dependency_overrides[require_token] = lambda: "test-token"
    yield USER
    app.dependency_overrides.clear()


@pytest.fixture
def courier(signed_in):
    app.dependency_overrides[current_delivery_partner] = lambda: COURIER
    return COURIER


class TestSessionRoutes:
    def test_anonymous_view_is_auth(self, client):
        response = client.get("/api/v1/session/view")
        assert response.status_code == 200
        assert response.json()["data"]["view"] == "auth"

    def test_view_for_signed_in_user(self, client, signed_in):
        decision = ViewDecision(view=View.CUSTOMER, delivery_toggle=True)
        with patch('campuseats.api.v1.session.resolve_view_for_user', new=AsyncMock(return_value=decision)):
            response = client.get("/api/v1/session/view")
        assert response.status_code == 200
        assert response.json()["data"]["view"] == "customer"
        assert response.json()["data"]["delivery_toggle"] is True

    def test_protected_route_requires_token(self, client):
        response = client.get("/api/v1/orders")
        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "http_error"
        assert body["request_id"]


class TestAuthRoutes:
    def test_signup_password_mismatch(self, client):
        payload = {"email": "asha@example.com", "password": "secret1", "confirm_password": "secret2"}
        response = client.post("/api/v1/auth/signup", json=payload)
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "validation_error"

    def test_signin_bad_credentials(self, client):
        sessions = MagicMock()
        sessions.sign_in = AsyncMock(side_effect=AuthenticationError("Invalid email or password."))
        app.dependency_overrides[get_session_provider] = lambda: sessions
        try:
            response = client.post("/api/v1/auth/signin", json={"email": "a@b.c", "password": "nope"})
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password."


class TestOrderRoutes:
    def test_checkout_success(self, client, signed_in):
        with patch('campuseats.api.v1.orders.order_service.place_order', new=AsyncMock(return_value=fake_order())):
            payload = {"customer_name": "Asha", "customer_phone": "9876543210", "delivery_address": "Hostel 4"}
            response = client.post("/api/v1/orders/checkout", json=payload)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "pending"
        assert data["total_amount"] == "250.00"
        assert data["items"][0]["item_name"] == "Veg Thali"

    def test_checkout_rejects_short_phone(self, client, signed_in):
        payload = {"customer_name": "Asha", "customer_phone": "98765", "delivery_address": "Hostel 4"}
        response = client.post("/api/v1/orders/checkout", json=payload)
        assert response.status_code == 422

    def test_checkout_empty_cart(self, client, signed_in):
        with patch('campuseats.api.v1.orders.order_service.place_order',
                   new=AsyncMock(side_effect=ValueError("Your cart is empty."))):
            payload = {"customer_name": "Asha", "customer_phone": "9876543210", "delivery_address": "Hostel 4"}
            response = client.post("/api/v1/orders/checkout", json=payload)
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Your cart is empty."

    def test_get_someone_elses_order_is_404(self, client, signed_in):
        order = fake_order(user_id=uuid4())
        with patch('campuseats.api.v1.orders.order_service.get_order', new=AsyncMock(return_value=order)):
            response = client.get(f"/api/v1/orders/{order.id}")
        assert response.status_code == 404

    def test_get_order_success(self, client, signed_in):
        order = fake_order(status=OrderStatus.CONFIRMED, delivery_partner_id=COURIER.id,
                           delivery_partner=SimpleNamespace(name="Ravi", phone="9876500000"))
        with patch('campuseats.api.v1.orders.order_service.get_order', new=AsyncMock(return_value=order)):
            response = client.get(f"/api/v1/orders/{order.id}")
        assert response.status_code == 200
        assert response.json()["data"]["delivery_partner_name"] == "Ravi"

    def test_server_error_is_wrapped(self, client, signed_in):
        with patch('campuseats.api.v1.orders.order_service.list_customer_orders',
                   new=AsyncMock(side_effect=RuntimeError("db down"))):
            response = client.get("/api/v1/orders")
        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Server failed to fetch orders."


class TestDeliveryRoutes:
    def test_accept_invalid_transition(self, client, courier):
        error = InvalidTransition("Order is already in a final state: delivered. Status cannot be updated.")
        with patch('campuseats.api.v1.delivery.order_service.accept_order', new=AsyncMock(side_effect=error)):
            response = client.post(f"/api/v1/delivery/orders/{uuid4()}/accept")
        assert response.status_code == 400
        assert "final state" in response.json()["error"]["message"]

    def test_accept_unknown_order(self, client, courier):
        with patch('campuseats.api.v1.delivery.order_service.accept_order',
                   new=AsyncMock(side_effect=OrderNotFound("missing"))):
            response = client.post(f"/api/v1/delivery/orders/{uuid4()}/accept")
        assert response.status_code == 404

    def test_accept_success(self, client, courier):
        order = fake_order(status=OrderStatus.CONFIRMED, delivery_partner_id=COURIER.id,
                           delivery_partner=SimpleNamespace(name="Ravi", phone=None))
        with patch('campuseats.api.v1.delivery.order_service.accept_order', new=AsyncMock(return_value=order)):
            response = client.post(f"/api/v1/delivery/orders/{order.id}/accept")
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "confirmed"

    def test_me_without_registration_is_null(self, client, signed_in):
        with patch('campuseats.api.v1.delivery.profile_service.get_delivery_partner', new=AsyncMock(return_value=None)):
            response = client.get("/api/v1/delivery/me")
        assert response.status_code == 200
        assert response.json()["data"] is None


class TestProfileRoutes:
    def test_patch_null_name_is_rejected_before_update(self, client, signed_in):
        update = AsyncMock()
        with patch('campuseats.api.v1.profile.profile_service.update_profile', new=update):
            response = client.patch("/api/v1/profile", json={"name": None})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "validation_error"
        update.assert_not_called()

    def test_patch_service_value_error_is_400(self, client, signed_in):
        with patch('campuseats.api.v1.profile.profile_service.update_profile',
                   new=AsyncMock(side_effect=ValueError("Name cannot be empty"))):
            response = client.patch("/api/v1/profile", json={"city": "Pune"})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Name cannot be empty"


class TestAdminRoutes:
    def test_non_admin_is_forbidden(self, client, signed_in):
        with patch('campuseats.api.deps.role_service.has_role', new=AsyncMock(return_value=False)):
            response = client.get("/api/v1/admin/partners")
        assert response.status_code == 403
