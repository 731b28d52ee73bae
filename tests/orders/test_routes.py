"""Tests for the orders route handlers."""

from __future__ import annotations

import pytest
from starlette.applications import Starlette
from starlette.testclient import TestClient

from authgate.auth.errors import VerificationResult
from authgate.auth.identity import VerifiedIdentity
from authgate.orders.mapper import OrderMapper
from authgate.orders.routes import build_order_routes
from authgate.server.app import create_app
from tests.conftest import StubVerifier, auth_headers


def _verifier_for(user_id: str) -> StubVerifier:
    return StubVerifier(VerificationResult.accepted(VerifiedIdentity.from_profile({"id": user_id})))


@pytest.fixture
def client(mapper: OrderMapper, accepting_verifier: StubVerifier) -> TestClient:
    return TestClient(create_app(accepting_verifier, mapper))


class TestListOrders:
    def test_empty_list(self, client: TestClient):
        response = client.get("/order/list", headers=auth_headers())
        assert response.status_code == 200
        assert response.json() == {"code": 200, "message": "success", "data": []}

    def test_lists_only_callers_orders(self, client: TestClient, mapper: OrderMapper):
        mine = mapper.create("u1", "coffee")
        mapper.create("u2", "cake")

        response = client.get("/order/list", headers=auth_headers())

        assert response.json()["data"] == [{"id": mine.id, "userId": "u1", "name": "coffee"}]


class TestCreateOrder:
    def test_creates_order_for_caller(self, client: TestClient, mapper: OrderMapper):
        response = client.post("/order/create", json={"name": "  coffee "}, headers=auth_headers())

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["userId"] == "u1"
        assert data["name"] == "coffee"
        assert [o.id for o in mapper.list_by_user("u1")] == [data["id"]]

    def test_owner_comes_from_identity_not_body(self, client: TestClient, mapper: OrderMapper):
        client.post("/order/create", json={"name": "coffee", "userId": "u2"}, headers=auth_headers())
        assert mapper.list_by_user("u2") == []
        assert len(mapper.list_by_user("u1")) == 1

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}, {"name": 5}, ["coffee"]])
    def test_invalid_name_returns_400(self, client: TestClient, mapper: OrderMapper, body):
        response = client.post("/order/create", json=body, headers=auth_headers())
        assert response.status_code == 400
        assert response.json() == {"code": 400, "message": "order name required", "data": None}
        assert mapper.list_by_user("u1") == []

    def test_non_json_body_returns_400(self, client: TestClient):
        response = client.post(
            "/order/create",
            content=b"name=coffee",
            headers={**auth_headers(), "content-type": "application/x-www-form-urlencoded"},
        )
        assert response.status_code == 400

    def test_name_at_length_limit_is_accepted(self, client: TestClient, mapper: OrderMapper):
        response = client.post("/order/create", json={"name": "x" * 255}, headers=auth_headers())
        assert response.status_code == 200
        assert [len(o.name) for o in mapper.list_by_user("u1")] == [255]

    @pytest.mark.parametrize("length", [256, 1000])
    def test_name_over_length_limit_returns_400(self, client: TestClient, mapper: OrderMapper, length: int):
        response = client.post("/order/create", json={"name": "x" * length}, headers=auth_headers())
        assert response.status_code == 400
        assert response.json()["message"] == "order name longer than 255 characters"
        assert mapper.list_by_user("u1") == []

    def test_length_limit_applies_after_trimming(self, client: TestClient):
        response = client.post("/order/create", json={"name": "  " + "x" * 255 + "  "}, headers=auth_headers())
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "x" * 255


class TestGetOrder:
    def test_returns_own_order(self, client: TestClient, mapper: OrderMapper):
        order = mapper.create("u1", "coffee")
        response = client.get(f"/order/{order.id}", headers=auth_headers())
        assert response.status_code == 200
        assert response.json()["data"] == {"id": order.id, "userId": "u1", "name": "coffee"}

    def test_other_users_order_looks_missing(self, client: TestClient, mapper: OrderMapper):
        order = mapper.create("u2", "cake")
        response = client.get(f"/order/{order.id}", headers=auth_headers())
        assert response.status_code == 404
        assert response.json() == {"code": 404, "message": "order not found", "data": None}

    def test_id_beyond_64_bit_range_returns_404(self, mapper: OrderMapper, accepting_verifier: StubVerifier):
        client = TestClient(create_app(accepting_verifier, mapper), raise_server_exceptions=False)
        response = client.get("/order/99999999999999999999", headers=auth_headers())
        assert response.status_code == 404
        assert response.json()["message"] == "order not found"


class TestDeleteOrder:
    def test_deletes_own_order(self, client: TestClient, mapper: OrderMapper):
        order = mapper.create("u1", "coffee")

        response = client.delete(f"/order/{order.id}", headers=auth_headers())

        assert response.status_code == 200
        assert response.json()["data"] == {"id": order.id}
        assert mapper.list_by_user("u1") == []

    def test_other_users_order_looks_missing(self, mapper: OrderMapper):
        order = mapper.create("u2", "cake")
        client = TestClient(create_app(_verifier_for("u1"), mapper))

        response = client.delete(f"/order/{order.id}", headers=auth_headers())

        assert response.status_code == 404
        assert response.json()["message"] == "order not found"
        assert mapper.get(order.id, "u2") == order

    def test_missing_order_returns_404(self, client: TestClient):
        response = client.delete("/order/999", headers=auth_headers())
        assert response.status_code == 404

    def test_id_beyond_64_bit_range_returns_404(self, mapper: OrderMapper, accepting_verifier: StubVerifier):
        client = TestClient(create_app(accepting_verifier, mapper), raise_server_exceptions=False)
        response = client.delete("/order/99999999999999999999", headers=auth_headers())
        assert response.status_code == 404
        assert response.json() == {"code": 404, "message": "order not found", "data": None}

    def test_largest_64_bit_id_reaches_mapper(self, client: TestClient):
        response = client.delete(f"/order/{2**63 - 1}", headers=auth_headers())
        assert response.status_code == 404


class TestWithIdentity:
    def test_handler_without_gate_refuses_to_run(self, mapper: OrderMapper):
        app = Starlette(routes=build_order_routes(mapper))
        client = TestClient(app)
        with pytest.raises(RuntimeError, match="No verified identity"):
            client.get("/order/list")
