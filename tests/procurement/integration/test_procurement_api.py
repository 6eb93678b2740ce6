"""Integration tests for Procurement API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from procurement.api import draft_router, order_router, register_procurement_handlers, user_router
from procurement.order.order import Order, OrderStatus
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers

STORE = {"X-Actor-Id": "store-001", "X-Actor-Role": "store"}
SUPPLIER = {"X-Actor-Id": "sup-001", "X-Actor-Role": "supplier"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(draft_router)
    app.include_router(order_router)
    app.include_router(user_router)
    register_exception_handlers(app)
    register_procurement_handlers(app)
    return TestClient(app)


@pytest.fixture(autouse=True)
def _products(catalog):
    catalog.stock("prod-001", "sup-001", price=1000.0, stock_quantity=20)
    catalog.stock("prod-002", "sup-001", price=2500.0, stock_quantity=3)


def _open_draft(client):
    response = client.post("/drafts", json={"store_id": "store-001", "supplier_id": "sup-001"})
    assert response.status_code == 201
    return response.json()["draft"]["id"]


def _add_item(client, order_id, product_id="prod-001", quantity=1):
    response = client.post(
        f"/drafts/{order_id}/items",
        json={"product_id": product_id, "quantity": quantity},
        headers=STORE,
    )
    assert response.status_code == 200
    return response.json()


def _placed_order(client, quantity=6, delivery_option="deliver", payment_method="gcash"):
    order_id = _open_draft(client)
    _add_item(client, order_id, quantity=quantity)
    response = client.post(
        f"/drafts/{order_id}/submit",
        json={"payment_method": payment_method, "delivery_option": delivery_option},
        headers=STORE,
    )
    assert response.status_code == 200
    return order_id


def _move(client, order_id, status):
    response = client.put(f"/orders/{order_id}/status", json={"status": status}, headers=SUPPLIER)
    assert response.status_code == 200
    return response.json()


class TestDraftEndpoints:
    def test_no_draft_returns_null(self, client):
        response = client.get("/drafts", params={"store_id": "store-001", "supplier_id": "sup-001"})
        assert response.status_code == 200
        assert response.json() == {"draft": None}

    def test_open_is_idempotent(self, client):
        first = _open_draft(client)
        second = _open_draft(client)
        assert first == second

        response = client.get("/drafts", params={"store_id": "store-001", "supplier_id": "sup-001"})
        assert response.json()["draft"]["id"] == first

    def test_add_and_merge_items(self, client):
        order_id = _open_draft(client)
        _add_item(client, order_id, quantity=2)
        body = _add_item(client, order_id, quantity=3)

        assert len(body["items"]) == 1
        assert body["items"][0]["quantity"] == 5
        assert body["total_amount"] == 5000.0

    def test_stock_error_returns_400(self, client):
        order_id = _open_draft(client)
        response = client.post(
            f"/drafts/{order_id}/items",
            json={"product_id": "prod-002", "quantity": 4},
            headers=STORE,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "insufficient_stock"

    def test_other_store_gets_403(self, client):
        order_id = _open_draft(client)
        response = client.post(
            f"/drafts/{order_id}/items",
            json={"product_id": "prod-001", "quantity": 1},
            headers={"X-Actor-Id": "store-999"},
        )
        assert response.status_code == 403

    def test_update_and_remove_item(self, client):
        order_id = _open_draft(client)
        item_id = _add_item(client, order_id, quantity=1)["items"][0]["id"]

        response = client.put(f"/drafts/{order_id}/items/{item_id}", json={"quantity": 4}, headers=STORE)
        assert response.status_code == 200
        assert response.json()["total_amount"] == 4000.0

        response = client.delete(f"/drafts/{order_id}/items/{item_id}", headers=STORE)
        assert response.status_code == 200
        assert response.json()["items"] == []
        assert response.json()["status"] == "draft"

    def test_unknown_item_returns_404(self, client):
        order_id = _open_draft(client)
        _add_item(client, order_id)

        response = client.put(f"/drafts/{order_id}/items/item-999", json={"quantity": 2}, headers=STORE)
        assert response.status_code == 404

        response = client.delete(f"/drafts/{order_id}/items/item-999", headers=STORE)
        assert response.status_code == 404

    def test_discard_draft(self, client):
        order_id = _open_draft(client)
        response = client.delete(f"/drafts/{order_id}", headers=STORE)
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_below_minimum_returns_400(self, client):
        order_id = _open_draft(client)
        _add_item(client, order_id, quantity=4)
        response = client.post(
            f"/drafts/{order_id}/submit",
            json={"payment_method": "gcash", "delivery_option": "pickup"},
            headers=STORE,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "minimum_order"

    def test_submit_computes_delivery_fee(self, client):
        order_id = _placed_order(client, quantity=6, delivery_option="deliver")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PREPARING.value
        assert order.delivery_fee == 120.0
        assert order.grand_total == 6120.0

    def test_submit_empty_draft_returns_409(self, client):
        order_id = _open_draft(client)
        response = client.post(
            f"/drafts/{order_id}/submit",
            json={"payment_method": "gcash", "delivery_option": "pickup"},
            headers=STORE,
        )
        assert response.status_code == 409
        assert response.json()["code"] == "invalid_state"


class TestOrderEndpoints:
    def test_list_orders_for_store(self, client):
        order_id = _placed_order(client)
        response = client.get("/orders", headers=STORE)
        assert response.status_code == 200
        assert [o["id"] for o in response.json()["orders"]] == [order_id]

    def test_read_order(self, client):
        order_id = _placed_order(client)
        response = client.get(f"/orders/{order_id}", headers=SUPPLIER)
        assert response.status_code == 200
        assert response.json()["supplier_id"] == "sup-001"

    def test_outsider_cannot_read_order(self, client):
        order_id = _placed_order(client)
        response = client.get(f"/orders/{order_id}", headers={"X-Actor-Id": "store-999"})
        assert response.status_code == 403

    def test_supplier_moves_order(self, client):
        order_id = _placed_order(client)
        assert _move(client, order_id, "in_transit")["status"] == "in_transit"
        assert _move(client, order_id, "delivered")["status"] == "delivered"

    def test_illegal_transition_returns_409(self, client):
        order_id = _placed_order(client)
        response = client.put(f"/orders/{order_id}/status", json={"status": "delivered"}, headers=SUPPLIER)
        assert response.status_code == 409
        assert response.json()["code"] == "illegal_transition"

    def test_cancel_denied_by_default(self, client):
        order_id = _placed_order(client)
        response = client.post(f"/orders/{order_id}/cancel", headers=STORE)
        assert response.status_code == 409

    def test_cancel_when_allowed(self, client, allow_cancellation):
        order_id = _placed_order(client)
        response = client.post(f"/orders/{order_id}/cancel", headers=STORE)
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_payment_confirmation(self, client):
        order_id = _placed_order(client, payment_method="gcash")

        response = client.put(f"/orders/{order_id}/payment/paid", headers=SUPPLIER)
        assert response.status_code == 200
        assert response.json()["payment_status"] == "paid"

        response = client.put(f"/orders/{order_id}/payment/pending", headers=SUPPLIER)
        assert response.json()["payment_status"] == "pending"

    def test_store_cannot_confirm_payment(self, client):
        order_id = _placed_order(client)
        response = client.put(f"/orders/{order_id}/payment/paid", headers=STORE)
        assert response.status_code == 409


class TestMessageEndpoints:
    def test_send_and_list(self, client):
        order_id = _placed_order(client)
        response = client.post(f"/orders/{order_id}/messages", json={"content": "Hi"}, headers=STORE)
        assert response.status_code == 201

        response = client.get(f"/orders/{order_id}/messages", headers=SUPPLIER)
        assert response.status_code == 200
        body = response.json()
        assert body["messaging_open"] is True
        assert [m["content"] for m in body["messages"]] == ["Hi"]

    def test_outsider_gets_403(self, client):
        order_id = _placed_order(client)
        response = client.post(
            f"/orders/{order_id}/messages",
            json={"content": "Hi"},
            headers={"X-Actor-Id": "store-999"},
        )
        assert response.status_code == 403
        assert response.json()["code"] == "access_denied"


class TestRatingEndpoints:
    def test_rate_delivered_order(self, client):
        order_id = _placed_order(client)
        _move(client, order_id, "in_transit")
        _move(client, order_id, "delivered")

        response = client.post(f"/orders/{order_id}/ratings", json={"score": 4}, headers=STORE)
        assert response.status_code == 201
        assert response.json()["rated_id"] == "sup-001"

        response = client.get("/users/sup-001/ratings")
        assert response.status_code == 200
        body = response.json()
        assert body["summary"]["count"] == 1
        assert body["summary"]["average"] == 4.0
        assert len(body["ratings"]) == 1

    def test_duplicate_rating_returns_409(self, client):
        order_id = _placed_order(client)
        _move(client, order_id, "in_transit")
        _move(client, order_id, "delivered")
        client.post(f"/orders/{order_id}/ratings", json={"score": 4}, headers=STORE)

        response = client.post(f"/orders/{order_id}/ratings", json={"score": 2}, headers=STORE)
        assert response.status_code == 409
        assert response.json()["code"] == "duplicate_rating"

    def test_rating_before_delivery_returns_409(self, client):
        order_id = _placed_order(client)
        response = client.post(f"/orders/{order_id}/ratings", json={"score": 4}, headers=STORE)
        assert response.status_code == 409
        assert response.json()["code"] == "invalid_state"

    def test_order_detail_includes_ratings(self, client):
        order_id = _placed_order(client)
        _move(client, order_id, "in_transit")
        _move(client, order_id, "delivered")

        response = client.get(f"/orders/{order_id}", headers=STORE)
        assert response.json()["ratings"] == []

        client.post(f"/orders/{order_id}/ratings", json={"score": 5}, headers=STORE)

        response = client.get(f"/orders/{order_id}", headers=SUPPLIER)
        assert response.status_code == 200
        ratings = response.json()["ratings"]
        assert len(ratings) == 1
        assert ratings[0]["rater_id"] == "store-001"
        assert ratings[0]["score"] == 5
