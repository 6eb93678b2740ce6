"""Procurement load test scenarios.

Three stateful SequentialTaskSet journeys: a store building and editing a
draft, a full order lifecycle through delivery and rating, and a supplier
correcting a premature delivery.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    draft_data,
    draft_item_data,
    message_data,
    party_id,
    product_data,
    rating_data,
    submission_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import OrderState

PRODUCTS_PER_SUPPLIER = 3


class _ProcurementJourney(SequentialTaskSet):
    """Shared setup: a fresh store/supplier pair with stocked products and an open draft."""

    def on_start(self):
        self.state = OrderState(store_id=party_id("store"), supplier_id=party_id("sup"))

    def _stock_products(self):
        for _ in range(PRODUCTS_PER_SUPPLIER):
            with self.client.post(
                "/catalog/products",
                json=product_data(self.state.supplier_id),
                catch_response=True,
                name="POST /catalog/products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["product_id"])
                else:
                    resp.failure(f"Stock product failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    def _open_draft(self):
        with self.client.post(
            "/drafts",
            json=draft_data(self.state.store_id, self.state.supplier_id),
            catch_response=True,
            name="POST /drafts",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["draft"]["id"]
            else:
                resp.failure(f"Open draft failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    def _add_items(self):
        for product_id in self.state.product_ids:
            with self.client.post(
                f"/drafts/{self.state.order_id}/items",
                json=draft_item_data(product_id),
                headers=self.state.store_headers,
                catch_response=True,
                name="POST /drafts/{id}/items",
            ) as resp:
                if resp.status_code == 200:
                    self.state.item_ids = [item["id"] for item in resp.json()["items"]]
                else:
                    resp.failure(f"Add draft item failed: {resp.status_code} — {extract_error_detail(resp)}")

    def _submit(self):
        with self.client.post(
            f"/drafts/{self.state.order_id}/submit",
            json=submission_data(),
            headers=self.state.store_headers,
            catch_response=True,
            name="POST /drafts/{id}/submit",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "preparing"
            else:
                resp.failure(f"Submit failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    def _move(self, status):
        with self.client.put(
            f"/orders/{self.state.order_id}/status",
            json={"status": status},
            headers=self.state.supplier_headers,
            catch_response=True,
            name="PUT /orders/{id}/status",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = status
            else:
                resp.failure(f"Move to {status} failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()


class DraftEditingJourney(_ProcurementJourney):
    """Stock -> Open Draft -> Add Items -> Update Quantity -> Remove Item -> Discard.

    Models a store that fills a cart, second-guesses it and walks away.
    """

    @task
    def stock_products(self):
        self._stock_products()

    @task
    def open_draft(self):
        self._open_draft()

    @task
    def add_items(self):
        self._add_items()

    @task
    def update_quantity(self):
        if not self.state.item_ids:
            return
        with self.client.put(
            f"/drafts/{self.state.order_id}/items/{self.state.item_ids[0]}",
            json={"quantity": 1},
            headers=self.state.store_headers,
            catch_response=True,
            name="PUT /drafts/{id}/items/{item_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update quantity failed: {extract_error_detail(resp)}")

    @task
    def remove_item(self):
        if not self.state.item_ids:
            return
        with self.client.delete(
            f"/drafts/{self.state.order_id}/items/{self.state.item_ids[-1]}",
            headers=self.state.store_headers,
            catch_response=True,
            name="DELETE /drafts/{id}/items/{item_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Remove item failed: {extract_error_detail(resp)}")

    @task
    def discard(self):
        with self.client.delete(
            f"/drafts/{self.state.order_id}",
            headers=self.state.store_headers,
            catch_response=True,
            name="DELETE /drafts/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Discard failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class OrderFullLifecycleJourney(_ProcurementJourney):
    """Stock -> Draft -> Submit -> In Transit -> Delivered -> Message -> Rate (both ways)."""

    @task
    def stock_products(self):
        self._stock_products()

    @task
    def open_draft(self):
        self._open_draft()

    @task
    def add_items(self):
        self._add_items()

    @task
    def submit(self):
        self._submit()

    @task
    def ship(self):
        self._move("in_transit")

    @task
    def deliver(self):
        self._move("delivered")

    @task
    def thank_supplier(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/messages",
            json=message_data(),
            headers=self.state.store_headers,
            catch_response=True,
            name="POST /orders/{id}/messages",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Send message failed: {extract_error_detail(resp)}")

    @task
    def store_rates_supplier(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/ratings",
            json=rating_data(),
            headers=self.state.store_headers,
            catch_response=True,
            name="POST /orders/{id}/ratings",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Store rating failed: {extract_error_detail(resp)}")

    @task
    def supplier_rates_store(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/ratings",
            json=rating_data(),
            headers=self.state.supplier_headers,
            catch_response=True,
            name="POST /orders/{id}/ratings",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Supplier rating failed: {extract_error_detail(resp)}")

    @task
    def read_supplier_ratings(self):
        with self.client.get(
            f"/users/{self.state.supplier_id}/ratings",
            catch_response=True,
            name="GET /users/{id}/ratings",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read ratings failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class DeliveryCorrectionJourney(_ProcurementJourney):
    """Stock -> Draft -> Submit -> In Transit -> Delivered -> back to In Transit -> Delivered."""

    @task
    def stock_products(self):
        self._stock_products()

    @task
    def open_draft(self):
        self._open_draft()

    @task
    def add_items(self):
        self._add_items()

    @task
    def submit(self):
        self._submit()

    @task
    def ship(self):
        self._move("in_transit")

    @task
    def deliver_too_early(self):
        self._move("delivered")

    @task
    def correct(self):
        self._move("in_transit")

    @task
    def deliver(self):
        self._move("delivered")

    @task
    def done(self):
        self.interrupt()


class ProcurementUser(HttpUser):
    """Locust user simulating store and supplier interactions.

    Weighted distribution:
    - 40% Draft editing (browsing, abandonment)
    - 45% Full order lifecycle (happy path)
    - 15% Delivery correction
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        DraftEditingJourney: 8,
        OrderFullLifecycleJourney: 9,
        DeliveryCorrectionJourney: 3,
    }
