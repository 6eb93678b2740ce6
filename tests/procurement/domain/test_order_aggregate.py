"""Tests for the Order aggregate — draft creation and parties."""

from procurement.order.order import Order, OrderStatus


class TestDraftCreation:
    def test_new_draft_is_empty(self):
        order = Order.create(store_id="store-001", supplier_id="sup-001")
        assert order.status == OrderStatus.DRAFT.value
        assert order.total_amount == 0.0
        assert len(order.items) == 0
        assert order.is_draft

    def test_payment_and_delivery_unset_while_draft(self):
        order = Order.create(store_id="store-001", supplier_id="sup-001")
        assert order.payment_method is None
        assert order.payment_status is None
        assert order.delivery_option is None
        assert order.delivery_fee == 0.0

    def test_timestamps_set(self):
        order = Order.create(store_id="store-001", supplier_id="sup-001")
        assert order.created_at is not None
        assert order.updated_at is not None

    def test_draft_key_identifies_pair(self):
        order = Order.create(store_id="store-001", supplier_id="sup-001")
        assert order.draft_key == "store-001:sup-001"
        assert Order.draft_key_for("store-001", "sup-001") == order.draft_key


class TestParties:
    def test_store_and_supplier_are_parties(self):
        order = Order.create(store_id="store-001", supplier_id="sup-001")
        assert order.is_party("store-001")
        assert order.is_party("sup-001")
        assert not order.is_party("someone-else")

    def test_counterparty(self):
        order = Order.create(store_id="store-001", supplier_id="sup-001")
        assert order.counterparty_of("store-001") == "sup-001"
        assert order.counterparty_of("sup-001") == "store-001"
        assert order.counterparty_of("someone-else") is None

    def test_is_supplier_requires_role_and_identity(self):
        order = Order.create(store_id="store-001", supplier_id="sup-001")
        assert order.is_supplier("sup-001", "supplier")
        assert not order.is_supplier("sup-001", "store")
        assert not order.is_supplier("sup-002", "supplier")
