"""Order aggregate: a store's purchase from one supplier.

An Order starts life as the store's draft cart for a supplier. Line items can
be added, re-quantified and removed only while it is a draft. Submission
freezes the items and hands the order to the supplier, who drives it
through the delivery states.

State Machine:
    DRAFT → PREPARING                      (submission only)
    PREPARING → IN_TRANSIT → DELIVERED     (supplier)
    DELIVERED → IN_TRANSIT                 (supplier correction)
    DRAFT | PREPARING | IN_TRANSIT → CANCELLED  (cancellation policy)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from procurement.domain import procurement
from procurement.exceptions import IllegalTransitionError, InvalidStateError, StockError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    DRAFT = "draft"
    PREPARING = "preparing"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "cash_on_delivery"
    GCASH = "gcash"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class DeliveryOption(Enum):
    PICKUP = "pickup"
    DELIVER = "deliver"


class ActorRole(Enum):
    STORE = "store"
    SUPPLIER = "supplier"


# Transitions the supplier may request explicitly. DRAFT → PREPARING is
# reserved for submission and CANCELLED for the cancellation policy.
_SUPPLIER_TRANSITIONS = {
    OrderStatus.PREPARING: {OrderStatus.IN_TRANSIT},
    OrderStatus.IN_TRANSIT: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.IN_TRANSIT},
}

_CANCELLABLE_STATES = {
    OrderStatus.DRAFT,
    OrderStatus.PREPARING,
    OrderStatus.IN_TRANSIT,
}


def _money(amount):
    return round(float(amount), 2)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@procurement.entity(part_of="Order")
class OrderItem:
    """One product line in an order.

    ``unit_price`` is copied from the catalog when the product first enters
    the order and is never refreshed afterwards.
    """

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    subtotal = Float(default=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@procurement.aggregate
class Order:
    store_id = Identifier(required=True)
    supplier_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.DRAFT.value)
    items = HasMany(OrderItem)
    total_amount = Float(default=0.0)
    payment_method = String(choices=PaymentMethod)
    payment_status = String(choices=PaymentStatus)
    payment_proof_ref = String(max_length=500)
    delivery_option = String(choices=DeliveryOption)
    delivery_fee = Float(default=0.0)
    grand_total = Float(default=0.0)
    shipping_address = Text()
    notes = Text()
    # "<store_id>:<supplier_id>" while a draft, the order's own id afterwards.
    draft_key = String(max_length=255, unique=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def delivery_fee_only_when_delivering(self):
        if self.delivery_fee and self.delivery_option != DeliveryOption.DELIVER.value:
            raise ValidationError({"delivery_fee": ["Delivery fee applies only to delivered orders"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, store_id, supplier_id):
        """Open an empty draft for the store/supplier pair."""
        now = datetime.now(UTC)
        return cls(
            store_id=store_id,
            supplier_id=supplier_id,
            status=OrderStatus.DRAFT.value,
            total_amount=0.0,
            draft_key=cls.draft_key_for(store_id, supplier_id),
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def draft_key_for(store_id, supplier_id):
        return f"{store_id}:{supplier_id}"

    # -------------------------------------------------------------------
    # Parties
    # -------------------------------------------------------------------
    def is_party(self, user_id):
        return str(user_id) in (str(self.store_id), str(self.supplier_id))

    def is_supplier(self, actor_id, actor_role):
        return actor_role == ActorRole.SUPPLIER.value and str(actor_id) == str(self.supplier_id)

    def counterparty_of(self, user_id):
        """The other side of the order from ``user_id``'s point of view."""
        if str(user_id) == str(self.store_id):
            return str(self.supplier_id)
        if str(user_id) == str(self.supplier_id):
            return str(self.store_id)
        return None

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def is_draft(self):
        return OrderStatus(self.status) == OrderStatus.DRAFT

    def _assert_draft(self, action):
        if not self.is_draft:
            raise InvalidStateError(
                f"Cannot {action} once the order is {self.status}",
                order_id=str(self.id),
                status=self.status,
            )

    @staticmethod
    def _assert_quantity(quantity):
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

    def item_for(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError(f"Item {item_id} not found in order {self.id}")
        return item

    def item_for_product(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def total_quantity(self):
        return sum(item.quantity for item in self.items)

    def _recalculate_total(self):
        """Rebuild the total from the current lines."""
        self.total_amount = _money(sum(item.subtotal for item in self.items))

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Draft line items
    # -------------------------------------------------------------------
    def add_item(self, product, quantity):
        """Add ``quantity`` units of a catalog product, merging with an existing line.

        The merged quantity, not just the increment, must fit in the stock
        the catalog reports right now.
        """
        self._assert_draft("add items")
        self._assert_quantity(quantity)

        existing = self.item_for_product(product.product_id)
        combined = quantity + (existing.quantity if existing else 0)
        if combined > product.stock_quantity:
            raise StockError(
                f"Insufficient stock: only {product.stock_quantity} available",
                product_id=str(product.product_id),
                requested=combined,
                available=product.stock_quantity,
            )

        with atomic_change(self):
            if existing:
                existing.quantity = combined
                existing.subtotal = _money(existing.unit_price * combined)
                item = existing
            else:
                item = OrderItem(
                    product_id=product.product_id,
                    quantity=quantity,
                    unit_price=product.price,
                    subtotal=_money(product.price * quantity),
                )
                self.add_items(item)

            self._recalculate_total()
            self._touch()

        return item

    def update_item_quantity(self, item_id, quantity, available):
        """Set a line's quantity outright, capped by ``available`` stock."""
        self._assert_draft("change item quantities")
        self._assert_quantity(quantity)

        item = self.item_for(item_id)
        if quantity > available:
            raise StockError(
                f"Insufficient stock: only {available} available",
                product_id=str(item.product_id),
                requested=quantity,
                available=available,
            )

        with atomic_change(self):
            item.quantity = quantity
            item.subtotal = _money(item.unit_price * quantity)
            self._recalculate_total()
            self._touch()

        return item

    def remove_item(self, item_id):
        """Drop a line. An emptied draft stays open."""
        self._assert_draft("remove items")

        item = self.item_for(item_id)
        with atomic_change(self):
            self.remove_items(item)
            self._recalculate_total()
            self._touch()

    # -------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------
    def assert_submittable(self):
        self._assert_draft("submit")
        if not self.items:
            raise InvalidStateError("Cannot submit an order with no items", order_id=str(self.id))

    def place(
        self,
        payment_method,
        delivery_option,
        delivery_fee,
        shipping_address=None,
        notes=None,
        payment_proof_ref=None,
    ):
        """Freeze the draft as a placed order awaiting preparation."""
        self.assert_submittable()

        with atomic_change(self):
            self.status = OrderStatus.PREPARING.value
            self.payment_method = payment_method
            self.payment_status = PaymentStatus.PENDING.value
            self.payment_proof_ref = payment_proof_ref
            self.delivery_option = delivery_option
            self.delivery_fee = _money(delivery_fee)
            self.grand_total = _money(self.total_amount + self.delivery_fee)
            self.shipping_address = shipping_address
            self.notes = notes
            self.draft_key = str(self.id)
            self._touch()

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def transition(self, actor_id, actor_role, target_status):
        """Move the order along a supplier-driven edge of the state machine."""
        current = OrderStatus(self.status)
        target = OrderStatus(target_status)

        if target not in _SUPPLIER_TRANSITIONS.get(current, set()):
            raise IllegalTransitionError(
                f"Cannot transition from {current.value} to {target.value}",
                order_id=str(self.id),
            )
        if not self.is_supplier(actor_id, actor_role):
            raise IllegalTransitionError(
                f"Only the order's supplier can mark it {target.value}",
                order_id=str(self.id),
            )

        self.status = target.value
        self._touch()

    def cancel(self, actor_id, actor_role, allowed_roles):
        """Cancel an order that has not been delivered yet.

        Who may cancel is decided by the caller-supplied ``allowed_roles``.
        Cancelling a draft discards its lines and frees the pair's draft slot.
        """
        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise IllegalTransitionError(
                f"Cannot cancel an order that is {current.value}",
                order_id=str(self.id),
            )
        if actor_role not in allowed_roles or not self.is_party(actor_id):
            raise IllegalTransitionError("Not authorized to cancel this order", order_id=str(self.id))

        if current == OrderStatus.DRAFT:
            self.discard()
            return

        self.status = OrderStatus.CANCELLED.value
        self._touch()

    def discard(self):
        """Throw away a draft: drop its lines and free the pair's draft slot."""
        self._assert_draft("discard")

        with atomic_change(self):
            for item in list(self.items):
                self.remove_items(item)
            self.total_amount = 0.0
            self.draft_key = str(self.id)
            self.status = OrderStatus.CANCELLED.value
            self._touch()

    # -------------------------------------------------------------------
    # Payment status
    # -------------------------------------------------------------------
    def mark_payment_paid(self, actor_id, actor_role):
        """Supplier confirms a GCash payment was received."""
        if not self.is_supplier(actor_id, actor_role):
            raise IllegalTransitionError("Only the order's supplier can confirm payment", order_id=str(self.id))
        if self.payment_method != PaymentMethod.GCASH.value:
            raise InvalidStateError("Payment confirmation only applies to GCash orders", order_id=str(self.id))
        if self.payment_status != PaymentStatus.PENDING.value:
            raise InvalidStateError(
                f"Payment is {self.payment_status or 'not started'}, expected pending",
                order_id=str(self.id),
            )

        self.payment_status = PaymentStatus.PAID.value
        self._touch()

    def mark_payment_pending(self, actor_id, actor_role):
        """Supplier puts a paid or failed payment back to pending."""
        if not self.is_supplier(actor_id, actor_role):
            raise IllegalTransitionError("Only the order's supplier can revert payment", order_id=str(self.id))
        if self.payment_method is None:
            raise InvalidStateError("Order has no payment to revert", order_id=str(self.id))
        if self.payment_status == PaymentStatus.PENDING.value:
            raise InvalidStateError("Payment is already pending", order_id=str(self.id))

        self.payment_status = PaymentStatus.PENDING.value
        self._touch()
