"""Order submission — command and handler.

Turns a store's draft into a placed order. Checks run in a fixed order so
callers always see the most fundamental problem first:

1. the order is a non-empty draft
2. the items total reaches the minimum order amount
3. every line still fits in current stock
"""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from procurement import config
from procurement.catalog import get_catalog
from procurement.domain import procurement
from procurement.exceptions import AccessDeniedError, MinimumOrderError, StockError
from procurement.order.order import DeliveryOption, Order, PaymentMethod
from procurement.utils.logging import get_logger

logger = get_logger(__name__)


@procurement.command(part_of="Order")
class SubmitOrder:
    order_id = Identifier(required=True)
    payment_method = String(required=True, choices=PaymentMethod)
    delivery_option = String(required=True, choices=DeliveryOption)
    shipping_address = Text()
    notes = Text()
    payment_proof_ref = String(max_length=500)
    actor_id = Identifier()


def delivery_fee(order, delivery_option, rate_per_unit=None):
    """Flat per-unit delivery charge; pickup is free."""
    if delivery_option != DeliveryOption.DELIVER.value:
        return 0.0
    if rate_per_unit is None:
        rate_per_unit = config.delivery_rate_per_unit()
    return round(order.total_quantity() * rate_per_unit, 2)


def _assert_minimum(order, minimum):
    if order.total_amount < minimum:
        raise MinimumOrderError(
            f"Minimum order amount is {minimum:.2f}",
            order_id=str(order.id),
            total_amount=order.total_amount,
            minimum=minimum,
        )


def _assert_in_stock(order, catalog):
    for item in order.items:
        product = catalog.get_product(str(item.product_id))
        available = product.stock_quantity if product else 0
        if item.quantity > available:
            raise StockError(
                f"Insufficient stock: only {available} available",
                product_id=str(item.product_id),
                requested=item.quantity,
                available=available,
            )


@procurement.command_handler(part_of=Order)
class SubmitOrderHandler:
    @handle(SubmitOrder)
    def submit_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if command.actor_id is not None and str(command.actor_id) != str(order.store_id):
            raise AccessDeniedError("Only the ordering store can submit its draft", order_id=str(order.id))

        order.assert_submittable()
        _assert_minimum(order, config.minimum_order_amount())
        _assert_in_stock(order, get_catalog())

        fee = delivery_fee(order, command.delivery_option)
        order.place(
            payment_method=command.payment_method,
            delivery_option=command.delivery_option,
            delivery_fee=fee,
            shipping_address=command.shipping_address,
            notes=command.notes,
            payment_proof_ref=command.payment_proof_ref,
        )
        repo.add(order)

        logger.info(
            "Order submitted",
            order_id=str(order.id),
            store_id=str(order.store_id),
            supplier_id=str(order.supplier_id),
            grand_total=order.grand_total,
        )
        return order
