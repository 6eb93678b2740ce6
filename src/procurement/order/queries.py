"""Read-side helpers for orders."""

from protean.utils.globals import current_domain

from procurement.order.order import Order, OrderStatus


def get_order(order_id) -> Order:
    """Fetch an order with its items. Raises ``ObjectNotFoundError`` when missing."""
    return current_domain.repository_for(Order).get(order_id)


def list_orders(party_id, role, status=None) -> list[Order]:
    """Orders a store or supplier takes part in, newest first.

    Drafts are a store's private cart and only show up when asked for.
    """
    orders = current_domain.repository_for(Order).find_for_party(party_id, role, status=status)
    if status is None:
        orders = [o for o in orders if o.status != OrderStatus.DRAFT.value]
    return orders


def order_summary(order) -> dict:
    """Serializable view of an order and its lines."""
    return {
        "id": str(order.id),
        "store_id": str(order.store_id),
        "supplier_id": str(order.supplier_id),
        "status": order.status,
        "total_amount": order.total_amount,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "payment_proof_ref": order.payment_proof_ref,
        "delivery_option": order.delivery_option,
        "delivery_fee": order.delivery_fee,
        "grand_total": order.grand_total,
        "shipping_address": order.shipping_address,
        "notes": order.notes,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
        "items": [
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "subtotal": item.subtotal,
            }
            for item in order.items
        ],
    }
