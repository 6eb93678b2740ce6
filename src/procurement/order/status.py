"""Order status changes — commands and handler.

Suppliers move placed orders through preparing, in transit and delivered.
Cancellation sits beside the supplier edges and is governed by the
configured cancellation roles.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from procurement import config
from procurement.domain import procurement
from procurement.order.order import ActorRole, Order, OrderStatus
from procurement.utils.logging import get_logger

logger = get_logger(__name__)


@procurement.command(part_of="Order")
class TransitionOrder:
    order_id = Identifier(required=True)
    target_status = String(required=True, choices=OrderStatus)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=ActorRole)


@procurement.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=ActorRole)


@procurement.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(TransitionOrder)
    def transition_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        previous = order.status
        order.transition(command.actor_id, command.actor_role, command.target_status)
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            from_status=previous,
            to_status=order.status,
            actor_id=str(command.actor_id),
        )
        return order

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        order.cancel(command.actor_id, command.actor_role, allowed_roles=config.cancellation_roles())
        repo.add(order)

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            actor_id=str(command.actor_id),
            actor_role=command.actor_role,
        )
        return order
