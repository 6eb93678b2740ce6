"""Payment status — commands and handler.

Payment is recorded, not processed: the supplier confirms a GCash transfer
once it shows up, and can take that confirmation back if it was premature.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from procurement.domain import procurement
from procurement.order.order import ActorRole, Order
from procurement.utils.logging import get_logger

logger = get_logger(__name__)


@procurement.command(part_of="Order")
class MarkPaymentPaid:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=ActorRole)


@procurement.command(part_of="Order")
class MarkPaymentPending:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=ActorRole)


@procurement.command_handler(part_of=Order)
class PaymentStatusHandler:
    @handle(MarkPaymentPaid)
    def mark_payment_paid(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_payment_paid(command.actor_id, command.actor_role)
        repo.add(order)

        logger.info("Payment confirmed", order_id=str(order.id), actor_id=str(command.actor_id))
        return order

    @handle(MarkPaymentPending)
    def mark_payment_pending(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_payment_pending(command.actor_id, command.actor_role)
        repo.add(order)

        logger.warning("Payment confirmation reverted", order_id=str(order.id), actor_id=str(command.actor_id))
        return order
