"""Order messaging — command, handler and thread lookup."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from procurement.domain import procurement
from procurement.exceptions import AccessDeniedError, MessagingClosedError
from procurement.messaging.message import OrderMessage, is_open
from procurement.order.order import Order
from procurement.utils.logging import get_logger

logger = get_logger(__name__)


@procurement.command(part_of="OrderMessage")
class SendMessage:
    order_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    content = Text()
    image_ref = String(max_length=500)


@procurement.command_handler(part_of=OrderMessage)
class SendMessageHandler:
    @handle(SendMessage)
    def send_message(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)

        if not order.is_party(command.sender_id):
            raise AccessDeniedError("Only the order's store and supplier can message", order_id=str(order.id))
        if not is_open(order):
            logger.info("Message rejected, thread closed", order_id=str(order.id), sender_id=str(command.sender_id))
            raise MessagingClosedError(
                "Messaging is closed for this order",
                order_id=str(order.id),
            )

        message = OrderMessage.compose(
            order_id=command.order_id,
            sender_id=command.sender_id,
            content=command.content,
            image_ref=command.image_ref,
        )
        current_domain.repository_for(OrderMessage).add(message)
        return message


def list_messages(order_id, viewer_id=None) -> list[OrderMessage]:
    """An order's thread, oldest first. ``viewer_id`` must be a party when given."""
    order = current_domain.repository_for(Order).get(order_id)
    if viewer_id is not None and not order.is_party(viewer_id):
        raise AccessDeniedError("Only the order's store and supplier can read its messages", order_id=str(order.id))

    repo = current_domain.repository_for(OrderMessage)
    messages = repo._dao.query.filter(order_id=str(order_id)).all().items
    return sorted(messages, key=lambda m: m.created_at)
