"""OrderMessage aggregate and the messaging window.

Store and supplier talk to each other on an order's thread until the order
has sat delivered for the configured window. Messages are append-only.
"""

from datetime import UTC, datetime, timedelta

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from procurement import config
from procurement.domain import procurement
from procurement.order.order import OrderStatus

MAX_CONTENT_LENGTH = 5000


def _aware(moment):
    # Stored timestamps can come back without tzinfo
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def is_open(order, now=None) -> bool:
    """Whether the order's thread still accepts messages.

    Only a delivered order closes, and only once ``updated_at`` is at least
    the window old. Moving the order back to in transit refreshes
    ``updated_at`` and reopens the thread.
    """
    if order.status != OrderStatus.DELIVERED.value:
        return True
    if order.updated_at is None:
        return True

    now = _aware(now or datetime.now(UTC))
    window = timedelta(hours=config.messaging_window_hours())
    return now - _aware(order.updated_at) < window


def _check_body(content, image_ref):
    if not (content or "").strip() and not image_ref:
        raise ValidationError({"content": ["Message must have text or an image"]})
    if content and len(content) > MAX_CONTENT_LENGTH:
        raise ValidationError({"content": [f"Message cannot exceed {MAX_CONTENT_LENGTH} characters"]})


@procurement.aggregate
class OrderMessage:
    order_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    content = Text()
    image_ref = String(max_length=500)
    created_at = DateTime()

    @invariant.post
    def must_carry_text_or_image_within_limit(self):
        _check_body(self.content, self.image_ref)

    @classmethod
    def compose(cls, order_id, sender_id, content=None, image_ref=None):
        _check_body(content, image_ref)
        return cls(
            order_id=order_id,
            sender_id=sender_id,
            content=content,
            image_ref=image_ref,
            created_at=datetime.now(UTC),
        )
