"""OrderRating aggregate — one party's score for the other after delivery."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String, Text

from procurement.domain import procurement


@procurement.aggregate
class OrderRating:
    order_id = Identifier(required=True)
    rater_id = Identifier(required=True)
    rated_id = Identifier(required=True)
    score = Integer(required=True, min_value=1, max_value=5)
    comment = Text()
    # "<order_id>:<rater_id>", one rating per party per order
    rater_key = String(max_length=255, unique=True)
    created_at = DateTime()

    @staticmethod
    def rater_key_for(order_id, rater_id):
        return f"{order_id}:{rater_id}"

    @classmethod
    def record(cls, order_id, rater_id, rated_id, score, comment=None):
        return cls(
            order_id=order_id,
            rater_id=rater_id,
            rated_id=rated_id,
            score=score,
            comment=comment,
            rater_key=cls.rater_key_for(order_id, rater_id),
            created_at=datetime.now(UTC),
        )
