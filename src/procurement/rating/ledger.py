"""Rating ledger — CreateRating command, handler and per-user lookups.

Either party may rate the other once per delivered order. One rating per
(order, rater) is enforced here with a repository query before saving, and
again by the unique ``rater_key`` when two submissions race.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from procurement.domain import procurement
from procurement.exceptions import AccessDeniedError, DuplicateRatingError, InvalidStateError
from procurement.order.order import Order, OrderStatus
from procurement.rating.rating import OrderRating
from procurement.utils.logging import get_logger

logger = get_logger(__name__)


@procurement.command(part_of="OrderRating")
class CreateRating:
    order_id = Identifier(required=True)
    rater_id = Identifier(required=True)
    score = Integer(required=True, min_value=1, max_value=5)
    comment = Text()
    rated_id = Identifier()


@procurement.command_handler(part_of=OrderRating)
class CreateRatingHandler:
    @handle(CreateRating)
    def create_rating(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)

        if order.status != OrderStatus.DELIVERED.value:
            raise InvalidStateError(
                "Only delivered orders can be rated",
                order_id=str(order.id),
                status=order.status,
            )
        if not order.is_party(command.rater_id):
            raise AccessDeniedError("Only the order's store and supplier can rate it", order_id=str(order.id))

        repo = current_domain.repository_for(OrderRating)
        existing = repo._dao.query.filter(
            rater_key=OrderRating.rater_key_for(command.order_id, command.rater_id),
        ).all()
        if existing.items:
            raise DuplicateRatingError("You have already rated this order", order_id=str(order.id))

        counterparty = order.counterparty_of(command.rater_id)
        if command.rated_id is not None and str(command.rated_id) != counterparty:
            raise ValidationError({"rated_id": ["Rated user must be the other party on the order"]})

        rating = OrderRating.record(
            order_id=command.order_id,
            rater_id=command.rater_id,
            rated_id=counterparty,
            score=command.score,
            comment=command.comment,
        )
        try:
            repo.add(rating)
        except ValidationError as exc:
            if "rater_key" in exc.messages:
                raise DuplicateRatingError("You have already rated this order", order_id=str(order.id)) from exc
            raise

        logger.info(
            "Order rated",
            order_id=str(order.id),
            rater_id=str(command.rater_id),
            rated_id=counterparty,
            score=command.score,
        )
        return rating


def list_for_user(user_id) -> list[OrderRating]:
    """Ratings the user has received, newest first."""
    repo = current_domain.repository_for(OrderRating)
    ratings = repo._dao.query.filter(rated_id=str(user_id)).all().items
    return sorted(ratings, key=lambda r: r.created_at, reverse=True)


def list_for_order(order_id) -> list[OrderRating]:
    """Ratings left on one order, oldest first."""
    repo = current_domain.repository_for(OrderRating)
    ratings = repo._dao.query.filter(order_id=str(order_id)).all().items
    return sorted(ratings, key=lambda r: r.created_at)


def rating_summary(user_id) -> dict:
    """Average, count and per-score distribution of the ratings a user received."""
    ratings = list_for_user(user_id)
    distribution = {score: 0 for score in range(1, 6)}
    for rating in ratings:
        distribution[rating.score] += 1

    count = len(ratings)
    average = round(sum(r.score for r in ratings) / count, 2) if count else 0.0
    return {
        "user_id": str(user_id),
        "average": average,
        "count": count,
        "distribution": distribution,
    }
