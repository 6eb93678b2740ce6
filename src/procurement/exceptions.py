"""Business rule violations raised by the procurement domain.

Every error here is terminal for the request that triggered it and is meant
to be shown to the user as-is. Malformed input is reported with Protean's
``ValidationError`` and missing records with ``ObjectNotFoundError``; these
classes cover the rest.
"""


class ProcurementError(Exception):
    status_code = 400
    code = "procurement_error"

    def __init__(self, message, **details):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self):
        return {"error": self.message, "code": self.code, **self.details}


class StockError(ProcurementError):
    """Requested quantity exceeds what the catalog reports in stock."""

    code = "insufficient_stock"


class MinimumOrderError(ProcurementError):
    code = "minimum_order"


class InvalidStateError(ProcurementError):
    """Operation is not valid for the order's current status."""

    status_code = 409
    code = "invalid_state"


class IllegalTransitionError(ProcurementError):
    """Status change not permitted, or not permitted for this actor."""

    status_code = 409
    code = "illegal_transition"


class ConflictError(ProcurementError):
    """A draft already exists for the store/supplier pair.

    Carries ``order_id`` of the existing draft so callers can treat the
    conflict as success.
    """

    status_code = 409
    code = "draft_exists"

    def __init__(self, message, order_id=None):
        super().__init__(message, order_id=order_id)
        self.order_id = order_id


class MessagingClosedError(ProcurementError):
    status_code = 403
    code = "messaging_closed"


class DuplicateRatingError(ProcurementError):
    status_code = 409
    code = "duplicate_rating"


class AccessDeniedError(ProcurementError):
    """Actor is not a party to the order they are acting on."""

    status_code = 403
    code = "access_denied"
