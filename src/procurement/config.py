"""Business policy settings, read from the environment.

Values are resolved on every call so tests and operators can change them
without reloading modules.
"""

import os


def _float(name, default):
    return float(os.environ.get(name, default))


def minimum_order_amount() -> float:
    """Smallest item total a draft may be submitted with."""
    return _float("MINIMUM_ORDER_AMOUNT", "5000")


def delivery_rate_per_unit() -> float:
    """Delivery fee charged per unit ordered when the supplier delivers."""
    return _float("DELIVERY_RATE_PER_UNIT", "20")


def messaging_window_hours() -> float:
    return _float("MESSAGING_WINDOW_HOURS", "12")


def cancellation_roles() -> set[str]:
    """Roles allowed to cancel an order. Empty means nobody may cancel."""
    raw = os.environ.get("ORDER_CANCELLATION_ROLES", "")
    return {role.strip() for role in raw.split(",") if role.strip()}
