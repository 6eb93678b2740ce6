"""Procurement bounded context: draft carts and store/supplier orders.

Stores build one draft per supplier, submit it as an order, and follow it
through preparation and delivery. Order chat and party-to-party ratings hang
off the same Order aggregate.
"""

from protean.domain import Domain

from procurement.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

procurement = Domain(name="procurement")
