"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class OrderState:
    """Tracks one store/supplier pair through a draft and its order."""

    store_id: str | None = None
    supplier_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    item_ids: list[str] = field(default_factory=list)
    current_status: str = "draft"

    @property
    def store_headers(self) -> dict:
        return {"X-Actor-Id": self.store_id, "X-Actor-Role": "store"}

    @property
    def supplier_headers(self) -> dict:
        return {"X-Actor-Id": self.supplier_id, "X-Actor-Role": "supplier"}
