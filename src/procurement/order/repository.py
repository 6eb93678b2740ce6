"""Repository for the Order aggregate."""

from procurement.domain import procurement
from procurement.order.order import ActorRole, Order, OrderStatus


@procurement.repository(part_of=Order)
class OrderRepository:
    """Order lookups beyond fetch-by-id."""

    def find_draft(self, store_id, supplier_id) -> Order | None:
        """The open draft for a store/supplier pair, if one exists."""
        results = self._dao.query.filter(
            draft_key=Order.draft_key_for(store_id, supplier_id),
            status=OrderStatus.DRAFT.value,
        ).all()
        return results.items[0] if results.items else None

    def find_for_party(self, party_id, role, status=None) -> list[Order]:
        """Orders where ``party_id`` is the store or the supplier, newest first."""
        criteria = {"supplier_id" if role == ActorRole.SUPPLIER.value else "store_id": str(party_id)}
        if status:
            criteria["status"] = status

        orders = self._dao.query.filter(**criteria).all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)
