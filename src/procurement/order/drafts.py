"""Draft cart — commands and handler.

A store keeps at most one draft per supplier. The draft is the cart: line
items are added, re-quantified and removed against live catalog stock until
the store submits it.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, TransactionError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain
from sqlalchemy.exc import IntegrityError

from procurement.catalog import get_catalog
from procurement.domain import procurement
from procurement.exceptions import AccessDeniedError, ConflictError
from procurement.order.order import Order
from procurement.utils.logging import get_logger

logger = get_logger(__name__)


@procurement.command(part_of="Order")
class OpenDraft:
    """Start a new, empty draft for a store/supplier pair."""

    store_id = Identifier(required=True)
    supplier_id = Identifier(required=True)


@procurement.command(part_of="Order")
class AddDraftItem:
    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    actor_id = Identifier()


@procurement.command(part_of="Order")
class UpdateDraftItemQuantity:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)
    actor_id = Identifier()


@procurement.command(part_of="Order")
class RemoveDraftItem:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    actor_id = Identifier()


@procurement.command(part_of="Order")
class DiscardDraft:
    """Abandon a draft without submitting it."""

    order_id = Identifier(required=True)
    actor_id = Identifier()


def _product_for(order, product_id):
    """Fetch a product from the catalog, insisting it belongs to the order's supplier."""
    product = get_catalog().get_product(str(product_id))
    if product is None or str(product.supplier_id) != str(order.supplier_id):
        raise ObjectNotFoundError(f"Product {product_id} is not offered by supplier {order.supplier_id}")
    return product


def _assert_store(order, actor_id):
    if actor_id is not None and str(actor_id) != str(order.store_id):
        raise AccessDeniedError("Only the ordering store can edit its draft", order_id=str(order.id))


@procurement.command_handler(part_of=Order)
class ManageDraftHandler:
    @handle(OpenDraft)
    def open_draft(self, command):
        repo = current_domain.repository_for(Order)

        existing = repo.find_draft(command.store_id, command.supplier_id)
        if existing:
            raise ConflictError(
                "A draft already exists for this store and supplier",
                order_id=str(existing.id),
            )

        order = Order.create(store_id=command.store_id, supplier_id=command.supplier_id)
        repo.add(order)

        logger.info(
            "Draft opened",
            order_id=str(order.id),
            store_id=str(command.store_id),
            supplier_id=str(command.supplier_id),
        )
        return order

    @handle(AddDraftItem)
    def add_draft_item(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        _assert_store(order, command.actor_id)

        product = _product_for(order, command.product_id)
        order.add_item(product, command.quantity)
        repo.add(order)
        return order

    @handle(UpdateDraftItemQuantity)
    def update_draft_item_quantity(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        _assert_store(order, command.actor_id)

        item = order.item_for(command.item_id)
        product = _product_for(order, item.product_id)
        order.update_item_quantity(command.item_id, command.quantity, available=product.stock_quantity)
        repo.add(order)
        return order

    @handle(RemoveDraftItem)
    def remove_draft_item(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        _assert_store(order, command.actor_id)

        order.remove_item(command.item_id)
        repo.add(order)
        return order

    @handle(DiscardDraft)
    def discard_draft(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        _assert_store(order, command.actor_id)

        order.discard()
        repo.add(order)

        logger.info("Draft discarded", order_id=str(order.id), store_id=str(order.store_id))
        return order


def get_draft(store_id, supplier_id) -> Order | None:
    """The store's open draft with this supplier, or ``None``."""
    return current_domain.repository_for(Order).find_draft(store_id, supplier_id)


def get_or_create_draft(store_id, supplier_id) -> Order:
    """Return the pair's draft, opening one if needed.

    Concurrent callers converge on the same draft. Losing the race to open
    one is treated as finding it, whether the loss shows up as a
    ``ConflictError`` from the handler, as Protean's unique-field check on
    ``draft_key``, or as the database's unique index rejecting the commit.
    """
    repo = current_domain.repository_for(Order)

    existing = repo.find_draft(store_id, supplier_id)
    if existing:
        return existing

    try:
        return current_domain.process(
            OpenDraft(store_id=store_id, supplier_id=supplier_id),
            asynchronous=False,
        )
    except ConflictError as exc:
        return repo.get(exc.order_id)
    except (ValidationError, TransactionError, IntegrityError):
        existing = repo.find_draft(store_id, supplier_id)
        if existing is None:
            raise
        logger.info(
            "Draft race lost, using existing draft",
            order_id=str(existing.id),
            store_id=str(store_id),
            supplier_id=str(supplier_id),
        )
        return existing
