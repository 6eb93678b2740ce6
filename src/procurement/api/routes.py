"""FastAPI routes for the Procurement domain — drafts, orders, messages, ratings and the fake catalog.

The caller's identity comes from ``X-Actor-Id`` / ``X-Actor-Role`` headers set
by the upstream auth layer.
"""

import os

from fastapi import APIRouter, Header, HTTPException
from protean.utils.globals import current_domain

from procurement.api.schemas import (
    AddDraftItemRequest,
    CreateRatingRequest,
    DraftResponse,
    MessageListResponse,
    MessageResponse,
    OpenDraftRequest,
    OrderDetailResponse,
    OrderListResponse,
    OrderResponse,
    ProductResponse,
    RatingResponse,
    RatingSummaryResponse,
    SendMessageRequest,
    StockProductRequest,
    SubmitOrderRequest,
    TransitionOrderRequest,
    UpdateDraftItemRequest,
    UserRatingsResponse,
)
from procurement.catalog import get_catalog
from procurement.catalog.fake_adapter import FakeCatalog
from procurement.exceptions import AccessDeniedError
from procurement.messaging.message import is_open
from procurement.messaging.sending import SendMessage, list_messages
from procurement.order.drafts import (
    AddDraftItem,
    DiscardDraft,
    RemoveDraftItem,
    UpdateDraftItemQuantity,
    get_draft,
    get_or_create_draft,
)
from procurement.order.payment import MarkPaymentPaid, MarkPaymentPending
from procurement.order.queries import get_order, list_orders, order_summary
from procurement.order.status import CancelOrder, TransitionOrder
from procurement.order.submission import SubmitOrder
from procurement.rating.ledger import CreateRating, list_for_order, list_for_user, rating_summary


def _order_response(order) -> OrderResponse:
    return OrderResponse(**order_summary(order))


def _iso(moment):
    return moment.isoformat() if moment else None


def _message_response(message) -> MessageResponse:
    return MessageResponse(
        id=str(message.id),
        order_id=str(message.order_id),
        sender_id=str(message.sender_id),
        content=message.content,
        image_ref=message.image_ref,
        created_at=_iso(message.created_at),
    )


def _rating_response(rating) -> RatingResponse:
    return RatingResponse(
        id=str(rating.id),
        order_id=str(rating.order_id),
        rater_id=str(rating.rater_id),
        rated_id=str(rating.rated_id),
        score=rating.score,
        comment=rating.comment,
        created_at=_iso(rating.created_at),
    )


# ---------------------------------------------------------------------------
# Draft Router
# ---------------------------------------------------------------------------
draft_router = APIRouter(prefix="/drafts", tags=["drafts"])


@draft_router.get("", response_model=DraftResponse)
async def read_draft(store_id: str, supplier_id: str) -> DraftResponse:
    draft = get_draft(store_id, supplier_id)
    return DraftResponse(draft=_order_response(draft) if draft else None)


@draft_router.post("", status_code=201, response_model=DraftResponse)
async def open_draft(body: OpenDraftRequest) -> DraftResponse:
    """Return the pair's draft, opening one when none exists."""
    draft = get_or_create_draft(body.store_id, body.supplier_id)
    return DraftResponse(draft=_order_response(draft))


@draft_router.post("/{order_id}/items", response_model=OrderResponse)
async def add_draft_item(
    order_id: str,
    body: AddDraftItemRequest,
    x_actor_id: str | None = Header(default=None),
) -> OrderResponse:
    command = AddDraftItem(
        order_id=order_id,
        product_id=body.product_id,
        quantity=body.quantity,
        actor_id=x_actor_id,
    )
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


@draft_router.put("/{order_id}/items/{item_id}", response_model=OrderResponse)
async def update_draft_item(
    order_id: str,
    item_id: str,
    body: UpdateDraftItemRequest,
    x_actor_id: str | None = Header(default=None),
) -> OrderResponse:
    command = UpdateDraftItemQuantity(
        order_id=order_id,
        item_id=item_id,
        quantity=body.quantity,
        actor_id=x_actor_id,
    )
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


@draft_router.delete("/{order_id}/items/{item_id}", response_model=OrderResponse)
async def remove_draft_item(
    order_id: str,
    item_id: str,
    x_actor_id: str | None = Header(default=None),
) -> OrderResponse:
    command = RemoveDraftItem(order_id=order_id, item_id=item_id, actor_id=x_actor_id)
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


@draft_router.delete("/{order_id}", response_model=OrderResponse)
async def discard_draft(order_id: str, x_actor_id: str | None = Header(default=None)) -> OrderResponse:
    command = DiscardDraft(order_id=order_id, actor_id=x_actor_id)
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


@draft_router.post("/{order_id}/submit", response_model=OrderResponse)
async def submit_draft(
    order_id: str,
    body: SubmitOrderRequest,
    x_actor_id: str | None = Header(default=None),
) -> OrderResponse:
    command = SubmitOrder(
        order_id=order_id,
        payment_method=body.payment_method,
        delivery_option=body.delivery_option,
        shipping_address=body.shipping_address,
        notes=body.notes,
        payment_proof_ref=body.payment_proof_ref,
        actor_id=x_actor_id,
    )
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderListResponse)
async def list_party_orders(
    status: str | None = None,
    x_actor_id: str = Header(),
    x_actor_role: str = Header(),
) -> OrderListResponse:
    orders = list_orders(x_actor_id, x_actor_role, status=status)
    return OrderListResponse(orders=[_order_response(o) for o in orders])


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def read_order(order_id: str, x_actor_id: str | None = Header(default=None)) -> OrderDetailResponse:
    order = get_order(order_id)
    if x_actor_id is not None and not order.is_party(x_actor_id):
        raise AccessDeniedError("Not a party to this order", order_id=order_id)
    return OrderDetailResponse(
        **order_summary(order),
        ratings=[_rating_response(rating) for rating in list_for_order(order.id)],
    )


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def transition_order(
    order_id: str,
    body: TransitionOrderRequest,
    x_actor_id: str = Header(),
    x_actor_role: str = Header(),
) -> OrderResponse:
    command = TransitionOrder(
        order_id=order_id,
        target_status=body.status,
        actor_id=x_actor_id,
        actor_role=x_actor_role,
    )
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, x_actor_id: str = Header(), x_actor_role: str = Header()) -> OrderResponse:
    command = CancelOrder(order_id=order_id, actor_id=x_actor_id, actor_role=x_actor_role)
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


@order_router.put("/{order_id}/payment/paid", response_model=OrderResponse)
async def mark_payment_paid(order_id: str, x_actor_id: str = Header(), x_actor_role: str = Header()) -> OrderResponse:
    command = MarkPaymentPaid(order_id=order_id, actor_id=x_actor_id, actor_role=x_actor_role)
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


@order_router.put("/{order_id}/payment/pending", response_model=OrderResponse)
async def mark_payment_pending(
    order_id: str,
    x_actor_id: str = Header(),
    x_actor_role: str = Header(),
) -> OrderResponse:
    command = MarkPaymentPending(order_id=order_id, actor_id=x_actor_id, actor_role=x_actor_role)
    order = current_domain.process(command, asynchronous=False)
    return _order_response(order)


@order_router.get("/{order_id}/messages", response_model=MessageListResponse)
async def read_messages(order_id: str, x_actor_id: str = Header()) -> MessageListResponse:
    messages = list_messages(order_id, viewer_id=x_actor_id)
    return MessageListResponse(
        messaging_open=is_open(get_order(order_id)),
        messages=[_message_response(m) for m in messages],
    )


@order_router.post("/{order_id}/messages", status_code=201, response_model=MessageResponse)
async def send_message(order_id: str, body: SendMessageRequest, x_actor_id: str = Header()) -> MessageResponse:
    command = SendMessage(
        order_id=order_id,
        sender_id=x_actor_id,
        content=body.content,
        image_ref=body.image_ref,
    )
    message = current_domain.process(command, asynchronous=False)
    return _message_response(message)


@order_router.post("/{order_id}/ratings", status_code=201, response_model=RatingResponse)
async def rate_order(order_id: str, body: CreateRatingRequest, x_actor_id: str = Header()) -> RatingResponse:
    command = CreateRating(
        order_id=order_id,
        rater_id=x_actor_id,
        score=body.score,
        comment=body.comment,
        rated_id=body.rated_id,
    )
    rating = current_domain.process(command, asynchronous=False)
    return _rating_response(rating)


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.get("/{user_id}/ratings", response_model=UserRatingsResponse)
async def read_user_ratings(user_id: str) -> UserRatingsResponse:
    summary = rating_summary(user_id)
    return UserRatingsResponse(
        user_id=user_id,
        summary=RatingSummaryResponse(
            average=summary["average"],
            count=summary["count"],
            distribution=summary["distribution"],
        ),
        ratings=[_rating_response(r) for r in list_for_user(user_id)],
    )


# ---------------------------------------------------------------------------
# Catalog Router
# ---------------------------------------------------------------------------
catalog_router = APIRouter(prefix="/catalog", tags=["catalog"])


@catalog_router.post("/products", status_code=201, response_model=ProductResponse)
async def stock_product(body: StockProductRequest) -> ProductResponse:
    """Add or replace a product in the FakeCatalog (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Catalog stocking not available in production")

    catalog = get_catalog()
    if not isinstance(catalog, FakeCatalog):
        raise HTTPException(status_code=400, detail="Catalog stocking only available for FakeCatalog")

    product = catalog.stock(
        body.product_id,
        body.supplier_id,
        price=body.price,
        stock_quantity=body.stock_quantity,
    )
    return ProductResponse(
        product_id=product.product_id,
        supplier_id=product.supplier_id,
        price=product.price,
        stock_quantity=product.stock_quantity,
    )
