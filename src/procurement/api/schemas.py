"""Pydantic request/response schemas for the Procurement API.

These are external contracts, kept separate from the Protean commands they
are translated into.
"""

from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Draft Request Schemas
# ---------------------------------------------------------------------------
class OpenDraftRequest(BaseModel):
    store_id: str
    supplier_id: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "store_id": "store-001",
                    "supplier_id": "supplier-001",
                }
            ]
        }
    }


class AddDraftItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateDraftItemRequest(BaseModel):
    quantity: int = Field(ge=1)


class SubmitOrderRequest(BaseModel):
    payment_method: Literal["cash_on_delivery", "gcash"]
    delivery_option: Literal["pickup", "deliver"]
    shipping_address: str | None = None
    notes: str | None = None
    payment_proof_ref: str | None = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class TransitionOrderRequest(BaseModel):
    status: str


class SendMessageRequest(BaseModel):
    content: str | None = Field(default=None, max_length=5000)
    image_ref: str | None = Field(default=None, max_length=500)


class CreateRatingRequest(BaseModel):
    score: int = Field(ge=1, le=5)
    comment: str | None = None
    rated_id: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    unit_price: float
    subtotal: float


class OrderResponse(BaseModel):
    id: str
    store_id: str
    supplier_id: str
    status: str
    total_amount: float
    payment_method: str | None = None
    payment_status: str | None = None
    payment_proof_ref: str | None = None
    delivery_option: str | None = None
    delivery_fee: float = 0.0
    grand_total: float = 0.0
    shipping_address: str | None = None
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    items: list[OrderItemResponse] = []


class DraftResponse(BaseModel):
    draft: OrderResponse | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class MessageResponse(BaseModel):
    id: str
    order_id: str
    sender_id: str
    content: str | None = None
    image_ref: str | None = None
    created_at: str | None = None


class MessageListResponse(BaseModel):
    messaging_open: bool
    messages: list[MessageResponse]


class RatingResponse(BaseModel):
    id: str
    order_id: str
    rater_id: str
    rated_id: str
    score: int
    comment: str | None = None
    created_at: str | None = None


class OrderDetailResponse(OrderResponse):
    """An order with the ratings its parties have left on it."""

    ratings: list[RatingResponse] = []


class RatingSummaryResponse(BaseModel):
    average: float
    count: int
    distribution: dict[int, int]


class UserRatingsResponse(BaseModel):
    user_id: str
    summary: RatingSummaryResponse
    ratings: list[RatingResponse]


# ---------------------------------------------------------------------------
# Catalog Schemas (fake adapter only)
# ---------------------------------------------------------------------------
class StockProductRequest(BaseModel):
    product_id: str
    supplier_id: str
    price: float = Field(ge=0)
    stock_quantity: int = Field(ge=0)


class ProductResponse(BaseModel):
    product_id: str
    supplier_id: str
    price: float
    stock_quantity: int
