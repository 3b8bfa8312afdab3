"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class DiscountTypeSchema(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    customer_id: str
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    new_quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    customer_id: str
    shipping_address: str = Field(min_length=1, max_length=500)
    customer_name: str = Field(min_length=1, max_length=150)
    customer_email: str = Field(min_length=3, max_length=255)
    phone_number: str | None = Field(default=None, max_length=30)
    notes: str | None = None
    discount_code: str | None = Field(default=None, max_length=50)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "shipping_address": "12 Orchard Lane, Springfield",
                    "customer_name": "Sam Lee",
                    "customer_email": "sam@example.com",
                    "phone_number": "+1-555-0100",
                    "notes": "Leave at the door",
                    "discount_code": "WELCOME10",
                }
            ]
        }
    }


class CancelOrderRequest(BaseModel):
    customer_id: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str

    model_config = {"json_schema_extra": {"examples": [{"status": "confirmed"}]}}


class CorrectItemQuantityRequest(BaseModel):
    quantity: int


class CorrectItemPriceRequest(BaseModel):
    unit_price: float


# ---------------------------------------------------------------------------
# Discount Request Schemas
# ---------------------------------------------------------------------------
class CreateDiscountRequest(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    description: str | None = None
    discount_type: DiscountTypeSchema = DiscountTypeSchema.PERCENTAGE
    discount_value: float = Field(ge=0)
    min_order_amount: float = Field(ge=0, default=0.0)
    max_discount_amount: float | None = Field(default=None, ge=0)
    usage_limit: int | None = Field(default=None, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool = True

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "WELCOME10",
                    "description": "10% off your first order",
                    "discount_type": "percentage",
                    "discount_value": 10,
                    "min_order_amount": 100000,
                    "max_discount_amount": 50000,
                    "usage_limit": 100,
                }
            ]
        }
    }


class UpdateDiscountRequest(BaseModel):
    description: str | None = None
    discount_type: DiscountTypeSchema | None = None
    discount_value: float | None = Field(default=None, ge=0)
    min_order_amount: float | None = Field(default=None, ge=0)
    max_discount_amount: float | None = Field(default=None, ge=0)
    usage_limit: int | None = Field(default=None, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool | None = None
    clear_fields: list[Literal["max_discount_amount", "usage_limit", "start_date", "end_date"]] = []


class ValidateDiscountRequest(BaseModel):
    code: str
    order_amount: float = Field(ge=0)


class RecordDiscountUsageRequest(BaseModel):
    customer_id: str
    order_id: str | None = None
    discount_amount: float = Field(ge=0)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class DiscountIdResponse(BaseModel):
    discount_id: str


class UsageIdResponse(BaseModel):
    usage_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    added_at: datetime | None = None


class CartResponse(BaseModel):
    cart_id: str | None = None
    customer_id: str | None = None
    items: list[CartItemResponse] = []
    total_quantity: int = 0
    is_empty: bool = True


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str | None = None
    quantity: int
    unit_price: float
    subtotal: float


class OrderSummaryBlock(BaseModel):
    item_count: int
    total_items: int
    can_be_cancelled: bool
    is_completed: bool


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    status: str
    items: list[OrderItemResponse]
    subtotal_amount: float
    discount_code: str | None = None
    discount_amount: float = 0.0
    total_amount: float
    shipping_address: str
    customer_name: str
    customer_email: str
    phone_number: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    summary: OrderSummaryBlock


class OrderSummaryResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    status: str
    total_amount: float
    item_count: int
    total_items: int
    created_at: datetime | None = None


class OrderStatisticsResponse(BaseModel):
    total_orders: int
    pending_orders: int
    confirmed_orders: int
    shipped_orders: int
    delivered_orders: int
    cancelled_orders: int
    total_revenue: float
    average_order_value: float


class DiscountResponse(BaseModel):
    id: str
    code: str
    description: str | None = None
    discount_type: str
    discount_value: float
    min_order_amount: float | None = None
    max_discount_amount: float | None = None
    usage_limit: int | None = None
    used_count: int
    remaining_usage: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool
    is_currently_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DiscountValidationResponse(BaseModel):
    code: str
    valid: bool
    reason: str
    message: str
    discount_amount: float | None = None
    required_minimum: float | None = None
    remaining_usage: int | None = None
    discount_type: str | None = None
    description: str | None = None


class DiscountUsageResponse(BaseModel):
    id: str
    discount_id: str
    discount_code: str | None = None
    customer_id: str
    order_id: str | None = None
    discount_amount: float
    used_at: datetime | None = None


class DiscountUsageStatsResponse(BaseModel):
    discount_id: str
    code: str
    total_usages: int
    total_discount_amount: float
    used_count: int
    usage_limit: int | None = None
    remaining_usage: int | None = None


class HasUsedResponse(BaseModel):
    customer_id: str
    discount_id: str
    has_used: bool


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: dict = {}
