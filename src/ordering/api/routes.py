"""FastAPI routes for the Ordering domain: carts, orders and discounts."""

from dataclasses import asdict

from fastapi import APIRouter, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartIdResponse,
    CartResponse,
    CorrectItemPriceRequest,
    CorrectItemQuantityRequest,
    CreateDiscountRequest,
    DiscountIdResponse,
    DiscountResponse,
    DiscountUsageResponse,
    DiscountUsageStatsResponse,
    DiscountValidationResponse,
    HasUsedResponse,
    OrderResponse,
    OrderStatisticsResponse,
    OrderSummaryResponse,
    PlaceOrderRequest,
    RecordDiscountUsageRequest,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateDiscountRequest,
    UpdateOrderStatusRequest,
    UsageIdResponse,
    ValidateDiscountRequest,
)
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.views import cart_view
from ordering.discount import ledger, rules
from ordering.discount.discount import Discount
from ordering.discount.ledger import RecordDiscountUsage
from ordering.discount.management import CreateDiscount, DeactivateDiscount, UpdateDiscount
from ordering.discount.views import discount_view, outcome_view, usage_stats_view, usage_view
from ordering.order.correction import CorrectItemPrice, CorrectItemQuantity, RemoveOrderItem
from ordering.order.creation import PlaceOrder
from ordering.order.lifecycle import (
    CancelOrder,
    ConfirmOrder,
    DeliverOrder,
    ShipOrder,
    UpdateOrderStatus,
    ensure_belongs_to,
)
from ordering.order.order import Order, OrderStatus
from ordering.order.repository import order_statistics
from ordering.order.views import order_summary_view, order_view

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("/items", status_code=201, response_model=CartIdResponse)
async def add_cart_item(body: AddToCartRequest) -> CartIdResponse:
    command = AddToCart(
        customer_id=body.customer_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/customer/{customer_id}", response_model=CartResponse)
async def get_customer_cart(customer_id: str):
    cart = current_domain.repository_for(ShoppingCart).find_for_customer(customer_id)
    return cart_view(cart, customer_id=customer_id)


@cart_router.put("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def update_cart_item_quantity(cart_id: str, item_id: str, body: UpdateCartQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(
        cart_id=cart_id,
        item_id=item_id,
        new_quantity=body.new_quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, item_id: str) -> StatusResponse:
    command = RemoveFromCart(
        cart_id=cart_id,
        item_id=item_id,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items", response_model=StatusResponse)
async def clear_cart(cart_id: str) -> StatusResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest):
    """Turn the customer's cart into an order.

    Stock is deducted, the discount (if any) is recorded and the cart is
    emptied, all in one unit of work.
    """
    command = PlaceOrder(
        customer_id=body.customer_id,
        shipping_address=body.shipping_address,
        customer_name=body.customer_name,
        customer_email=body.customer_email,
        phone_number=body.phone_number,
        notes=body.notes,
        discount_code=body.discount_code,
    )
    return current_domain.process(command, asynchronous=False)


@order_router.get("", response_model=list[OrderSummaryResponse])
async def list_orders(
    customer_id: str | None = None,
    status: str | None = None,
    days: int | None = Query(default=None, ge=1),
):
    repo = current_domain.repository_for(Order)
    target = OrderStatus.parse(status) if status else None

    if customer_id:
        orders = repo.for_customer(customer_id, status=target)
    elif target is not None:
        orders = repo.with_status(target)
    else:
        orders = repo.recent(days=days)
    return [order_summary_view(order) for order in orders]


@order_router.get("/cancellable", response_model=list[OrderSummaryResponse])
async def list_cancellable_orders(customer_id: str | None = None):
    orders = current_domain.repository_for(Order).cancellable(customer_id=customer_id)
    return [order_summary_view(order) for order in orders]


@order_router.get("/statistics", response_model=OrderStatisticsResponse)
async def get_order_statistics(customer_id: str | None = None):
    return asdict(order_statistics(customer_id=customer_id))


@order_router.get("/number/{order_number}", response_model=OrderResponse)
async def get_order_by_number(order_number: str, customer_id: str | None = None):
    order = current_domain.repository_for(Order).get_by_number(order_number)
    if customer_id:
        ensure_belongs_to(order, customer_id)
    return order_view(order)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, customer_id: str | None = None):
    order = current_domain.repository_for(Order).get(order_id)
    if customer_id:
        ensure_belongs_to(order, customer_id)
    return order_view(order)


@order_router.put("/{order_id}/confirm", response_model=OrderResponse)
async def confirm_order(order_id: str):
    return current_domain.process(ConfirmOrder(order_id=order_id), asynchronous=False)


@order_router.put("/{order_id}/ship", response_model=OrderResponse)
async def ship_order(order_id: str):
    return current_domain.process(ShipOrder(order_id=order_id), asynchronous=False)


@order_router.put("/{order_id}/deliver", response_model=OrderResponse)
async def deliver_order(order_id: str):
    return current_domain.process(DeliverOrder(order_id=order_id), asynchronous=False)


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest | None = None):
    command = CancelOrder(
        order_id=order_id,
        customer_id=body.customer_id if body else None,
    )
    return current_domain.process(command, asynchronous=False)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest):
    command = UpdateOrderStatus(order_id=order_id, status=body.status)
    return current_domain.process(command, asynchronous=False)


@order_router.put("/{order_id}/items/{item_id}/quantity", response_model=OrderResponse)
async def correct_item_quantity(order_id: str, item_id: str, body: CorrectItemQuantityRequest):
    command = CorrectItemQuantity(order_id=order_id, item_id=item_id, quantity=body.quantity)
    return current_domain.process(command, asynchronous=False)


@order_router.put("/{order_id}/items/{item_id}/price", response_model=OrderResponse)
async def correct_item_price(order_id: str, item_id: str, body: CorrectItemPriceRequest):
    command = CorrectItemPrice(order_id=order_id, item_id=item_id, unit_price=body.unit_price)
    return current_domain.process(command, asynchronous=False)


@order_router.delete("/{order_id}/items/{item_id}", response_model=OrderResponse)
async def remove_order_item(order_id: str, item_id: str):
    command = RemoveOrderItem(order_id=order_id, item_id=item_id)
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Discount Router
# ---------------------------------------------------------------------------
discount_router = APIRouter(prefix="/discounts", tags=["discounts"])


@discount_router.post("", status_code=201, response_model=DiscountIdResponse)
async def create_discount(body: CreateDiscountRequest) -> DiscountIdResponse:
    command = CreateDiscount(
        code=body.code,
        description=body.description,
        discount_type=body.discount_type.value,
        discount_value=body.discount_value,
        min_order_amount=body.min_order_amount,
        max_discount_amount=body.max_discount_amount,
        usage_limit=body.usage_limit,
        start_date=body.start_date,
        end_date=body.end_date,
        is_active=body.is_active,
    )
    result = current_domain.process(command, asynchronous=False)
    return DiscountIdResponse(discount_id=result)


@discount_router.get("", response_model=list[DiscountResponse])
async def list_discounts(active_only: bool = False):
    repo = current_domain.repository_for(Discount)
    discounts = repo.active_discounts() if active_only else repo.all_discounts()
    return [discount_view(discount) for discount in discounts]


@discount_router.post("/validate", response_model=DiscountValidationResponse)
async def validate_discount(body: ValidateDiscountRequest):
    """Check a code against an order amount without using it."""
    return outcome_view(rules.validate(body.code, body.order_amount))


@discount_router.get("/available", response_model=list[DiscountResponse])
async def list_available_discounts(order_amount: float):
    return [discount_view(discount) for discount in rules.available_discounts(order_amount)]


@discount_router.get("/code/{code}", response_model=DiscountResponse)
async def get_discount_by_code(code: str):
    discount = current_domain.repository_for(Discount).find_by_code(code)
    if discount is None:
        raise ObjectNotFoundError(f"Discount not found with code: {code}")
    return discount_view(discount)


@discount_router.get("/usages/customer/{customer_id}", response_model=list[DiscountUsageResponse])
async def list_customer_usages(customer_id: str):
    return [usage_view(usage) for usage in ledger.usages_for_customer(customer_id)]


@discount_router.get("/{discount_id}", response_model=DiscountResponse)
async def get_discount(discount_id: str):
    return discount_view(current_domain.repository_for(Discount).get(discount_id))


@discount_router.put("/{discount_id}", response_model=StatusResponse)
async def update_discount(discount_id: str, body: UpdateDiscountRequest) -> StatusResponse:
    command = UpdateDiscount(
        discount_id=discount_id,
        description=body.description,
        discount_type=body.discount_type.value if body.discount_type else None,
        discount_value=body.discount_value,
        min_order_amount=body.min_order_amount,
        max_discount_amount=body.max_discount_amount,
        usage_limit=body.usage_limit,
        start_date=body.start_date,
        end_date=body.end_date,
        is_active=body.is_active,
        clear_fields=body.clear_fields,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@discount_router.put("/{discount_id}/deactivate", response_model=StatusResponse)
async def deactivate_discount(discount_id: str) -> StatusResponse:
    current_domain.process(DeactivateDiscount(discount_id=discount_id), asynchronous=False)
    return StatusResponse()


@discount_router.get("/{discount_id}/stats", response_model=DiscountUsageStatsResponse)
async def get_discount_stats(discount_id: str):
    return usage_stats_view(ledger.usage_stats(discount_id))


@discount_router.get("/{discount_id}/usages", response_model=list[DiscountUsageResponse])
async def list_discount_usages(discount_id: str):
    return [usage_view(usage) for usage in ledger.usages_for_discount(discount_id)]


@discount_router.post("/{discount_id}/usages", status_code=201, response_model=UsageIdResponse)
async def record_discount_usage(discount_id: str, body: RecordDiscountUsageRequest) -> UsageIdResponse:
    """Record a usage outside the order flow, e.g. an administrative correction."""
    command = RecordDiscountUsage(
        discount_id=discount_id,
        customer_id=body.customer_id,
        order_id=body.order_id,
        discount_amount=body.discount_amount,
    )
    result = current_domain.process(command, asynchronous=False)
    return UsageIdResponse(usage_id=result)


@discount_router.get("/{discount_id}/usages/customer/{customer_id}", response_model=HasUsedResponse)
async def has_customer_used_discount(discount_id: str, customer_id: str) -> HasUsedResponse:
    return HasUsedResponse(
        customer_id=customer_id,
        discount_id=discount_id,
        has_used=ledger.has_customer_used(customer_id, discount_id),
    )
