"""Order placement: turning a customer's cart into an order.

``PlaceOrder`` runs as one command handler, and therefore one unit of work:
the order, its items, stock deductions, the discount usage record, the
discount counter and the emptied cart are committed together or not at all.
All checks that can fail (customer, empty cart, stock, discount) run before
anything is written.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.customer.customer import Customer
from ordering.discount import rules
from ordering.discount.ledger import record_usage
from ordering.domain import ordering
from ordering.errors import EmptyCart, InsufficientStock
from ordering.order.order import Order, generate_order_number
from ordering.order.views import order_view
from ordering.product.product import Product
from ordering.shared.money import ZERO, round_money, to_decimal

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    shipping_address = Text(required=True)
    customer_name = String(required=True, max_length=150)
    customer_email = String(required=True, max_length=255)
    phone_number = String(max_length=30)
    notes = Text()
    discount_code = String(max_length=50)


def _unique_order_number(customer_id):
    repo = current_domain.repository_for(Order)
    now = datetime.now(UTC)
    order_number = generate_order_number(customer_id, now)
    while repo.order_number_exists(order_number):
        now += timedelta(milliseconds=1)
        order_number = generate_order_number(customer_id, now)
    return order_number


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        customer = current_domain.repository_for(Customer).get(command.customer_id)

        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.find_or_create_for(customer.id)
        if cart.is_empty:
            raise EmptyCart()

        # Live products, checked against the requested quantities
        product_repo = current_domain.repository_for(Product)
        lines = []
        for cart_item in cart.items:
            product = product_repo.get(cart_item.product_id)
            if not product.has_sufficient_stock(cart_item.quantity):
                raise InsufficientStock(
                    available=product.stock_quantity,
                    requested=cart_item.quantity,
                    product_name=product.name,
                )
            lines.append((cart_item, product))

        raw_total = round_money(
            sum(
                (to_decimal(product.price) * cart_item.quantity for cart_item, product in lines),
                ZERO,
            )
        )

        outcome = None
        discount_code = (command.discount_code or "").strip()
        if discount_code:
            outcome = rules.validate(discount_code, raw_total)
            outcome.raise_if_invalid()

        order = Order.create(
            customer_id=str(customer.id),
            shipping_address=command.shipping_address,
            customer_name=command.customer_name,
            customer_email=command.customer_email,
            phone_number=command.phone_number,
            notes=command.notes,
            order_number=_unique_order_number(customer.id),
        )

        for cart_item, product in lines:
            order.add_item(
                product_id=str(product.id),
                product_name=product.name,
                quantity=cart_item.quantity,
                unit_price=product.price,
            )
            product.reduce_stock(cart_item.quantity, order_id=order.id)
            product_repo.add(product)

        if outcome is not None:
            record_usage(
                outcome.discount,
                customer_id=customer.id,
                amount=outcome.discount_amount,
                order_id=order.id,
            )
            order.apply_discount(outcome.code, outcome.discount_amount)

        order.mark_placed()
        current_domain.repository_for(Order).add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(customer.id),
            total_amount=order.total_amount,
            discount_code=order.discount_code,
        )
        return order_view(order)
