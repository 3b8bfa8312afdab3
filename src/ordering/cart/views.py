"""Read model for a customer's shopping cart."""


def cart_view(cart, customer_id=None):
    """The cart and its items. ``cart`` may be ``None`` for a customer without one."""
    if cart is None:
        return {
            "cart_id": None,
            "customer_id": str(customer_id) if customer_id else None,
            "items": [],
            "total_quantity": 0,
            "is_empty": True,
        }

    return {
        "cart_id": str(cart.id),
        "customer_id": str(cart.customer_id),
        "items": [
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "added_at": item.added_at,
            }
            for item in cart.items
        ],
        "total_quantity": cart.total_quantity(),
        "is_empty": cart.is_empty,
    }
