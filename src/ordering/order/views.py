"""Read models returned to callers of the order operations."""


def order_item_view(item):
    return {
        "id": str(item.id),
        "product_id": str(item.product_id),
        "product_name": item.product_name,
        "quantity": item.quantity,
        "unit_price": item.unit_price,
        "subtotal": item.subtotal,
    }


def order_view(order):
    """The order, its line items and a summary block."""
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "status": order.status,
        "items": [order_item_view(item) for item in order.items],
        "subtotal_amount": order.subtotal_amount,
        "discount_code": order.discount_code,
        "discount_amount": order.discount_amount,
        "total_amount": order.total_amount,
        "shipping_address": order.shipping_address,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "phone_number": order.phone_number,
        "notes": order.notes,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "shipped_at": order.shipped_at,
        "delivered_at": order.delivered_at,
        "cancelled_at": order.cancelled_at,
        "summary": {
            "item_count": len(order.items),
            "total_items": order.total_items(),
            "can_be_cancelled": order.can_be_cancelled(),
            "is_completed": order.is_completed(),
        },
    }


def order_summary_view(order):
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "status": order.status,
        "total_amount": order.total_amount,
        "item_count": len(order.items),
        "total_items": order.total_items(),
        "created_at": order.created_at,
    }
