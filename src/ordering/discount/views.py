"""Read models for discounts, validation outcomes and the usage ledger."""


def discount_view(discount):
    return {
        "id": str(discount.id),
        "code": discount.code,
        "description": discount.description,
        "discount_type": discount.discount_type,
        "discount_value": discount.discount_value,
        "min_order_amount": discount.min_order_amount,
        "max_discount_amount": discount.max_discount_amount,
        "usage_limit": discount.usage_limit,
        "used_count": discount.used_count or 0,
        "remaining_usage": discount.remaining_usage(),
        "start_date": discount.start_date,
        "end_date": discount.end_date,
        "is_active": discount.is_active,
        "is_currently_active": discount.is_currently_active(),
        "created_at": discount.created_at,
        "updated_at": discount.updated_at,
    }


def outcome_view(outcome):
    view = {
        "code": outcome.code,
        "valid": outcome.is_valid,
        "reason": outcome.reason.value,
        "message": outcome.message,
        "discount_amount": outcome.discount_amount,
        "required_minimum": outcome.required_minimum,
        "remaining_usage": None,
        "discount_type": None,
        "description": None,
    }
    if outcome.is_valid:
        view["remaining_usage"] = outcome.remaining_usage
        view["discount_type"] = outcome.discount.discount_type
        view["description"] = outcome.discount.description
    return view


def usage_view(usage):
    return {
        "id": str(usage.id),
        "discount_id": str(usage.discount_id),
        "discount_code": usage.discount_code,
        "customer_id": str(usage.customer_id),
        "order_id": str(usage.order_id) if usage.order_id else None,
        "discount_amount": usage.discount_amount,
        "used_at": usage.used_at,
    }


def usage_stats_view(stats):
    return {
        "discount_id": stats.discount_id,
        "code": stats.code,
        "total_usages": stats.total_usages,
        "total_discount_amount": stats.total_discount_amount,
        "used_count": stats.used_count,
        "usage_limit": stats.usage_limit,
        "remaining_usage": stats.remaining_usage,
    }
