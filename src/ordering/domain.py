"""Ordering bounded context: carts, orders and promotional discounts.

Handles the order lifecycle, the discount rule engine and usage ledger, and
the checkout flow that converts a customer's cart into an order. Customers
and products live here too, as the thin collaborators order placement reads
and updates inside a single unit of work.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
