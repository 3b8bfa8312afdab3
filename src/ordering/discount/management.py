"""Discount administration: commands and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, List, String, Text
from protean.utils.globals import current_domain

from ordering.discount.discount import Discount, DiscountType, normalize_code
from ordering.domain import ordering
from ordering.errors import DuplicateDiscountCode

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Discount")
class CreateDiscount:
    code = String(required=True, max_length=50)
    description = Text()
    discount_type = String(choices=DiscountType, default=DiscountType.PERCENTAGE.value)
    discount_value = Float(required=True, min_value=0.0)
    min_order_amount = Float(default=0.0, min_value=0.0)
    max_discount_amount = Float(min_value=0.0)
    usage_limit = Integer(min_value=0)
    start_date = DateTime()
    end_date = DateTime()
    is_active = Boolean(default=True)


@ordering.command(part_of="Discount")
class UpdateDiscount:
    """Partial update: attributes left as ``None`` keep their current value.

    ``clear_fields`` names optional attributes to unset.
    """

    discount_id = Identifier(required=True)
    description = Text()
    discount_type = String(choices=DiscountType)
    discount_value = Float(min_value=0.0)
    min_order_amount = Float(min_value=0.0)
    max_discount_amount = Float(min_value=0.0)
    usage_limit = Integer(min_value=0)
    start_date = DateTime()
    end_date = DateTime()
    is_active = Boolean()
    clear_fields = List(content_type=String)


@ordering.command(part_of="Discount")
class DeactivateDiscount:
    discount_id = Identifier(required=True)


@ordering.command_handler(part_of=Discount)
class ManageDiscountHandler:
    @handle(CreateDiscount)
    def create_discount(self, command):
        repo = current_domain.repository_for(Discount)
        if repo.find_by_code(command.code) is not None:
            raise DuplicateDiscountCode(normalize_code(command.code))

        discount = Discount.create(
            code=command.code,
            description=command.description,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            min_order_amount=command.min_order_amount,
            max_discount_amount=command.max_discount_amount,
            usage_limit=command.usage_limit,
            start_date=command.start_date,
            end_date=command.end_date,
            is_active=command.is_active,
        )
        repo.add(discount)

        logger.info("Discount created", discount_code=discount.code, discount_id=str(discount.id))
        return str(discount.id)

    @handle(UpdateDiscount)
    def update_discount(self, command):
        repo = current_domain.repository_for(Discount)
        discount = repo.get(command.discount_id)
        discount.update_details(
            clear=command.clear_fields or [],
            description=command.description,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            min_order_amount=command.min_order_amount,
            max_discount_amount=command.max_discount_amount,
            usage_limit=command.usage_limit,
            start_date=command.start_date,
            end_date=command.end_date,
            is_active=command.is_active,
        )
        repo.add(discount)

    @handle(DeactivateDiscount)
    def deactivate_discount(self, command):
        repo = current_domain.repository_for(Discount)
        discount = repo.get(command.discount_id)
        discount.deactivate()
        repo.add(discount)
