"""Customer registration: command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from ordering.customer.customer import Customer
from ordering.domain import ordering


@ordering.command(part_of="Customer")
class RegisterCustomer:
    name = String(required=True, max_length=150)
    email = String(required=True, max_length=255)
    phone = String(max_length=30)


@ordering.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        customer = Customer.register(
            name=command.name,
            email=command.email,
            phone=command.phone,
        )
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)
