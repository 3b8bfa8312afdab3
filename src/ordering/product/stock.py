"""Product stock: commands and handler.

Products are normally owned by the catalogue; these commands exist so that a
store can be seeded and restocked through the ordering context.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.product.product import Product


@ordering.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.01)
    stock_quantity = Integer(default=0, min_value=0)


@ordering.command(part_of="Product")
class RestockProduct:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@ordering.command_handler(part_of=Product)
class ProductStockHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            stock_quantity=command.stock_quantity or 0,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity)
        repo.add(product)
