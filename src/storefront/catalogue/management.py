"""Catalogue management: add products to the catalogue."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    category_id = Identifier()
    quantity = Integer(required=True, min_value=0)
    sold = Integer(default=0, min_value=0)
    photo_data = Text()
    photo_content_type = String(max_length=50)


@storefront.command_handler(part_of=Product)
class ManageCatalogueHandler:
    @handle(AddProduct)
    def add_product(self, command):
        repo = current_domain.repository_for(Product)
        if repo.find_by_name(command.name) is not None:
            raise ValidationError({"name": ["Product already exists"]})

        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            category_id=command.category_id,
            quantity=command.quantity,
            sold=command.sold or 0,
            photo_data=command.photo_data,
            photo_content_type=command.photo_content_type,
        )
        repo.add(product)
        return str(product.id)
