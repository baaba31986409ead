"""Product repository with version-checked stock updates."""

from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.utils.logging import get_logger
from storefront.utils.versioning import save_if_current

logger = get_logger(__name__)


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_by_name(self, name: str) -> Product | None:
        results = self._dao.query.filter(name=name).all()
        return results.items[0] if results.items else None

    def find(self, product_id) -> Product | None:
        try:
            return self.get(product_id)
        except ObjectNotFoundError:
            return None

    def reserve(self, product: Product, quantity: int) -> bool:
        """Move ``quantity`` units from stock to sold.

        The write only lands if the stored product is still at the version
        ``product`` was loaded at; returns False when someone else got there
        first. ``product`` must not be reused after a False.
        """
        if quantity < 1 or quantity > product.quantity:
            return False

        product.quantity -= quantity
        product.sold += quantity
        return save_if_current(self, product)

    def release(self, product_id, quantity: int, attempts: int = 3) -> bool:
        """Give ``quantity`` reserved units back to stock."""
        for _ in range(attempts):
            product = self.find(product_id)
            if product is None:
                logger.warning("Product vanished before stock release", product_id=str(product_id), quantity=quantity)
                return False

            product.quantity += quantity
            product.sold = max(product.sold - quantity, 0)
            if save_if_current(self, product):
                return True

        logger.error("Could not release reserved stock", product_id=str(product_id), quantity=quantity)
        return False
