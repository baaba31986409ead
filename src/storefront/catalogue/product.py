"""Product aggregate: a purchasable item with its price and stock."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.utils.clock import utc_now

ALLOWED_PHOTO_TYPES = ("image/jpeg", "image/jpg", "image/png")


@storefront.aggregate
class Product:
    """A catalogue entry.

    ``quantity`` is the stock on hand and ``sold`` the running count of units
    taken by orders. Both only move together, through the version-checked
    writes in ``ProductRepository``.
    """

    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    category_id = Identifier()
    quantity = Integer(default=0, min_value=0)
    sold = Integer(default=0, min_value=0)
    photo_data = Text()  # base64
    photo_content_type = String(max_length=50)
    created_at = DateTime(default=utc_now)

    @invariant.post
    def photo_must_have_supported_type(self):
        if self.photo_data and self.photo_content_type not in ALLOWED_PHOTO_TYPES:
            raise ValidationError({"photo": ["Image type not allowed"]})

    @classmethod
    def create(
        cls,
        name,
        price,
        quantity,
        description=None,
        category_id=None,
        sold=0,
        photo_data=None,
        photo_content_type=None,
    ):
        return cls(
            name=name,
            description=description,
            price=round(price, 2),
            category_id=category_id,
            quantity=quantity,
            sold=sold,
            photo_data=photo_data,
            photo_content_type=photo_content_type,
        )

    def acceptable_quantity(self, requested: int) -> int:
        """Units of ``requested`` that the current stock can cover."""
        return max(0, min(requested, self.quantity))
