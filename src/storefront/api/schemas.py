"""Pydantic request/response schemas for the storefront API.

These are the external contracts (camelCase on the wire), kept separate from
the protean commands and aggregates behind them.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class OrderLineRequest(CamelModel):
    product_id: str
    quantity: int = Field(ge=0)


class PlaceOrderRequest(CamelModel):
    country: str = Field(min_length=1, max_length=100)
    city: str = Field(min_length=1, max_length=100)
    address: str = Field(min_length=1, max_length=255)
    reference: str = Field(min_length=1, max_length=255)
    products: list[OrderLineRequest] = Field(min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "country": "Peru",
                    "city": "Lima",
                    "address": "Av. Arequipa 123",
                    "reference": "Blue door",
                    "products": [{"productId": "0b7b0c0e-8f0e-4a51-9d57-2e3f1c4c7c11", "quantity": 2}],
                }
            ]
        }
    }


class UpdateOrderRequest(CamelModel):
    """Only shipping fields and status are honoured; anything else is ignored."""

    country: str | None = Field(default=None, min_length=1, max_length=100)
    city: str | None = Field(default=None, min_length=1, max_length=100)
    address: str | None = Field(default=None, min_length=1, max_length=255)
    reference: str | None = Field(default=None, min_length=1, max_length=255)
    status: Literal["pending", "completed"] | None = None


class PaymentRequest(CamelModel):
    order_id: str = Field(min_length=1)
    process_id: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Identity Request Schemas
# ---------------------------------------------------------------------------
class RegisterRequest(CamelModel):
    email: str = Field(min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=6, max_length=72)
    name: str = Field(min_length=1, max_length=100)
    lastname: str = Field(min_length=1, max_length=100)


class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderLineResponse(CamelModel):
    product_id: str
    quantity: int
    unit_price: float


class OrderResponse(CamelModel):
    id: str
    user_id: str
    country: str
    city: str
    address: str
    reference: str
    products: list[OrderLineResponse]
    total_amount: float
    status: str
    paid: bool
    payment_status: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            user_id=str(order.user_id),
            country=order.country,
            city=order.city,
            address=order.address,
            reference=order.reference,
            products=[
                OrderLineResponse(product_id=str(line.product_id), quantity=line.quantity, unit_price=line.unit_price)
                for line in order.lines
            ],
            total_amount=order.total_amount,
            status=order.status,
            paid=order.paid,
            payment_status=order.payment_status,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderDetailLineResponse(CamelModel):
    product_id: str
    name: str
    price: float
    quantity: int


class OrderDetailResponse(CamelModel):
    id: str
    user_id: str
    country: str
    city: str
    address: str
    reference: str
    products: list[OrderDetailLineResponse]
    total_amount: float
    status: str
    paid: bool
    created_at: datetime

    @classmethod
    def from_detail(cls, detail) -> "OrderDetailResponse":
        order = detail.order
        return cls(
            id=str(order.id),
            user_id=str(order.user_id),
            country=order.country,
            city=order.city,
            address=order.address,
            reference=order.reference,
            products=[
                OrderDetailLineResponse(
                    product_id=line.product_id, name=line.name, price=line.price, quantity=line.quantity
                )
                for line in detail.lines
            ],
            total_amount=order.total_amount,
            status=order.status,
            paid=order.paid,
            created_at=order.created_at,
        )


class IncomeResponse(CamelModel):
    year: int
    month: int
    total: float


class UserIdResponse(CamelModel):
    user_id: str


class TokenResponse(CamelModel):
    token: str


class StatusResponse(CamelModel):
    status: str = "ok"
