"""Pydantic request/response schemas for the Ordering API.

These are external contracts, kept separate from the
internal commands in ``ordering.order``.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from identity.api.schemas import AddressRequest


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    """A cart line as the storefront sends it. Prices are advisory and ignored."""

    product_id: str
    quantity: int = Field(ge=1)
    color: str | None = Field(None, max_length=50)
    size: str | None = Field(None, max_length=50)
    sku: str | None = None
    delivery_method: str | None = Field(None, max_length=20)
    price: float | None = None
    discounted_price: float | None = None


class OrderItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: str
    title: str
    quantity: int
    price: float
    color: str | None = None
    size: str | None = None
    sku: str | None = None
    delivery_method: str | None = None


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    cart_lines: list[CartLineSchema]
    address: AddressRequest | None = None
    address_id: str | None = None
    notes: str | None = Field(None, max_length=1000)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "cart_lines": [
                        {"product_id": "prod-001", "quantity": 2, "color": "Black", "size": "M"},
                    ],
                    "address": {
                        "name": "Jane Doe",
                        "email": "jane.doe@example.com",
                        "phone": "+1-555-0123",
                        "street": "12 Market Street",
                        "city": "Springfield",
                        "state": "IL",
                        "zip_code": "62701",
                    },
                    "notes": "Leave at the door",
                }
            ]
        }
    }


class PlaceOrderRequest(BaseModel):
    cart_lines: list[CartLineSchema]
    address_id: str | None = None
    notes: str | None = Field(None, max_length=1000)


class UpdateStatusRequest(BaseModel):
    status: str


class TrackOrderRequest(BaseModel):
    order_id: str = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str | None = None
    status: str
    total: float
    shipping_cost: float
    address_id: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[OrderItemSchema] = Field(default_factory=list)


class TrackedItemSchema(BaseModel):
    product_id: str
    title: str
    quantity: int
    price: float


class TrackedAddressSchema(BaseModel):
    name: str
    street: str
    city: str = ""
    state: str = ""
    zip_code: str = ""


class TrackingResponse(BaseModel):
    id: str
    status: str
    total: float
    shipping_cost: float
    created_at: datetime | None = None
    items: list[TrackedItemSchema] = Field(default_factory=list)
    address: TrackedAddressSchema | None = None
