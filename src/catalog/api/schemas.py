"""Pydantic request/response schemas for the Catalog API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# --- Shared sub-models ---


class VariantSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    color_name: str | None = Field(None, max_length=50)
    color_hex: str | None = Field(None, max_length=9)
    size: str | None = Field(None, max_length=50)
    price: float | None = Field(None, ge=0)
    discounted_price: float | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    images: list[str] = Field(default_factory=list)
    sku: str | None = None


# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Desk Fan",
                    "price": 120.0,
                    "discounted_price": 100.0,
                    "stock": 25,
                    "category_id": "cat-home-electrics",
                    "default_color": "White",
                    "default_size": "12 inch",
                    "variants": [{"color_name": "Black", "size": "16 inch", "price": 150.0}],
                }
            ]
        }
    }

    title: str = Field(..., max_length=255)
    price: float = Field(..., ge=0)
    discounted_price: float | None = Field(None, ge=0)
    stock: int = Field(0, ge=0)
    stock_status: str | None = None
    category_id: str | None = None
    default_color: str | None = Field(None, max_length=50)
    default_size: str | None = Field(None, max_length=50)
    variants: list[VariantSchema] = Field(default_factory=list)


class UpdateProductRequest(BaseModel):
    """Every field is optional; only the fields present in the body are applied."""

    title: str | None = Field(None, max_length=255)
    price: float | None = Field(None, ge=0)
    discounted_price: float | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    stock_status: str | None = None
    category_id: str | None = None
    default_color: str | None = Field(None, max_length=50)
    default_size: str | None = Field(None, max_length=50)
    variants: list[VariantSchema] | None = None


# --- Response Schemas ---


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    price: float
    discounted_price: float | None = None
    stock: int
    stock_status: str
    sku: str | None = None
    all_skus: list[str] = Field(default_factory=list)
    variants: list[VariantSchema] = Field(default_factory=list)
    default_color: str | None = None
    default_size: str | None = None
    category_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
