"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# --- Request Schemas ---


class AddressRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Jane Doe",
                    "email": "jane.doe@example.com",
                    "phone": "+1-555-0123",
                    "street": "12 Market Street",
                    "city": "Springfield",
                    "state": "IL",
                    "zip_code": "62701",
                }
            ]
        }
    }

    name: str = Field("", max_length=100)
    email: str = Field("", max_length=254)
    phone: str = Field("", max_length=20)
    street: str = Field("", max_length=255)
    city: str = Field("", max_length=100)
    state: str = Field("", max_length=100)
    zip_code: str = Field("", max_length=20)


# --- Response Schemas ---


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str | None = None
    name: str
    email: str
    phone: str
    street: str
    city: str = ""
    state: str = ""
    zip_code: str = ""
    is_default: bool = False
