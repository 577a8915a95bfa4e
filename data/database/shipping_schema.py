"""Shipping information schemas for API validation."""
from pydantic import Field, field_validator
from typing import Optional
from data.database.product_schema import CamelModel


class ShippingInfoBase(CamelModel):
    """Shipping address captured by value on the order."""
    address: str = Field(..., min_length=1, max_length=500, description="Complete street address")
    city: str = Field(..., min_length=1, max_length=100, description="City name")
    country: str = Field(..., min_length=1, max_length=100, description="Country name")
    phone: Optional[str] = Field(None, max_length=50, description="Contact phone number")

    @field_validator('address', 'city', 'country')
    @classmethod
    def validate_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()


class ShippingInfoCreate(ShippingInfoBase):
    """Schema for shipping information submitted at checkout."""
    pass


class ShippingInfoResponse(ShippingInfoBase):
    """Schema for shipping information response."""
    pass
