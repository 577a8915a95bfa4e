"""Order schemas for API validation."""
from pydantic import Field, field_validator
from typing import Optional, List, Literal, Dict, Any
from datetime import datetime
from data.database.product_schema import CamelModel
from data.database.shipping_schema import ShippingInfoCreate, ShippingInfoResponse

PLACEHOLDER_IMAGE = "https://via.placeholder.com/150"


class OrderItemCreate(CamelModel):
    """Line item as submitted by the client; stored as a snapshot."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    price: float = Field(..., ge=0, description="Unit price")
    quantity: int = Field(..., ge=1, description="Units ordered")
    image: Optional[str] = Field(PLACEHOLDER_IMAGE, alias="images", max_length=500, description="Image URL")
    product_id: int = Field(..., alias="product", description="Product id")


class PaymentInfo(CamelModel):
    id: Optional[str] = None
    status: Optional[str] = None


class OrderCreate(CamelModel):
    """Schema for creating an order at checkout."""
    shipping_info: ShippingInfoCreate
    order_items: List[OrderItemCreate] = Field(..., min_length=1)
    payment_method: Literal["COD", "ONLINE"] = "COD"
    payment_info: Optional[PaymentInfo] = None
    item_price: float = Field(..., ge=0)
    tax: float = Field(..., ge=0)
    shipping_charges: float = Field(..., ge=0)
    total_amount: float = Field(..., ge=0)

    @field_validator("payment_method", mode="before")
    @classmethod
    def normalize_method(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


class StatusUpdate(CamelModel):
    """Manual status override; any non-empty value is accepted."""
    order_status: str = Field(..., min_length=1, max_length=50)


class ServiceRequestCreate(CamelModel):
    """Return or replace request filed by the order owner."""
    reason: str = Field("", max_length=255)
    description: str = Field("", max_length=2000)


class PaymentIntentRequest(CamelModel):
    total_amount: Optional[float] = Field(None, description="Order total in major currency units")


class PaymentIntentResponse(CamelModel):
    id: str
    client_secret: str


class OrderItemResponse(CamelModel):
    id: int
    name: str
    price: float
    quantity: int
    image: str = Field(..., alias="images")
    product_id: int = Field(..., alias="product")


class ServiceRequestResponse(CamelModel):
    status: str
    reason: str
    description: str
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    processed_by: Optional[int] = None


class OrderResponse(CamelModel):
    """Order with its stored fields plus values derived at read time."""
    id: int
    user_id: int = Field(..., alias="user")
    shipping_info: ShippingInfoResponse
    order_items: List[OrderItemResponse]
    payment_method: str
    payment_info: Optional[PaymentInfo] = None
    paid_at: Optional[datetime] = None
    item_price: float
    tax: float
    shipping_charges: float
    total_amount: float
    order_status: str
    delivered_at: Optional[datetime] = None
    notes: str = ""
    refund_status: str = "none"
    estimated_delivery_date: Optional[datetime] = None
    tracking_info: Optional[Dict[str, Any]] = None
    return_request: ServiceRequestResponse
    replace_request: ServiceRequestResponse
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Derived
    order_age: int
    can_return: bool
    can_replace: bool
    return_window_closes_at: Optional[datetime] = None
    replace_window_closes_at: Optional[datetime] = None


class OrderListResponse(CamelModel):
    total_orders: int
    orders: List[OrderResponse]


class NotificationResponse(CamelModel):
    id: int
    type: str
    title: str
    body: str
    priority: str
    data: Dict[str, Any]
    is_read: bool
    created_at: Optional[datetime] = None
