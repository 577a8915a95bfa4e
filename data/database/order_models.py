"""Order-related database models."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text, JSON, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from data.database.connection import Base


class OrderStatus:
    """Values stored in ``Order.order_status``."""

    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURN_APPROVED = "return_approved"
    RETURN_REJECTED = "return_rejected"
    REPLACE_APPROVED = "replace_approved"
    REPLACE_REJECTED = "replace_rejected"
    RETURNED = "returned"
    REPLACED = "replaced"

    ALL = (
        PROCESSING, SHIPPED, DELIVERED, CANCELLED,
        RETURN_APPROVED, RETURN_REJECTED, REPLACE_APPROVED, REPLACE_REJECTED,
        RETURNED, REPLACED,
    )


class RequestStatus:
    """Values stored in the return/replace request status columns."""

    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class PaymentMethod:
    COD = "COD"
    ONLINE = "ONLINE"


def empty_service_request() -> dict:
    """At-rest shape of a return/replace request nobody has filed yet."""
    return {
        "status": RequestStatus.NONE,
        "reason": "",
        "description": "",
        "requestedAt": None,
        "processedAt": None,
        "processedBy": None,
    }


class Order(Base):
    """
    Order model representing a user's checkout.

    Column names and the nested JSON documents (``shippingInfo``,
    ``paymentInfo``, ``returnRequest``, ``replaceRequest``, ``trackingInfo``)
    follow the stored order shape that reporting jobs read directly.
    """

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column("user", Integer, ForeignKey("users.id"), nullable=False, index=True)

    # {"address", "city", "country", "phone"}, captured by value at checkout
    shipping_info = Column("shippingInfo", JSON, nullable=False)

    # Payment
    payment_method = Column("paymentMethod", String(10), nullable=False, default=PaymentMethod.COD)
    payment_info = Column("paymentInfo", JSON, nullable=True)  # {"id", "status"}
    paid_at = Column("paidAt", DateTime(timezone=True), nullable=True)

    # Totals as submitted by the client
    item_price = Column("itemPrice", Float, nullable=False)
    tax = Column(Float, nullable=False)
    shipping_charges = Column("shippingCharges", Float, nullable=False)
    total_amount = Column("totalAmount", Float, nullable=False)

    # Lifecycle
    order_status = Column("orderStatus", String(50), nullable=False, default=OrderStatus.PROCESSING, index=True)
    delivered_at = Column("deliveredAt", DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=False, default="")
    refund_status = Column("refundStatus", String(20), nullable=False, default="none")  # none, requested, processing, completed, rejected
    estimated_delivery_date = Column("estimatedDeliveryDate", DateTime(timezone=True), nullable=True)
    tracking_info = Column("trackingInfo", JSON, nullable=True)  # {"carrier", "trackingNumber", "trackingUrl"}

    # {"status", "reason", "description", "requestedAt", "processedAt", "processedBy"}
    return_request = Column("returnRequest", JSON, nullable=False, default=empty_service_request)
    replace_request = Column("replaceRequest", JSON, nullable=False, default=empty_service_request)

    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column("updatedAt", DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.id",
        cascade="all, delete-orphan"
    )

    def service_request(self, kind: str) -> dict:
        """Copy of the ``return`` or ``replace`` request with every key present."""
        stored = getattr(self, f"{kind}_request") or {}
        return {**empty_service_request(), **stored}

    def update_service_request(self, kind: str, changes: dict):
        """Merge ``changes`` into a request; datetimes are stored as ISO strings."""
        request = self.service_request(kind)
        for key, value in changes.items():
            request[key] = value.isoformat() if isinstance(value, datetime) else value
        # Reassign so the JSON column is marked dirty
        setattr(self, f"{kind}_request", request)

    def __repr__(self):
        return f"<Order(id={self.id}, user_id={self.user_id}, total={self.total_amount}, status='{self.order_status}')>"


class OrderItem(Base):
    """Order line item: a snapshot of the product at checkout time."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # Plain value, not a foreign key: deleting a product leaves orders intact
    product_id = Column("product", Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)  # Snapshot of product name at time of order
    price = Column(Float, nullable=False)  # Snapshot of price at time of order
    quantity = Column(Integer, nullable=False)
    image = Column("images", String(500), nullable=False, default="https://via.placeholder.com/150")

    # Relationships
    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem(id={self.id}, product_id={self.product_id}, quantity={self.quantity}, price={self.price})>"


class Notification(Base):
    """Notification history entry written by the notification dispatcher."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    priority = Column(String(20), nullable=False, default="normal")
    data = Column(JSON, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}')>"
