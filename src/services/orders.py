"""Order creation and reads."""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from data.database.connection import commit_or_rollback
from data.database.order_models import Order, OrderItem, PaymentMethod
from data.database.order_schema import (
    PLACEHOLDER_IMAGE, OrderCreate, OrderItemResponse, OrderResponse, PaymentInfo, ServiceRequestResponse
)
from data.database.shipping_schema import ShippingInfoResponse
from src.services import notifications
from src.services.inventory import apply_order_stock
from src.services.returns import REPLACE, RETURN, can_request, window_closes_at
from src.utils.clock import as_utc, parse_timestamp, utcnow
from src.utils.errors import ForbiddenError, NotFoundError


def create_order(db: Session, user_id: int, data: OrderCreate, notifier=None, now: Optional[datetime] = None) -> Order:
    """
    Persist an order, then take its quantities off product stock.

    Totals are stored as submitted. The order is committed before any stock
    change; stock lines are applied one by one afterwards and are not undone
    if a later line fails.

    Args:
        db: Database session
        user_id: Ordering user
        data: Validated checkout payload
        notifier: NotificationTrigger for the confirmation message
        now: Creation time, defaults to the current UTC time

    Returns:
        The created order
    """
    now = now or utcnow()
    order = Order(
        user_id=user_id,
        shipping_info=data.shipping_info.model_dump(),
        payment_method=data.payment_method,
        item_price=data.item_price,
        tax=data.tax,
        shipping_charges=data.shipping_charges,
        total_amount=data.total_amount,
        created_at=now,
        items=[
            OrderItem(
                product_id=item.product_id,
                name=item.name,
                price=item.price,
                quantity=item.quantity,
                image=item.image or PLACEHOLDER_IMAGE
            )
            for item in data.order_items
        ]
    )
    if data.payment_info is not None:
        order.payment_info = data.payment_info.model_dump()
        if data.payment_method == PaymentMethod.ONLINE:
            order.paid_at = now

    db.add(order)
    commit_or_rollback(db, "create order")
    db.refresh(order)
    print(f"[ORDER] Created order {order.id} for user {user_id} with {len(order.items)} items, total={order.total_amount}")

    applied = apply_order_stock(db, order.items)
    print(f"[INVENTORY] Applied stock for {applied}/{len(order.items)} lines of order {order.id}")

    if notifier is not None:
        notifier.fire(user_id, notifications.ORDER_CONFIRMATION, {
            "orderId": order.id,
            "totalAmount": order.total_amount,
        })
    return order


def get_order(db: Session, order_id: int) -> Order:
    order = db.query(Order).options(selectinload(Order.items)).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")
    return order


def get_order_for_user(db: Session, order_id: int, user) -> Order:
    """Fetch an order visible to ``user``: their own, or any for an admin."""
    order = get_order(db, order_id)
    if order.user_id != user.id and not user.is_admin:
        raise ForbiddenError("You can only view your own orders")
    return order


def list_user_orders(db: Session, user_id: int) -> List[Order]:
    return (
        db.query(Order)
        .options(selectinload(Order.items))
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def list_all_orders(db: Session) -> List[Order]:
    return (
        db.query(Order)
        .options(selectinload(Order.items))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def delete_order(db: Session, order_id: int):
    """Hard-delete an order and its items. Product stock is not restored."""
    order = get_order(db, order_id)
    db.delete(order)
    commit_or_rollback(db, "delete order")
    print(f"[ORDER] Deleted order {order_id}")


def _service_request(order: Order, kind: str) -> ServiceRequestResponse:
    request = order.service_request(kind)
    return ServiceRequestResponse(
        status=request["status"],
        reason=request["reason"],
        description=request["description"],
        requested_at=parse_timestamp(request["requestedAt"]),
        processed_at=parse_timestamp(request["processedAt"]),
        processed_by=request["processedBy"],
    )


def order_to_response(order: Order, now: Optional[datetime] = None) -> OrderResponse:
    """Build the API view of an order, including values derived from ``now``."""
    now = now or utcnow()
    created_at = as_utc(order.created_at)
    order_age = (now - created_at).days if created_at else 0

    payment_info = None
    if order.payment_info:
        payment_info = PaymentInfo.model_validate(order.payment_info)

    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        shipping_info=ShippingInfoResponse.model_validate(order.shipping_info),
        order_items=[OrderItemResponse.model_validate(item) for item in order.items],
        payment_method=order.payment_method,
        payment_info=payment_info,
        paid_at=as_utc(order.paid_at),
        item_price=order.item_price,
        tax=order.tax,
        shipping_charges=order.shipping_charges,
        total_amount=order.total_amount,
        order_status=order.order_status,
        delivered_at=as_utc(order.delivered_at),
        notes=order.notes or "",
        refund_status=order.refund_status or "none",
        estimated_delivery_date=as_utc(order.estimated_delivery_date),
        tracking_info=order.tracking_info,
        return_request=_service_request(order, RETURN),
        replace_request=_service_request(order, REPLACE),
        created_at=created_at,
        updated_at=as_utc(order.updated_at),
        order_age=max(order_age, 0),
        can_return=can_request(order, RETURN, now),
        can_replace=can_request(order, REPLACE, now),
        return_window_closes_at=window_closes_at(order, RETURN),
        replace_window_closes_at=window_closes_at(order, REPLACE),
    )
