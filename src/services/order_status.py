"""Order status transitions: strict auto-advance and permissive manual override."""
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from data.database.connection import commit_or_rollback
from data.database.order_models import Order, OrderStatus, RequestStatus
from src.services.notifications import template_for_status
from src.utils.clock import utcnow
from src.utils.errors import InvalidTransitionError, NotFoundError, ValidationError

# Auto-advance graph
NEXT_STATUS = {
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}

# Manual statuses that settle a filed return/replace request: status -> (request, outcome)
REQUEST_OUTCOMES = {
    OrderStatus.RETURN_APPROVED: ("return", RequestStatus.APPROVED),
    OrderStatus.RETURN_REJECTED: ("return", RequestStatus.REJECTED),
    OrderStatus.RETURNED: ("return", RequestStatus.COMPLETED),
    OrderStatus.REPLACE_APPROVED: ("replace", RequestStatus.APPROVED),
    OrderStatus.REPLACE_REJECTED: ("replace", RequestStatus.REJECTED),
    OrderStatus.REPLACED: ("replace", RequestStatus.COMPLETED),
}


def _get_order(db: Session, order_id: int) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")
    return order


def _notify(notifier, order: Order):
    if notifier is not None:
        notifier.fire(order.user_id, template_for_status(order.order_status), {
            "orderId": order.id,
            "status": order.order_status,
        })


def advance(db: Session, order_id: int, notifier=None, now: Optional[datetime] = None) -> Order:
    """
    Move an order one step along processing -> shipped -> delivered.

    ``delivered_at`` keeps its first value if the order was delivered before.

    Raises:
        NotFoundError: If the order does not exist
        InvalidTransitionError: From delivered or any side-branch status
    """
    order = _get_order(db, order_id)
    current = (order.order_status or "").strip().lower()
    next_status = NEXT_STATUS.get(current)
    if next_status is None:
        if current == OrderStatus.DELIVERED:
            raise InvalidTransitionError()
        raise InvalidTransitionError(f"Order status '{order.order_status}' cannot be advanced")

    order.order_status = next_status
    if next_status == OrderStatus.DELIVERED and order.delivered_at is None:
        order.delivered_at = now or utcnow()

    commit_or_rollback(db, "advance order status")
    db.refresh(order)
    print(f"[ORDER] Order {order.id} advanced to {order.order_status}")
    _notify(notifier, order)
    return order


def set_status(
    db: Session,
    order_id: int,
    status: str,
    notifier=None,
    processed_by: Optional[int] = None,
    now: Optional[datetime] = None
) -> Order:
    """
    Set an order's status to any value the admin gives.

    Unlike ``advance`` no transition graph is checked here; this is the
    admin override. Setting ``delivered`` stamps ``delivered_at`` once.
    Statuses that settle a return/replace request update that request
    when one was filed.
    """
    if not status or not status.strip():
        raise ValidationError("Order status is required")
    order = _get_order(db, order_id)
    now = now or utcnow()

    order.order_status = status
    normalized = status.strip().lower()
    if normalized == OrderStatus.DELIVERED and order.delivered_at is None:
        order.delivered_at = now

    outcome = REQUEST_OUTCOMES.get(normalized)
    if outcome:
        kind, request_status = outcome
        if order.service_request(kind)["status"] != RequestStatus.NONE:
            order.update_service_request(kind, {
                "status": request_status,
                "processedAt": now,
                "processedBy": processed_by,
            })

    commit_or_rollback(db, "update order status")
    db.refresh(order)
    print(f"[ORDER] Order {order.id} status set to {order.order_status}")
    _notify(notifier, order)
    return order
