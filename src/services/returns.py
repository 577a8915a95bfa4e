"""Return and replace requests on delivered orders."""
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session
from data.database.connection import commit_or_rollback
from data.database.order_models import Order, OrderStatus, RequestStatus
from src.config import settings
from src.services import notifications
from src.utils.clock import as_utc, utcnow
from src.utils.errors import (
    AlreadyRequestedError, ForbiddenError, InvalidStateError, NotFoundError,
    ValidationError, WindowClosedError
)

RETURN = "return"
REPLACE = "replace"

REQUEST_KINDS = {
    RETURN: {"label": "Return", "template": notifications.RETURN_REQUESTED},
    REPLACE: {"label": "Replacement", "template": notifications.REPLACE_REQUESTED},
}


def window_days(kind: str) -> int:
    return settings.return_window_days if kind == RETURN else settings.replace_window_days


def window_closes_at(order: Order, kind: str) -> Optional[datetime]:
    """End of the request window, or None while the order is undelivered."""
    delivered_at = as_utc(order.delivered_at)
    if delivered_at is None:
        return None
    return delivered_at + timedelta(days=window_days(kind))


def is_within_window(order: Order, kind: str, now: datetime) -> bool:
    closes_at = window_closes_at(order, kind)
    return closes_at is not None and now <= closes_at


def is_delivered(order: Order) -> bool:
    return (order.order_status or "").strip().lower() == OrderStatus.DELIVERED


def can_request(order: Order, kind: str, now: datetime) -> bool:
    """Whether the order is delivered and still inside the request window."""
    return is_delivered(order) and is_within_window(order, kind, now)


def _request_service(
    db: Session,
    kind: str,
    order_id: int,
    user_id: int,
    reason: str,
    description: str,
    notifier=None,
    now: Optional[datetime] = None
) -> Order:
    label = REQUEST_KINDS[kind]["label"]
    reason = (reason or "").strip()
    description = (description or "").strip()
    if not reason or not description:
        raise ValidationError("Please provide reason and description")

    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")
    if order.user_id != user_id:
        raise ForbiddenError(f"You can only request a {kind} for your own orders")
    if not is_delivered(order) or order.delivered_at is None:
        raise InvalidStateError(f"{label} can only be requested for delivered orders")

    now = now or utcnow()
    if not is_within_window(order, kind, now):
        raise WindowClosedError(f"{label} window of {window_days(kind)} days has expired")
    if order.service_request(kind)["status"] != RequestStatus.NONE:
        raise AlreadyRequestedError(f"{label} already requested for this order")

    order.update_service_request(kind, {
        "status": RequestStatus.PENDING,
        "reason": reason,
        "description": description,
        "requestedAt": now,
    })
    commit_or_rollback(db, f"request {kind}")
    db.refresh(order)
    print(f"[ORDER] {label} requested for order {order.id} by user {user_id}")

    if notifier is not None:
        notifier.fire(order.user_id, REQUEST_KINDS[kind]["template"], {"orderId": order.id})
    return order


def request_return(db: Session, order_id: int, user_id: int, reason: str, description: str,
                   notifier=None, now: Optional[datetime] = None) -> Order:
    """File a return request on a delivered order within the return window."""
    return _request_service(db, RETURN, order_id, user_id, reason, description, notifier, now)


def request_replace(db: Session, order_id: int, user_id: int, reason: str, description: str,
                    notifier=None, now: Optional[datetime] = None) -> Order:
    """File a replace request on a delivered order within the replace window."""
    return _request_service(db, REPLACE, order_id, user_id, reason, description, notifier, now)
