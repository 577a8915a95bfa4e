"""Order lifecycle notifications.

Dispatch is fire-and-forget: the trigger hands the send to a scheduler
(FastAPI background tasks in the routes) and any failure is logged and
dropped, so the order operation that fired it always completes.
"""
from typing import Any, Callable, Dict, List, Optional
from data.database.connection import SessionLocal, commit_or_rollback
from data.database.order_models import Notification, OrderStatus
from src.utils.errors import NotFoundError

ORDER_CONFIRMATION = "order_confirmation"
ORDER_SHIPPED = "order_shipped"
ORDER_DELIVERED = "order_delivered"
RETURN_REQUESTED = "return_requested"
REPLACE_REQUESTED = "replace_requested"

# Template per notification type; {ref} is the last six characters of the order id
ORDER_TEMPLATES: Dict[str, Dict[str, str]] = {
    ORDER_CONFIRMATION: {
        "title": "🎉 Order Confirmed!",
        "body": "Your order #{ref} has been confirmed and is being prepared.",
    },
    ORDER_SHIPPED: {
        "title": "📦 Order Shipped!",
        "body": "Good news! Your order #{ref} is on its way to you.",
    },
    ORDER_DELIVERED: {
        "title": "✅ Order Delivered!",
        "body": "Your order #{ref} has been delivered. Enjoy your purchase!",
    },
    RETURN_REQUESTED: {
        "title": "↩️ Return Requested",
        "body": "We have received your return request for order #{ref}. We will update you shortly.",
    },
    REPLACE_REQUESTED: {
        "title": "🔄 Replacement Requested",
        "body": "We have received your replacement request for order #{ref}. We will update you shortly.",
    },
}

# Order statuses that have a customer-facing template
STATUS_TEMPLATES = {
    OrderStatus.SHIPPED: ORDER_SHIPPED,
    OrderStatus.DELIVERED: ORDER_DELIVERED,
}


def template_for_status(status: str) -> Optional[str]:
    """Notification type for a new order status, if the status has one."""
    return STATUS_TEMPLATES.get((status or "").strip().lower())


def render_template(template_type: str, context: Dict[str, Any]) -> Dict[str, Any]:
    """
    Render an order template into title, body and data payload.

    Raises:
        KeyError: If the template type is unknown
    """
    template = ORDER_TEMPLATES[template_type]
    order_id = context.get("orderId", "")
    ref = str(order_id)[-6:]
    return {
        "title": template["title"],
        "body": template["body"].format(ref=ref),
        "data": {"orderId": order_id, "type": "order_update", **context},
    }


class DatabaseNotificationDispatcher:
    """Writes rendered notifications to the user's notification history."""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def notify(self, user_id: int, template_type: str, context: Dict[str, Any]):
        rendered = render_template(template_type, context)
        db = self.session_factory()
        try:
            db.add(Notification(
                user_id=user_id,
                type=template_type,
                title=rendered["title"],
                body=rendered["body"],
                priority="high",
                data=rendered["data"]
            ))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


class NotificationTrigger:
    """Schedules notifications without letting them affect the caller."""

    def __init__(self, dispatcher, schedule: Optional[Callable[..., Any]] = None):
        """
        Args:
            dispatcher: Object with ``notify(user_id, template_type, context)``
            schedule: Called as ``schedule(func, *args)`` to run the send later;
                      when omitted the send runs inline
        """
        self.dispatcher = dispatcher
        self.schedule = schedule

    def fire(self, user_id: int, template_type: Optional[str], context: Dict[str, Any]):
        if not template_type:
            return
        if self.schedule is None:
            self._dispatch(user_id, template_type, context)
            return
        try:
            self.schedule(self._dispatch, user_id, template_type, context)
        except Exception as e:
            print(f"[NOTIFY] Could not schedule {template_type} for user {user_id}: {e}")

    def _dispatch(self, user_id: int, template_type: str, context: Dict[str, Any]):
        try:
            self.dispatcher.notify(user_id, template_type, context)
        except Exception as e:
            # Notification failures never reach the order operation
            print(f"[NOTIFY] Failed to send {template_type} to user {user_id}: {e}")


def list_notifications(db, user_id: int, unread_only: bool = False) -> List[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def mark_notification_read(db, user_id: int, notification_id: int) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")
    notification.is_read = True
    commit_or_rollback(db, "mark notification read")
    db.refresh(notification)
    return notification
