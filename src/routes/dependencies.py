"""Request-scoped dependencies shared by the admin and user routers."""
from fastapi import BackgroundTasks, Depends, Header, Request
from typing import Optional
from src.services.notifications import NotificationTrigger
from src.services.users import UserRecord
from src.utils.errors import ForbiddenError, UnauthorizedError


def get_current_user(
    request: Request,
    x_user_id: Optional[str] = Header(None, alias="X-User-Id")
) -> UserRecord:
    """
    Resolve the caller from the ``X-User-Id`` header set by the auth layer.

    Raises:
        UnauthorizedError: If the header is missing or names no known user
    """
    if not x_user_id or not x_user_id.strip().isdigit():
        raise UnauthorizedError("Please login to access this resource")
    user = request.app.state.user_directory.get_user_by_id(int(x_user_id))
    if user is None:
        raise UnauthorizedError("Please login to access this resource")
    return user


def require_admin(user: UserRecord = Depends(get_current_user)) -> UserRecord:
    if not user.is_admin:
        raise ForbiddenError(f"Role: {user.role} is not allowed to access this resource")
    return user


def get_notifier(request: Request, background_tasks: BackgroundTasks) -> NotificationTrigger:
    """Notification trigger that sends after the response is returned."""
    return NotificationTrigger(request.app.state.notification_dispatcher, schedule=background_tasks.add_task)


def get_image_store(request: Request):
    return request.app.state.image_store


def get_payment_gateway(request: Request):
    return request.app.state.payment_gateway
