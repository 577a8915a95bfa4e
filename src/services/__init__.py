"""Store services: catalog, inventory, orders, returns and external clients."""
from .images import LocalImageStore
from .notifications import DatabaseNotificationDispatcher, NotificationTrigger
from .payments import StripePaymentGateway
from .users import DatabaseUserDirectory, UserRecord

__all__ = [
    "LocalImageStore",
    "DatabaseNotificationDispatcher",
    "NotificationTrigger",
    "StripePaymentGateway",
    "DatabaseUserDirectory",
    "UserRecord"
]
