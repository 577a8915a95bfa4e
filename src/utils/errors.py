"""Domain errors raised by the services and mapped to HTTP responses."""
from typing import Optional


class StoreError(Exception):
    """Base class for errors that carry an HTTP status code."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(StoreError):
    status_code = 400
    default_detail = "Invalid request"


class UnauthorizedError(StoreError):
    status_code = 401
    default_detail = "Authentication required"


class ForbiddenError(StoreError):
    status_code = 403
    default_detail = "Not allowed"


class NotFoundError(StoreError):
    status_code = 404
    default_detail = "Not found"


class ConflictError(StoreError):
    status_code = 409
    default_detail = "Resource already exists"


class InvalidStateError(StoreError):
    status_code = 400
    default_detail = "Order is not in a valid state for this action"


class InvalidTransitionError(InvalidStateError):
    default_detail = "Order already delivered"


class WindowClosedError(StoreError):
    status_code = 400
    default_detail = "Request window has closed"


class AlreadyRequestedError(StoreError):
    status_code = 400
    default_detail = "Request already submitted"


class AlreadyReviewedError(StoreError):
    status_code = 400
    default_detail = "Product Already Reviewed"


class DuplicateColorError(StoreError):
    status_code = 400
    default_detail = "Duplicate color detected. Please ensure each color is unique."


class InternalError(StoreError):
    """Storage or external-service failure."""
