from typing import Any, Optional

from shared.utils.app_status_code import AppStatusCode


class MarketplaceError(Exception):
    """Base class for failures that are reported to the caller as-is."""

    http_status = 400
    status_code = AppStatusCode.OPERATION_FAILED

    def __init__(self, message: str, details: Optional[Any] = None, status_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class ValidationError(MarketplaceError):
    http_status = 400
    status_code = AppStatusCode.REQUIRED_VALIDATION_ERROR


class AuthenticationError(MarketplaceError):
    http_status = 401
    status_code = AppStatusCode.AUTHENTICATION_CREDENTIALS_INVALID


class AuthorizationError(MarketplaceError):
    http_status = 403
    status_code = AppStatusCode.UNAUTHORIZED_ACTION


class NotFoundError(MarketplaceError):
    http_status = 404
    status_code = AppStatusCode.NOT_FOUND


class ConflictError(MarketplaceError):
    http_status = 400
    status_code = AppStatusCode.INVALID_STATUS_TRANSITION


class InsufficientStockError(ConflictError):
    """Raised once with every item that cannot be covered by current stock."""

    status_code = AppStatusCode.INSUFFICIENT_STOCK

    def __init__(self, shortfalls: list):
        self.shortfalls = shortfalls
        lines = [
            f"{s['product_name']}: requested {s['requested']}, available {s['available']}"
            for s in shortfalls
        ]
        super().__init__(
            "Insufficient stock for some items: " + "; ".join(lines),
            details=shortfalls,
        )


class ConcurrentUpdateError(ConflictError):
    http_status = 409
    status_code = AppStatusCode.CONCURRENT_UPDATE


class InternalError(MarketplaceError):
    http_status = 500
    status_code = AppStatusCode.OPERATION_ERROR
