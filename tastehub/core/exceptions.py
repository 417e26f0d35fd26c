from typing import Any, Dict, Optional

from fastapi import status

from tastehub.core import config


class DomainError(Exception):
    """
    Base class for errors raised by the service layer.
    Each subclass carries the HTTP status and error code used at the API boundary.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "domain_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(DomainError):
    """Missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ForbiddenError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class InsufficientStockError(DomainError):
    """Requested quantity exceeds the stock seen while validating the purchase."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "insufficient_stock"

    def __init__(self, message: str, available: int):
        super().__init__(message, details={"available": available})
        self.available = available


class ConflictError(DomainError):
    """
    A conditional write lost a race with a concurrent request
    (e.g. the stock reservation found less stock than the validation step saw).
    """
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"

    def __init__(self, message: str, available: Optional[int] = None):
        super().__init__(message, details={"available": available} if available is not None else None)
        self.available = available


class InternalError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "server_error"


def internal_error(message: str, exc: Exception) -> InternalError:
    """Wraps an unexpected failure, appending its text only when EXPOSE_ERROR_DETAILS is on."""
    if config.EXPOSE_ERROR_DETAILS:
        return InternalError(f"{message}: {exc}")
    return InternalError(message)
