"""Application error taxonomy shared by every layer of the price cache."""

from __future__ import annotations

from typing import Any, Dict


# HTTP-equivalent status classifications
BAD_REQUEST = 400
FORBIDDEN = 403
NOT_FOUND = 404
TOO_MANY_REQUESTS = 429
INTERNAL_SERVER_ERROR = 500
SERVICE_UNAVAILABLE = 503


# Validation
MSG_SYMBOL_REQUIRED = "Symbol is required"
MSG_INVALID_NUMBER = "Value must be a valid integer"
MSG_OUT_OF_RANGE = "Value is out of the allowed range"

# Business not-found
MSG_CRYPTO_NOT_FOUND = "Cryptocurrency not found"
MSG_HISTORY_NOT_FOUND = "Price history not found"

# Cache
MSG_CACHE_NOT_FOUND = "Cached data not found"

# Upstream price API
MSG_API_BAD_REQUEST = "Invalid request to price API"
MSG_API_RATE_LIMITED = "Price API rate limit exceeded"
MSG_API_NOT_FOUND = "Resource not found on price API"
MSG_API_SERVER_ERROR = "Price API server error"
MSG_API_NETWORK_ERROR = "Unable to reach price API"

# Generic
MSG_INTERNAL = "Internal server error"


class AppError(Exception):
    """
    The single error shape crossing every layer boundary.

    `code` names the taxonomy kind for logs; only `message` and `details`
    are ever rendered to callers.
    """

    default_code = "APP_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int,
        details: Any = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.details:
            body["details"] = self.details
        return body

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AppError):
            return NotImplemented
        return (
            self.message == other.message
            and self.status_code == other.status_code
            and self.details == other.details
        )

    __hash__ = Exception.__hash__

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code}, details={self.details!r})"
        )


class ValidationError(AppError):
    default_code = "VALIDATION"

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message, BAD_REQUEST, details)


class NotFoundError(AppError):
    default_code = "NOT_FOUND"

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message, NOT_FOUND, details)


class CacheMissError(NotFoundError):
    """Nothing cached under the key. Recoverable: callers fetch upstream."""

    default_code = "CACHE_MISS"

    def __init__(self, cache_key: str) -> None:
        super().__init__(MSG_CACHE_NOT_FOUND, {"cacheKey": cache_key})


class InternalError(AppError):
    default_code = "INTERNAL"

    def __init__(self, details: Any = None, message: str = MSG_INTERNAL) -> None:
        super().__init__(message, INTERNAL_SERVER_ERROR, details)


def describe(exc: BaseException) -> str:
    """Message text of an arbitrary exception, for `originalError` details."""
    return str(exc) or type(exc).__name__
