"""
Error taxonomy for the Fpp API library.

Every error carries a flat ``kind`` and a ``retriable`` flag so callers can
decide what to do without walking the class hierarchy.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Enumerated error kinds raised by the library."""
    GENERIC = "generic"
    INVALID_HMAC = "invalid_hmac"
    INVALID_SHOP = "invalid_shop"
    INVALID_JWT = "invalid_jwt"
    MISSING_JWT_TOKEN = "missing_jwt_token"
    SAFE_COMPARE = "safe_compare"
    UNINITIALIZED_CONTEXT = "uninitialized_context"
    PRIVATE_APP = "private_app"
    HTTP_REQUEST = "http_request"
    HTTP_MAX_RETRIES = "http_max_retries"
    HTTP_RESPONSE = "http_response"
    HTTP_RETRIABLE = "http_retriable"
    HTTP_INTERNAL = "http_internal"
    HTTP_THROTTLING = "http_throttling"
    INVALID_OAUTH = "invalid_oauth"
    SESSION_NOT_FOUND = "session_not_found"
    COOKIE_NOT_FOUND = "cookie_not_found"
    INVALID_WEBHOOK = "invalid_webhook"
    SESSION_STORAGE = "session_storage"
    MISSING_REQUIRED_ARGUMENT = "missing_required_argument"
    UNSUPPORTED_CLIENT_TYPE = "unsupported_client_type"


class FppError(Exception):
    """Base class for all library errors."""
    kind = ErrorKind.GENERIC
    retriable = False

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class InvalidHmacError(FppError):
    """Raised when an OAuth callback query carries no HMAC."""
    kind = ErrorKind.INVALID_HMAC


class InvalidShopError(FppError):
    """Raised for a malformed shop domain."""
    kind = ErrorKind.INVALID_SHOP


class InvalidJwtError(FppError):
    """Raised when a session token fails verification."""
    kind = ErrorKind.INVALID_JWT


class MissingJwtTokenError(FppError):
    """Raised when the Authorization header holds no bearer token."""
    kind = ErrorKind.MISSING_JWT_TOKEN


class SafeCompareError(FppError):
    """Raised when safe_compare gets operands of different types."""
    kind = ErrorKind.SAFE_COMPARE


class UninitializedContextError(FppError):
    kind = ErrorKind.UNINITIALIZED_CONTEXT


class PrivateAppError(FppError):
    kind = ErrorKind.PRIVATE_APP


class HttpRequestError(FppError):
    """Raised when a request could not be made or its response not parsed."""
    kind = ErrorKind.HTTP_REQUEST


class HttpMaxRetriesError(FppError):
    kind = ErrorKind.HTTP_MAX_RETRIES


class HttpResponseError(FppError):
    """Raised for non-retriable error responses (4xx other than 429)."""
    kind = ErrorKind.HTTP_RESPONSE

    def __init__(self, message: str, code: int, status_text: str = ""):
        super().__init__(message)
        self.code = code
        self.status_text = status_text


class HttpRetriableError(FppError):
    """Base for errors the HTTP client may retry."""
    kind = ErrorKind.HTTP_RETRIABLE
    retriable = True


class HttpInternalError(HttpRetriableError):
    """Raised for 5xx responses."""
    kind = ErrorKind.HTTP_INTERNAL


class HttpThrottlingError(HttpRetriableError):
    """Raised for 429 responses; retry_after is in seconds when provided."""
    kind = ErrorKind.HTTP_THROTTLING

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class InvalidOAuthError(FppError):
    kind = ErrorKind.INVALID_OAUTH


class SessionNotFound(FppError):
    kind = ErrorKind.SESSION_NOT_FOUND


class CookieNotFound(FppError):
    kind = ErrorKind.COOKIE_NOT_FOUND


class InvalidWebhookError(FppError):
    kind = ErrorKind.INVALID_WEBHOOK


class SessionStorageError(FppError):
    """Raised when the session store reports a failure. Never retried."""
    kind = ErrorKind.SESSION_STORAGE


class MissingRequiredArgument(FppError):
    kind = ErrorKind.MISSING_REQUIRED_ARGUMENT


class UnsupportedClientType(FppError):
    kind = ErrorKind.UNSUPPORTED_CLIENT_TYPE
