"""
Custom Exceptions - Application-specific error classes.

Remote calls (memory store, LLM API) raise a RemoteServiceError
subclass describing where the round trip broke:

- InvalidRequest    : the request could not be built (bad URL, unserializable body)
- TransportFailure  : network-level error, no HTTP response
- HTTPStatusFailure : non-2xx response, carries the status and body
- DecodeFailure     : body does not match the expected schema

Services turn these into fallback replies (chat) or failure tallies
(sync); the API layer turns anything that escapes into a JSON error.
"""
from typing import Optional


class SoarException(Exception):
    """
    Base exception for all application errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class RemoteServiceError(SoarException):
    """Base class for failures talking to a remote API."""
    status_code = 503
    error_code = "remote_service_error"

    def __init__(self, message: str, service: str = "remote", details: Optional[str] = None):
        super().__init__(message, details=details)
        self.service = service


class InvalidRequest(RemoteServiceError):
    """Raised when a request URL or body cannot be constructed."""
    status_code = 500
    error_code = "invalid_request"


class TransportFailure(RemoteServiceError):
    """Raised when the request never produced an HTTP response."""
    error_code = "transport_failure"


class HTTPStatusFailure(RemoteServiceError):
    """Raised when the remote API answers with a non-2xx status."""
    error_code = "http_status_failure"

    def __init__(self, http_status: int, service: str = "remote", body: Optional[str] = None):
        super().__init__(
            message=f"{service} returned HTTP {http_status}",
            service=service,
            details=body[:500] if body else None,
        )
        self.http_status = http_status
        self.body = body


class DecodeFailure(RemoteServiceError):
    """Raised when a response body does not match the expected schema."""
    error_code = "decode_failure"

    def __init__(self, message: str, service: str = "remote", raw_body: Optional[str] = None):
        super().__init__(message, service=service)
        self.raw_body = raw_body


class LedgerError(SoarException):
    """Raised when the sync ledger cannot be read or written."""
    status_code = 503
    error_code = "ledger_error"

    def __init__(self, message: str = "Sync ledger operation failed"):
        super().__init__(message)


class RateLimitExceeded(SoarException):
    """Raised when a client exceeds the rate limit."""
    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(self, retry_after: int = 60):
        super().__init__(
            message=f"Rate limit exceeded. Please wait {retry_after} seconds.",
            details=f"retry_after={retry_after}"
        )
        self.retry_after = retry_after


class ValidationError(SoarException):
    """Raised when input validation fails."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field
