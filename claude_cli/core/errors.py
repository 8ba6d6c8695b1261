"""Error taxonomy shared by the client, the session and the CLI."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ConfigurationError(Exception):
    """Missing or invalid settings. Always fatal at startup."""


class ValidationError(Exception):
    """Rejected interactive input (unknown model id, bad command arguments)."""


class ApiErrorKind(str, Enum):
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    BAD_REQUEST = "bad_request"
    UNKNOWN = "unknown"


_HINTS = {
    ApiErrorKind.AUTHENTICATION: "Check your ANTHROPIC_API_KEY in the environment or .env file.",
    ApiErrorKind.RATE_LIMIT: "Rate limit exceeded. Please wait a moment and try again.",
    ApiErrorKind.BAD_REQUEST: "Invalid request. Check your prompt or parameters.",
}

# HTTP status -> kind. Anything not listed (5xx, 529 overloaded, no status at
# all for connection failures) is UNKNOWN.
_STATUS_KINDS = {
    400: ApiErrorKind.BAD_REQUEST,
    401: ApiErrorKind.AUTHENTICATION,
    403: ApiErrorKind.AUTHENTICATION,
    404: ApiErrorKind.BAD_REQUEST,
    413: ApiErrorKind.BAD_REQUEST,
    422: ApiErrorKind.BAD_REQUEST,
    429: ApiErrorKind.RATE_LIMIT,
}


class ApiError(Exception):
    """A failure reported by the remote model service, already classified."""

    def __init__(self, message: str, kind: ApiErrorKind, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.code = code

    @property
    def hint(self) -> Optional[str]:
        return _HINTS.get(self.kind)

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (HTTP {self.code})"
        return self.message


def classify_error(exc: BaseException) -> ApiError:
    """Map a transport failure onto :class:`ApiError` using its HTTP status.

    Only the ``status_code`` the transport reports is consulted, so the result
    does not depend on which SDK exception class was raised.
    """
    if isinstance(exc, ApiError):
        return exc

    status = getattr(exc, "status_code", None)
    message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
    if not isinstance(status, int):
        return ApiError(message, ApiErrorKind.UNKNOWN)
    return ApiError(message, _STATUS_KINDS.get(status, ApiErrorKind.UNKNOWN), str(status))
