"""Error taxonomy for the generation core.

Every public operation either returns a complete result or raises an
``AppError`` subclass. Each subclass carries a stable ``kind`` tag so callers
can branch programmatically, plus a ready-to-display ``message``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Stable, user-facing error categories."""

    AUTH = "AuthError"
    PERMISSION = "PermissionError"
    MALFORMED_RESPONSE = "MalformedResponseError"
    CAPACITY = "CapacityError"
    QUOTA_EXCEEDED = "QuotaExceededError"
    SAFETY_REJECTION = "SafetyRejectionError"
    TRANSPORT = "TransportError"
    REFUSAL = "RefusalError"
    EMPTY_RESULT = "EmptyResultError"
    JOB_TIMEOUT = "JobTimeoutError"
    UNKNOWN = "UnknownError"


class AppError(Exception):
    """Base exception for all classified generation failures."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, context: str | None = None):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form for the UI layer."""
        return {"kind": self.kind.value, "message": self.message}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class AuthError(AppError):
    """Missing or invalid API key."""

    kind = ErrorKind.AUTH


class ConfigurationError(AuthError):
    """Raised at construction time when no API key is configured."""


class ApiPermissionError(AppError):
    """The key lacks scope for the requested capability."""

    kind = ErrorKind.PERMISSION


class MalformedResponseError(AppError):
    """Provider returned invalid or truncated structured output."""

    kind = ErrorKind.MALFORMED_RESPONSE


class CapacityError(AppError):
    """Provider is overloaded."""

    kind = ErrorKind.CAPACITY


class QuotaExceededError(AppError):
    """Account usage or billing limit reached."""

    kind = ErrorKind.QUOTA_EXCEEDED


class SafetyRejectionError(AppError):
    """Request blocked by the content-safety policy."""

    kind = ErrorKind.SAFETY_REJECTION


class TransportError(AppError):
    """Network or RPC level failure."""

    kind = ErrorKind.TRANSPORT


class RefusalError(AppError):
    """HTTP success, but the model's text is a refusal."""

    kind = ErrorKind.REFUSAL


class EmptyResultError(AppError):
    """Call succeeded but produced no usable artifact."""

    kind = ErrorKind.EMPTY_RESULT


class JobTimeoutError(AppError):
    """A long-running job exceeded its wall-clock budget."""

    kind = ErrorKind.JOB_TIMEOUT


class UnknownError(AppError):
    """Anything that matches no other category."""

    kind = ErrorKind.UNKNOWN


ERROR_CLASSES: dict[ErrorKind, type[AppError]] = {
    ErrorKind.AUTH: AuthError,
    ErrorKind.PERMISSION: ApiPermissionError,
    ErrorKind.MALFORMED_RESPONSE: MalformedResponseError,
    ErrorKind.CAPACITY: CapacityError,
    ErrorKind.QUOTA_EXCEEDED: QuotaExceededError,
    ErrorKind.SAFETY_REJECTION: SafetyRejectionError,
    ErrorKind.TRANSPORT: TransportError,
    ErrorKind.REFUSAL: RefusalError,
    ErrorKind.EMPTY_RESULT: EmptyResultError,
    ErrorKind.JOB_TIMEOUT: JobTimeoutError,
    ErrorKind.UNKNOWN: UnknownError,
}
