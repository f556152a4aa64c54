"""
Failure classification.

Every error a service can raise on purpose is a `KnownError` subclass that
carries its own failure kind and HTTP status. The application maps these to
responses in exactly one place (`cardbox.api.errors`);
routers and services never build error responses themselves.

Anything that is not a `KnownError` is an unknown failure: it is logged
server-side and the caller gets a fixed, generic message.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Caller-supplied input
    INVALID_ARGUMENT = "invalid_argument"
    VALIDATION_FAILED = "validation_failed"

    # Resource failures
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"

    # Authentication
    UNAUTHENTICATED = "unauthenticated"
    IDENTITY_LOOKUP_FAILED = "identity_lookup_failed"

    # Unknown
    UNKNOWN = "unknown"


UNKNOWN_FAILURE_MESSAGE = "Internal server error"


class FailureDetail(BaseModel):
    """Error body returned for every non-success response."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="Explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    kind: FailureKind = FailureKind.UNKNOWN
    status_code: int = 500

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)

    def to_response(self) -> FailureDetail:
        """Convert to an error body."""
        return FailureDetail(kind=self.kind, message=self.message, detail=self.detail)


class InvalidArgumentError(KnownError):
    """Malformed identifier or argument of the wrong shape."""

    kind = FailureKind.INVALID_ARGUMENT
    status_code = 400


class RecordValidationError(KnownError):
    """A record payload violates its schema (missing or mistyped field)."""

    kind = FailureKind.VALIDATION_FAILED
    status_code = 400


class NotFoundError(KnownError):
    """No record matches the given identifier."""

    kind = FailureKind.NOT_FOUND
    status_code = 404


class ConflictError(KnownError):
    """Uniqueness violation or concurrent modification."""

    kind = FailureKind.CONFLICT
    status_code = 409


class UnauthenticatedError(KnownError):
    """
    Missing, invalid or expired token, or an identity that lacks the
    required access level.
    """

    kind = FailureKind.UNAUTHENTICATED
    status_code = 401


class IdentityLookupError(UnauthenticatedError):
    """
    The token was valid but resolving its identity failed.

    Still answers 401, but keeps its own kind so the cause is not confused
    with a token failure.
    """

    kind = FailureKind.IDENTITY_LOOKUP_FAILED
