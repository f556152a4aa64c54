from cardbox.models.db import Base, CardDB, CollectionDB, ScoreDB, UserDB
from cardbox.models.failure import (
    ConflictError,
    FailureDetail,
    FailureKind,
    IdentityLookupError,
    InvalidArgumentError,
    KnownError,
    NotFoundError,
    RecordValidationError,
    UnauthenticatedError,
)
from cardbox.models.fields import CardFields, CollectionFields, RecordFields, UserFields

__all__ = [
    "Base",
    "CardDB",
    "CardFields",
    "CollectionDB",
    "CollectionFields",
    "ConflictError",
    "FailureDetail",
    "FailureKind",
    "IdentityLookupError",
    "InvalidArgumentError",
    "KnownError",
    "NotFoundError",
    "RecordFields",
    "RecordValidationError",
    "ScoreDB",
    "UnauthenticatedError",
    "UserDB",
    "UserFields",
]
