"""
Request and response models shared by the routers.

Response models are built from ORM records (`from_attributes`). The user
response has no password field, so a password can never be serialized.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from cardbox.models.db import ScoreDB


class UserResponse(BaseModel):
    """A user account as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str | None = None
    level: str | None = None
    created_at: datetime
    updated_at: datetime


class CardResponse(BaseModel):
    """A card as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    kind: str
    name: str
    image: list[Any] = Field(default_factory=list)
    data: Any = None
    collections: list[str] = Field(
        default_factory=list,
        description="Ids of the collections this card belongs to",
    )
    created_at: datetime
    updated_at: datetime


class CollectionResponse(BaseModel):
    """A collection as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_at: datetime
    updated_at: datetime


class ScoreResponse(BaseModel):
    """
    A user's score for a card.

    `card` and `user` are either bare ids or, when populated, the full
    records. A populated reference whose record was deleted is None.
    """

    id: str
    card: str | CardResponse | None
    user: str | UserResponse | None
    points: int
    last_test: datetime


def score_to_response(score: ScoreDB, populate: bool = False) -> ScoreResponse:
    """Convert a score record, embedding card and user if populated."""
    card: str | CardResponse | None = score.card_id
    user: str | UserResponse | None = score.user_id
    if populate:
        card = CardResponse.model_validate(score.card) if score.card is not None else None
        user = UserResponse.model_validate(score.user) if score.user is not None else None

    return ScoreResponse(
        id=score.id,
        card=card,
        user=user,
        points=score.points,
        last_test=score.last_test,
    )


class LoginRequest(BaseModel):
    """Credentials for /auth/login. Missing fields are an auth failure, not a 400."""

    email: str | None = None
    password: str | None = None


class LoginResponse(BaseModel):
    auth: bool
    uid: str
    token: str


class ScoreResultEntry(BaseModel):
    """One entry of a /scores/results batch."""

    model_config = ConfigDict(populate_by_name=True)

    card_id: str = Field(..., alias="cardId")
    hit: StrictBool
    date: datetime
