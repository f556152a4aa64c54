"""
SQLAlchemy ORM models for persistent storage.

Every record has an opaque hex UUID id and a version marker used for
optimistic concurrency. Cards, collections and users also carry
created/updated timestamps.
"""

import uuid
from datetime import UTC, datetime
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    DateTime,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

ID_LENGTH = 32


def new_id() -> str:
    """Generate a new opaque record id."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserDB(Base):
    """
    A user account.

    The password column only ever holds a bcrypt hash.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_id)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password: Mapped[str] = mapped_column(String(255))
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<UserDB(id={self.id}, email={self.email})>"


class CardDB(Base):
    """
    A study card.

    `collections` holds the ids of the collections the card belongs to.
    It is a set stored as a JSON list, so it must be reassigned (never
    mutated in place) for a change to be persisted.
    """

    __tablename__ = "cards"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_id)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(255), index=True)

    # Free-form payloads
    image: Mapped[list[Any]] = mapped_column(JSON, default=list)
    data: Mapped[Any] = mapped_column(JSON, nullable=True)

    collections: Mapped[list[str]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<CardDB(id={self.id}, name={self.name})>"


class CollectionDB(Base):
    """A named group of cards. Membership is stored on the cards."""

    __tablename__ = "collections"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_id)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<CollectionDB(id={self.id}, name={self.name})>"


class ScoreDB(Base):
    """
    Recall score of one user for one card.

    At most one row per (card, user) pair. The card and user ids are plain
    references with no database constraint: deleting a card or user leaves
    its scores in place, and a populated score then carries None for the
    missing record. Scores go away only through the bulk reset.
    """

    __tablename__ = "scores"
    __table_args__ = (UniqueConstraint("card_id", "user_id", name="uq_score_card_user"),)

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_id)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    card_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    user_id: Mapped[str] = mapped_column(String(ID_LENGTH), index=True)
    points: Mapped[int] = mapped_column(Integer)
    last_test: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Loaded only when a populated score is requested
    card: Mapped[Optional["CardDB"]] = relationship(
        primaryjoin="foreign(ScoreDB.card_id) == CardDB.id",
        viewonly=True,
        lazy="raise",
    )
    user: Mapped[Optional["UserDB"]] = relationship(
        primaryjoin="foreign(ScoreDB.user_id) == UserDB.id",
        viewonly=True,
        lazy="raise",
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<ScoreDB(card={self.card_id}, user={self.user_id}, points={self.points})>"
