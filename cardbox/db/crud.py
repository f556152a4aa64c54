"""
Generic CRUD store.

A `ResourceStore` is built once per record type and gives every resource
the same list / find / create / update / delete operations. Which fields a
caller may write is configured per store: the writable-field schema decides
what create() accepts, and update() additionally skips the permanent
block-list and the store's own `non_updatable` fields.

Stores hold no state between calls; every operation takes the request's
session.
"""

import uuid
from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from cardbox.models.db import Base
from cardbox.models.failure import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    RecordValidationError,
)
from cardbox.models.fields import RecordFields

ModelT = TypeVar("ModelT", bound=Base)

# Never written by update(), whatever the resource or the caller sends
PROTECTED_FIELDS = frozenset({"id", "version", "created_at", "updated_at"})


def parse_id(value: Any) -> str:
    """
    Normalize a record id to its canonical hex form.

    Accepts a `uuid.UUID` or a string in any form `uuid.UUID` understands
    (hex, hyphenated). Raises InvalidArgumentError for anything else, so a
    malformed id is never confused with an absent record.
    """
    if isinstance(value, uuid.UUID):
        return value.hex
    if isinstance(value, str):
        try:
            return uuid.UUID(value).hex
        except ValueError:
            pass
    raise InvalidArgumentError(f"Invalid id: {value!r}")


def describe_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into a single line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "payload"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def _check_offset(name: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(f"{name} must be a non-negative integer, got {value!r}")


class ResourceStore(Generic[ModelT]):
    """
    Data-access operations for one record type.

    Args:
        model: ORM class the store reads and writes
        fields: Schema of the fields callers may write
        non_updatable: Fields that create() may set but update() must not
    """

    def __init__(
        self,
        model: type[ModelT],
        fields: type[RecordFields],
        non_updatable: Iterable[str] = (),
    ):
        self.model = model
        self.fields = fields
        self.non_updatable = frozenset(non_updatable)
        self.name = model.__name__.removesuffix("DB")

    @property
    def updatable_fields(self) -> frozenset[str]:
        return frozenset(self.fields.model_fields) - PROTECTED_FIELDS - self.non_updatable

    async def list(
        self,
        session: AsyncSession,
        skip: int | None = None,
        limit: int | None = None,
    ) -> list[ModelT]:
        """
        Get records in insertion order.

        `skip` records are passed over, then at most `limit` are returned.
        Either may be None for no offset / no limit.
        """
        _check_offset("skip", skip)
        _check_offset("limit", limit)

        order = [self.model.id]
        created_at = getattr(self.model, "created_at", None)
        if created_at is not None:
            order.insert(0, created_at)

        result = await session.execute(
            select(self.model).order_by(*order).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def find_by_id(self, session: AsyncSession, record_id: Any) -> ModelT | None:
        """
        Get a record by id.

        Returns None if the id is well formed but no record matches.
        """
        return await session.get(self.model, parse_id(record_id))

    async def get_or_fail(self, session: AsyncSession, record_id: Any) -> ModelT:
        """Like find_by_id(), but raises NotFoundError for an absent record."""
        record = await self.find_by_id(session, record_id)
        if record is None:
            raise NotFoundError(f"{self.name} not found", detail=f"id={record_id}")
        return record

    def validate(self, fields: Any) -> dict[str, Any]:
        """
        Validate a create payload against the writable-field schema.

        Unknown keys are dropped. Returns the validated values.
        """
        if not isinstance(fields, Mapping):
            raise InvalidArgumentError(f"{self.name} payload must be an object")
        try:
            validated = self.fields.model_validate(dict(fields))
        except ValidationError as e:
            raise RecordValidationError(
                f"Invalid {self.name}", detail=describe_validation_error(e)
            ) from e
        return {
            key: value
            for key, value in validated.model_dump().items()
            if key not in PROTECTED_FIELDS
        }

    async def create(self, session: AsyncSession, fields: Any) -> ModelT:
        """
        Create a record from the given fields.

        Raises RecordValidationError for missing or mistyped fields and
        ConflictError when a uniqueness constraint is violated.
        """
        return await self.insert(session, self.validate(fields))

    async def insert(self, session: AsyncSession, values: dict[str, Any]) -> ModelT:
        """Persist already-validated values as a new record."""
        record = self.model(**values)
        session.add(record)
        await self.flush(session)
        return record

    async def update(self, session: AsyncSession, record_id: Any, changes: Any) -> ModelT:
        """
        Apply a partial update to the record with the given id.

        Only updatable fields are applied; every other key is ignored.
        The resulting record is re-validated as a whole.

        Raises:
            InvalidArgumentError: id malformed or changes not a mapping
            NotFoundError: no record with this id
            RecordValidationError: an applied value has the wrong type
        """
        key = parse_id(record_id)
        if not isinstance(changes, Mapping):
            raise InvalidArgumentError(f"{self.name} update must be an object")

        record = await session.get(self.model, key)
        if record is None:
            raise NotFoundError(f"{self.name} not found", detail=f"id={key}")

        allowed = self.updatable_fields
        writable = {name: value for name, value in changes.items() if name in allowed}
        if not writable:
            return record

        current = {name: getattr(record, name) for name in self.fields.model_fields}
        try:
            validated = self.fields.model_validate({**current, **writable})
        except ValidationError as e:
            raise RecordValidationError(
                f"Invalid {self.name}", detail=describe_validation_error(e)
            ) from e

        for name in writable:
            setattr(record, name, getattr(validated, name))

        await self.flush(session)
        return record

    async def delete(self, session: AsyncSession, record_id: Any) -> ModelT | None:
        """
        Delete the record with the given id.

        Returns the deleted record, or None if it did not exist.
        """
        record = await session.get(self.model, parse_id(record_id))
        if record is None:
            return None

        await session.delete(record)
        await self.flush(session)
        return record

    async def delete_all(self, session: AsyncSession) -> None:
        """
        Delete every record of this type.

        WARNING: Destroys all data of this type. Meant for fixtures and
        admin tooling.
        """
        await session.execute(delete(self.model))

    async def flush(self, session: AsyncSession) -> None:
        """Flush pending changes, translating constraint failures to conflicts."""
        try:
            await session.flush()
        except IntegrityError as e:
            await session.rollback()
            raise ConflictError(
                f"{self.name} conflicts with an existing record", detail=str(e.orig)
            ) from e
        except StaleDataError as e:
            await session.rollback()
            raise ConflictError(f"{self.name} was modified concurrently") from e
