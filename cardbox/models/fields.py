"""
Writable-field schemas.

One pydantic model per resource, listing exactly the fields a caller may
supply on create/update. Keys outside a schema are ignored, so anything not
listed here (ids, timestamps, access level, collection membership) can
never be written through the generic store.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RecordFields(BaseModel):
    """Base for writable-field schemas: unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")


class UserFields(RecordFields):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)
    name: str | None = Field(default=None, max_length=255)


class CardFields(RecordFields):
    kind: str = Field(..., min_length=1, max_length=255)
    name: str = Field(..., min_length=1, max_length=255)
    image: list[Any] = Field(default_factory=list)
    data: Any = None


class CollectionFields(RecordFields):
    name: str = Field(..., min_length=1, max_length=255)
