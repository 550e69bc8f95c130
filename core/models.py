"""
Base entity shape and repository contract shared by domain services.

The core does not implement the repository; domain services do, and usually
put a ``CacheService`` in front of it.
"""

import uuid
from datetime import datetime, timezone
from typing import Protocol, Sequence, TypeVar, runtime_checkable

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GenericModel(BaseModel):
    """Fields every persisted entity carries."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    is_active: bool = True
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


EntityT = TypeVar("EntityT", bound=GenericModel)


@runtime_checkable
class GenericRepository(Protocol[EntityT]):
    """CRUD contract implemented by domain repositories."""

    async def get_all(self) -> Sequence[EntityT]: ...

    async def get_by_id(self, id: uuid.UUID) -> EntityT: ...

    async def create(self, entity: EntityT) -> EntityT: ...

    async def update(self, entity: EntityT) -> EntityT: ...

    async def delete(self, id: uuid.UUID) -> EntityT: ...
