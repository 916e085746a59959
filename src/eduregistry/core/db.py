from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.cursor import AsyncCursor
from pymongo.errors import DuplicateKeyError

from eduregistry.errors import ValidationError


class MongoModel(BaseModel):
    """Document stored with a UUID `_id`, exposed as `id`."""

    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        data["_id"] = data.pop("id")
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]


async def insert_document(collection: AsyncCollection[dict[str, Any]], model: MongoModel, duplicate_message: str) -> None:
    """Insert a model, reporting a unique index violation as a ValidationError.

    Services check uniqueness before inserting; this covers the concurrent
    registration that passes the check at the same time.
    """
    try:
        await collection.insert_one(model.to_mongo())
    except DuplicateKeyError as exc:
        raise ValidationError(duplicate_message) from exc
