"""Durable-store access for counter reconciliation and collision checks."""

from typing import Any, Protocol

import pymongo
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from eduregistry.core.modules.counter.models import CounterSpec


class RegistrySource(Protocol):
    """Read-only view of the records that own registration numbers of one type."""

    async def is_connected(self) -> bool: ...

    async def collection_exists(self) -> bool: ...

    async def find_latest_sequence(self) -> int: ...

    async def registration_number_exists(self, registration_number: str) -> bool: ...


class MongoRegistrySource:
    """RegistrySource over one MongoDB collection."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]], spec: CounterSpec, query_timeout_ms: int) -> None:
        self._database = database
        self._spec = spec
        self._query_timeout_ms = query_timeout_ms
        self._collection = database.get_collection(spec.collection)

    @property
    def _timeout_seconds(self) -> float:
        return self._query_timeout_ms / 1000

    async def is_connected(self) -> bool:
        try:
            with pymongo.timeout(self._timeout_seconds):
                await self._database.command("ping")
        except PyMongoError:
            return False
        return True

    async def collection_exists(self) -> bool:
        with pymongo.timeout(self._timeout_seconds):
            names = await self._database.list_collection_names()
        return self._spec.collection in names

    async def find_latest_sequence(self) -> int:
        """Sequence of the most recently created record.

        Embedded records have no usable creation order, so every parent
        document is scanned and the highest sequence wins.
        """
        if self._spec.nested:
            return await self._find_max_nested_sequence()

        doc = await self._collection.find_one(
            {},
            {self._spec.field: 1},
            sort=[("created_at", -1)],
            max_time_ms=self._query_timeout_ms,
        )
        if doc is None:
            return 0
        return self._spec.parse_sequence(doc.get(self._spec.field))

    async def registration_number_exists(self, registration_number: str) -> bool:
        doc = await self._collection.find_one({self._spec.field: registration_number}, {"_id": 1})
        return doc is not None

    async def _find_max_nested_sequence(self) -> int:
        array_field, _, item_field = self._spec.field.partition(".")
        last = 0
        cursor = self._collection.find({}, {self._spec.field: 1}, max_time_ms=self._query_timeout_ms)
        async for doc in cursor:
            for item in doc.get(array_field) or []:
                last = max(last, self._spec.parse_sequence(item.get(item_field)))
        return last
