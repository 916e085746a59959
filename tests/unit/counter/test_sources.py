"""Tests for MongoDB-backed registry sources."""

from contextlib import contextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import NetworkTimeout, ServerSelectionTimeoutError

from eduregistry.core.modules.counter import sources
from eduregistry.core.modules.counter.models import COUNTER_SPECS, CounterType
from eduregistry.core.modules.counter.sources import MongoRegistrySource


class FakeCursor:
    """Async iterator over fixed documents, standing in for AsyncCursor."""

    def __init__(self, docs):
        self._docs = list(docs)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._docs:
            raise StopAsyncIteration
        return self._docs.pop(0)


def make_database(collection):
    database = MagicMock()
    database.get_collection.return_value = collection
    database.command = AsyncMock(return_value={"ok": 1})
    database.list_collection_names = AsyncMock(return_value=["countries", "schools", "parents"])
    return database


@pytest.fixture
def collection():
    return MagicMock()


class TestConnectivity:
    """Tests for connection and collection checks."""

    @pytest.mark.asyncio
    async def test_connected(self, collection):
        """Test that a successful ping reports connected."""
        source = MongoRegistrySource(make_database(collection), COUNTER_SPECS[CounterType.SCHOOL], 5000)
        assert await source.is_connected() is True

    @pytest.mark.asyncio
    async def test_ping_failure(self, collection):
        """Test that a failed ping reports disconnected."""
        database = make_database(collection)
        database.command = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        source = MongoRegistrySource(database, COUNTER_SPECS[CounterType.SCHOOL], 5000)
        assert await source.is_connected() is False

    @pytest.mark.asyncio
    async def test_collection_exists(self, collection):
        """Test that the collection list decides existence."""
        database = make_database(collection)
        assert await MongoRegistrySource(database, COUNTER_SPECS[CounterType.SCHOOL], 5000).collection_exists()
        assert not await MongoRegistrySource(database, COUNTER_SPECS[CounterType.STUDENT], 5000).collection_exists()

    @pytest.mark.asyncio
    async def test_checks_bounded_by_query_timeout(self, collection, monkeypatch):
        """Test that ping and the collection listing run under the query time limit."""
        timeouts = []

        @contextmanager
        def record_timeout(seconds):
            timeouts.append(seconds)
            yield

        monkeypatch.setattr(sources.pymongo, "timeout", record_timeout)
        source = MongoRegistrySource(make_database(collection), COUNTER_SPECS[CounterType.SCHOOL], 2500)

        assert await source.is_connected() is True
        assert await source.collection_exists() is True
        assert timeouts == [2.5, 2.5]

    @pytest.mark.asyncio
    async def test_ping_timeout(self, collection):
        """Test that a ping exceeding the time limit reports disconnected."""
        database = make_database(collection)
        database.command = AsyncMock(side_effect=NetworkTimeout("timed out"))
        source = MongoRegistrySource(database, COUNTER_SPECS[CounterType.SCHOOL], 5000)
        assert await source.is_connected() is False


class TestFindLatestSequence:
    """Tests for reading the highest issued sequence."""

    @pytest.mark.asyncio
    async def test_most_recent_record(self, collection):
        """Test that the newest record is queried with a time limit."""
        collection.find_one = AsyncMock(return_value={"_id": 1, "registration_number": "NGA1/SCH7"})
        source = MongoRegistrySource(make_database(collection), COUNTER_SPECS[CounterType.SCHOOL], 5000)

        assert await source.find_latest_sequence() == 7
        collection.find_one.assert_awaited_once_with(
            {}, {"registration_number": 1}, sort=[("created_at", -1)], max_time_ms=5000
        )

    @pytest.mark.asyncio
    async def test_empty_collection(self, collection):
        """Test that no records yields 0."""
        collection.find_one = AsyncMock(return_value=None)
        source = MongoRegistrySource(make_database(collection), COUNTER_SPECS[CounterType.SCHOOL], 5000)
        assert await source.find_latest_sequence() == 0

    @pytest.mark.asyncio
    async def test_malformed_number(self, collection):
        """Test that a record with a malformed number yields 0."""
        collection.find_one = AsyncMock(return_value={"_id": 1, "registration_number": "legacy-42"})
        source = MongoRegistrySource(make_database(collection), COUNTER_SPECS[CounterType.SCHOOL], 5000)
        assert await source.find_latest_sequence() == 0

    @pytest.mark.asyncio
    async def test_children_scanned_across_all_parents(self, collection):
        """Test that the highest child sequence of any parent wins."""
        collection.find = MagicMock(
            return_value=FakeCursor(
                [
                    {"_id": 1, "children": [{"registration_number": "NGA1/CHD1"}, {"registration_number": "NGA1/CHD3"}]},
                    {"_id": 2, "children": [{"registration_number": "GHA2/CHD5"}]},
                    {"_id": 3, "children": []},
                    {"_id": 4},
                ]
            )
        )
        source = MongoRegistrySource(make_database(collection), COUNTER_SPECS[CounterType.CHILD], 5000)

        assert await source.find_latest_sequence() == 5
        collection.find.assert_called_once_with({}, {"children.registration_number": 1}, max_time_ms=5000)

    @pytest.mark.asyncio
    async def test_no_children(self, collection):
        """Test that parents without children yield 0."""
        collection.find = MagicMock(return_value=FakeCursor([{"_id": 1, "children": []}]))
        source = MongoRegistrySource(make_database(collection), COUNTER_SPECS[CounterType.CHILD], 5000)
        assert await source.find_latest_sequence() == 0


class TestRegistrationNumberExists:
    """Tests for collision lookups."""

    @pytest.mark.asyncio
    async def test_taken(self, collection):
        """Test that an existing record is reported as taken."""
        collection.find_one = AsyncMock(return_value={"_id": 1})
        source = MongoRegistrySource(make_database(collection), COUNTER_SPECS[CounterType.SCHOOL], 5000)

        assert await source.registration_number_exists("NGA1/SCH8") is True
        collection.find_one.assert_awaited_once_with({"registration_number": "NGA1/SCH8"}, {"_id": 1})

    @pytest.mark.asyncio
    async def test_free(self, collection):
        """Test that a missing record is reported as free."""
        collection.find_one = AsyncMock(return_value=None)
        source = MongoRegistrySource(make_database(collection), COUNTER_SPECS[CounterType.CHILD], 5000)

        assert await source.registration_number_exists("NGA1/CHD2") is False
        collection.find_one.assert_awaited_once_with({"children.registration_number": "NGA1/CHD2"}, {"_id": 1})
