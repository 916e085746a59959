"""Shared pytest fixtures."""

import pytest

from eduregistry.core.modules.counter.engine import SequenceCounter
from eduregistry.core.modules.counter.models import COUNTER_SPECS, CounterSpec, CounterType


class FakeCounterStore:
    """In-memory CounterStore with switches for cache failures."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.incr_failures = 0  # Number of upcoming increments that raise
        self.set_failures = 0  # Number of upcoming set() calls that raise
        self.drop_writes = False  # Accept set() calls without storing anything
        self.fail_reads = False

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise ConnectionError("cache unavailable")
        return self.data.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if self.set_failures > 0:
            self.set_failures -= 1
            raise ConnectionError("cache blip")
        if self.drop_writes:
            return
        self.data[key] = value
        self.ttls[key] = ttl_seconds

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)
        self.ttls.pop(key, None)

    async def incr(self, key: str) -> int:
        if self.incr_failures > 0:
            self.incr_failures -= 1
            raise ConnectionError("cache unavailable")
        value = int(self.data.get(key, "0")) + 1
        self.data[key] = str(value)
        return value

    async def expire(self, key: str, ttl_seconds: int) -> None:
        if key in self.data:
            self.ttls[key] = ttl_seconds


class FakeRegistrySource:
    """In-memory RegistrySource; `numbers` are registration numbers in creation order."""

    def __init__(self, spec: CounterSpec, numbers: list[str] | None = None) -> None:
        self.spec = spec
        self.numbers = list(numbers or [])
        self.connected = True
        self.exists = True
        self.all_taken = False  # Every candidate collides
        self.lookup_failures = 0  # Number of upcoming lookups that raise
        self.lookups: list[str] = []

    async def is_connected(self) -> bool:
        return self.connected

    async def collection_exists(self) -> bool:
        return self.exists

    async def find_latest_sequence(self) -> int:
        if not self.numbers:
            return 0
        return self.spec.parse_sequence(self.numbers[-1])

    async def registration_number_exists(self, registration_number: str) -> bool:
        self.lookups.append(registration_number)
        if self.lookup_failures > 0:
            self.lookup_failures -= 1
            raise TimeoutError("durable store timeout")
        return self.all_taken or registration_number in self.numbers


@pytest.fixture
def store():
    """Empty in-memory cache."""
    return FakeCounterStore()


@pytest.fixture
def school_spec():
    return COUNTER_SPECS[CounterType.SCHOOL]


@pytest.fixture
def school_source(school_spec):
    """School records with no registrations yet."""
    return FakeRegistrySource(school_spec)


@pytest.fixture
def school_counter(school_spec, store, school_source):
    """School counter over the in-memory fakes, without retry delays."""
    return SequenceCounter(school_spec, store, school_source, retry_delay=0)


@pytest.fixture
def fake_source_class():
    return FakeRegistrySource
