"""Tests for CounterService wiring."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from eduregistry.core.modules.counter import service as counter_service
from eduregistry.core.modules.counter.models import CounterType
from eduregistry.core.modules.counter.service import CounterService


@pytest.fixture
def service(monkeypatch, store, fake_source_class):
    def make_source(_database, spec, _timeout_ms):
        source = fake_source_class(spec)
        if spec.counter_type == CounterType.COUNTRY:
            source.numbers = ["NGA1", "GHA2"]
        return source

    monkeypatch.setattr(counter_service, "MongoRegistrySource", make_source)
    config = SimpleNamespace(
        counter_ttl_seconds=60,
        counter_max_attempts=5,
        counter_retry_delay=0,
        reconcile_query_timeout_ms=5000,
    )
    instance = CounterService(MagicMock())
    instance.set_core(SimpleNamespace(config=config, cache=store))
    return instance


class TestCounterService:
    """Tests for counter lifecycle through the service."""

    def test_counter_unavailable_before_start(self, service):
        """Test that counters cannot be used before on_start."""
        with pytest.raises(RuntimeError, match="not started"):
            service.get_counter(CounterType.SCHOOL)

    @pytest.mark.asyncio
    async def test_start_initializes_all_counters(self, service, store):
        """Test that startup writes every counter key with the configured TTL."""
        await service.on_start()
        assert store.data == {
            "global:countryCounter": "2",
            "global:schoolCounter": "0",
            "global:studentCounter": "0",
            "global:individualCounter": "0",
            "global:childCounter": "0",
        }
        assert set(store.ttls.values()) == {60}

    @pytest.mark.asyncio
    async def test_next_number_per_type(self, service):
        """Test that each type uses its own sequence and format."""
        await service.on_start()
        assert await service.get_next_registration_number(CounterType.COUNTRY, "KEN") == "KEN3"
        assert await service.get_next_registration_number(CounterType.SCHOOL, "KEN3") == "KEN3/SCH1"
        assert await service.get_next_registration_number(CounterType.STUDENT, "KEN3/SCH1") == "KEN3/SCH1/STU1"
        assert await service.get_next_registration_number(CounterType.CHILD, "KEN3") == "KEN3/CHD1"

    @pytest.mark.asyncio
    async def test_health_report(self, service, store):
        """Test that the report covers every type and flags lost values."""
        await service.on_start()
        del store.data["global:studentCounter"]

        report = await service.check_all_health()
        assert set(report) == set(CounterType)
        assert report[CounterType.COUNTRY].value == 2
        assert report[CounterType.STUDENT].healthy is False

    @pytest.mark.asyncio
    async def test_init_counter_repairs_lost_value(self, service, store):
        """Test that re-running init restores a lost counter."""
        await service.on_start()
        del store.data["global:countryCounter"]

        await service.init_counter(CounterType.COUNTRY)
        assert store.data["global:countryCounter"] == "2"
