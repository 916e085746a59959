from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

from eduregistry.core.core import Service
from eduregistry.core.modules.counter.engine import SequenceCounter
from eduregistry.core.modules.counter.models import COUNTER_SPECS, INIT_ORDER, CounterHealth, CounterType
from eduregistry.core.modules.counter.sources import MongoRegistrySource


class CounterService(Service):
    """Registration-number counters, one per entity type, shared through the cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._counters: dict[CounterType, SequenceCounter] = {}

    async def on_start(self) -> None:
        """Build the counters and initialize them in dependency order.

        A counter that cannot be verified in the cache aborts startup.
        """
        config = self.core.config
        for counter_type, spec in COUNTER_SPECS.items():
            self._counters[counter_type] = SequenceCounter(
                spec,
                self.core.cache,
                MongoRegistrySource(self.database, spec, config.reconcile_query_timeout_ms),
                ttl_seconds=config.counter_ttl_seconds,
                max_attempts=config.counter_max_attempts,
                retry_delay=config.counter_retry_delay,
            )
        for counter_type in INIT_ORDER:
            await self.init_counter(counter_type)

    def get_counter(self, counter_type: CounterType) -> SequenceCounter:
        if counter_type not in self._counters:
            raise RuntimeError(f"Counter '{counter_type}' is not started")
        return self._counters[counter_type]

    async def init_counter(self, counter_type: CounterType) -> None:
        await self.get_counter(counter_type).init()

    async def get_next_registration_number(self, counter_type: CounterType, parent_registration_number: str) -> str:
        """Issue the next registration number of a type under its parent's registration number."""
        return await self.get_counter(counter_type).next_registration_number(parent_registration_number)

    async def check_health(self, counter_type: CounterType) -> CounterHealth:
        return await self.get_counter(counter_type).check_health()

    async def check_all_health(self) -> dict[CounterType, CounterHealth]:
        return {counter_type: await self.check_health(counter_type) for counter_type in INIT_ORDER}
