"""Generic cache-backed sequence counter.

The cache holds the last issued sequence for one entity type. The durable
store is the source of truth: whenever the cached value is missing or
corrupt it is rebuilt from the highest registration number on record.
Uniqueness across processes relies on the cache's atomic increment; the
durable-store lookup only catches counters that were reset behind the
high-water mark.
"""

import asyncio
import re

import structlog

from eduregistry.core.cache import CounterStore
from eduregistry.core.modules.counter.models import CounterHealth, CounterSpec
from eduregistry.core.modules.counter.sources import RegistrySource
from eduregistry.errors import CounterInitializationError, RegistrationNumberExhaustedError, TransientCacheFault

logger = structlog.get_logger(__name__)

COUNTER_VALUE_RE = re.compile(r"[0-9]+")


def parse_counter_value(raw: str) -> int | None:
    """Parse a cached counter value, None if it is not a non-negative integer."""
    if not COUNTER_VALUE_RE.fullmatch(raw):
        return None
    return int(raw)


class SequenceCounter:
    """Validate, reconcile, initialize and increment one entity type's counter."""

    def __init__(
        self,
        spec: CounterSpec,
        store: CounterStore,
        source: RegistrySource,
        *,
        ttl_seconds: int = 24 * 60 * 60,
        max_attempts: int = 5,
        retry_delay: float = 0.1,
    ) -> None:
        self.spec = spec
        self._store = store
        self._source = source
        self._ttl_seconds = ttl_seconds
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay

    @property
    def key(self) -> str:
        return self.spec.cache_key

    async def validate(self) -> int | None:
        """Return the cached value, or None if it is absent or corrupt.

        Corrupt values are deleted so that the next initialization rebuilds them.
        """
        try:
            raw = await self._store.get(self.key)
            if raw is None:
                return None

            value = parse_counter_value(raw)
            if value is None:
                logger.warning("counter_corrupt_value", counter=self.spec.counter_type, key=self.key, value=raw)
                await self._store.delete(self.key)
            return value
        except Exception as e:
            logger.error("counter_validation_failed", counter=self.spec.counter_type, key=self.key, error=str(e))
            return None

    async def reconstruct_last_sequence(self) -> int:
        """Highest sequence already issued according to the durable store, 0 on any failure."""
        try:
            if not await self._source.is_connected():
                logger.error("counter_reconcile_failed", counter=self.spec.counter_type, error="durable store not connected")
                return 0

            if not await self._source.collection_exists():
                logger.info("counter_reconcile_no_collection", counter=self.spec.counter_type, collection=self.spec.collection)
                return 0

            return await self._source.find_latest_sequence()
        except Exception as e:
            logger.error("counter_reconcile_failed", counter=self.spec.counter_type, error=str(e))
            return 0

    async def init(self) -> None:
        """Populate the cached counter from the durable store unless it already holds a valid value.

        Raises:
            CounterInitializationError: If the written value cannot be read back.
        """
        current = await self.validate()
        if current is not None:
            logger.info("counter_already_initialized", counter=self.spec.counter_type, value=current)
            return

        last = await self.reconstruct_last_sequence()
        try:
            await self._store.set(self.key, str(last), self._ttl_seconds)
            stored = await self._store.get(self.key)
        except Exception as e:
            raise CounterInitializationError(f"Failed to set {self.spec.counter_type} counter {self.key}: {e}") from e

        if stored != str(last):
            raise CounterInitializationError(
                f"Failed to set {self.spec.counter_type} counter {self.key}. Expected: {last}, Got: {stored}"
            )
        logger.info("counter_initialized", counter=self.spec.counter_type, value=last)

    async def next_registration_number(self, parent_registration_number: str) -> str:
        """Issue the next registration number under a parent registration number.

        Issued numbers are never handed back: a registration abandoned after
        this call leaves a gap in the sequence.

        A counter that cannot be repopulated counts as a failed attempt like
        any other error.

        Raises:
            RegistrationNumberExhaustedError: If no free number was found within max_attempts.
        """
        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                if await self.validate() is None:
                    logger.info("counter_reinitializing", counter=self.spec.counter_type, attempt=attempt)
                    await self.init()

                sequence = await self._increment()
                candidate = self.spec.compose(parent_registration_number, sequence)
                taken = await self._source.registration_number_exists(candidate)
            except Exception as e:
                last_error = e
                logger.error(
                    "counter_attempt_failed",
                    counter=self.spec.counter_type,
                    attempt=attempt,
                    error=str(e),
                )
                if isinstance(e, TransientCacheFault):
                    await self._reset()
                if attempt < self._max_attempts:
                    await asyncio.sleep(self._retry_delay * attempt)
                continue

            if not taken:
                logger.info("registration_number_issued", counter=self.spec.counter_type, registration_number=candidate)
                return candidate

            # Collisions retry immediately with a fresh increment
            logger.warning(
                "registration_number_collision",
                counter=self.spec.counter_type,
                registration_number=candidate,
                attempt=attempt,
            )

        logger.error(
            "registration_number_exhausted",
            counter=self.spec.counter_type,
            parent=parent_registration_number,
            attempts=self._max_attempts,
        )
        raise RegistrationNumberExhaustedError(self.spec.counter_type, self._max_attempts) from last_error

    async def check_health(self) -> CounterHealth:
        value = await self.validate()
        if value is None:
            return CounterHealth(healthy=False, value=None, error=f"{self.spec.counter_type} counter is invalid or missing")
        return CounterHealth(healthy=True, value=value)

    async def _increment(self) -> int:
        try:
            sequence = await self._store.incr(self.key)
        except Exception as e:
            raise TransientCacheFault(f"Increment of {self.key} failed: {e}") from e
        if sequence <= 0:
            raise TransientCacheFault(f"Invalid {self.spec.counter_type} counter value after increment: {sequence}")
        if sequence == 1:
            # INCR on a missing key recreates it without a TTL
            await self._expire()
        return sequence

    async def _expire(self) -> None:
        try:
            await self._store.expire(self.key, self._ttl_seconds)
        except Exception as e:
            logger.warning("counter_expire_failed", counter=self.spec.counter_type, key=self.key, error=str(e))

    async def _reset(self) -> None:
        """Drop the cached value and rebuild it from the durable store."""
        logger.info("counter_recovering", counter=self.spec.counter_type, key=self.key)
        try:
            await self._store.delete(self.key)
        except Exception as e:
            logger.error("counter_delete_failed", counter=self.spec.counter_type, key=self.key, error=str(e))
        try:
            await self.init()
        except CounterInitializationError as e:
            # The next attempt reinitializes from scratch
            logger.error("counter_recovery_failed", counter=self.spec.counter_type, key=self.key, error=str(e))
