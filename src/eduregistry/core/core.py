from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from redis.asyncio import Redis

from eduregistry.config import Config
from eduregistry.core.cache import RedisCounterStore, create_redis_client

if TYPE_CHECKING:
    from eduregistry.core.modules.access.service import AccessService
    from eduregistry.core.modules.admin.service import AdminService
    from eduregistry.core.modules.auth.service import AuthService
    from eduregistry.core.modules.counter.service import CounterService
    from eduregistry.core.modules.country.service import CountryService
    from eduregistry.core.modules.individual.service import IndividualService
    from eduregistry.core.modules.parent.service import ParentService
    from eduregistry.core.modules.school.service import SchoolService
    from eduregistry.core.modules.student.service import StudentService

logger = structlog.get_logger(__name__)


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    auth: AuthService
    access: AccessService
    country: CountryService
    school: SchoolService
    student: StudentService
    individual: IndividualService
    parent: ParentService
    counter: CounterService
    admin: AdminService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        # Entity services create their collections and indexes before the
        # counters reconcile against them
        service_configs = [
            ("auth", "eduregistry.core.modules.auth.service", "AuthService"),
            ("access", "eduregistry.core.modules.access.service", "AccessService"),
            ("country", "eduregistry.core.modules.country.service", "CountryService"),
            ("school", "eduregistry.core.modules.school.service", "SchoolService"),
            ("student", "eduregistry.core.modules.student.service", "StudentService"),
            ("individual", "eduregistry.core.modules.individual.service", "IndividualService"),
            ("parent", "eduregistry.core.modules.parent.service", "ParentService"),
            ("counter", "eduregistry.core.modules.counter.service", "CounterService"),
            ("admin", "eduregistry.core.modules.admin.service", "AdminService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            if hasattr(service, "on_start"):
                await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            if hasattr(service, "on_stop"):
                await service.on_stop()


class Core:
    """Container providing config, database, cache, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    redis_client: Redis
    cache: RedisCounterStore
    services: Services

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB, Redis, and auto-register services."""
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard")
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.redis_client = create_redis_client(config.redis_url)
        self.cache = RedisCounterStore(self.redis_client)
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Check the cache connection, then start all services."""
        await self.cache.ping()
        logger.info("redis_connected")
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB and Redis connections on shutdown."""
        await self.services.stop_all()
        await self.redis_client.aclose()
        await self.mongo_client.aclose()
