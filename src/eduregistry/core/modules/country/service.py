from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from eduregistry.core.core import Service
from eduregistry.core.db import insert_document
from eduregistry.core.modules.auth.security import hash_password
from eduregistry.core.modules.auth.validators import validate_email, validate_password
from eduregistry.core.modules.counter.models import CounterType
from eduregistry.core.modules.country.models import Country
from eduregistry.errors import NotFoundError, ValidationError
from eduregistry.utils import is_country_code, normalize_email

logger = structlog.get_logger(__name__)


class CountryService(Service):
    """Manages country accounts."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("countries")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self._collection.create_index([("country_code", 1)], unique=True)
        await self._collection.create_index([("registration_number", 1)], unique=True)
        await self._collection.create_index([("created_at", -1)])

    async def get_country(self, country_id: UUID) -> Country:
        doc = await self._collection.find_one({"_id": country_id})
        if doc is None:
            raise NotFoundError(f"Country '{country_id}' not found")
        return Country.model_validate(doc)

    async def get_country_by_code(self, country_code: str) -> Country:
        doc = await self._collection.find_one({"country_code": country_code.strip().upper()})
        if doc is None:
            raise NotFoundError(f"Country '{country_code}' not found")
        return Country.model_validate(doc)

    async def list_countries(self) -> list[Country]:
        return await Country.list_cursor(self._collection.find().sort("name", 1))

    async def register_country(self, name: str, country_code: str, email: str, password: str) -> Country:
        """Register a country; its registration number is the alpha-3 code plus the global sequence."""
        code = country_code.strip().upper()
        if not is_country_code(code):
            raise ValidationError(f"Invalid country code '{country_code}', expected ISO 3166-1 alpha-3")
        email = normalize_email(email)
        validate_email(email)
        validate_password(password)

        existing = await self._collection.find_one({"$or": [{"email": email}, {"country_code": code}]})
        if existing is not None:
            if existing["email"] == email:
                raise ValidationError("Email already registered")
            raise ValidationError(f"Country already registered: {code}")

        registration_number = await self.core.services.counter.get_next_registration_number(CounterType.COUNTRY, code)
        country = Country(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
            country_code=code,
            registration_number=registration_number,
        )
        await insert_document(self._collection, country, "Country or email already registered")
        logger.info("country_registered", country_id=country.id, registration_number=registration_number)
        return country

    async def set_verified(self, country_id: UUID, verified: bool) -> Country:
        result = await self._collection.update_one({"_id": country_id}, {"$set": {"is_verified": verified}})
        if result.matched_count == 0:
            raise NotFoundError(f"Country '{country_id}' not found")
        return await self.get_country(country_id)
