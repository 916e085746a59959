from datetime import date
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from eduregistry.core.core import Service
from eduregistry.core.db import insert_document
from eduregistry.core.modules.auth.security import hash_password
from eduregistry.core.modules.auth.validators import validate_email, validate_password
from eduregistry.core.modules.counter.models import CounterType
from eduregistry.core.modules.individual.models import Individual
from eduregistry.core.modules.student.models import Gender
from eduregistry.errors import NotFoundError, ValidationError
from eduregistry.utils import normalize_email, start_of_day

logger = structlog.get_logger(__name__)


class IndividualService(Service):
    """Manages individual learners."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("individuals")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self._collection.create_index([("registration_number", 1)], unique=True)
        await self._collection.create_index([("created_at", -1)])

    async def get_individual(self, individual_id: UUID) -> Individual:
        doc = await self._collection.find_one({"_id": individual_id})
        if doc is None:
            raise NotFoundError(f"Individual '{individual_id}' not found")
        return Individual.model_validate(doc)

    async def get_by_registration_number(self, registration_number: str) -> Individual:
        doc = await self._collection.find_one({"registration_number": registration_number})
        if doc is None:
            raise NotFoundError(f"Individual '{registration_number}' not found")
        return Individual.model_validate(doc)

    async def register_individual(
        self,
        country_id: UUID,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        gender: Gender,
        date_of_birth: date,
        address: str = "",
        phone: str = "",
    ) -> Individual:
        country = await self.core.services.country.get_country(country_id)

        email = normalize_email(email)
        validate_email(email)
        validate_password(password)
        if await self._collection.find_one({"email": email}) is not None:
            raise ValidationError("Email already registered")

        registration_number = await self.core.services.counter.get_next_registration_number(
            CounterType.INDIVIDUAL, country.registration_number
        )
        individual = Individual(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email,
            password_hash=hash_password(password),
            gender=gender,
            date_of_birth=start_of_day(date_of_birth),
            country_id=country.id,
            registration_number=registration_number,
            address=address.strip(),
            phone=phone.strip(),
        )
        await insert_document(self._collection, individual, "Email or registration number already registered")
        logger.info("individual_registered", individual_id=individual.id, registration_number=registration_number)
        return individual
