from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from eduregistry.core.core import Service
from eduregistry.core.db import insert_document
from eduregistry.core.modules.auth.security import hash_password
from eduregistry.core.modules.auth.validators import validate_email, validate_password
from eduregistry.core.modules.counter.models import CounterType
from eduregistry.core.modules.school.models import (
    SUBSCRIPTION_PLANS,
    RosterEntry,
    School,
    SchoolLevel,
    SubscriptionType,
)
from eduregistry.core.pagination import PaginationResult, find_page
from eduregistry.errors import NotFoundError, ValidationError
from eduregistry.utils import normalize_email

logger = structlog.get_logger(__name__)


class SchoolService(Service):
    """Manages schools and their student rosters."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("schools")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self._collection.create_index([("registration_number", 1)], unique=True)
        await self._collection.create_index([("country_id", 1), ("created_at", -1)])
        await self._collection.create_index([("created_at", -1)])

    async def get_school(self, school_id: UUID) -> School:
        doc = await self._collection.find_one({"_id": school_id})
        if doc is None:
            raise NotFoundError(f"School '{school_id}' not found")
        return School.model_validate(doc)

    async def list_schools_by_country(self, country_id: UUID, limit: int = 10, offset: int = 0) -> PaginationResult[School]:
        """Get paginated schools of a country, newest first."""
        return await find_page(self._collection, School, {"country_id": country_id}, [("created_at", -1)], limit, offset)

    async def register_school(
        self,
        country_id: UUID,
        name: str,
        email: str,
        password: str,
        address: str,
        phone: str,
        school_levels: list[SchoolLevel],
        subscription_type: SubscriptionType = SubscriptionType.BASIC,
    ) -> School:
        """Register a school under a verified country."""
        country = await self.core.services.country.get_country(country_id)
        if not country.is_verified:
            raise ValidationError("Country must be verified before schools can register")

        email = normalize_email(email)
        validate_email(email)
        validate_password(password)
        if await self._collection.find_one({"email": email}) is not None:
            raise ValidationError("Email already registered")

        levels = list(dict.fromkeys(school_levels))  # Drop duplicates, keep order
        if not levels:
            raise ValidationError("At least one school level must be selected")

        registration_number = await self.core.services.counter.get_next_registration_number(
            CounterType.SCHOOL, country.registration_number
        )
        school = School(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
            country_id=country.id,
            country_code=country.country_code,
            registration_number=registration_number,
            address=address.strip(),
            phone=phone.strip(),
            school_levels=levels,
            subscription_type=subscription_type,
            max_students=SUBSCRIPTION_PLANS[subscription_type].max_students,
        )
        await insert_document(self._collection, school, "Email or registration number already registered")
        logger.info(
            "school_registered",
            school_id=school.id,
            registration_number=registration_number,
            country=country.country_code,
        )
        return school

    async def add_student(self, school_id: UUID, student_id: UUID, level: SchoolLevel) -> None:
        """Enroll a student, enforcing capacity atomically."""
        school = await self.get_school(school_id)
        if not school.offers(level):
            raise ValidationError(f"School does not offer {level} level education")

        entry = RosterEntry(student_id=student_id, level=level)
        result = await self._collection.update_one(
            {"_id": school_id, "current_students": {"$lt": school.max_students}, "roster.student_id": {"$ne": student_id}},
            {"$push": {"roster": entry.model_dump()}, "$inc": {"current_students": 1}},
        )
        if result.modified_count == 0:
            raise ValidationError(f"Cannot register more students. Maximum capacity ({school.max_students}) reached.")

    async def update_subscription(self, school_id: UUID, subscription_type: SubscriptionType) -> School:
        school = await self.get_school(school_id)
        plan = SUBSCRIPTION_PLANS[subscription_type]
        if school.current_students > plan.max_students:
            raise ValidationError(
                f"Cannot downgrade subscription. Current students ({school.current_students}) "
                f"exceed new plan limit ({plan.max_students})"
            )
        await self._collection.update_one(
            {"_id": school_id},
            {"$set": {"subscription_type": subscription_type, "max_students": plan.max_students}},
        )
        return await self.get_school(school_id)

    async def set_verified(self, school_id: UUID, verified: bool) -> School:
        result = await self._collection.update_one({"_id": school_id}, {"$set": {"is_verified": verified}})
        if result.matched_count == 0:
            raise NotFoundError(f"School '{school_id}' not found")
        return await self.get_school(school_id)
