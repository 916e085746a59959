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
from eduregistry.core.modules.school.models import SchoolLevel
from eduregistry.core.modules.student.models import Gender, Student
from eduregistry.errors import NotFoundError, ValidationError
from eduregistry.utils import normalize_email, start_of_day

logger = structlog.get_logger(__name__)


class StudentService(Service):
    """Manages students registered through their school."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("students")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self._collection.create_index([("registration_number", 1)], unique=True)
        await self._collection.create_index([("school_id", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def get_student(self, student_id: UUID) -> Student:
        doc = await self._collection.find_one({"_id": student_id})
        if doc is None:
            raise NotFoundError(f"Student '{student_id}' not found")
        return Student.model_validate(doc)

    async def register_student(
        self,
        school_id: UUID,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        gender: Gender,
        date_of_birth: date,
        level: SchoolLevel,
        address: str = "",
        phone: str = "",
    ) -> Student:
        """Register a student; the registration number nests under the school's."""
        school = await self.core.services.school.get_school(school_id)
        if not school.offers(level):
            raise ValidationError("Invalid school level")
        if not school.can_register_student():
            raise ValidationError(f"Cannot register more students. Maximum capacity ({school.max_students}) reached.")

        email = normalize_email(email)
        validate_email(email)
        validate_password(password)
        if await self._collection.find_one({"email": email}) is not None:
            raise ValidationError("Email already registered")

        registration_number = await self.core.services.counter.get_next_registration_number(
            CounterType.STUDENT, school.registration_number
        )
        student = Student(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email,
            password_hash=hash_password(password),
            gender=gender,
            date_of_birth=start_of_day(date_of_birth),
            level=level,
            school_id=school.id,
            country_id=school.country_id,
            registration_number=registration_number,
            address=address.strip(),
            phone=phone.strip(),
        )
        await insert_document(self._collection, student, "Email or registration number already registered")
        try:
            await self.core.services.school.add_student(school.id, student.id, level)
        except ValidationError:
            # Capacity filled concurrently; the issued number stays unused
            await self._collection.delete_one({"_id": student.id})
            raise
        logger.info("student_registered", student_id=student.id, registration_number=registration_number, school_id=school.id)
        return student
