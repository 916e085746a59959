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
from eduregistry.core.modules.parent.models import MAX_CHILDREN, Child, Parent
from eduregistry.core.modules.parent.validators import validate_child_age
from eduregistry.core.modules.school.models import SchoolLevel
from eduregistry.core.modules.student.models import Gender
from eduregistry.errors import NotFoundError, ValidationError
from eduregistry.utils import normalize_email, now, start_of_day

logger = structlog.get_logger(__name__)


class ParentService(Service):
    """Manages parents and the children registered under them."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("parents")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)
        # Unique across all parents, only where children exist
        await self._collection.create_index(
            [("children.registration_number", 1)],
            unique=True,
            partialFilterExpression={"children.registration_number": {"$exists": True}},
        )

    async def get_parent(self, parent_id: UUID) -> Parent:
        doc = await self._collection.find_one({"_id": parent_id})
        if doc is None:
            raise NotFoundError(f"Parent '{parent_id}' not found")
        return Parent.model_validate(doc)

    async def register_parent(
        self,
        country_id: UUID,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        phone_number: str = "",
    ) -> Parent:
        country = await self.core.services.country.get_country(country_id)

        email = normalize_email(email)
        validate_email(email)
        validate_password(password)
        if await self._collection.find_one({"email": email}) is not None:
            raise ValidationError("Email already registered")

        parent = Parent(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email,
            password_hash=hash_password(password),
            phone_number=phone_number.strip(),
            country_id=country.id,
        )
        await insert_document(self._collection, parent, "Email already registered")
        logger.info("parent_registered", parent_id=parent.id, country=country.country_code)
        return parent

    async def add_child(
        self,
        parent_id: UUID,
        first_name: str,
        last_name: str,
        date_of_birth: date,
        gender: Gender,
        level: SchoolLevel,
    ) -> Child:
        """Register a child under a parent, in the parent's country."""
        parent = await self.get_parent(parent_id)
        country = await self.core.services.country.get_country(parent.country_id)

        first_name = first_name.strip()
        last_name = last_name.strip()
        validate_child_age(level, date_of_birth, now().date())
        if len(parent.children) >= MAX_CHILDREN:
            raise ValidationError(f"Maximum of {MAX_CHILDREN} children allowed per parent account")
        if parent.has_child_named(first_name, last_name):
            raise ValidationError("A child with this name already exists in your account")

        registration_number = await self.core.services.counter.get_next_registration_number(
            CounterType.CHILD, country.registration_number
        )
        child = Child(
            first_name=first_name,
            last_name=last_name,
            date_of_birth=start_of_day(date_of_birth),
            gender=gender,
            level=level,
            country_id=country.id,
            registration_number=registration_number,
        )
        # The filter on the last allowed slot keeps concurrent additions within the limit
        result = await self._collection.update_one(
            {"_id": parent_id, f"children.{MAX_CHILDREN - 1}": {"$exists": False}},
            {"$push": {"children": child.model_dump()}},
        )
        if result.modified_count == 0:
            raise ValidationError(f"Maximum of {MAX_CHILDREN} children allowed per parent account")

        logger.info("child_registered", parent_id=parent_id, child_id=child.id, registration_number=registration_number)
        return child

    async def list_children(self, parent_id: UUID) -> list[Child]:
        parent = await self.get_parent(parent_id)
        return parent.children

    async def remove_child(self, parent_id: UUID, child_id: UUID) -> Child:
        """Remove a child from the parent account."""
        parent = await self.get_parent(parent_id)
        child = next((c for c in parent.children if c.id == child_id), None)
        if child is None:
            raise NotFoundError(f"Child '{child_id}' not found")

        await self._collection.update_one({"_id": parent_id}, {"$pull": {"children": {"id": child_id}}})
        logger.info("child_removed", parent_id=parent_id, child_id=child_id, registration_number=child.registration_number)
        return child
