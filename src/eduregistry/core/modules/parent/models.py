"""Parent accounts with embedded children."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from eduregistry.core.modules.auth.models import Account
from eduregistry.core.modules.school.models import SchoolLevel
from eduregistry.core.modules.student.models import Gender
from eduregistry.utils import now

MAX_CHILDREN = 5


class Child(BaseModel):
    """Child embedded in a parent document; owns a CHD registration number."""

    id: UUID = Field(default_factory=uuid4, description="Child ID")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    date_of_birth: datetime = Field(..., description="Date of birth")
    gender: Gender = Field(..., description="Gender")
    level: SchoolLevel = Field(..., description="Education level")
    country_id: UUID = Field(..., description="Country the child is registered in")
    registration_number: str = Field(..., description="Registration number, e.g. NGA1/CHD5")
    is_active: bool = Field(True, description="Whether the child account is active")
    enrolled_at: datetime = Field(default_factory=now, description="Enrollment time")


class Parent(Account):
    """Parent account; has no registration number of its own.

    Indexed on email - unique; children.registration_number - unique, sparse.
    """

    first_name: str
    last_name: str
    phone_number: str = ""
    country_id: UUID
    children: list[Child] = Field(default_factory=list)

    def has_child_named(self, first_name: str, last_name: str) -> bool:
        return any(
            child.first_name.lower() == first_name.lower() and child.last_name.lower() == last_name.lower()
            for child in self.children
        )


class ParentView(BaseModel):
    """Parent information (API representation)."""

    id: UUID = Field(..., description="Parent ID")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Email")
    phone_number: str = Field(..., description="Phone number")
    country_id: UUID = Field(..., description="Country ID")
    children: list[Child] = Field(..., description="Registered children")

    @classmethod
    def from_domain(cls, parent: Parent) -> "ParentView":
        """Create view model from domain model."""
        return cls(
            id=parent.id,
            first_name=parent.first_name,
            last_name=parent.last_name,
            email=parent.email,
            phone_number=parent.phone_number,
            country_id=parent.country_id,
            children=parent.children,
        )
