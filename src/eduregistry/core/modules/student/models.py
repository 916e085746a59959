from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from eduregistry.core.modules.auth.models import Account
from eduregistry.core.modules.school.models import SchoolLevel


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Student(Account):
    """Student enrolled in one school at one level.

    Indexed on email, registration_number - unique; school_id.
    """

    first_name: str
    last_name: str
    gender: Gender
    date_of_birth: datetime  # Midnight UTC
    level: SchoolLevel
    school_id: UUID
    country_id: UUID
    registration_number: str  # <school registration number>/STU<sequence>
    address: str = ""
    phone: str = ""


class StudentView(BaseModel):
    """Student information (API representation)."""

    id: UUID = Field(..., description="Student ID")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Email")
    gender: Gender = Field(..., description="Gender")
    date_of_birth: datetime = Field(..., description="Date of birth")
    level: SchoolLevel = Field(..., description="Education level")
    school_id: UUID = Field(..., description="School ID")
    registration_number: str = Field(..., description="Registration number, e.g. NGA1/SCH3/STU42")
    created_at: datetime = Field(..., description="Registration time")

    @classmethod
    def from_domain(cls, student: Student) -> "StudentView":
        """Create view model from domain model."""
        return cls(
            id=student.id,
            first_name=student.first_name,
            last_name=student.last_name,
            email=student.email,
            gender=student.gender,
            date_of_birth=student.date_of_birth,
            level=student.level,
            school_id=student.school_id,
            registration_number=student.registration_number,
            created_at=student.created_at,
        )
