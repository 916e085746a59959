"""School accounts and subscription plans."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from eduregistry.core.modules.auth.models import Account


class SchoolLevel(StrEnum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"


class SubscriptionType(StrEnum):
    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"


class SubscriptionPlan(BaseModel):
    """Capacity and price of a subscription tier."""

    type: SubscriptionType
    max_students: int
    price: int
    features: list[str]


SUBSCRIPTION_PLANS: dict[SubscriptionType, SubscriptionPlan] = {
    SubscriptionType.BASIC: SubscriptionPlan(
        type=SubscriptionType.BASIC,
        max_students=100,
        price=0,
        features=["Student registration", "Basic reporting"],
    ),
    SubscriptionType.STANDARD: SubscriptionPlan(
        type=SubscriptionType.STANDARD,
        max_students=500,
        price=50,
        features=["Student registration", "Advanced reporting", "Course management"],
    ),
    SubscriptionType.PREMIUM: SubscriptionPlan(
        type=SubscriptionType.PREMIUM,
        max_students=2000,
        price=150,
        features=["Student registration", "Advanced reporting", "Course management", "Priority support"],
    ),
}


class RosterEntry(BaseModel):
    """Student enrolled in a school at one level."""

    student_id: UUID
    level: SchoolLevel


class School(Account):
    """School registered under a verified country.

    Indexed on email, registration_number - unique; (country_id, created_at).
    """

    name: str
    country_id: UUID
    country_code: str
    registration_number: str  # <country registration number>/SCH<sequence>
    address: str
    phone: str
    school_levels: list[SchoolLevel]
    subscription_type: SubscriptionType = SubscriptionType.BASIC
    max_students: int
    current_students: int = 0  # Always len(roster); kept separately for atomic capacity checks
    roster: list[RosterEntry] = Field(default_factory=list)

    def can_register_student(self) -> bool:
        return self.current_students < self.max_students

    def offers(self, level: SchoolLevel) -> bool:
        return level in self.school_levels


class SchoolView(BaseModel):
    """School information (API representation)."""

    id: UUID = Field(..., description="School ID")
    name: str = Field(..., description="School name")
    email: str = Field(..., description="Contact email")
    country_id: UUID = Field(..., description="Country the school belongs to")
    registration_number: str = Field(..., description="Registration number, e.g. NGA1/SCH3")
    address: str = Field(..., description="Postal address")
    phone: str = Field(..., description="Phone number")
    school_levels: list[SchoolLevel] = Field(..., description="Levels the school offers")
    subscription_type: SubscriptionType = Field(..., description="Subscription tier")
    max_students: int = Field(..., description="Student capacity of the subscription")
    current_students: int = Field(..., description="Enrolled students")
    is_verified: bool = Field(..., description="Whether an admin verified the school")
    created_at: datetime = Field(..., description="Registration time")

    @classmethod
    def from_domain(cls, school: School) -> "SchoolView":
        """Create view model from domain model."""
        return cls(
            id=school.id,
            name=school.name,
            email=school.email,
            country_id=school.country_id,
            registration_number=school.registration_number,
            address=school.address,
            phone=school.phone,
            school_levels=school.school_levels,
            subscription_type=school.subscription_type,
            max_students=school.max_students,
            current_students=school.current_students,
            is_verified=school.is_verified,
            created_at=school.created_at,
        )
