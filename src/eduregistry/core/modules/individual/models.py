from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from eduregistry.core.modules.auth.models import Account
from eduregistry.core.modules.student.models import Gender


class Individual(Account):
    """Independent learner registered directly under a country.

    Indexed on email, registration_number - unique; created_at.
    """

    first_name: str
    last_name: str
    gender: Gender
    date_of_birth: datetime  # Midnight UTC
    country_id: UUID
    registration_number: str  # <country registration number>/IND<sequence>
    address: str = ""
    phone: str = ""


class IndividualView(BaseModel):
    """Individual learner information (API representation)."""

    id: UUID = Field(..., description="Individual ID")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Email")
    gender: Gender = Field(..., description="Gender")
    date_of_birth: datetime = Field(..., description="Date of birth")
    country_id: UUID = Field(..., description="Country ID")
    registration_number: str = Field(..., description="Registration number, e.g. NGA1/IND7")
    created_at: datetime = Field(..., description="Registration time")

    @classmethod
    def from_domain(cls, individual: Individual) -> "IndividualView":
        """Create view model from domain model."""
        return cls(
            id=individual.id,
            first_name=individual.first_name,
            last_name=individual.last_name,
            email=individual.email,
            gender=individual.gender,
            date_of_birth=individual.date_of_birth,
            country_id=individual.country_id,
            registration_number=individual.registration_number,
            created_at=individual.created_at,
        )
