from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from eduregistry.core.modules.auth.models import Account


class Country(Account):
    """National account; root of every registration number.

    Indexed on email, country_code, registration_number - unique; created_at.
    """

    name: str
    country_code: str  # ISO 3166-1 alpha-3, e.g. NGA
    registration_number: str  # Alpha-3 code followed by the global country sequence, e.g. NGA1


class CountryView(BaseModel):
    """Country account information (API representation)."""

    id: UUID = Field(..., description="Country ID")
    name: str = Field(..., description="Country name")
    email: str = Field(..., description="Contact email")
    country_code: str = Field(..., description="ISO 3166-1 alpha-3 code")
    registration_number: str = Field(..., description="Registration number, e.g. NGA1")
    is_verified: bool = Field(..., description="Whether an admin verified the country")
    created_at: datetime = Field(..., description="Registration time")

    @classmethod
    def from_domain(cls, country: Country) -> "CountryView":
        """Create view model from domain model."""
        return cls(
            id=country.id,
            name=country.name,
            email=country.email,
            country_code=country.country_code,
            registration_number=country.registration_number,
            is_verified=country.is_verified,
            created_at=country.created_at,
        )
