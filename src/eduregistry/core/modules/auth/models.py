"""Account and token models shared by every registrable actor."""

from datetime import datetime
from enum import StrEnum
from typing import NewType
from uuid import UUID

from pydantic import BaseModel, Field

from eduregistry.core.db import MongoModel
from eduregistry.utils import now

AccessToken = NewType("AccessToken", str)


class UserType(StrEnum):
    """Actor types, each stored in its own collection."""

    ADMIN = "admin"
    COUNTRY = "country"
    SCHOOL = "school"
    STUDENT = "student"
    INDIVIDUAL = "individual"
    PARENT = "parent"


USER_COLLECTIONS: dict[UserType, str] = {
    UserType.ADMIN: "admins",
    UserType.COUNTRY: "countries",
    UserType.SCHOOL: "schools",
    UserType.STUDENT: "students",
    UserType.INDIVIDUAL: "individuals",
    UserType.PARENT: "parents",
}


class TokenType(StrEnum):
    ACCESS = "access"
    REFRESH = "refresh"


class Account(MongoModel):
    """Credentials common to all actor documents.

    Indexed on email - unique per collection.
    """

    email: str  # Lowercased
    password_hash: str  # bcrypt hash
    refresh_token: str | None = None  # Last issued refresh token, cleared on logout
    is_verified: bool = False
    created_at: datetime = Field(default_factory=now)


class Principal(BaseModel):
    """Authenticated caller decoded from an access token."""

    id: UUID = Field(..., description="Account ID")
    user_type: UserType = Field(..., description="Actor type")
    email: str = Field(..., description="Account email")
    registration_number: str | None = Field(None, description="Registration number, if the actor has one")


class TokenPair(BaseModel):
    """Access/refresh JWT pair."""

    access_token: str = Field(..., description="Short-lived token for API requests")
    refresh_token: str = Field(..., description="Long-lived token to obtain a new pair")
