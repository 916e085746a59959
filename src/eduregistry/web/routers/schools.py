from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from eduregistry.core.modules.school.models import SchoolLevel, SchoolView, SubscriptionType
from eduregistry.web.deps import AccessTokenDep, AppDep
from eduregistry.web.openapi import ErrorResponse

router = APIRouter(tags=["schools"])


class RegisterSchoolRequest(BaseModel):
    """Request to register a school."""

    country_id: UUID = Field(..., description="Verified country the school belongs to")
    name: str = Field(..., min_length=1, description="School name")
    email: str = Field(..., description="Contact email")
    password: str = Field(..., description="Account password")
    address: str = Field(..., description="Postal address")
    phone: str = Field(..., description="Phone number")
    school_levels: list[SchoolLevel] = Field(..., min_length=1, description="Levels the school offers")
    subscription_type: SubscriptionType = Field(SubscriptionType.BASIC, description="Subscription tier")


class UpdateSubscriptionRequest(BaseModel):
    """Request to change a school's subscription."""

    subscription_type: SubscriptionType = Field(..., description="New subscription tier")


@router.post(
    "/schools",
    summary="Register school",
    description="Register a new school under a verified country.",
    operation_id="registerSchool",
    status_code=201,
    responses={
        201: {"description": "School registered"},
        400: {"model": ErrorResponse, "description": "Invalid data or country not verified"},
        404: {"model": ErrorResponse, "description": "Country not found"},
        503: {"model": ErrorResponse, "description": "Registration number unavailable"},
    },
)
async def register_school(register_data: RegisterSchoolRequest, app: AppDep) -> SchoolView:
    return await app.register_school(
        register_data.country_id,
        register_data.name,
        register_data.email,
        register_data.password,
        register_data.address,
        register_data.phone,
        register_data.school_levels,
        register_data.subscription_type,
    )


@router.get(
    "/schools/{school_id}",
    summary="Get school",
    description="Get school details by ID.",
    operation_id="getSchool",
    responses={
        200: {"description": "School details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "School not found"},
    },
)
async def get_school(school_id: UUID, app: AppDep, access_token: AccessTokenDep) -> SchoolView:
    return await app.get_school(access_token, school_id)


@router.patch(
    "/schools/{school_id}/subscription",
    summary="Change subscription",
    description="Change the school's subscription tier. Capacity follows the new plan.",
    operation_id="updateSchoolSubscription",
    responses={
        200: {"description": "Subscription updated"},
        400: {"model": ErrorResponse, "description": "Plan too small for enrolled students"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the school's account"},
        404: {"model": ErrorResponse, "description": "School not found"},
    },
)
async def update_subscription(
    school_id: UUID, update_data: UpdateSubscriptionRequest, app: AppDep, access_token: AccessTokenDep
) -> SchoolView:
    return await app.update_school_subscription(access_token, school_id, update_data.subscription_type)
