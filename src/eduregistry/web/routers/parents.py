from datetime import date
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from eduregistry.core.modules.parent.models import Child, ParentView
from eduregistry.core.modules.school.models import SchoolLevel
from eduregistry.core.modules.student.models import Gender
from eduregistry.web.deps import AccessTokenDep, AppDep
from eduregistry.web.openapi import ErrorResponse

router = APIRouter(tags=["parents"])


class RegisterParentRequest(BaseModel):
    """Request to register a parent account."""

    country_id: UUID = Field(..., description="Country of residence")
    first_name: str = Field(..., min_length=1, description="First name")
    last_name: str = Field(..., min_length=1, description="Last name")
    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Account password")
    phone_number: str = Field("", description="Phone number")


class AddChildRequest(BaseModel):
    """Request to register a child under the calling parent."""

    first_name: str = Field(..., min_length=1, description="First name")
    last_name: str = Field(..., min_length=1, description="Last name")
    date_of_birth: date = Field(..., description="Date of birth")
    gender: Gender = Field(..., description="Gender")
    level: SchoolLevel = Field(..., description="Education level")


@router.post(
    "/parents",
    summary="Register parent",
    description="Register a parent account. Parents register children after logging in.",
    operation_id="registerParent",
    status_code=201,
    responses={
        201: {"description": "Parent registered"},
        400: {"model": ErrorResponse, "description": "Invalid data or email taken"},
        404: {"model": ErrorResponse, "description": "Country not found"},
    },
)
async def register_parent(register_data: RegisterParentRequest, app: AppDep) -> ParentView:
    return await app.register_parent(
        register_data.country_id,
        register_data.first_name,
        register_data.last_name,
        register_data.email,
        register_data.password,
        register_data.phone_number,
    )


@router.get(
    "/parents/me",
    summary="Get parent profile",
    description="Get the calling parent's account with registered children.",
    operation_id="getCurrentParent",
    responses={
        200: {"description": "Parent profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Parent account required"},
    },
)
async def get_current_parent(app: AppDep, access_token: AccessTokenDep) -> ParentView:
    return await app.get_current_parent(access_token)


@router.get(
    "/parents/me/children",
    summary="List children",
    description="Get the calling parent's children.",
    operation_id="listChildren",
    responses={
        200: {"description": "List of children"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Parent account required"},
    },
)
async def list_children(app: AppDep, access_token: AccessTokenDep) -> list[Child]:
    return await app.list_children(access_token)


@router.post(
    "/parents/me/children",
    summary="Register child",
    description="Register a child under the calling parent. A parent can have at most five children.",
    operation_id="addChild",
    status_code=201,
    responses={
        201: {"description": "Child registered"},
        400: {"model": ErrorResponse, "description": "Invalid data, age out of range or child limit reached"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Parent account required"},
        503: {"model": ErrorResponse, "description": "Registration number unavailable"},
    },
)
async def add_child(child_data: AddChildRequest, app: AppDep, access_token: AccessTokenDep) -> Child:
    return await app.add_child(
        access_token,
        child_data.first_name,
        child_data.last_name,
        child_data.date_of_birth,
        child_data.gender,
        child_data.level,
    )


@router.delete(
    "/parents/me/children/{child_id}",
    summary="Remove child",
    description="Remove a child from the calling parent's account.",
    operation_id="removeChild",
    responses={
        200: {"description": "Removed child"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Parent account required"},
        404: {"model": ErrorResponse, "description": "Child not found"},
    },
)
async def remove_child(child_id: UUID, app: AppDep, access_token: AccessTokenDep) -> Child:
    return await app.remove_child(access_token, child_id)
