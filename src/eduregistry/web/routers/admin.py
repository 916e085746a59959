from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from eduregistry.core.modules.admin.models import AdminLevel, AdminPermission, AdminStatus, AdminView
from eduregistry.core.modules.counter.models import CounterHealth, CounterType
from eduregistry.core.modules.country.models import CountryView
from eduregistry.core.modules.individual.models import IndividualView
from eduregistry.core.modules.school.models import SchoolView
from eduregistry.web.deps import AccessTokenDep, AppDep
from eduregistry.web.openapi import ErrorResponse

router = APIRouter(tags=["admin"])


class VerificationRequest(BaseModel):
    """Request to change a verification flag."""

    verified: bool = Field(True, description="New verification state")


@router.put(
    "/admin/countries/{country_id}/verification",
    summary="Verify country",
    description="Verify or unverify a country. Only verified countries accept school registrations.",
    operation_id="setCountryVerified",
    responses={
        200: {"description": "Country updated"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
        404: {"model": ErrorResponse, "description": "Country not found"},
    },
)
async def set_country_verified(
    country_id: UUID, verification_data: VerificationRequest, app: AppDep, access_token: AccessTokenDep
) -> CountryView:
    return await app.set_country_verified(access_token, country_id, verification_data.verified)


@router.put(
    "/admin/schools/{school_id}/verification",
    summary="Verify school",
    description="Verify or unverify a school. Available to admins and the school's country.",
    operation_id="setSchoolVerified",
    responses={
        200: {"description": "School updated"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Access denied"},
        404: {"model": ErrorResponse, "description": "School not found"},
    },
)
async def set_school_verified(
    school_id: UUID, verification_data: VerificationRequest, app: AppDep, access_token: AccessTokenDep
) -> SchoolView:
    return await app.set_school_verified(access_token, school_id, verification_data.verified)


@router.get(
    "/admin/counters/health",
    summary="Counter health",
    description="Report the cached value and health of every registration counter.",
    operation_id="getCounterHealth",
    responses={
        200: {"description": "Health per counter type"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def get_counter_health(app: AppDep, access_token: AccessTokenDep) -> dict[CounterType, CounterHealth]:
    return await app.get_counter_health(access_token)


@router.get(
    "/admin/individuals",
    summary="Find individual by registration number",
    description="Look up an individual learner by registration number, e.g. NGA1/IND3.",
    operation_id="findIndividualByRegistrationNumber",
    responses={
        200: {"description": "Individual details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
        404: {"model": ErrorResponse, "description": "Individual not found"},
    },
)
async def find_individual(registration_number: str, app: AppDep, access_token: AccessTokenDep) -> IndividualView:
    return await app.find_individual_by_registration_number(access_token, registration_number)


class CreateAdminRequest(BaseModel):
    """Request to create an administrator."""

    first_name: str = Field(..., min_length=1, max_length=50, description="First name")
    last_name: str = Field(..., min_length=1, max_length=50, description="Last name")
    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Account password")
    admin_level: AdminLevel = Field(..., description="Administrator tier")
    country_id: UUID | None = Field(None, description="Country the admin is bound to, required below super admin")
    phone: str = Field("", description="Phone number")


class UpdateAdminRequest(BaseModel):
    """Request to update an administrator. Omitted fields are left unchanged."""

    first_name: str | None = Field(None, min_length=1, max_length=50, description="First name")
    last_name: str | None = Field(None, min_length=1, max_length=50, description="Last name")
    phone: str | None = Field(None, description="Phone number")
    status: AdminStatus | None = Field(None, description="Account status")
    country_id: UUID | None = Field(None, description="Country the admin is bound to")
    permissions: list[AdminPermission] | None = Field(None, description="Replacement permission list")


@router.get(
    "/admin/me",
    summary="Get current admin",
    description="Get the calling administrator's account.",
    operation_id="getCurrentAdmin",
    responses={
        200: {"description": "Admin details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def get_current_admin(app: AppDep, access_token: AccessTokenDep) -> AdminView:
    return await app.get_current_admin(access_token)


@router.get(
    "/admin/admins",
    summary="List admins",
    description="List administrators, newest first. Admins below super admin only see their own country.",
    operation_id="listAdmins",
    responses={
        200: {"description": "List of admins"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def list_admins(app: AppDep, access_token: AccessTokenDep, country_id: UUID | None = None) -> list[AdminView]:
    return await app.list_admins(access_token, country_id)


@router.post(
    "/admin/admins",
    summary="Create admin",
    description="Create an administrator with the permissions of its level.",
    operation_id="createAdmin",
    status_code=201,
    responses={
        201: {"description": "Admin created"},
        400: {"model": ErrorResponse, "description": "Invalid data or email already registered"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Permission denied"},
    },
)
async def create_admin(create_data: CreateAdminRequest, app: AppDep, access_token: AccessTokenDep) -> AdminView:
    return await app.create_admin(
        access_token,
        create_data.first_name,
        create_data.last_name,
        create_data.email,
        create_data.password,
        create_data.admin_level,
        create_data.country_id,
        create_data.phone,
    )


@router.patch(
    "/admin/admins/{admin_id}",
    summary="Update admin",
    description="Update an administrator's profile, status, country or permissions. Super admins only.",
    operation_id="updateAdmin",
    responses={
        200: {"description": "Admin updated"},
        400: {"model": ErrorResponse, "description": "Invalid country"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Permission denied"},
        404: {"model": ErrorResponse, "description": "Admin not found"},
    },
)
async def update_admin(
    admin_id: UUID, update_data: UpdateAdminRequest, app: AppDep, access_token: AccessTokenDep
) -> AdminView:
    return await app.update_admin(
        access_token,
        admin_id,
        first_name=update_data.first_name,
        last_name=update_data.last_name,
        phone=update_data.phone,
        status=update_data.status,
        country_id=update_data.country_id,
        permissions=update_data.permissions,
    )
