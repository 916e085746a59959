from datetime import date
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from eduregistry.core.modules.individual.models import IndividualView
from eduregistry.core.modules.student.models import Gender
from eduregistry.web.deps import AccessTokenDep, AppDep
from eduregistry.web.openapi import ErrorResponse

router = APIRouter(tags=["individuals"])


class RegisterIndividualRequest(BaseModel):
    """Request to register an individual learner."""

    country_id: UUID = Field(..., description="Country of residence")
    first_name: str = Field(..., min_length=1, description="First name")
    last_name: str = Field(..., min_length=1, description="Last name")
    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Account password")
    gender: Gender = Field(..., description="Gender")
    date_of_birth: date = Field(..., description="Date of birth")
    address: str = Field("", description="Postal address")
    phone: str = Field("", description="Phone number")


@router.post(
    "/individuals",
    summary="Register individual",
    description="Register a learner who is not enrolled through a school.",
    operation_id="registerIndividual",
    status_code=201,
    responses={
        201: {"description": "Individual registered"},
        400: {"model": ErrorResponse, "description": "Invalid data or email taken"},
        404: {"model": ErrorResponse, "description": "Country not found"},
        503: {"model": ErrorResponse, "description": "Registration number unavailable"},
    },
)
async def register_individual(register_data: RegisterIndividualRequest, app: AppDep) -> IndividualView:
    return await app.register_individual(
        register_data.country_id,
        register_data.first_name,
        register_data.last_name,
        register_data.email,
        register_data.password,
        register_data.gender,
        register_data.date_of_birth,
        register_data.address,
        register_data.phone,
    )


@router.get(
    "/individuals/{individual_id}",
    summary="Get individual",
    description="Get individual learner details. Available to the learner and admins.",
    operation_id="getIndividual",
    responses={
        200: {"description": "Individual details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Access denied"},
        404: {"model": ErrorResponse, "description": "Individual not found"},
    },
)
async def get_individual(individual_id: UUID, app: AppDep, access_token: AccessTokenDep) -> IndividualView:
    return await app.get_individual(access_token, individual_id)
