from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from eduregistry.core.modules.country.models import CountryView
from eduregistry.core.modules.school.models import SchoolView
from eduregistry.core.pagination import PaginationResult
from eduregistry.web.deps import AccessTokenDep, AppDep
from eduregistry.web.openapi import ErrorResponse

router = APIRouter(tags=["countries"])


class RegisterCountryRequest(BaseModel):
    """Request to register a country."""

    name: str = Field(..., min_length=1, description="Country name")
    country_code: str = Field(..., description="ISO 3166-1 alpha-3 code, e.g. NGA")
    email: str = Field(..., description="Contact email")
    password: str = Field(..., description="Account password")


@router.get(
    "/countries",
    summary="List countries",
    description="Get all registered countries.",
    operation_id="listCountries",
    responses={200: {"description": "List of countries"}},
)
async def list_countries(app: AppDep) -> list[CountryView]:
    return await app.list_countries()


@router.post(
    "/countries",
    summary="Register country",
    description="Register a new country. The country stays unverified until an admin verifies it.",
    operation_id="registerCountry",
    status_code=201,
    responses={
        201: {"description": "Country registered"},
        400: {"model": ErrorResponse, "description": "Invalid data or already registered"},
        503: {"model": ErrorResponse, "description": "Registration number unavailable"},
    },
)
async def register_country(register_data: RegisterCountryRequest, app: AppDep) -> CountryView:
    return await app.register_country(
        register_data.name, register_data.country_code, register_data.email, register_data.password
    )


@router.get(
    "/countries/{country_id}",
    summary="Get country",
    description="Get country details by ID.",
    operation_id="getCountry",
    responses={
        200: {"description": "Country details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Country not found"},
    },
)
async def get_country(country_id: UUID, app: AppDep, access_token: AccessTokenDep) -> CountryView:
    return await app.get_country(access_token, country_id)


@router.get(
    "/countries/by-code/{country_code}",
    summary="Get country by code",
    description="Get country details by ISO 3166-1 alpha-3 code.",
    operation_id="getCountryByCode",
    responses={
        200: {"description": "Country details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Country not found"},
    },
)
async def get_country_by_code(country_code: str, app: AppDep, access_token: AccessTokenDep) -> CountryView:
    return await app.get_country_by_code(access_token, country_code)


@router.get(
    "/countries/{country_id}/schools",
    summary="List schools of a country",
    description="Get paginated schools registered under a country, newest first.",
    operation_id="listCountrySchools",
    responses={
        200: {"description": "Paginated schools"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_country_schools(
    country_id: UUID, app: AppDep, access_token: AccessTokenDep, limit: int = 10, offset: int = 0
) -> PaginationResult[SchoolView]:
    return await app.list_schools_by_country(access_token, country_id, limit, offset)
