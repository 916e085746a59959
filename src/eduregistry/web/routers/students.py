from datetime import date
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from eduregistry.core.modules.school.models import SchoolLevel
from eduregistry.core.modules.student.models import Gender, StudentView
from eduregistry.web.deps import AccessTokenDep, AppDep
from eduregistry.web.openapi import ErrorResponse

router = APIRouter(tags=["students"])


class RegisterStudentRequest(BaseModel):
    """Request to register a student in a school."""

    school_id: UUID = Field(..., description="School to enroll in")
    first_name: str = Field(..., min_length=1, description="First name")
    last_name: str = Field(..., min_length=1, description="Last name")
    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Account password")
    gender: Gender = Field(..., description="Gender")
    date_of_birth: date = Field(..., description="Date of birth")
    level: SchoolLevel = Field(..., description="Education level, must be offered by the school")
    address: str = Field("", description="Postal address")
    phone: str = Field("", description="Phone number")


@router.post(
    "/students",
    summary="Register student",
    description="Register a student in a school with free capacity for the requested level.",
    operation_id="registerStudent",
    status_code=201,
    responses={
        201: {"description": "Student registered"},
        400: {"model": ErrorResponse, "description": "Invalid data, level not offered or school full"},
        404: {"model": ErrorResponse, "description": "School not found"},
        503: {"model": ErrorResponse, "description": "Registration number unavailable"},
    },
)
async def register_student(register_data: RegisterStudentRequest, app: AppDep) -> StudentView:
    return await app.register_student(
        register_data.school_id,
        register_data.first_name,
        register_data.last_name,
        register_data.email,
        register_data.password,
        register_data.gender,
        register_data.date_of_birth,
        register_data.level,
        register_data.address,
        register_data.phone,
    )


@router.get(
    "/students/{student_id}",
    summary="Get student",
    description="Get student details. Available to the student, their school and admins.",
    operation_id="getStudent",
    responses={
        200: {"description": "Student details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Access denied"},
        404: {"model": ErrorResponse, "description": "Student not found"},
    },
)
async def get_student(student_id: UUID, app: AppDep, access_token: AccessTokenDep) -> StudentView:
    return await app.get_student(access_token, student_id)
