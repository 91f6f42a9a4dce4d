"""
Student Information Schemas
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.modules.workflow.schemas import WorkflowSection


class StudentPersonalInformation(BaseModel):
    """Personal details as entered on the first profile page."""

    title: str | None = Field(None, max_length=10)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=20)
    date_of_birth: date | None = None
    gender: str | None = Field(None, max_length=20)
    marital_status: str | None = Field(None, max_length=20)
    passport_number: str | None = Field(None, max_length=30)


class Residence(BaseModel):
    address: str | None = Field(None, max_length=300)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)


class StudentPreferences(BaseModel):
    preferred_country: str | None = Field(None, max_length=100)
    preferred_program: str | None = Field(None, max_length=200)
    preferred_intake: str | None = Field(None, max_length=50)


class StudentInformationCreate(BaseModel):
    """
    Request body for POST /student-information.

    Agents must pass the ``student_id`` of the student account they manage;
    students create their own profile and leave it empty.
    """

    student_id: UUID | None = None
    personal_information: StudentPersonalInformation
    residence: Residence | None = None
    preferences: StudentPreferences | None = None


class StudentInformationUpdate(BaseModel):
    """Request body for PATCH /student-information/{id}. Omitted sections are kept."""

    personal_information: StudentPersonalInformation | None = None
    residence: Residence | None = None
    preferences: StudentPreferences | None = None


class StudentInformationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    agent_id: UUID | None = None
    personal_information: dict
    residence: dict | None = None
    preferences: dict | None = None
    page_status: WorkflowSection
    created_at: datetime
    updated_at: datetime


class StudentInformationListResponse(BaseModel):
    students: list[StudentInformationResponse]
    total: int
    skip: int
    limit: int
