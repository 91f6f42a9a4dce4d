"""
Agent Company Schemas
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl

from app.modules.agents.models import REGISTRATION_PAGE_COUNT
from app.modules.workflow.schemas import WorkflowSection


class CompanyDetails(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=200)
    registration_number: str | None = Field(None, max_length=50)
    gst_number: str | None = Field(None, max_length=20)
    address: str | None = Field(None, max_length=300)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)
    website: HttpUrl | None = None


class PrimaryContact(BaseModel):
    """Person the portal emails about the registration."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    designation: str | None = Field(None, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=20)


class BankDetails(BaseModel):
    account_holder_name: str = Field(..., min_length=1, max_length=200)
    bank_name: str = Field(..., min_length=1, max_length=200)
    account_number: str = Field(..., min_length=4, max_length=34)
    ifsc_code: str | None = Field(None, max_length=11)
    branch: str | None = Field(None, max_length=200)


class CompanyOperations(BaseModel):
    students_per_year: int | None = Field(None, ge=0)
    countries_served: list[str] = Field(default_factory=list, max_length=50)
    services_offered: list[str] = Field(default_factory=list, max_length=20)
    head_office: str | None = Field(None, max_length=200)


class Reference(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=20)
    company: str | None = Field(None, max_length=200)


class CompanySave(BaseModel):
    """
    Request body for PUT /agents/company.

    Only the pages sent are replaced; ``page_count`` records how far the
    agent has got through the registration form.
    """

    company_details: CompanyDetails | None = None
    primary_contact: PrimaryContact | None = None
    bank_details: BankDetails | None = None
    company_operations: CompanyOperations | None = None
    page_count: int | None = Field(None, ge=0, le=REGISTRATION_PAGE_COUNT)


class CompanySubmit(BaseModel):
    """Request body for POST /agents/company/submit (the last page)."""

    references: list[Reference] = Field(..., min_length=1, max_length=5)


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    agent_id: UUID
    ag_id: str | None = Field(None, description="Assigned on first submission, e.g. AG-24092601")
    company_details: dict | None = None
    primary_contact: dict | None = None
    bank_details: dict | None = None
    company_operations: dict | None = None
    references: list | None = None
    page_count: int
    page_status: WorkflowSection
    created_at: datetime
    updated_at: datetime


class CompanyListResponse(BaseModel):
    companies: list[CompanyResponse]
    total: int
    skip: int
    limit: int
