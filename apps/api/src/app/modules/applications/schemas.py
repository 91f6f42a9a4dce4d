"""
Application Schemas

Pydantic schemas for offer letter, GIC and course-fee requests.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl

from app.modules.workflow.schemas import WorkflowSection


class Address(BaseModel):
    street: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)


class PersonalInformation(BaseModel):
    """Applicant's personal details."""

    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone_number: str = Field(..., min_length=5, max_length=20)
    address: Address | None = None


class EducationDetails(BaseModel):
    education_level: str = Field(..., min_length=1, max_length=100)
    mark_sheet_10: HttpUrl | None = None
    mark_sheet_12: HttpUrl | None = None
    mark_sheet_under_graduate: HttpUrl | None = None
    mark_sheet_post_graduate: HttpUrl | None = None


class Preferences(BaseModel):
    country: str = Field(..., min_length=1, max_length=100)
    institution: str = Field(..., min_length=1, max_length=200)
    course: str = Field(..., min_length=1, max_length=200)
    intake: str = Field(..., min_length=1, max_length=50)


class LanguageScore(BaseModel):
    """Band scores for IELTS, PTE or TOEFL."""

    reading: float | None = Field(None, ge=0)
    writing: float | None = Field(None, ge=0)
    speaking: float | None = Field(None, ge=0)
    listening: float | None = Field(None, ge=0)
    overall: float | None = Field(None, ge=0)


class OfferLetterCreate(BaseModel):
    """Request body for POST /applications/offer-letter."""

    student_information_id: UUID
    personal_information: PersonalInformation
    education_details: EducationDetails
    preferences: Preferences
    ielts_score: LanguageScore | None = None
    pte_score: LanguageScore | None = None
    toefl_score: LanguageScore | None = None
    certificates: list[HttpUrl] = Field(default_factory=list, max_length=20)


class GicDocuments(BaseModel):
    offer_letter: HttpUrl | None = None
    fee_receipt: HttpUrl | None = None
    gic_letter: HttpUrl | None = None
    medical: HttpUrl | None = None
    pcc: HttpUrl | None = None
    pal: HttpUrl | None = None
    ielts: HttpUrl | None = None


class GicCreate(BaseModel):
    """Request body for POST /applications/gic."""

    student_information_id: UUID
    personal_details: PersonalInformation
    document_upload: GicDocuments


class StudentDocuments(BaseModel):
    aadhar_card: HttpUrl | None = None
    pan_card: HttpUrl | None = None


class ParentDocuments(BaseModel):
    father_aadhar_card: HttpUrl | None = None
    father_pan_card: HttpUrl | None = None
    mother_aadhar_card: HttpUrl | None = None
    mother_pan_card: HttpUrl | None = None


class OfferLetterAndPassport(BaseModel):
    offer_letter: HttpUrl | None = None
    passport: HttpUrl | None = None


class CourseFeeCreate(BaseModel):
    """Request body for POST /applications/course-fee."""

    student_information_id: UUID
    personal_details: PersonalInformation
    student_document: StudentDocuments | None = None
    parent_document: ParentDocuments | None = None
    offer_letter_and_passport: OfferLetterAndPassport | None = None


class ApplicationResponse(BaseModel):
    """Application as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    application_id: str = Field(..., description="Human-readable identifier, e.g. AP-24092601")
    kind: str = Field(..., description="offerLetter, gic or courseFee")
    student_information_id: UUID
    user_id: UUID
    offer_letter: WorkflowSection | None = None
    gic: WorkflowSection | None = None
    course_fee: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class ApplicationOverview(BaseModel):
    """Counts shown on a student's or agent's dashboard."""

    total: int
    under_review: int
    completed: int
    submitted_last_7_days: int
    increase_percentage: float = Field(
        ..., description="Change in submissions vs. the previous 7 days"
    )


class AdminApplicationStats(BaseModel):
    """Application counts for the admin dashboard."""

    total: int
    offer_letters_under_review: int
    offer_letters_approved: int
    offer_letters_rejected: int
    gic_under_review: int
    gic_success: int
    gic_reject: int
    course_fee_requests: int
    submitted_this_week: int
