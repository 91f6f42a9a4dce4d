"""
Applications Router

API endpoints for students and agents filing applications.

Endpoints:
- POST /applications/offer-letter - File an offer letter request
- POST /applications/gic - File a GIC request
- POST /applications/course-fee - File a course-fee payment
- GET /applications - The caller's applications
- GET /applications/overview - Dashboard counts
- GET /applications/{id} - Application detail

Security:
- Students and agents only; each may file only for profiles they own or manage
- Filing is rate limited per user
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, require_roles
from app.core.database import get_db
from app.core.rate_limit import enforce_rate_limit
from app.modules.applications import service
from app.modules.applications.schemas import (
    ApplicationListResponse,
    ApplicationOverview,
    ApplicationResponse,
    CourseFeeCreate,
    GicCreate,
    OfferLetterCreate,
)
from app.modules.shared.errors import ServiceError, raise_http_error
from app.modules.users.models import UserRole

logger = logging.getLogger(__name__)

router = APIRouter()

student_or_agent = require_roles(UserRole.STUDENT, UserRole.AGENT)

RATE_LIMIT_CREATE = (20, 60)  # 20 applications per minute

_CREATE_RESPONSES = {
    403: {"description": "The profile is not the caller's own or managed student"},
    404: {"description": "Student information not found"},
    409: {"description": "No application identifier could be allocated"},
    429: {"description": "Rate limit exceeded"},
}


@router.post(
    "/offer-letter",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="File Offer Letter Request",
    description="""
File an offer letter request for a student profile.

The application is given an identifier such as `AP-24092601` and its
offerLetter section starts as `under review`. The student and agent are
emailed when it is approved or rejected.
""",
    responses=_CREATE_RESPONSES,
)
async def create_offer_letter(
    data: OfferLetterCreate,
    user: CurrentUser = Depends(student_or_agent),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    await enforce_rate_limit(user.id, "create_application", *RATE_LIMIT_CREATE)

    try:
        application = await service.create_offer_letter(db, user, data)
    except ServiceError as e:
        raise_http_error(e)
    return ApplicationResponse.model_validate(application)


@router.post(
    "/gic",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="File GIC Request",
    description="File a GIC request. Its gic section starts as `under review`.",
    responses=_CREATE_RESPONSES,
)
async def create_gic(
    data: GicCreate,
    user: CurrentUser = Depends(student_or_agent),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    await enforce_rate_limit(user.id, "create_application", *RATE_LIMIT_CREATE)

    try:
        application = await service.create_gic(db, user, data)
    except ServiceError as e:
        raise_http_error(e)
    return ApplicationResponse.model_validate(application)


@router.post(
    "/course-fee",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="File Course Fee Payment",
    responses=_CREATE_RESPONSES,
)
async def create_course_fee(
    data: CourseFeeCreate,
    user: CurrentUser = Depends(student_or_agent),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    await enforce_rate_limit(user.id, "create_application", *RATE_LIMIT_CREATE)

    try:
        application = await service.create_course_fee(db, user, data)
    except ServiceError as e:
        raise_http_error(e)
    return ApplicationResponse.model_validate(application)


@router.get(
    "",
    response_model=ApplicationListResponse,
    summary="List My Applications",
    description="""
Applications of the calling student, or of the students the calling agent
manages, newest first.

**Filters:** `application_id`, `full_name`, `country`, `institution`
(case-insensitive, partial match)
""",
)
async def list_applications(
    application_id: str | None = Query(None, min_length=1, max_length=11),
    full_name: str | None = Query(None, min_length=1, max_length=100),
    country: str | None = Query(None, min_length=1, max_length=100),
    institution: str | None = Query(None, min_length=1, max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(student_or_agent),
    db: AsyncSession = Depends(get_db),
) -> ApplicationListResponse:
    result = await service.list_my_applications(
        db,
        user,
        application_id=application_id,
        full_name=full_name,
        country=country,
        institution=institution,
        page=page,
        limit=limit,
    )
    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(a) for a in result["applications"]],
        total=result["total"],
        page=result["page"],
        limit=result["limit"],
        total_pages=result["total_pages"],
    )


@router.get(
    "/overview",
    response_model=ApplicationOverview,
    summary="Applications Overview",
    description="Totals for the caller plus the change in submissions over the last 7 days.",
)
async def get_overview(
    user: CurrentUser = Depends(student_or_agent),
    db: AsyncSession = Depends(get_db),
) -> ApplicationOverview:
    return ApplicationOverview(**await service.get_overview(db, user))


@router.get(
    "/{application_id}",
    response_model=ApplicationResponse,
    summary="Get Application",
    responses={
        403: {"description": "Not the caller's application"},
        404: {"description": "Application not found"},
    },
)
async def get_application(
    application_id: UUID,
    user: CurrentUser = Depends(require_roles(UserRole.STUDENT, UserRole.AGENT, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    try:
        application = await service.get_application(db, user, application_id)
    except ServiceError as e:
        raise_http_error(e)
    return ApplicationResponse.model_validate(application)
