"""
Applications Admin Router

API endpoints for administrators reviewing applications.
All endpoints require the admin role.

Endpoints:
- GET /admin/applications - List applications with filters and pagination
- GET /admin/applications/stats - Dashboard statistics
- PATCH /admin/applications/{id}/sections/{section} - Move offerLetter or gic

Security:
- Audit logging for every transition
- Rate limiting on transitions to prevent mass operations
"""

import logging
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user
from app.core.database import get_db
from app.core.rate_limit import enforce_rate_limit
from app.modules.applications import service
from app.modules.applications.schemas import (
    AdminApplicationStats,
    ApplicationListResponse,
    ApplicationResponse,
)
from app.modules.shared.errors import ServiceError, raise_http_error
from app.modules.workflow import OfferLetterStatus
from app.modules.workflow.schemas import SectionTransitionRequest

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_TRANSITION = (30, 60)  # 30 transitions per minute


@router.get(
    "",
    response_model=ApplicationListResponse,
    summary="List Applications",
    description="""
Paginated list of every application, newest first.

**Filters:**
- `kind`: offerLetter, gic or courseFee
- `offer_letter_status`: under review, approved or rejected
- `application_id`, `full_name`: case-insensitive partial match

**Access:** Admin only
""",
)
async def list_applications(
    kind: Literal["offerLetter", "gic", "courseFee"] | None = Query(None),
    offer_letter_status: OfferLetterStatus | None = Query(None),
    application_id: str | None = Query(None, min_length=1, max_length=11),
    full_name: str | None = Query(None, min_length=1, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> ApplicationListResponse:
    result = await service.admin_list_applications(
        db,
        kind=kind,
        offer_letter_status=offer_letter_status.value if offer_letter_status else None,
        application_id=application_id,
        full_name=full_name,
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
    "/stats",
    response_model=AdminApplicationStats,
    summary="Application Statistics",
)
async def get_stats(
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> AdminApplicationStats:
    return AdminApplicationStats(**await service.admin_get_stats(db))


@router.patch(
    "/{application_id}/sections/{section}",
    response_model=ApplicationResponse,
    summary="Update Application Section Status",
    description="""
Move one section of an application to a new status.

- `offerLetter`: under review, approved, rejected
- `gic`: under review, success, reject

Any status in the section's set may follow any other. The message is kept
when omitted. Approving or rejecting an offer letter emails the student
and their agent.

**Access:** Admin only. **Rate limit:** 30 per minute.
""",
    responses={
        404: {"description": "Application not found"},
        422: {"description": "Unknown section or status"},
        429: {"description": "Rate limit exceeded"},
    },
)
async def transition_section(
    application_id: UUID,
    section: str,
    data: SectionTransitionRequest,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    await enforce_rate_limit(admin.id, "admin_transition", *RATE_LIMIT_TRANSITION)

    try:
        application = await service.admin_transition_section(
            db, admin, application_id, section, data.status, data.message
        )
    except ServiceError as e:
        raise_http_error(e)
    return ApplicationResponse.model_validate(application)
