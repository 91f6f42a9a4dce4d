"""
Student Information Admin Router

Endpoints:
- GET /admin/students - List profiles with filters and pagination
- PATCH /admin/students/{id}/page-status - Move the pageStatus section

All endpoints require the admin role. Transitions are rate limited.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user
from app.core.database import get_db
from app.core.rate_limit import enforce_rate_limit
from app.modules.shared.errors import ServiceError, raise_http_error
from app.modules.students import service
from app.modules.students.schemas import StudentInformationListResponse, StudentInformationResponse
from app.modules.workflow import PageStatus
from app.modules.workflow.schemas import SectionTransitionRequest

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_TRANSITION = (30, 60)  # 30 transitions per minute


@router.get(
    "",
    response_model=StudentInformationListResponse,
    summary="List Students",
    description="""
Paginated list of student profiles, newest first.

**Filters:**
- `page_status`: pageStatus status
- `search`: first name, last name or email

**Access:** Admin only
""",
)
async def list_students(
    page_status: PageStatus | None = Query(None, description="Filter by pageStatus status"),
    search: str | None = Query(None, min_length=1, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> StudentInformationListResponse:
    result = await service.admin_list_students(
        db,
        page_status=page_status.value if page_status else None,
        search=search,
        skip=skip,
        limit=limit,
    )
    return StudentInformationListResponse(
        students=[StudentInformationResponse.model_validate(s) for s in result["students"]],
        total=result["total"],
        skip=result["skip"],
        limit=result["limit"],
    )


@router.patch(
    "/{student_information_id}/page-status",
    response_model=StudentInformationResponse,
    summary="Update Student Page Status",
    description="""
Move a profile's pageStatus to `registering`, `inProgress`, `completed`,
`pending` or `rejected`. The message is kept when omitted.

**Access:** Admin only. **Rate limit:** 30 per minute.
""",
)
async def update_page_status(
    student_information_id: UUID,
    data: SectionTransitionRequest,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> StudentInformationResponse:
    await enforce_rate_limit(admin.id, "admin_transition", *RATE_LIMIT_TRANSITION)

    try:
        info = await service.admin_transition_page_status(
            db, admin, student_information_id, data.status, data.message
        )
    except ServiceError as e:
        raise_http_error(e)
    return StudentInformationResponse.model_validate(info)
