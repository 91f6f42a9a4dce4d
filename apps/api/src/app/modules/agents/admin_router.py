"""
Agents Admin Router

Endpoints:
- GET /admin/agents - List agent companies
- PATCH /admin/agents/{id}/page-status - Approve, reject or move pageStatus

All endpoints require the admin role. Transitions are rate limited and
audit logged.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user
from app.core.database import get_db
from app.core.rate_limit import enforce_rate_limit
from app.modules.agents import service
from app.modules.agents.schemas import CompanyListResponse, CompanyResponse
from app.modules.shared.errors import ServiceError, raise_http_error
from app.modules.workflow import PageStatus
from app.modules.workflow.schemas import SectionTransitionRequest

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_TRANSITION = (30, 60)  # 30 transitions per minute


@router.get(
    "",
    response_model=CompanyListResponse,
    summary="List Agent Companies",
    description="""
Paginated list of agent companies, most recently updated first.

**Filters:**
- `page_status`: e.g. `pending` for registrations awaiting review
- `search`: AG- identifier, company name or contact email

**Access:** Admin only
""",
)
async def list_companies(
    page_status: PageStatus | None = Query(None),
    search: str | None = Query(None, min_length=1, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> CompanyListResponse:
    result = await service.admin_list_companies(
        db,
        page_status=page_status.value if page_status else None,
        search=search,
        skip=skip,
        limit=limit,
    )
    return CompanyListResponse(
        companies=[CompanyResponse.model_validate(c) for c in result["companies"]],
        total=result["total"],
        skip=result["skip"],
        limit=result["limit"],
    )


@router.patch(
    "/{company_id}/page-status",
    response_model=CompanyResponse,
    summary="Update Agent Page Status",
    description="""
Move a company's pageStatus. Use `completed` to approve a registration and
`rejected` to send it back. The message is kept when omitted.

**Access:** Admin only. **Rate limit:** 30 per minute.
""",
)
async def update_page_status(
    company_id: UUID,
    data: SectionTransitionRequest,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    await enforce_rate_limit(admin.id, "admin_transition", *RATE_LIMIT_TRANSITION)

    try:
        company = await service.admin_transition_page_status(
            db, admin, company_id, data.status, data.message
        )
    except ServiceError as e:
        raise_http_error(e)
    return CompanyResponse.model_validate(company)
