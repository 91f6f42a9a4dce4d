"""
Tickets Admin Router

Endpoints:
- GET /admin/tickets - List tickets with status, type and priority filters
- PATCH /admin/tickets/{id}/status - Move a ticket's status

All endpoints require the admin role.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user
from app.core.database import get_db
from app.core.rate_limit import enforce_rate_limit
from app.modules.shared.errors import ServiceError, raise_http_error
from app.modules.tickets import service
from app.modules.tickets.models import TicketPriority, TicketType
from app.modules.tickets.schemas import TicketListResponse, TicketResponse
from app.modules.workflow import TicketStatus
from app.modules.workflow.schemas import SectionTransitionRequest

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_TRANSITION = (30, 60)  # 30 transitions per minute


@router.get(
    "",
    response_model=TicketListResponse,
    summary="List Tickets",
    description="Paginated list of tickets, newest first. **Access:** Admin only",
)
async def list_tickets(
    status: TicketStatus | None = Query(None, description="Filter by ticket status"),
    ticket_type: TicketType | None = Query(None, description="Filter by ticket type"),
    priority: TicketPriority | None = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> TicketListResponse:
    result = await service.admin_list_tickets(
        db,
        status=status.value if status else None,
        ticket_type=ticket_type,
        priority=priority,
        skip=skip,
        limit=limit,
    )
    return TicketListResponse(
        tickets=[TicketResponse.model_validate(t) for t in result["tickets"]],
        total=result["total"],
        skip=result["skip"],
        limit=result["limit"],
    )


@router.patch(
    "/{ticket_id}/status",
    response_model=TicketResponse,
    summary="Update Ticket Status",
    description="""
Move a ticket to `under review`, `approved` or `reject`. The message is
kept when omitted.

**Access:** Admin only. **Rate limit:** 30 per minute.
""",
)
async def update_status(
    ticket_id: UUID,
    data: SectionTransitionRequest,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> TicketResponse:
    await enforce_rate_limit(admin.id, "admin_transition", *RATE_LIMIT_TRANSITION)

    try:
        ticket = await service.admin_transition_status(
            db, admin, ticket_id, data.status, data.message
        )
    except ServiceError as e:
        raise_http_error(e)
    return TicketResponse.model_validate(ticket)
