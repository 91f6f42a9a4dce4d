"""
Tickets Router

Endpoints:
- POST /tickets - Raise a ticket (students only, rate limited)
- GET /tickets/mine - The calling student's tickets
- GET /tickets/{ticket_id} - Ticket detail (creator or admin)
"""

import logging

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, require_roles
from app.core.database import get_db
from app.core.rate_limit import enforce_rate_limit
from app.modules.shared.errors import ServiceError, raise_http_error
from app.modules.tickets import service
from app.modules.tickets.schemas import TicketCreate, TicketListResponse, TicketResponse
from app.modules.users.models import UserRole

logger = logging.getLogger(__name__)

router = APIRouter()

student_only = require_roles(UserRole.STUDENT)

RATE_LIMIT_CREATE = (10, 3600)  # 10 tickets per hour


@router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Raise Ticket",
    description="""
Raise a support ticket. The ticket is given an identifier such as
`TK-24092601` and starts as `under review`.

Urgent tickets carry a fee (`payment`); Normal tickets are free.
""",
    responses={
        404: {"description": "The student has no profile yet"},
        409: {"description": "No ticket identifier could be allocated"},
        429: {"description": "Rate limit exceeded"},
    },
)
async def create_ticket(
    data: TicketCreate,
    user: CurrentUser = Depends(student_only),
    db: AsyncSession = Depends(get_db),
) -> TicketResponse:
    await enforce_rate_limit(user.id, "create_ticket", *RATE_LIMIT_CREATE)

    try:
        ticket = await service.create_ticket(db, user, data)
    except ServiceError as e:
        raise_http_error(e)
    return TicketResponse.model_validate(ticket)


@router.get("/mine", response_model=TicketListResponse, summary="List My Tickets")
async def list_my_tickets(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: CurrentUser = Depends(student_only),
    db: AsyncSession = Depends(get_db),
) -> TicketListResponse:
    result = await service.list_my_tickets(db, user, skip=skip, limit=limit)
    return TicketListResponse(
        tickets=[TicketResponse.model_validate(t) for t in result["tickets"]],
        total=result["total"],
        skip=result["skip"],
        limit=result["limit"],
    )


@router.get(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Get Ticket",
    responses={
        403: {"description": "Not the caller's ticket"},
        404: {"description": "Ticket not found"},
    },
)
async def get_ticket(
    ticket_id: str = Path(..., pattern=r"^[Tt][Kk]-\d{8}$", examples=["TK-24092601"]),
    user: CurrentUser = Depends(require_roles(UserRole.STUDENT, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> TicketResponse:
    try:
        ticket = await service.get_ticket(db, user, ticket_id)
    except ServiceError as e:
        raise_http_error(e)
    return TicketResponse.model_validate(ticket)
