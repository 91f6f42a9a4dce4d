"""
Ticket Service Layer

Business logic for support tickets. Only students with a profile may raise
tickets; each one is given a TK- identifier. Urgent tickets carry the
configured fee.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.core.config import settings
from app.modules.identifiers import IdentifierCategory, persist_with_identifier
from app.modules.shared.errors import ForbiddenError, NotFoundError
from app.modules.students import repository as student_repository
from app.modules.students.service import StudentInformationNotFoundError
from app.modules.tickets import repository
from app.modules.tickets.models import TICKET_ID_CONSTRAINT, Ticket, TicketPriority, TicketType
from app.modules.tickets.schemas import TicketCreate
from app.modules.workflow import TICKET, RecordKind, transition

logger = logging.getLogger(__name__)


class TicketNotFoundError(NotFoundError):
    """Raised when a ticket is not found."""

    def __init__(self, ticket_id: str | UUID | None = None):
        message = f"Ticket {ticket_id} not found" if ticket_id else "Ticket not found"
        super().__init__(message=message, error_code="TICKET_NOT_FOUND")


def ticket_fee(priority: TicketPriority) -> int:
    """Fee charged for a ticket of the given priority."""
    return settings.urgent_ticket_fee if priority == TicketPriority.URGENT else 0


async def create_ticket(db: AsyncSession, user: CurrentUser, data: TicketCreate) -> Ticket:
    """
    Raise a support ticket for the calling student.

    Raises:
        StudentInformationNotFoundError: If the student has no profile yet
    """
    info = await student_repository.get_by_student_id(db, user.id)
    if info is None:
        raise StudentInformationNotFoundError()

    payment = ticket_fee(data.priority)

    async def _create(ticket_id: str) -> Ticket:
        return await repository.create(
            db,
            ticket_id=ticket_id,
            student_id=user.id,
            created_by=user.id,
            ticket_type=data.ticket_type,
            priority=data.priority,
            description=data.description,
            payment=payment,
            ticket_status=TICKET.new_section(),
        )

    ticket = await persist_with_identifier(
        db, IdentifierCategory.TICKET, _create, constraint=TICKET_ID_CONSTRAINT
    )

    logger.info(
        f"Ticket {ticket.ticket_id} ({data.ticket_type.value}, {data.priority.value}) "
        f"raised by student {user.id}"
    )
    return ticket


async def get_ticket(db: AsyncSession, user: CurrentUser, ticket_id: str) -> Ticket:
    """
    Get a ticket by its TK- identifier.

    Raises:
        TicketNotFoundError: If it does not exist
        ForbiddenError: If the caller neither created it nor is an admin
    """
    ticket = await repository.get_by_ticket_id(db, ticket_id)
    if ticket is None:
        raise TicketNotFoundError(ticket_id)

    if not user.is_admin and ticket.created_by != user.id:
        logger.warning(f"{user} denied access to ticket {ticket_id}")
        raise ForbiddenError()

    return ticket


async def list_my_tickets(
    db: AsyncSession,
    user: CurrentUser,
    *,
    skip: int = 0,
    limit: int = 20,
) -> dict:
    """List the calling student's tickets."""
    limit = min(max(1, limit), 100)
    skip = max(0, skip)

    tickets, total = await repository.list_tickets(db, student_id=user.id, skip=skip, limit=limit)
    return {"tickets": tickets, "total": total, "skip": skip, "limit": limit}


# ============================================
# Admin operations
# ============================================


async def admin_list_tickets(
    db: AsyncSession,
    *,
    status: str | None = None,
    ticket_type: TicketType | None = None,
    priority: TicketPriority | None = None,
    skip: int = 0,
    limit: int = 20,
) -> dict:
    """List every ticket for the admin dashboard."""
    logger.info(
        f"Admin listing tickets: status={status}, type={ticket_type}, priority={priority}, "
        f"skip={skip}, limit={limit}"
    )

    limit = min(max(1, limit), 100)
    skip = max(0, skip)

    tickets, total = await repository.list_tickets(
        db, status=status, ticket_type=ticket_type, priority=priority, skip=skip, limit=limit
    )
    return {"tickets": tickets, "total": total, "skip": skip, "limit": limit}


async def admin_transition_status(
    db: AsyncSession,
    admin: CurrentUser,
    ticket_id: UUID,
    status: str,
    message: str | None = None,
) -> Ticket:
    """Move a ticket's status section."""
    ticket = await transition(db, RecordKind.TICKET, ticket_id, TICKET.name, status, message)
    logger.info(f"AUDIT: Admin {admin.id} set ticket {ticket.ticket_id} to '{status}'")
    return ticket
