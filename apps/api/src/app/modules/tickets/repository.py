"""
Ticket Repository

Database operations for support tickets.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Ticket, TicketPriority, TicketType


async def create(
    db: AsyncSession,
    *,
    ticket_id: str,
    student_id: UUID,
    created_by: UUID,
    ticket_type: TicketType,
    priority: TicketPriority,
    description: str,
    payment: int,
    ticket_status: dict,
) -> Ticket:
    """Create a new ticket."""
    ticket = Ticket(
        ticket_id=ticket_id,
        student_id=student_id,
        created_by=created_by,
        ticket_type=ticket_type,
        priority=priority,
        description=description,
        payment=payment,
        ticket_status=ticket_status,
    )

    db.add(ticket)
    await db.commit()
    await db.refresh(ticket)

    return ticket


async def get_by_ticket_id(db: AsyncSession, ticket_id: str) -> Ticket | None:
    """Get a ticket by its TK- identifier."""
    result = await db.execute(select(Ticket).where(Ticket.ticket_id == ticket_id.upper()))
    return result.scalar_one_or_none()


async def list_tickets(
    db: AsyncSession,
    *,
    student_id: UUID | None = None,
    status: str | None = None,
    ticket_type: TicketType | None = None,
    priority: TicketPriority | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Ticket], int]:
    """
    List tickets, newest first.

    Returns:
        Tuple of (tickets, total count matching filters)
    """
    query = select(Ticket)

    if student_id:
        query = query.where(Ticket.student_id == student_id)

    if status:
        query = query.where(Ticket.ticket_status["status"].astext == status)

    if ticket_type:
        query = query.where(Ticket.ticket_type == ticket_type)

    if priority:
        query = query.where(Ticket.priority == priority)

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    query = query.order_by(Ticket.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total
