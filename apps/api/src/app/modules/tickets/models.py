"""
Ticket Models

Support tickets raised by students, identified by a TK- identifier.
"""

import enum
import uuid

from sqlalchemy import Enum, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel

TICKET_ID_CONSTRAINT = "uq_tickets_ticket_id"


class TicketType(str, enum.Enum):
    """Ticket categories."""

    GENERAL = "General"
    TECHNICAL = "Technical"
    FINANCIAL = "Financial"


class TicketPriority(str, enum.Enum):
    """Ticket priority. Urgent tickets carry a fee."""

    NORMAL = "Normal"
    URGENT = "Urgent"


class Ticket(BaseModel):
    """Support ticket."""

    __tablename__ = "tickets"

    # Human-readable identifier, e.g. TK-24092601
    ticket_id: Mapped[str] = mapped_column(String(11), nullable=False)

    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)

    ticket_type: Mapped[TicketType] = mapped_column(
        Enum(TicketType, name="ticket_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    priority: Mapped[TicketPriority] = mapped_column(
        Enum(
            TicketPriority,
            name="ticket_priority",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=TicketPriority.NORMAL,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    payment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    ticket_status: Mapped[dict] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        UniqueConstraint("ticket_id", name=TICKET_ID_CONSTRAINT),
        Index("ix_tickets_student_id", "student_id"),
    )
