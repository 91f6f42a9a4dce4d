"""
Ticket Schemas
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.modules.tickets.models import TicketPriority, TicketType
from app.modules.workflow.schemas import WorkflowSection


class TicketCreate(BaseModel):
    """Request body for POST /tickets."""

    ticket_type: TicketType
    priority: TicketPriority = TicketPriority.NORMAL
    description: str = Field(..., min_length=10, max_length=5000)


class TicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    ticket_id: str = Field(..., description="Human-readable identifier, e.g. TK-24092601")
    student_id: UUID
    created_by: UUID
    ticket_type: TicketType
    priority: TicketPriority
    description: str
    payment: int = Field(..., description="Fee charged for the ticket; 0 unless Urgent")
    ticket_status: WorkflowSection
    created_at: datetime
    updated_at: datetime


class TicketListResponse(BaseModel):
    tickets: list[TicketResponse]
    total: int
    skip: int
    limit: int
