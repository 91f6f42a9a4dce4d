"""
Agent Company Models

The company profile an agent completes during registration. Submitting the
profile assigns an AG- identifier and puts the company up for admin review.
"""

import uuid

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel

AG_ID_CONSTRAINT = "uq_companies_ag_id"

# Number of profile pages; page_count reaches this on submission
REGISTRATION_PAGE_COUNT = 6


class Company(BaseModel):
    """Agent company, one per agent user."""

    __tablename__ = "companies"

    agent_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    # Human-readable identifier, assigned on first submission
    ag_id: Mapped[str | None] = mapped_column(String(11), nullable=True)

    company_details: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    primary_contact: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    bank_details: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    company_operations: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    references: Mapped[list | None] = mapped_column(JSON(none_as_null=True), nullable=True)

    page_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    page_status: Mapped[dict] = mapped_column(JSON, nullable=False)

    __table_args__ = (UniqueConstraint("ag_id", name=AG_ID_CONSTRAINT),)
