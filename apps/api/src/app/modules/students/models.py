"""
Student Information Models

The student profile filled in by a student (or by their agent on the
student's behalf). Applications reference it to find the owning student
and linked agent.
"""

import uuid

from sqlalchemy import ForeignKey, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel

STUDENT_ID_CONSTRAINT = "uq_student_information_student_id"


class StudentInformation(BaseModel):
    """
    Student profile.

    ``page_status`` is a workflow section tracking registration progress.
    """

    __tablename__ = "student_information"

    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Agent who manages this student, if any
    agent_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Stored as submitted: {title, first_name, last_name, email, phone, ...}
    personal_information: Mapped[dict] = mapped_column(JSON, nullable=False)
    residence: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    preferences: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)

    page_status: Mapped[dict] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        UniqueConstraint("student_id", name=STUDENT_ID_CONSTRAINT),
        Index("ix_student_information_agent_id", "agent_id"),
    )
