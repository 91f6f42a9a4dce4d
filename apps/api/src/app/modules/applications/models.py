"""
Application Models

An application (institution request) filed for a student: an offer letter,
a GIC, or a course-fee payment. Each carries an AP- identifier.
"""

import uuid

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel

APPLICATION_ID_CONSTRAINT = "uq_applications_application_id"


class Application(BaseModel):
    """
    Application filed against a StudentInformation record.

    Exactly one of offer_letter, gic or course_fee is set. offer_letter and
    gic are workflow sections; course_fee is a plain payload.
    """

    __tablename__ = "applications"

    # Human-readable identifier, e.g. AP-24092601
    application_id: Mapped[str] = mapped_column(String(11), nullable=False)

    student_information_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("student_information.id", ondelete="CASCADE"),
        nullable=False,
    )
    # User (student or agent) who submitted the application
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    offer_letter: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    gic: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    course_fee: Mapped[dict | None] = mapped_column(JSON(none_as_null=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("application_id", name=APPLICATION_ID_CONSTRAINT),
        Index("ix_applications_student_information_id", "student_information_id"),
        Index("ix_applications_user_id", "user_id"),
    )

    @property
    def kind(self) -> str:
        """Which request this application carries."""
        if self.offer_letter is not None:
            return "offerLetter"
        if self.gic is not None:
            return "gic"
        return "courseFee"
