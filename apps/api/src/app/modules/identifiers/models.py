"""
Identifier Models

Per-day sequence counters backing the human-readable identifiers
(AP-/AG-/TK- followed by YYMMDD and a two-digit sequence).
"""

import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Enum, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class IdentifierCategory(str, enum.Enum):
    """Record categories that receive a human-readable identifier."""

    APPLICATION = "application"
    AGENT = "agent"
    TICKET = "ticket"


IDENTIFIER_PREFIXES: dict[IdentifierCategory, str] = {
    IdentifierCategory.APPLICATION: "AP",
    IdentifierCategory.AGENT: "AG",
    IdentifierCategory.TICKET: "TK",
}


class SequenceCounter(Base):
    """
    Last sequence handed out for one (category, date stamp) key.

    Rows are created by the first allocation of the day and incremented
    atomically afterwards. Old rows are pruned by a background job.
    """

    __tablename__ = "sequence_counters"

    category: Mapped[IdentifierCategory] = mapped_column(
        Enum(IdentifierCategory, name="identifier_category"),
        primary_key=True,
    )
    date_stamp: Mapped[str] = mapped_column(String(6), primary_key=True)
    last_sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("last_sequence >= 1", name="ck_sequence_counters_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"<SequenceCounter({self.category.value}, {self.date_stamp}, "
            f"last={self.last_sequence})>"
        )
