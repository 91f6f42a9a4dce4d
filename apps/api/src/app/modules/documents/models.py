"""
Document Models
"""

import uuid

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel


class Document(BaseModel):
    """Reference to a file uploaded by a user."""

    __tablename__ = "documents"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    document_name: Mapped[str] = mapped_column(String(200), nullable=False)
    view_url: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (Index("ix_documents_user_id", "user_id"),)

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, name={self.document_name})>"
