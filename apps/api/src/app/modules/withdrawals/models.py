"""
Withdrawal Models
"""

import uuid

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel

USER_ID_CONSTRAINT = "uq_withdrawals_user_id"


class Withdrawal(BaseModel):
    """Withdrawal details, one row per user, overwritten on every save."""

    __tablename__ = "withdrawals"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # {bank_name, branch_name, country, ..., swift_bic_code, iban}
    bank_details: Mapped[dict] = mapped_column(JSON, nullable=False)
    # {aadhar_card: {filename}, pan_card: {filename}}
    document_upload: Mapped[dict] = mapped_column(JSON, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", name=USER_ID_CONSTRAINT),)
