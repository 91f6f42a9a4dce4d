"""
Withdrawal Repository

Database operations for withdrawal details.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Withdrawal


async def create(
    db: AsyncSession,
    *,
    user_id: UUID,
    bank_details: dict,
    document_upload: dict,
) -> Withdrawal:
    """Create withdrawal details for a user."""
    withdrawal = Withdrawal(
        user_id=user_id,
        bank_details=bank_details,
        document_upload=document_upload,
    )

    db.add(withdrawal)
    await db.commit()
    await db.refresh(withdrawal)

    return withdrawal


async def get_by_user_id(db: AsyncSession, user_id: UUID) -> Withdrawal | None:
    """Get a user's withdrawal details."""
    result = await db.execute(select(Withdrawal).where(Withdrawal.user_id == user_id))
    return result.scalar_one_or_none()


async def update(db: AsyncSession, withdrawal: Withdrawal, **fields) -> Withdrawal:
    """Overwrite fields on existing withdrawal details."""
    for name, value in fields.items():
        setattr(withdrawal, name, value)

    await db.commit()
    await db.refresh(withdrawal)

    return withdrawal
