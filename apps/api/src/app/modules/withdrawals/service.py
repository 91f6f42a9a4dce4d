"""
Withdrawal Service Layer

Agents and students keep one set of withdrawal details on file. Saving
creates it the first time and overwrites it after that.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.modules.shared.errors import NotFoundError
from app.modules.withdrawals import repository
from app.modules.withdrawals.models import USER_ID_CONSTRAINT, Withdrawal
from app.modules.withdrawals.schemas import WithdrawalSave

logger = logging.getLogger(__name__)


class WithdrawalNotFoundError(NotFoundError):
    """Raised when the caller has no withdrawal details on file."""

    def __init__(self):
        super().__init__(
            message="No withdrawal details on file.",
            error_code="WITHDRAWAL_NOT_FOUND",
        )


async def save_withdrawal(
    db: AsyncSession,
    user: CurrentUser,
    data: WithdrawalSave,
) -> tuple[Withdrawal, bool]:
    """
    Create or overwrite the caller's withdrawal details.

    Returns:
        Tuple of (withdrawal, True if it was created by this call)
    """
    fields = data.model_dump(mode="json")

    existing = await repository.get_by_user_id(db, user.id)
    if existing is None:
        try:
            withdrawal = await repository.create(db, user_id=user.id, **fields)
        except IntegrityError as e:
            await db.rollback()
            if USER_ID_CONSTRAINT not in str(e.orig):
                raise
            # A concurrent save created the row first; overwrite it below
            existing = await repository.get_by_user_id(db, user.id)
            if existing is None:
                raise
        else:
            logger.info(f"Withdrawal details {withdrawal.id} created by {user}")
            return withdrawal, True

    withdrawal = await repository.update(db, existing, **fields)
    logger.info(f"Withdrawal details {withdrawal.id} updated by {user}")
    return withdrawal, False


async def get_my_withdrawal(db: AsyncSession, user: CurrentUser) -> Withdrawal:
    """
    Get the caller's withdrawal details.

    Raises:
        WithdrawalNotFoundError: If nothing has been saved yet
    """
    withdrawal = await repository.get_by_user_id(db, user.id)
    if withdrawal is None:
        raise WithdrawalNotFoundError()
    return withdrawal
