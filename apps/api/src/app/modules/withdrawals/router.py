"""
Withdrawals Router

Endpoints:
- POST /withdrawals - Save withdrawal details (agents and students)
- GET /withdrawals/mine - The caller's withdrawal details
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, require_roles
from app.core.database import get_db
from app.core.rate_limit import enforce_rate_limit
from app.modules.shared.errors import ServiceError, raise_http_error
from app.modules.users.models import UserRole
from app.modules.withdrawals import service
from app.modules.withdrawals.schemas import WithdrawalResponse, WithdrawalSave

logger = logging.getLogger(__name__)

router = APIRouter()

account_holder = require_roles(UserRole.AGENT, UserRole.STUDENT)

RATE_LIMIT_SAVE = (20, 3600)  # 20 saves per hour


@router.post(
    "",
    response_model=WithdrawalResponse,
    status_code=status.HTTP_200_OK,
    summary="Save Withdrawal Details",
    description="""
Save the bank account and identity documents used for withdrawals.

The first save returns **201 Created**; later saves overwrite the stored
details and return **200 OK**.
""",
    responses={
        201: {"description": "Withdrawal details created", "model": WithdrawalResponse},
        429: {"description": "Rate limit exceeded"},
    },
)
async def save_withdrawal(
    data: WithdrawalSave,
    response: Response,
    user: CurrentUser = Depends(account_holder),
    db: AsyncSession = Depends(get_db),
) -> WithdrawalResponse:
    await enforce_rate_limit(user.id, "save_withdrawal", *RATE_LIMIT_SAVE)

    withdrawal, created = await service.save_withdrawal(db, user, data)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return WithdrawalResponse.model_validate(withdrawal)


@router.get(
    "/mine",
    response_model=WithdrawalResponse,
    summary="Get My Withdrawal Details",
    responses={404: {"description": "Nothing saved yet"}},
)
async def get_my_withdrawal(
    user: CurrentUser = Depends(account_holder),
    db: AsyncSession = Depends(get_db),
) -> WithdrawalResponse:
    try:
        withdrawal = await service.get_my_withdrawal(db, user)
    except ServiceError as e:
        raise_http_error(e)
    return WithdrawalResponse.model_validate(withdrawal)
