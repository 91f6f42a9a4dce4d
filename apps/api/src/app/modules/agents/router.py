"""
Agent Company Router

Endpoints:
- PUT /agents/company - Save registration pages
- GET /agents/company - The calling agent's company
- POST /agents/company/submit - Submit the registration for review

All endpoints require the agent role.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, require_roles
from app.core.database import get_db
from app.modules.agents import service
from app.modules.agents.schemas import CompanyResponse, CompanySave, CompanySubmit
from app.modules.shared.errors import ServiceError, raise_http_error
from app.modules.users.models import UserRole

logger = logging.getLogger(__name__)

router = APIRouter()

agent_only = require_roles(UserRole.AGENT)


@router.put(
    "/company",
    response_model=CompanyResponse,
    summary="Save Company Registration",
    description="""
Save one or more registration pages. The company is created on the first
call. Pages that are not sent are left unchanged.
""",
    responses={409: {"description": "The registration was already approved"}},
)
async def save_company(
    data: CompanySave,
    user: CurrentUser = Depends(agent_only),
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    try:
        company = await service.save_company(db, user, data)
    except ServiceError as e:
        raise_http_error(e)
    return CompanyResponse.model_validate(company)


@router.get(
    "/company",
    response_model=CompanyResponse,
    summary="Get My Company",
    responses={404: {"description": "No registration pages saved yet"}},
)
async def get_my_company(
    user: CurrentUser = Depends(agent_only),
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    try:
        company = await service.get_my_company(db, user)
    except ServiceError as e:
        raise_http_error(e)
    return CompanyResponse.model_validate(company)


@router.post(
    "/company/submit",
    response_model=CompanyResponse,
    summary="Submit Company Registration",
    description="""
Save the references page and submit the registration.

On the first submission the company is given an identifier such as
`AG-24092601`. pageStatus becomes `pending` until an admin reviews it, and
the primary contact receives a confirmation email.
""",
    responses={
        404: {"description": "No registration pages saved yet"},
        409: {"description": "Already approved, or no identifier could be allocated"},
    },
)
async def submit_company(
    data: CompanySubmit,
    user: CurrentUser = Depends(agent_only),
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    try:
        company = await service.submit_company(db, user, data)
    except ServiceError as e:
        raise_http_error(e)
    return CompanyResponse.model_validate(company)
