"""
Student Information Router

Endpoints:
- POST /student-information - Create a profile (student or agent)
- GET /student-information/mine - The calling student's profile
- GET /student-information - Profiles managed by the calling agent
- GET /student-information/{id} - Profile detail
- PATCH /student-information/{id} - Update profile sections
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, require_roles
from app.core.database import get_db
from app.modules.shared.errors import ServiceError, raise_http_error
from app.modules.students import service
from app.modules.students.schemas import (
    StudentInformationCreate,
    StudentInformationListResponse,
    StudentInformationResponse,
    StudentInformationUpdate,
)
from app.modules.users.models import UserRole

logger = logging.getLogger(__name__)

router = APIRouter()

student_or_agent = require_roles(UserRole.STUDENT, UserRole.AGENT)


@router.post(
    "",
    response_model=StudentInformationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Student Information",
    description="""
Create a student profile. Its pageStatus starts as `registering`.

- **Students** create their own profile and omit `student_id`.
- **Agents** create a profile for the student account given in `student_id`
  and become its managing agent.
""",
    responses={
        403: {"description": "A student tried to create another student's profile"},
        409: {"description": "The student already has a profile"},
        422: {"description": "Missing or invalid student_id"},
    },
)
async def create_student_information(
    data: StudentInformationCreate,
    user: CurrentUser = Depends(student_or_agent),
    db: AsyncSession = Depends(get_db),
) -> StudentInformationResponse:
    try:
        info = await service.create_student_information(db, user, data)
    except ServiceError as e:
        raise_http_error(e)
    return StudentInformationResponse.model_validate(info)


@router.get(
    "/mine",
    response_model=StudentInformationResponse,
    summary="Get My Student Information",
)
async def get_my_profile(
    user: CurrentUser = Depends(require_roles(UserRole.STUDENT)),
    db: AsyncSession = Depends(get_db),
) -> StudentInformationResponse:
    try:
        info = await service.get_my_profile(db, user)
    except ServiceError as e:
        raise_http_error(e)
    return StudentInformationResponse.model_validate(info)


@router.get(
    "",
    response_model=StudentInformationListResponse,
    summary="List My Students",
    description="Profiles managed by the calling agent, newest first.",
)
async def list_my_students(
    search: str | None = Query(None, min_length=1, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    user: CurrentUser = Depends(require_roles(UserRole.AGENT)),
    db: AsyncSession = Depends(get_db),
) -> StudentInformationListResponse:
    result = await service.list_agent_students(db, user, search=search, skip=skip, limit=limit)
    return StudentInformationListResponse(
        students=[StudentInformationResponse.model_validate(s) for s in result["students"]],
        total=result["total"],
        skip=result["skip"],
        limit=result["limit"],
    )


@router.get(
    "/{student_information_id}",
    response_model=StudentInformationResponse,
    summary="Get Student Information",
)
async def get_student_information(
    student_information_id: UUID,
    user: CurrentUser = Depends(require_roles(UserRole.STUDENT, UserRole.AGENT, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> StudentInformationResponse:
    try:
        info = await service.get_student_information(db, user, student_information_id)
    except ServiceError as e:
        raise_http_error(e)
    return StudentInformationResponse.model_validate(info)


@router.patch(
    "/{student_information_id}",
    response_model=StudentInformationResponse,
    summary="Update Student Information",
    description="Replace the personal information, residence or preferences sections sent.",
)
async def update_student_information(
    student_information_id: UUID,
    data: StudentInformationUpdate,
    user: CurrentUser = Depends(student_or_agent),
    db: AsyncSession = Depends(get_db),
) -> StudentInformationResponse:
    try:
        info = await service.update_student_information(db, user, student_information_id, data)
    except ServiceError as e:
        raise_http_error(e)
    return StudentInformationResponse.model_validate(info)
