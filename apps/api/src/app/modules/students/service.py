"""
Student Information Service Layer

Business logic for student profiles:
- Students create and edit their own profile
- Agents create and edit profiles for the student accounts they manage
- Admins list every profile and move its pageStatus section
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.modules.shared.errors import ForbiddenError, NotFoundError, ServiceError, ValidationError
from app.modules.students import repository
from app.modules.students.models import STUDENT_ID_CONSTRAINT, StudentInformation
from app.modules.students.schemas import StudentInformationCreate, StudentInformationUpdate
from app.modules.users.models import UserRole
from app.modules.users.repository import UserRepository
from app.modules.workflow import PAGE_STATUS, RecordKind, transition

logger = logging.getLogger(__name__)


class StudentInformationNotFoundError(NotFoundError):
    """Raised when a student profile is not found."""

    def __init__(self, student_information_id: UUID | None = None):
        message = (
            f"Student information {student_information_id} not found"
            if student_information_id
            else "Student information not found"
        )
        super().__init__(message=message, error_code="STUDENT_INFORMATION_NOT_FOUND")


class ProfileAlreadyExistsError(ServiceError):
    """Raised when the student already has a profile."""

    def __init__(self):
        super().__init__(
            message="This student already has a profile.",
            error_code="PROFILE_EXISTS",
            status_code=409,
        )


class InvalidStudentAccountError(ValidationError):
    """Raised when an agent names a user that is not a student account."""

    def __init__(self, message: str = "student_id must refer to an existing student account."):
        super().__init__(message=message, error_code="INVALID_STUDENT_ACCOUNT")


def can_access(user: CurrentUser, info: StudentInformation) -> bool:
    """Admins, the owning student and the managing agent may see a profile."""
    if user.is_admin:
        return True
    if user.role == UserRole.STUDENT:
        return info.student_id == user.id
    if user.role == UserRole.AGENT:
        return info.agent_id == user.id
    return False


async def _resolve_student_id(
    db: AsyncSession, user: CurrentUser, requested: UUID | None
) -> tuple[UUID, UUID | None]:
    """Return (student_id, agent_id) for a new profile."""
    if user.role == UserRole.STUDENT:
        if requested is not None and requested != user.id:
            raise ForbiddenError("Students can only create their own profile.")
        return user.id, None

    if requested is None:
        raise InvalidStudentAccountError("student_id is required when an agent creates a profile.")

    student = await UserRepository.get_by_id(db, requested)
    if student is None or student.role != UserRole.STUDENT:
        raise InvalidStudentAccountError()

    return student.id, user.id


async def create_student_information(
    db: AsyncSession,
    user: CurrentUser,
    data: StudentInformationCreate,
) -> StudentInformation:
    """
    Create a student profile with pageStatus ``registering``.

    Raises:
        ForbiddenError: If a student targets another account
        InvalidStudentAccountError: If an agent omits or misnames the student
        ProfileAlreadyExistsError: If the student already has a profile
    """
    student_id, agent_id = await _resolve_student_id(db, user, data.student_id)

    if await repository.get_by_student_id(db, student_id) is not None:
        raise ProfileAlreadyExistsError()

    try:
        info = await repository.create(
            db,
            student_id=student_id,
            agent_id=agent_id,
            personal_information=data.personal_information.model_dump(mode="json"),
            residence=data.residence.model_dump(mode="json") if data.residence else None,
            preferences=data.preferences.model_dump(mode="json") if data.preferences else None,
            page_status=PAGE_STATUS.new_section(),
        )
    except IntegrityError as e:
        await db.rollback()
        if STUDENT_ID_CONSTRAINT not in str(e.orig):
            raise
        raise ProfileAlreadyExistsError() from e

    logger.info(f"Student information {info.id} created for student {student_id} by {user}")
    return info


async def get_my_profile(db: AsyncSession, user: CurrentUser) -> StudentInformation:
    """Get the calling student's own profile."""
    info = await repository.get_by_student_id(db, user.id)
    if info is None:
        raise StudentInformationNotFoundError()
    return info


async def get_student_information(
    db: AsyncSession,
    user: CurrentUser,
    student_information_id: UUID,
) -> StudentInformation:
    """
    Get a profile the caller may see.

    Raises:
        StudentInformationNotFoundError: If it does not exist
        ForbiddenError: If the caller is not its student, agent or an admin
    """
    info = await repository.get_by_id(db, student_information_id)
    if info is None:
        raise StudentInformationNotFoundError(student_information_id)

    if not can_access(user, info):
        logger.warning(f"{user} denied access to student information {student_information_id}")
        raise ForbiddenError()

    return info


async def update_student_information(
    db: AsyncSession,
    user: CurrentUser,
    student_information_id: UUID,
    data: StudentInformationUpdate,
) -> StudentInformation:
    """Replace the sections present in the request."""
    info = await get_student_information(db, user, student_information_id)

    sections = {
        name: value.model_dump(mode="json")
        for name, value in (
            ("personal_information", data.personal_information),
            ("residence", data.residence),
            ("preferences", data.preferences),
        )
        if value is not None
    }
    if not sections:
        return info

    info = await repository.update_sections(db, info, sections)
    logger.info(f"Student information {info.id} updated ({', '.join(sections)}) by {user}")
    return info


async def list_agent_students(
    db: AsyncSession,
    user: CurrentUser,
    *,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> dict:
    """List the profiles the calling agent manages."""
    limit = min(max(1, limit), 100)
    skip = max(0, skip)

    students, total = await repository.list_profiles(
        db, agent_id=user.id, search=search, skip=skip, limit=limit
    )
    return {"students": students, "total": total, "skip": skip, "limit": limit}


# ============================================
# Admin operations
# ============================================


async def admin_list_students(
    db: AsyncSession,
    *,
    page_status: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> dict:
    """List every profile for the admin dashboard."""
    logger.info(
        f"Admin listing students: page_status={page_status}, search={search}, "
        f"skip={skip}, limit={limit}"
    )

    limit = min(max(1, limit), 100)
    skip = max(0, skip)

    students, total = await repository.list_profiles(
        db, page_status=page_status, search=search, skip=skip, limit=limit
    )
    return {"students": students, "total": total, "skip": skip, "limit": limit}


async def admin_transition_page_status(
    db: AsyncSession,
    admin: CurrentUser,
    student_information_id: UUID,
    status: str,
    message: str | None = None,
) -> StudentInformation:
    """Move a profile's pageStatus section."""
    info = await transition(
        db,
        RecordKind.STUDENT_INFORMATION,
        student_information_id,
        PAGE_STATUS.name,
        status,
        message,
    )
    logger.info(
        f"AUDIT: Admin {admin.id} set pageStatus of student information "
        f"{student_information_id} to '{status}'"
    )
    return info
