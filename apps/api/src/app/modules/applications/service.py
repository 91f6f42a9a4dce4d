"""
Applications Service Layer

Business logic for offer letter, GIC and course-fee applications.

1. Filing:
   - The StudentInformation must exist and belong to the caller
     (its student, or its managing agent)
   - An AP- identifier is allocated and the application persisted with it;
     identifier collisions are retried by the allocator
   - offerLetter and gic start in ``under review``

2. Reading:
   - Students see their own applications, agents those of their students
   - Dashboard overview with the week-over-week change in submissions

3. Admin:
   - List and stats across every application
   - Section transitions through the workflow tracker, which emails the
     student and agent when an offer letter is approved or rejected
"""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.modules.applications import repository
from app.modules.applications.models import APPLICATION_ID_CONSTRAINT, Application
from app.modules.applications.schemas import CourseFeeCreate, GicCreate, OfferLetterCreate
from app.modules.identifiers import IdentifierCategory, persist_with_identifier
from app.modules.shared.errors import ForbiddenError, NotFoundError
from app.modules.students import repository as student_repository
from app.modules.students.models import StudentInformation
from app.modules.students.service import StudentInformationNotFoundError, can_access
from app.modules.users.models import UserRole
from app.modules.workflow import GIC, OFFER_LETTER, RecordKind, notify_parties, transition

logger = logging.getLogger(__name__)

OVERVIEW_WINDOW_DAYS = 7


class ApplicationNotFoundError(NotFoundError):
    """Raised when an application is not found."""

    def __init__(self, application_id: UUID | None = None):
        message = (
            f"Application {application_id} not found" if application_id else "Application not found"
        )
        super().__init__(message=message, error_code="APPLICATION_NOT_FOUND")


def _scope_for(user: CurrentUser) -> dict:
    """Repository filter limiting queries to the caller's applications."""
    if user.role == UserRole.AGENT:
        return {"agent_id": user.id}
    return {"student_id": user.id}


async def _get_owned_student_information(
    db: AsyncSession,
    user: CurrentUser,
    student_information_id: UUID,
) -> StudentInformation:
    """
    Load the profile an application is filed against.

    Raises:
        StudentInformationNotFoundError: If it does not exist
        ForbiddenError: If the caller is neither its student nor its agent
    """
    info = await student_repository.get_by_id(db, student_information_id)
    if info is None:
        raise StudentInformationNotFoundError(student_information_id)

    if user.is_admin or not can_access(user, info):
        logger.warning(
            f"{user} may not file applications for student information {student_information_id}"
        )
        raise ForbiddenError("You can only file applications for your own students.")

    return info


async def _file_application(
    db: AsyncSession,
    user: CurrentUser,
    student_information_id: UUID,
    **sections: dict,
) -> Application:
    """Allocate an AP- identifier and persist the application with it."""
    info = await _get_owned_student_information(db, user, student_information_id)
    info_id = info.id

    async def _create(application_id: str) -> Application:
        return await repository.create(
            db,
            application_id=application_id,
            student_information_id=info_id,
            user_id=user.id,
            **sections,
        )

    application = await persist_with_identifier(
        db,
        IdentifierCategory.APPLICATION,
        _create,
        constraint=APPLICATION_ID_CONSTRAINT,
    )

    logger.info(
        f"Application {application.application_id} ({application.kind}) filed by {user} "
        f"for student information {info_id}"
    )
    return application


async def create_offer_letter(
    db: AsyncSession, user: CurrentUser, data: OfferLetterCreate
) -> Application:
    """File an offer letter request."""
    details = data.model_dump(mode="json", exclude={"student_information_id"})
    return await _file_application(
        db, user, data.student_information_id, offer_letter=OFFER_LETTER.new_section(details)
    )


async def create_gic(db: AsyncSession, user: CurrentUser, data: GicCreate) -> Application:
    """File a GIC request."""
    details = data.model_dump(mode="json", exclude={"student_information_id"})
    return await _file_application(
        db, user, data.student_information_id, gic=GIC.new_section(details)
    )


async def create_course_fee(
    db: AsyncSession, user: CurrentUser, data: CourseFeeCreate
) -> Application:
    """File a course-fee payment. It carries no workflow section."""
    payload = data.model_dump(mode="json", exclude={"student_information_id"})
    payload["type"] = "Course Fee"
    return await _file_application(db, user, data.student_information_id, course_fee=payload)


async def get_application(
    db: AsyncSession,
    user: CurrentUser,
    application_id: UUID,
) -> Application:
    """
    Get an application the caller may see.

    Admins see every application. Others see applications they filed or
    that belong to a profile they can access.
    """
    application = await repository.get_by_id(db, application_id)
    if application is None:
        raise ApplicationNotFoundError(application_id)

    if user.is_admin or application.user_id == user.id:
        return application

    info = await student_repository.get_by_id(db, application.student_information_id)
    if info is None or not can_access(user, info):
        logger.warning(f"{user} denied access to application {application_id}")
        raise ForbiddenError()

    return application


async def list_my_applications(
    db: AsyncSession,
    user: CurrentUser,
    *,
    application_id: str | None = None,
    full_name: str | None = None,
    country: str | None = None,
    institution: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> dict:
    """
    List the caller's applications.

    Returns:
        Dict with applications, total, page, limit and total_pages
    """
    limit = min(max(1, limit), 100)
    page = max(1, page)

    applications, total = await repository.list_applications(
        db,
        **_scope_for(user),
        application_id=application_id,
        full_name=full_name,
        country=country,
        institution=institution,
        skip=(page - 1) * limit,
        limit=limit,
    )

    return {
        "applications": applications,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": (total + limit - 1) // limit,
    }


def _increase_percentage(current: int, previous: int) -> float:
    """Week-over-week change; 100% when growing from zero."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 1)


async def get_overview(
    db: AsyncSession,
    user: CurrentUser,
    now: datetime | None = None,
) -> dict:
    """Dashboard counts for the caller's applications."""
    now = now or datetime.now(UTC)
    week_start = now - timedelta(days=OVERVIEW_WINDOW_DAYS)

    counts = await repository.get_overview_counts(
        db,
        **_scope_for(user),
        week_start=week_start,
        previous_week_start=week_start - timedelta(days=OVERVIEW_WINDOW_DAYS),
    )

    return {
        "total": counts["total"],
        "under_review": counts["under_review"],
        "completed": counts["completed"],
        "submitted_last_7_days": counts["last_7_days"],
        "increase_percentage": _increase_percentage(
            counts["last_7_days"], counts["previous_7_days"]
        ),
    }


# ============================================
# Admin operations
# ============================================


async def admin_list_applications(
    db: AsyncSession,
    *,
    kind: str | None = None,
    offer_letter_status: str | None = None,
    application_id: str | None = None,
    full_name: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> dict:
    """List every application for the admin dashboard."""
    logger.info(
        f"Admin listing applications: kind={kind}, offer_letter_status={offer_letter_status}, "
        f"application_id={application_id}, page={page}, limit={limit}"
    )

    limit = min(max(1, limit), 100)
    page = max(1, page)

    applications, total = await repository.list_applications(
        db,
        kind=kind,
        offer_letter_status=offer_letter_status,
        application_id=application_id,
        full_name=full_name,
        skip=(page - 1) * limit,
        limit=limit,
    )

    logger.info(f"Found {total} applications, returning {len(applications)}")

    return {
        "applications": applications,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": (total + limit - 1) // limit,
    }


async def admin_get_stats(db: AsyncSession) -> dict:
    """Aggregated application counts for the admin dashboard."""
    week_start = datetime.now(UTC) - timedelta(days=OVERVIEW_WINDOW_DAYS)
    stats = await repository.get_admin_stats(db, week_start=week_start)
    logger.info(f"Application stats: {stats}")
    return stats


async def admin_transition_section(
    db: AsyncSession,
    admin: CurrentUser,
    application_id: UUID,
    section: str,
    status: str,
    message: str | None = None,
) -> Application:
    """
    Move the offerLetter or gic section of an application.

    Offer letter approvals and rejections email the student and the
    linked agent; delivery failures never undo the change.
    """
    application = await transition(
        db,
        RecordKind.APPLICATION,
        application_id,
        section,
        status,
        message,
        notifier=notify_parties,
    )
    logger.info(
        f"AUDIT: Admin {admin.id} set {section} of application "
        f"{application.application_id} to '{status}'"
    )
    return application
