"""
Applications Repository

Database operations for applications. Caller scoping (student or agent)
goes through the owning StudentInformation row.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.students.models import StudentInformation

from .models import Application

# JSON paths into the stored sections
_OFFER_LETTER_NAME = Application.offer_letter[("details", "personal_information", "full_name")]
_GIC_NAME = Application.gic[("details", "personal_details", "full_name")]
_COURSE_FEE_NAME = Application.course_fee[("personal_details", "full_name")]
_COUNTRY = Application.offer_letter[("details", "preferences", "country")]
_INSTITUTION = Application.offer_letter[("details", "preferences", "institution")]
_OFFER_LETTER_STATUS = Application.offer_letter["status"].astext
_GIC_STATUS = Application.gic["status"].astext


async def create(
    db: AsyncSession,
    *,
    application_id: str,
    student_information_id: UUID,
    user_id: UUID,
    offer_letter: dict | None = None,
    gic: dict | None = None,
    course_fee: dict | None = None,
) -> Application:
    """Create a new application."""
    application = Application(
        application_id=application_id,
        student_information_id=student_information_id,
        user_id=user_id,
        offer_letter=offer_letter,
        gic=gic,
        course_fee=course_fee,
    )

    db.add(application)
    await db.commit()
    await db.refresh(application)

    return application


async def get_by_id(db: AsyncSession, id: UUID) -> Application | None:
    """Get application by ID."""
    return await db.get(Application, id)


def _scoped(
    query: Select,
    *,
    student_id: UUID | None = None,
    agent_id: UUID | None = None,
) -> Select:
    """Restrict a query to one student's or one agent's applications."""
    if student_id is None and agent_id is None:
        return query

    query = query.join(
        StudentInformation, StudentInformation.id == Application.student_information_id
    )
    if student_id is not None:
        query = query.where(StudentInformation.student_id == student_id)
    if agent_id is not None:
        query = query.where(StudentInformation.agent_id == agent_id)
    return query


async def list_applications(
    db: AsyncSession,
    *,
    student_id: UUID | None = None,
    agent_id: UUID | None = None,
    application_id: str | None = None,
    full_name: str | None = None,
    country: str | None = None,
    institution: str | None = None,
    kind: str | None = None,
    offer_letter_status: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Application], int]:
    """
    List applications with filters and pagination, newest first.

    Args:
        db: Database session
        student_id: Only applications of this student (optional)
        agent_id: Only applications of students managed by this agent (optional)
        application_id: Case-insensitive match on the AP- identifier (optional)
        full_name: Case-insensitive match on the applicant name (optional)
        country: Offer letter preferred country (optional)
        institution: Offer letter preferred institution (optional)
        kind: offerLetter, gic or courseFee (optional)
        offer_letter_status: Offer letter section status (optional)
        skip: Records to skip
        limit: Maximum records to return

    Returns:
        Tuple of (applications, total count matching filters)
    """
    query = _scoped(select(Application), student_id=student_id, agent_id=agent_id)

    if application_id:
        query = query.where(Application.application_id.icontains(application_id, autoescape=True))

    if full_name:
        query = query.where(
            or_(
                _OFFER_LETTER_NAME.astext.icontains(full_name, autoescape=True),
                _GIC_NAME.astext.icontains(full_name, autoescape=True),
                _COURSE_FEE_NAME.astext.icontains(full_name, autoescape=True),
            )
        )

    if country:
        query = query.where(_COUNTRY.astext.icontains(country, autoescape=True))

    if institution:
        query = query.where(_INSTITUTION.astext.icontains(institution, autoescape=True))

    if kind == "offerLetter":
        query = query.where(Application.offer_letter.is_not(None))
    elif kind == "gic":
        query = query.where(Application.gic.is_not(None))
    elif kind == "courseFee":
        query = query.where(Application.course_fee.is_not(None))

    if offer_letter_status:
        query = query.where(_OFFER_LETTER_STATUS == offer_letter_status)

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    query = query.order_by(Application.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def get_overview_counts(
    db: AsyncSession,
    *,
    student_id: UUID | None = None,
    agent_id: UUID | None = None,
    week_start: datetime,
    previous_week_start: datetime,
) -> dict:
    """
    Count a caller's applications in one query.

    Returns:
        Dict with total, under_review, completed, last_7_days, previous_7_days
    """
    query = _scoped(
        select(
            func.count(Application.id).label("total"),
            func.count(case((_OFFER_LETTER_STATUS == "under review", 1))).label("under_review"),
            func.count(case((_OFFER_LETTER_STATUS == "approved", 1))).label("completed"),
            func.count(case((Application.created_at >= week_start, 1))).label("last_7_days"),
            func.count(
                case(
                    (
                        and_(
                            Application.created_at >= previous_week_start,
                            Application.created_at < week_start,
                        ),
                        1,
                    ),
                )
            ).label("previous_7_days"),
        ).select_from(Application),
        student_id=student_id,
        agent_id=agent_id,
    )

    row = (await db.execute(query)).one()
    return {
        "total": row.total,
        "under_review": row.under_review,
        "completed": row.completed,
        "last_7_days": row.last_7_days,
        "previous_7_days": row.previous_7_days,
    }


async def get_admin_stats(db: AsyncSession, *, week_start: datetime) -> dict:
    """Aggregate counts for the admin dashboard in a single query."""

    def _count(condition):
        return func.count(case((condition, 1)))

    query = select(
        func.count(Application.id).label("total"),
        _count(_OFFER_LETTER_STATUS == "under review").label("offer_letters_under_review"),
        _count(_OFFER_LETTER_STATUS == "approved").label("offer_letters_approved"),
        _count(_OFFER_LETTER_STATUS == "rejected").label("offer_letters_rejected"),
        _count(_GIC_STATUS == "under review").label("gic_under_review"),
        _count(_GIC_STATUS == "success").label("gic_success"),
        _count(_GIC_STATUS == "reject").label("gic_reject"),
        _count(Application.course_fee.is_not(None)).label("course_fee_requests"),
        _count(Application.created_at >= week_start).label("submitted_this_week"),
    )

    row = (await db.execute(query)).one()
    return dict(row._mapping)
