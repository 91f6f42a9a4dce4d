"""
Student Information Repository

Database operations for student profiles.
"""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import StudentInformation


async def create(
    db: AsyncSession,
    *,
    student_id: UUID,
    agent_id: UUID | None,
    personal_information: dict,
    residence: dict | None,
    preferences: dict | None,
    page_status: dict,
) -> StudentInformation:
    """Create a new student profile."""
    info = StudentInformation(
        student_id=student_id,
        agent_id=agent_id,
        personal_information=personal_information,
        residence=residence,
        preferences=preferences,
        page_status=page_status,
    )

    db.add(info)
    await db.commit()
    await db.refresh(info)

    return info


async def get_by_id(db: AsyncSession, id: UUID) -> StudentInformation | None:
    """Get a profile by ID."""
    return await db.get(StudentInformation, id)


async def get_by_student_id(db: AsyncSession, student_id: UUID) -> StudentInformation | None:
    """Get the profile belonging to a student account."""
    result = await db.execute(
        select(StudentInformation)
        .where(StudentInformation.student_id == student_id)
        .order_by(StudentInformation.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def update_sections(
    db: AsyncSession,
    info: StudentInformation,
    sections: dict[str, dict],
) -> StudentInformation:
    """
    Replace the given JSON sections of a profile.

    Args:
        sections: Mapping of attribute name to its new value
    """
    for attribute, value in sections.items():
        setattr(info, attribute, value)

    await db.commit()
    await db.refresh(info)

    return info


async def list_profiles(
    db: AsyncSession,
    *,
    agent_id: UUID | None = None,
    page_status: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[StudentInformation], int]:
    """
    List profiles, newest first.

    Args:
        agent_id: Only profiles managed by this agent (optional)
        page_status: Filter by pageStatus status (optional)
        search: Case-insensitive match on first name, last name or email (optional)

    Returns:
        Tuple of (profiles, total count matching filters)
    """
    query = select(StudentInformation)

    if agent_id:
        query = query.where(StudentInformation.agent_id == agent_id)

    if page_status:
        query = query.where(StudentInformation.page_status["status"].astext == page_status)

    if search:
        personal = StudentInformation.personal_information
        query = query.where(
            or_(
                personal["first_name"].astext.icontains(search, autoescape=True),
                personal["last_name"].astext.icontains(search, autoescape=True),
                personal["email"].astext.icontains(search, autoescape=True),
            )
        )

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    query = query.order_by(StudentInformation.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total
