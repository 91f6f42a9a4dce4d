"""
Agent Company Repository

Database operations for agent companies.
"""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Company


async def create(db: AsyncSession, *, agent_id: UUID, page_status: dict) -> Company:
    """Create an empty company for an agent."""
    company = Company(agent_id=agent_id, page_count=0, page_status=page_status)

    db.add(company)
    await db.commit()
    await db.refresh(company)

    return company


async def get_by_id(db: AsyncSession, id: UUID) -> Company | None:
    """Get company by ID."""
    return await db.get(Company, id)


async def get_by_agent_id(db: AsyncSession, agent_id: UUID) -> Company | None:
    """Get the company belonging to an agent account."""
    result = await db.execute(select(Company).where(Company.agent_id == agent_id))
    return result.scalar_one_or_none()


async def update(db: AsyncSession, company: Company, **fields) -> Company:
    """
    Set the given columns and commit.

    JSON columns must be passed as new objects so the change is detected.
    """
    for name, value in fields.items():
        setattr(company, name, value)

    await db.commit()
    await db.refresh(company)

    return company


async def list_companies(
    db: AsyncSession,
    *,
    page_status: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Company], int]:
    """
    List companies, most recently updated first.

    Args:
        page_status: Filter by pageStatus status (optional)
        search: Case-insensitive match on AG- id, company name or contact email (optional)

    Returns:
        Tuple of (companies, total count matching filters)
    """
    query = select(Company)

    if page_status:
        query = query.where(Company.page_status["status"].astext == page_status)

    if search:
        query = query.where(
            or_(
                Company.ag_id.icontains(search, autoescape=True),
                Company.company_details["company_name"].astext.icontains(search, autoescape=True),
                Company.primary_contact["email"].astext.icontains(search, autoescape=True),
            )
        )

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    query = query.order_by(Company.updated_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total
