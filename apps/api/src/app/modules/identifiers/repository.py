"""
Identifier Repository

Database operations for identifier allocation: prefix lookups against the
tables that store identifiers, and atomic counter updates.
"""

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.agents.models import Company
from app.modules.applications.models import Application
from app.modules.tickets.models import Ticket

from .models import IdentifierCategory, SequenceCounter

# Column holding the persisted identifier for each category
IDENTIFIER_COLUMNS = {
    IdentifierCategory.APPLICATION: Application.application_id,
    IdentifierCategory.AGENT: Company.ag_id,
    IdentifierCategory.TICKET: Ticket.ticket_id,
}


async def find_latest_by_prefix(
    db: AsyncSession,
    category: IdentifierCategory,
    prefix: str,
) -> str | None:
    """
    Get the lexicographically greatest stored identifier starting with prefix.

    Fixed-width identifiers sort the same lexicographically and numerically,
    so this is the last identifier allocated under that prefix.
    """
    column = IDENTIFIER_COLUMNS[category]
    result = await db.execute(
        select(column)
        .where(column.startswith(prefix, autoescape=True))
        .order_by(column.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def increment_counter(
    db: AsyncSession,
    category: IdentifierCategory,
    date_stamp: str,
) -> int | None:
    """
    Atomically increment an existing counter and return the new value.

    Returns:
        The incremented sequence, or None if no counter exists for the key yet
    """
    result = await db.execute(
        update(SequenceCounter)
        .where(
            SequenceCounter.category == category,
            SequenceCounter.date_stamp == date_stamp,
        )
        .values(last_sequence=SequenceCounter.last_sequence + 1)
        .returning(SequenceCounter.last_sequence)
        .execution_options(synchronize_session=False)
    )
    sequence = result.scalar_one_or_none()
    if sequence is not None:
        await db.commit()
    return sequence


async def seed_or_increment_counter(
    db: AsyncSession,
    category: IdentifierCategory,
    date_stamp: str,
    seed: int,
) -> int:
    """
    Create the counter at ``seed``, or increment it if a concurrent call won.

    Uses INSERT ... ON CONFLICT DO UPDATE so two first-of-the-day allocations
    still receive distinct sequences.
    """
    stmt = pg_insert(SequenceCounter).values(
        category=category,
        date_stamp=date_stamp,
        last_sequence=seed,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[SequenceCounter.category, SequenceCounter.date_stamp],
        set_={
            "last_sequence": SequenceCounter.last_sequence + 1,
            "updated_at": func.now(),
        },
    ).returning(SequenceCounter.last_sequence)

    result = await db.execute(stmt)
    sequence = result.scalar_one()
    await db.commit()
    return sequence


async def delete_counters_before(db: AsyncSession, date_stamp: str) -> int:
    """
    Delete counters for days before date_stamp.

    Returns:
        Number of rows deleted
    """
    result = await db.execute(
        delete(SequenceCounter).where(SequenceCounter.date_stamp < date_stamp)
    )
    await db.commit()
    return result.rowcount or 0
