"""
Document Repository

Database operations for document records.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Document


async def create(
    db: AsyncSession,
    *,
    user_id: UUID,
    document_name: str,
    view_url: str,
) -> Document:
    """Create a document record."""
    document = Document(user_id=user_id, document_name=document_name, view_url=view_url)

    db.add(document)
    await db.commit()
    await db.refresh(document)

    return document


async def get_by_id(db: AsyncSession, id: UUID) -> Document | None:
    """Get a document by ID."""
    return await db.get(Document, id)


async def list_by_user_id(db: AsyncSession, user_id: UUID) -> list[Document]:
    """A user's documents, newest first."""
    result = await db.execute(
        select(Document).where(Document.user_id == user_id).order_by(Document.created_at.desc())
    )
    return list(result.scalars().all())


async def delete(db: AsyncSession, document: Document) -> None:
    """Delete a document record."""
    await db.delete(document)
    await db.commit()
