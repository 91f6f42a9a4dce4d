"""
Document Service Layer

Users record the documents they have uploaded. A document is visible to
its owner and to admins.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.modules.documents import repository
from app.modules.documents.models import Document
from app.modules.documents.schemas import DocumentCreate
from app.modules.shared.errors import ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


class DocumentNotFoundError(NotFoundError):
    """Raised when a document is not found."""

    def __init__(self, document_id: UUID):
        super().__init__(
            message=f"Document {document_id} not found",
            error_code="DOCUMENT_NOT_FOUND",
        )


async def upload_document(db: AsyncSession, user: CurrentUser, data: DocumentCreate) -> Document:
    """Record a document for the caller."""
    document = await repository.create(
        db,
        user_id=user.id,
        document_name=data.document_name,
        view_url=str(data.view_url),
    )
    logger.info(f"Document {document.id} recorded by {user}")
    return document


async def list_my_documents(db: AsyncSession, user: CurrentUser) -> list[Document]:
    """The caller's documents; empty when none are recorded."""
    return await repository.list_by_user_id(db, user.id)


async def get_document(db: AsyncSession, user: CurrentUser, document_id: UUID) -> Document:
    """
    Get one document.

    Raises:
        DocumentNotFoundError: If the document does not exist
        ForbiddenError: If the caller is neither the owner nor an admin
    """
    document = await repository.get_by_id(db, document_id)
    if document is None:
        raise DocumentNotFoundError(document_id)

    if not user.is_admin and document.user_id != user.id:
        logger.warning(f"{user} denied access to document {document_id}")
        raise ForbiddenError()

    return document


async def delete_document(db: AsyncSession, user: CurrentUser, document_id: UUID) -> None:
    """
    Delete one document record.

    Raises:
        DocumentNotFoundError: If the document does not exist
        ForbiddenError: If the caller is neither the owner nor an admin
    """
    document = await get_document(db, user, document_id)
    await repository.delete(db, document)
    logger.info(f"Document {document_id} deleted by {user}")
