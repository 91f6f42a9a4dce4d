"""
Documents Router

Endpoints:
- POST /documents - Record an uploaded document
- GET /documents - The caller's documents
- GET /documents/{id} - Document detail (owner or admin)
- DELETE /documents/{id} - Remove a document record (owner or admin)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.rate_limit import enforce_rate_limit
from app.modules.documents import service
from app.modules.documents.schemas import DocumentCreate, DocumentListResponse, DocumentResponse
from app.modules.shared.errors import ServiceError, raise_http_error

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_UPLOAD = (30, 3600)  # 30 documents per hour


@router.post(
    "",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record Document",
    responses={429: {"description": "Rate limit exceeded"}},
)
async def upload_document(
    data: DocumentCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> DocumentResponse:
    await enforce_rate_limit(user.id, "upload_document", *RATE_LIMIT_UPLOAD)

    document = await service.upload_document(db, user, data)
    return DocumentResponse.model_validate(document)


@router.get("", response_model=DocumentListResponse, summary="List My Documents")
async def list_my_documents(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> DocumentListResponse:
    documents = await service.list_my_documents(db, user)
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(d) for d in documents],
        total=len(documents),
    )


@router.get(
    "/{document_id}",
    response_model=DocumentResponse,
    summary="Get Document",
    responses={
        403: {"description": "Not the caller's document"},
        404: {"description": "Document not found"},
    },
)
async def get_document(
    document_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> DocumentResponse:
    try:
        document = await service.get_document(db, user, document_id)
    except ServiceError as e:
        raise_http_error(e)
    return DocumentResponse.model_validate(document)


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Document",
    responses={
        403: {"description": "Not the caller's document"},
        404: {"description": "Document not found"},
    },
)
async def delete_document(
    document_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_document(db, user, document_id)
    except ServiceError as e:
        raise_http_error(e)
