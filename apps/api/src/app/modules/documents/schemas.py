"""
Document Schemas
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class DocumentCreate(BaseModel):
    """Request body for POST /documents."""

    document_name: str = Field(..., min_length=1, max_length=200)
    view_url: HttpUrl = Field(..., description="Where the uploaded file can be viewed")


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    document_name: str
    view_url: str
    created_at: datetime
    updated_at: datetime


class DocumentListResponse(BaseModel):
    documents: list[DocumentResponse]
    total: int
