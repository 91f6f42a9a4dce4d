"""
Workflow Schemas

Request and response shapes shared by every endpoint that exposes or
changes a workflow section.
"""

from typing import Any

from pydantic import BaseModel, Field


class WorkflowSection(BaseModel):
    """A workflow section as stored on a record."""

    type: str
    status: str
    message: str | None = None
    details: dict[str, Any] | None = None


class SectionTransitionRequest(BaseModel):
    """Request body for changing a section's status."""

    status: str = Field(..., min_length=1, max_length=50, json_schema_extra={"example": "approved"})
    message: str | None = Field(
        None,
        max_length=1000,
        description="Shown to the student; the previous message is kept when omitted",
        json_schema_extra={"example": "Offer letter issued by the institution."},
    )
