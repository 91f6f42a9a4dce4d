"""
Status Workflow Tracker

Applies a status transition to one named section of a workflow record:

1. Load the record by its internal id
2. Check the section is known for the record kind and present on the record
3. Check the new status belongs to the section's status set
4. Set the status (and the message, when one is given), commit
5. Notify interested parties for qualifying transitions

Transitions are permissive: any status may follow any other in the same
set. The message is only replaced when a new one is supplied.

Notification failures are logged and never undo the committed status.
The caller is responsible for authorization.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.shared.errors import NotFoundError, ValidationError

from .registry import RecordKind, get_workflow
from .sections import SectionSpec

logger = logging.getLogger(__name__)


class RecordNotFoundError(NotFoundError):
    """Raised when the record to transition does not exist."""

    def __init__(self, kind: RecordKind, record_id: UUID):
        self.kind = kind
        self.record_id = record_id
        super().__init__(
            message=f"{kind.value.replace('_', ' ').capitalize()} {record_id} not found",
            error_code="RECORD_NOT_FOUND",
        )


class InvalidSectionError(ValidationError):
    """Raised when the section is unknown for the record."""

    def __init__(self, kind: RecordKind, section_name: str, known: list[str]):
        self.section_name = section_name
        super().__init__(
            message=(
                f"'{section_name}' is not a section of this {kind.value.replace('_', ' ')}. "
                f"Known sections: {', '.join(known) or 'none'}"
            ),
            error_code="INVALID_SECTION",
        )


class InvalidStatusError(ValidationError):
    """Raised when the status is outside the section's status set."""

    def __init__(self, section: SectionSpec, status: object):
        self.section_name = section.name
        self.status = status
        super().__init__(
            message=(
                f"'{status}' is not a valid {section.name} status. "
                f"Valid statuses: {', '.join(section.allowed_values)}"
            ),
            error_code="INVALID_STATUS",
        )


@dataclass(frozen=True)
class TransitionEvent:
    """A committed transition handed to the notifier."""

    kind: RecordKind
    record: Any
    section: SectionSpec
    previous_status: str | None
    status: enum.Enum
    message: str | None


class WorkflowNotifier(Protocol):
    async def __call__(self, db: AsyncSession, event: TransitionEvent) -> None: ...


def _present_sections(record: Any, sections: dict[str, SectionSpec]) -> list[str]:
    return [
        name for name, section in sections.items() if getattr(record, section.attribute) is not None
    ]


async def transition(
    db: AsyncSession,
    kind: RecordKind | str,
    record_id: UUID,
    section_name: str,
    new_status: str | enum.Enum,
    message: str | None = None,
    *,
    notifier: WorkflowNotifier | None = None,
) -> Any:
    """
    Transition one section of a record to a new status.

    Args:
        db: Database session
        kind: Record kind (application, student_information, company, ticket)
        record_id: Internal record id
        section_name: Section to change, e.g. "offerLetter"
        new_status: Target status, e.g. "approved"
        message: Optional message; the existing one is kept when omitted
        notifier: Called after commit for statuses in the section's notify_on

    Returns:
        The updated record

    Raises:
        RecordNotFoundError: If the record does not exist
        InvalidSectionError: If the section is not on the record
        InvalidStatusError: If the status is not in the section's set
    """
    workflow = get_workflow(kind)

    record = await db.get(workflow.model, record_id)
    if record is None:
        raise RecordNotFoundError(workflow.kind, record_id)

    section = workflow.sections.get(section_name)
    if section is None or getattr(record, section.attribute) is None:
        raise InvalidSectionError(
            workflow.kind, section_name, _present_sections(record, workflow.sections)
        )

    try:
        status = section.parse_status(new_status)
    except ValueError as e:
        raise InvalidStatusError(section, new_status) from e

    current = dict(getattr(record, section.attribute))
    previous_status = current.get("status")
    current["status"] = status.value
    if message is not None:
        current["message"] = message

    # Assign a new dict so SQLAlchemy detects the JSON change
    setattr(record, section.attribute, current)
    await db.commit()
    await db.refresh(record)

    logger.info(
        f"{workflow.kind.value} {record_id}: {section.name} "
        f"'{previous_status}' -> '{status.value}'"
    )

    if notifier is not None and status in section.notify_on:
        event = TransitionEvent(
            kind=workflow.kind,
            record=record,
            section=section,
            previous_status=previous_status,
            status=status,
            message=current.get("message"),
        )
        try:
            await notifier(db, event)
        except Exception as e:
            logger.error(
                f"Notification for {workflow.kind.value} {record_id} "
                f"({section.name} -> {status.value}) failed: {e}",
                exc_info=True,
            )
            # Don't fail the transition - notification is non-critical

    return record
