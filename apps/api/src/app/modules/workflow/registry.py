"""
Workflow Registry

Maps each record kind to its table and the sections it carries.
"""

import enum
from dataclasses import dataclass

from app.core.database import Base
from app.modules.agents.models import Company
from app.modules.applications.models import Application
from app.modules.shared.errors import ValidationError
from app.modules.students.models import StudentInformation
from app.modules.tickets.models import Ticket

from .sections import GIC, OFFER_LETTER, PAGE_STATUS, TICKET, SectionSpec


class RecordKind(str, enum.Enum):
    """Kinds of records that carry workflow sections."""

    APPLICATION = "application"
    STUDENT_INFORMATION = "student_information"
    COMPANY = "company"
    TICKET = "ticket"


@dataclass(frozen=True)
class RecordWorkflow:
    kind: RecordKind
    model: type[Base]
    sections: dict[str, SectionSpec]


def _workflow(kind: RecordKind, model: type[Base], *sections: SectionSpec) -> RecordWorkflow:
    return RecordWorkflow(kind=kind, model=model, sections={s.name: s for s in sections})


WORKFLOWS: dict[RecordKind, RecordWorkflow] = {
    RecordKind.APPLICATION: _workflow(RecordKind.APPLICATION, Application, OFFER_LETTER, GIC),
    RecordKind.STUDENT_INFORMATION: _workflow(
        RecordKind.STUDENT_INFORMATION, StudentInformation, PAGE_STATUS
    ),
    RecordKind.COMPANY: _workflow(RecordKind.COMPANY, Company, PAGE_STATUS),
    RecordKind.TICKET: _workflow(RecordKind.TICKET, Ticket, TICKET),
}


def get_workflow(kind: RecordKind | str) -> RecordWorkflow:
    """
    Look up the workflow for a record kind.

    Raises:
        ValidationError: If kind is not a known record kind
    """
    try:
        return WORKFLOWS[RecordKind(kind)]
    except ValueError as e:
        raise ValidationError(
            f"Unknown record kind '{kind}'", error_code="UNKNOWN_RECORD_KIND"
        ) from e
