"""
Workflow Sections

Closed status sets for every workflow section, and the SectionSpec that
describes how a section is stored and when it notifies.

A section is persisted as a JSON object:
    {"type": "Offer Letter", "status": "under review", "message": None, "details": {...}}
"""

import enum
from dataclasses import dataclass, field
from typing import Any


class OfferLetterStatus(str, enum.Enum):
    """Statuses of an offer-letter request."""

    UNDER_REVIEW = "under review"
    APPROVED = "approved"
    REJECTED = "rejected"


class GicStatus(str, enum.Enum):
    """Statuses of a GIC request."""

    UNDER_REVIEW = "under review"
    SUCCESS = "success"
    REJECT = "reject"


class PageStatus(str, enum.Enum):
    """Registration progress of a student profile or agent company."""

    REGISTERING = "registering"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    PENDING = "pending"
    REJECTED = "rejected"


class TicketStatus(str, enum.Enum):
    """Statuses of a support ticket."""

    UNDER_REVIEW = "under review"
    APPROVED = "approved"
    REJECT = "reject"


@dataclass(frozen=True)
class SectionSpec:
    """
    Static description of one workflow section.

    Attributes:
        name: Section name used by clients (e.g. "offerLetter")
        attribute: Model attribute holding the section JSON
        type_tag: Fixed descriptive tag stored with the section
        statuses: Enum of allowed statuses
        initial_status: Status given to a new section
        notify_on: Statuses whose arrival triggers notifications
    """

    name: str
    attribute: str
    type_tag: str
    statuses: type[enum.Enum]
    initial_status: enum.Enum
    notify_on: frozenset[enum.Enum] = field(default_factory=frozenset)

    def parse_status(self, value: str | enum.Enum) -> enum.Enum:
        """
        Coerce a status value into this section's enum.

        Raises:
            ValueError: If value is not in the section's status set
        """
        if isinstance(value, enum.Enum):
            value = value.value
        return self.statuses(value)

    @property
    def allowed_values(self) -> list[str]:
        return [status.value for status in self.statuses]

    def new_section(self, details: dict[str, Any] | None = None) -> dict[str, Any]:
        """Build the initial JSON for a freshly created section."""
        section: dict[str, Any] = {
            "type": self.type_tag,
            "status": self.initial_status.value,
            "message": None,
        }
        if details is not None:
            section["details"] = details
        return section


OFFER_LETTER = SectionSpec(
    name="offerLetter",
    attribute="offer_letter",
    type_tag="Offer Letter",
    statuses=OfferLetterStatus,
    initial_status=OfferLetterStatus.UNDER_REVIEW,
    notify_on=frozenset({OfferLetterStatus.APPROVED, OfferLetterStatus.REJECTED}),
)

GIC = SectionSpec(
    name="gic",
    attribute="gic",
    type_tag="GIC",
    statuses=GicStatus,
    initial_status=GicStatus.UNDER_REVIEW,
)

PAGE_STATUS = SectionSpec(
    name="pageStatus",
    attribute="page_status",
    type_tag="Page Status",
    statuses=PageStatus,
    initial_status=PageStatus.REGISTERING,
)

TICKET = SectionSpec(
    name="ticket",
    attribute="ticket_status",
    type_tag="Ticket",
    statuses=TicketStatus,
    initial_status=TicketStatus.UNDER_REVIEW,
)
