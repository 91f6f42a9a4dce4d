"""
Workflow Module

Status tracking for the sections of portal records:

- application: offerLetter, gic
- student_information: pageStatus
- company: pageStatus
- ticket: ticket

transition() validates the section and status against closed enums,
persists the change and, for qualifying transitions (offer letter
approved/rejected), notifies the student and linked agent by email.
"""

from .notifications import notify_parties
from .registry import RecordKind
from .sections import (
    GIC,
    OFFER_LETTER,
    PAGE_STATUS,
    TICKET,
    GicStatus,
    OfferLetterStatus,
    PageStatus,
    SectionSpec,
    TicketStatus,
)
from .tracker import (
    InvalidSectionError,
    InvalidStatusError,
    RecordNotFoundError,
    TransitionEvent,
    transition,
)

__all__ = [
    "RecordKind",
    "SectionSpec",
    "OFFER_LETTER",
    "GIC",
    "PAGE_STATUS",
    "TICKET",
    "OfferLetterStatus",
    "GicStatus",
    "PageStatus",
    "TicketStatus",
    "TransitionEvent",
    "transition",
    "notify_parties",
    "RecordNotFoundError",
    "InvalidSectionError",
    "InvalidStatusError",
]
