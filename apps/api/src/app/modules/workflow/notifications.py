"""
Workflow Notifications

Email notifications sent after qualifying transitions. notify_parties is
the notifier passed to transition() by the admin services.

Currently notified:
- offerLetter approved/rejected: the owning student, and the linked agent
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.email import send_offer_letter_decision
from app.modules.students.models import StudentInformation
from app.modules.users.repository import UserRepository

from .registry import RecordKind
from .sections import OFFER_LETTER, OfferLetterStatus
from .tracker import TransitionEvent

logger = logging.getLogger(__name__)


def _student_name(student_info: StudentInformation, fallback: str) -> str:
    personal = student_info.personal_information or {}
    name = " ".join(
        part for part in (personal.get("first_name"), personal.get("last_name")) if part
    )
    return name or fallback


async def notify_offer_letter_decision(db: AsyncSession, event: TransitionEvent) -> None:
    """
    Email the student, and their agent when linked, about an offer-letter decision.

    Each send is independent: a failed student email does not stop the
    agent email. Failures are logged, never raised.
    """
    application = event.record
    student_info = await db.get(StudentInformation, application.student_information_id)
    if student_info is None:
        logger.error(
            f"Cannot notify for application {application.application_id}: "
            f"student information {application.student_information_id} missing"
        )
        return

    approved = event.status == OfferLetterStatus.APPROVED
    student = await UserRepository.get_by_id(db, student_info.student_id)
    student_name = _student_name(student_info, student.full_name if student else "Student")

    recipients = []
    if student is not None:
        recipients.append((student, False))
    if student_info.agent_id is not None:
        agent = await UserRepository.get_by_id(db, student_info.agent_id)
        if agent is not None:
            recipients.append((agent, True))

    for user, for_agent in recipients:
        sent = await send_offer_letter_decision(
            to_email=user.email,
            recipient_name=user.first_name,
            student_name=student_name,
            application_id=application.application_id,
            approved=approved,
            message=event.message,
            for_agent=for_agent,
        )
        if sent:
            logger.info(
                f"Sent offer letter {event.status.value} email for "
                f"{application.application_id} to {user.role.value} {user.id}"
            )
        else:
            logger.error(
                f"Notification delivery failed: offer letter {event.status.value} email for "
                f"{application.application_id} to {user.role.value} {user.id}"
            )


_HANDLERS = {
    (RecordKind.APPLICATION, OFFER_LETTER.name): notify_offer_letter_decision,
}


async def notify_parties(db: AsyncSession, event: TransitionEvent) -> None:
    """Dispatch a transition event to its notification handler, if any."""
    handler = _HANDLERS.get((event.kind, event.section.name))
    if handler is None:
        logger.debug(f"No notification handler for {event.kind.value}.{event.section.name}")
        return
    await handler(db, event)
