"""
Fixtures for workflow tests.

Records are real (transient) ORM instances so section JSON behaves as it
does in the application; the session is mocked.
"""

from uuid import uuid4

import pytest

from app.modules.agents.models import Company
from app.modules.applications.models import Application
from app.modules.students.models import StudentInformation
from app.modules.tickets.models import Ticket, TicketPriority, TicketType
from app.modules.workflow.sections import GIC, OFFER_LETTER, PAGE_STATUS, TICKET


@pytest.fixture
def student_information():
    return StudentInformation(
        id=uuid4(),
        student_id=uuid4(),
        agent_id=uuid4(),
        personal_information={
            "first_name": "Asha",
            "last_name": "Rao",
            "email": "asha@test.com",
            "phone": "+919800000000",
        },
        page_status=PAGE_STATUS.new_section(),
    )


@pytest.fixture
def offer_letter_application(student_information):
    return Application(
        id=uuid4(),
        application_id="AP-24092601",
        student_information_id=student_information.id,
        user_id=student_information.student_id,
        offer_letter=OFFER_LETTER.new_section({"preferences": {"country": "Canada"}}),
        gic=None,
        course_fee=None,
    )


@pytest.fixture
def gic_application(student_information):
    return Application(
        id=uuid4(),
        application_id="AP-24092602",
        student_information_id=student_information.id,
        user_id=student_information.student_id,
        offer_letter=None,
        gic=GIC.new_section(),
        course_fee=None,
    )


@pytest.fixture
def company():
    return Company(
        id=uuid4(),
        agent_id=uuid4(),
        ag_id="AG-24092601",
        page_count=6,
        page_status={"type": "Page Status", "status": "pending", "message": None},
    )


@pytest.fixture
def ticket():
    return Ticket(
        id=uuid4(),
        ticket_id="TK-24092601",
        student_id=uuid4(),
        created_by=uuid4(),
        ticket_type=TicketType.TECHNICAL,
        priority=TicketPriority.NORMAL,
        description="Cannot upload my passport scan.",
        payment=0,
        ticket_status=TICKET.new_section(),
    )
