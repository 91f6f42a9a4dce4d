"""
Fixtures for application service tests.
"""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from app.modules.applications.models import Application
from app.modules.applications.schemas import (
    CourseFeeCreate,
    GicCreate,
    OfferLetterCreate,
)
from app.modules.students.models import StudentInformation
from app.modules.workflow.sections import OFFER_LETTER, PAGE_STATUS


@pytest.fixture
def student_information(student_user, agent_user):
    """A profile owned by student_user and managed by agent_user."""
    return StudentInformation(
        id=uuid4(),
        student_id=student_user.id,
        agent_id=agent_user.id,
        personal_information={"first_name": "Asha", "last_name": "Rao"},
        page_status=PAGE_STATUS.new_section(),
    )


@pytest.fixture
def personal_details():
    return {
        "full_name": "Asha Rao",
        "email": "asha@test.com",
        "phone_number": "+919800000000",
    }


@pytest.fixture
def offer_letter_create(student_information, personal_details):
    return OfferLetterCreate(
        student_information_id=student_information.id,
        personal_information=personal_details,
        education_details={"education_level": "Bachelor's"},
        preferences={
            "country": "Canada",
            "institution": "University of Toronto",
            "course": "Computer Science",
            "intake": "September 2025",
        },
        ielts_score={"overall": 7.5},
    )


@pytest.fixture
def gic_create(student_information, personal_details):
    return GicCreate(
        student_information_id=student_information.id,
        personal_details=personal_details,
        document_upload={"offer_letter": "https://files.test/offer.pdf"},
    )


@pytest.fixture
def course_fee_create(student_information, personal_details):
    return CourseFeeCreate(
        student_information_id=student_information.id,
        personal_details=personal_details,
    )


@pytest.fixture
def offer_letter_application(student_information):
    now = datetime.now(UTC)
    return Application(
        id=uuid4(),
        application_id="AP-24092601",
        student_information_id=student_information.id,
        user_id=student_information.student_id,
        offer_letter=OFFER_LETTER.new_section({"preferences": {"country": "Canada"}}),
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def fake_persist():
    """Stand-in for persist_with_identifier that hands out fixed ids."""
    calls = []

    async def persist(db, category, create, *, constraint, **kwargs):
        calls.append({"category": category, "constraint": constraint})
        return await create("AP-24092601")

    persist.calls = calls
    return persist
