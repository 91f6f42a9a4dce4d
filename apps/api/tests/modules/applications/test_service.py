"""
Unit tests for the applications service layer.

These tests cover:
- Filing offer letter, GIC and course-fee applications
- Ownership checks for students and agents
- Visibility of a single application
- Dashboard overview arithmetic
- Admin section transitions
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from app.core.auth import CurrentUser
from app.modules.applications.models import APPLICATION_ID_CONSTRAINT
from app.modules.applications.service import (
    ApplicationNotFoundError,
    _increase_percentage,
    admin_list_applications,
    admin_transition_section,
    create_course_fee,
    create_gic,
    create_offer_letter,
    get_application,
    get_overview,
    list_my_applications,
)
from app.modules.identifiers import IdentifierCategory
from app.modules.shared.errors import ForbiddenError
from app.modules.students.service import StudentInformationNotFoundError
from app.modules.users.models import UserRole
from app.modules.workflow import RecordKind, notify_parties
from app.modules.workflow.tracker import InvalidStatusError


def _created(**fields):
    """Return what repository.create would: the fields on an object."""
    application = MagicMock()
    for name, value in fields.items():
        setattr(application, name, value)
    application.kind = "offerLetter" if fields.get("offer_letter") else "gic"
    return application


class TestCreateOfferLetter:
    """Tests for create_offer_letter()."""

    @pytest.mark.asyncio
    async def test_student_files_offer_letter(
        self, mock_db, student_user, student_information, offer_letter_create, fake_persist
    ):
        with (
            patch("app.modules.applications.service.student_repository") as mock_students,
            patch("app.modules.applications.service.repository") as mock_repo,
            patch("app.modules.applications.service.persist_with_identifier", fake_persist),
        ):
            mock_students.get_by_id = AsyncMock(return_value=student_information)
            mock_repo.create = AsyncMock(side_effect=lambda db, **fields: _created(**fields))

            result = await create_offer_letter(mock_db, student_user, offer_letter_create)

        assert result.application_id == "AP-24092601"
        assert result.student_information_id == student_information.id
        assert result.user_id == student_user.id
        assert result.offer_letter["type"] == "Offer Letter"
        assert result.offer_letter["status"] == "under review"
        assert result.offer_letter["message"] is None
        assert result.offer_letter["details"]["preferences"]["country"] == "Canada"
        assert "student_information_id" not in result.offer_letter["details"]
        assert fake_persist.calls == [
            {"category": IdentifierCategory.APPLICATION, "constraint": APPLICATION_ID_CONSTRAINT}
        ]

    @pytest.mark.asyncio
    async def test_agent_files_for_managed_student(
        self, mock_db, agent_user, student_information, offer_letter_create, fake_persist
    ):
        with (
            patch("app.modules.applications.service.student_repository") as mock_students,
            patch("app.modules.applications.service.repository") as mock_repo,
            patch("app.modules.applications.service.persist_with_identifier", fake_persist),
        ):
            mock_students.get_by_id = AsyncMock(return_value=student_information)
            mock_repo.create = AsyncMock(side_effect=lambda db, **fields: _created(**fields))

            result = await create_offer_letter(mock_db, agent_user, offer_letter_create)

        assert result.user_id == agent_user.id
        mock_repo.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_student_information(
        self, mock_db, student_user, offer_letter_create, fake_persist
    ):
        with (
            patch("app.modules.applications.service.student_repository") as mock_students,
            patch("app.modules.applications.service.repository") as mock_repo,
            patch("app.modules.applications.service.persist_with_identifier", fake_persist),
        ):
            mock_students.get_by_id = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock()

            with pytest.raises(StudentInformationNotFoundError):
                await create_offer_letter(mock_db, student_user, offer_letter_create)

        mock_repo.create.assert_not_awaited()
        assert fake_persist.calls == []

    @pytest.mark.asyncio
    async def test_other_students_profile_is_forbidden(
        self, mock_db, student_information, offer_letter_create, fake_persist
    ):
        stranger = CurrentUser(id=uuid4(), email="other@test.com", role=UserRole.STUDENT)

        with (
            patch("app.modules.applications.service.student_repository") as mock_students,
            patch("app.modules.applications.service.persist_with_identifier", fake_persist),
        ):
            mock_students.get_by_id = AsyncMock(return_value=student_information)

            with pytest.raises(ForbiddenError):
                await create_offer_letter(mock_db, stranger, offer_letter_create)

        assert fake_persist.calls == []

    @pytest.mark.asyncio
    async def test_admin_cannot_file(
        self, mock_db, admin_user, student_information, offer_letter_create, fake_persist
    ):
        with (
            patch("app.modules.applications.service.student_repository") as mock_students,
            patch("app.modules.applications.service.persist_with_identifier", fake_persist),
        ):
            mock_students.get_by_id = AsyncMock(return_value=student_information)

            with pytest.raises(ForbiddenError):
                await create_offer_letter(mock_db, admin_user, offer_letter_create)


class TestCreateOtherKinds:
    """GIC and course-fee filing."""

    @pytest.mark.asyncio
    async def test_gic_starts_under_review(
        self, mock_db, student_user, student_information, gic_create, fake_persist
    ):
        with (
            patch("app.modules.applications.service.student_repository") as mock_students,
            patch("app.modules.applications.service.repository") as mock_repo,
            patch("app.modules.applications.service.persist_with_identifier", fake_persist),
        ):
            mock_students.get_by_id = AsyncMock(return_value=student_information)
            mock_repo.create = AsyncMock(side_effect=lambda db, **fields: _created(**fields))

            result = await create_gic(mock_db, student_user, gic_create)

        assert result.gic["type"] == "GIC"
        assert result.gic["status"] == "under review"
        assert result.gic["details"]["document_upload"]["offer_letter"] == (
            "https://files.test/offer.pdf"
        )

    @pytest.mark.asyncio
    async def test_course_fee_has_no_workflow_section(
        self, mock_db, student_user, student_information, course_fee_create, fake_persist
    ):
        with (
            patch("app.modules.applications.service.student_repository") as mock_students,
            patch("app.modules.applications.service.repository") as mock_repo,
            patch("app.modules.applications.service.persist_with_identifier", fake_persist),
        ):
            mock_students.get_by_id = AsyncMock(return_value=student_information)
            mock_repo.create = AsyncMock(side_effect=lambda db, **fields: _created(**fields))

            await create_course_fee(mock_db, student_user, course_fee_create)

        fields = mock_repo.create.await_args.kwargs
        assert fields["course_fee"]["type"] == "Course Fee"
        assert "status" not in fields["course_fee"]
        assert "offer_letter" not in fields
        assert "gic" not in fields


class TestGetApplication:
    """Tests for get_application() visibility."""

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db, student_user):
        with patch("app.modules.applications.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(ApplicationNotFoundError) as exc_info:
                await get_application(mock_db, student_user, uuid4())

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_filer_sees_application(
        self, mock_db, student_user, offer_letter_application
    ):
        with patch("app.modules.applications.service.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=offer_letter_application)

            result = await get_application(mock_db, student_user, offer_letter_application.id)

        assert result is offer_letter_application

    @pytest.mark.asyncio
    async def test_agent_sees_students_application(
        self, mock_db, agent_user, student_information, offer_letter_application
    ):
        with (
            patch("app.modules.applications.service.repository") as mock_repo,
            patch("app.modules.applications.service.student_repository") as mock_students,
        ):
            mock_repo.get_by_id = AsyncMock(return_value=offer_letter_application)
            mock_students.get_by_id = AsyncMock(return_value=student_information)

            result = await get_application(mock_db, agent_user, offer_letter_application.id)

        assert result is offer_letter_application

    @pytest.mark.asyncio
    async def test_unrelated_agent_is_forbidden(
        self, mock_db, student_information, offer_letter_application
    ):
        other_agent = CurrentUser(id=uuid4(), email="other@agency.com", role=UserRole.AGENT)

        with (
            patch("app.modules.applications.service.repository") as mock_repo,
            patch("app.modules.applications.service.student_repository") as mock_students,
        ):
            mock_repo.get_by_id = AsyncMock(return_value=offer_letter_application)
            mock_students.get_by_id = AsyncMock(return_value=student_information)

            with pytest.raises(ForbiddenError):
                await get_application(mock_db, other_agent, offer_letter_application.id)


class TestListAndOverview:
    """Listing and dashboard overview."""

    @pytest.mark.asyncio
    async def test_agent_listing_is_scoped_to_agent(self, mock_db, agent_user):
        with patch("app.modules.applications.service.repository") as mock_repo:
            mock_repo.list_applications = AsyncMock(return_value=([], 25))

            result = await list_my_applications(mock_db, agent_user, page=2, limit=10)

        kwargs = mock_repo.list_applications.await_args.kwargs
        assert kwargs["agent_id"] == agent_user.id
        assert "student_id" not in kwargs
        assert kwargs["skip"] == 10
        assert result["total_pages"] == 3

    @pytest.mark.asyncio
    async def test_student_listing_is_scoped_to_student(self, mock_db, student_user):
        with patch("app.modules.applications.service.repository") as mock_repo:
            mock_repo.list_applications = AsyncMock(return_value=([], 0))

            result = await list_my_applications(mock_db, student_user, limit=500)

        kwargs = mock_repo.list_applications.await_args.kwargs
        assert kwargs["student_id"] == student_user.id
        assert result["limit"] == 100

    @pytest.mark.asyncio
    async def test_overview(self, mock_db, student_user):
        now = datetime(2024, 9, 26, 12, 0, tzinfo=UTC)
        counts = {
            "total": 12,
            "under_review": 4,
            "completed": 6,
            "last_7_days": 3,
            "previous_7_days": 2,
        }

        with patch("app.modules.applications.service.repository") as mock_repo:
            mock_repo.get_overview_counts = AsyncMock(return_value=counts)

            result = await get_overview(mock_db, student_user, now=now)

        kwargs = mock_repo.get_overview_counts.await_args.kwargs
        assert kwargs["week_start"] == now - timedelta(days=7)
        assert kwargs["previous_week_start"] == now - timedelta(days=14)
        assert result == {
            "total": 12,
            "under_review": 4,
            "completed": 6,
            "submitted_last_7_days": 3,
            "increase_percentage": 50.0,
        }

    @pytest.mark.parametrize(
        "current,previous,expected",
        [
            (0, 0, 0.0),
            (4, 0, 100.0),
            (2, 4, -50.0),
            (4, 3, 33.3),
        ],
    )
    def test_increase_percentage(self, current, previous, expected):
        assert _increase_percentage(current, previous) == expected

    @pytest.mark.asyncio
    async def test_admin_listing_passes_filters(self, mock_db):
        with patch("app.modules.applications.service.repository") as mock_repo:
            mock_repo.list_applications = AsyncMock(return_value=([], 0))

            await admin_list_applications(
                mock_db, kind="gic", offer_letter_status="approved", page=0, limit=0
            )

        kwargs = mock_repo.list_applications.await_args.kwargs
        assert kwargs["kind"] == "gic"
        assert kwargs["offer_letter_status"] == "approved"
        assert kwargs["skip"] == 0
        assert kwargs["limit"] == 1


class TestAdminTransitionSection:
    """Tests for admin_transition_section()."""

    @pytest.mark.asyncio
    async def test_passes_notifier_to_tracker(self, mock_db, admin_user, offer_letter_application):
        with patch(
            "app.modules.applications.service.transition",
            new_callable=AsyncMock,
            return_value=offer_letter_application,
        ) as mock_transition:
            result = await admin_transition_section(
                mock_db,
                admin_user,
                offer_letter_application.id,
                "offerLetter",
                "approved",
                "Well done",
            )

        assert result is offer_letter_application
        args = mock_transition.await_args
        assert args.args[2] == offer_letter_application.id
        assert args.args[3:] == ("offerLetter", "approved", "Well done")
        assert args.kwargs["notifier"] is notify_parties

    @pytest.mark.asyncio
    async def test_end_to_end_approval_notifies(
        self, mock_db, admin_user, offer_letter_application
    ):
        mock_db.get.return_value = offer_letter_application
        handler = AsyncMock()

        with patch.dict(
            "app.modules.workflow.notifications._HANDLERS",
            {(RecordKind.APPLICATION, "offerLetter"): handler},
        ):
            result = await admin_transition_section(
                mock_db, admin_user, offer_letter_application.id, "offerLetter", "approved"
            )

        assert result.offer_letter["status"] == "approved"
        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_status_propagates(self, mock_db, admin_user, offer_letter_application):
        mock_db.get.return_value = offer_letter_application

        with pytest.raises(InvalidStatusError):
            await admin_transition_section(
                mock_db, admin_user, offer_letter_application.id, "offerLetter", "done"
            )

        assert offer_letter_application.offer_letter["status"] == "under review"
