"""
HTTP tests for the ticket endpoints.

The service layer is patched; these tests check routing, role checks,
error mapping and response shape.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.auth import get_current_user
from app.core.database import get_db
from app.main import app
from app.modules.students.service import StudentInformationNotFoundError
from app.modules.tickets.models import Ticket, TicketPriority, TicketType
from app.modules.workflow.sections import TICKET


def _ticket(student_id, priority=TicketPriority.URGENT, payment=12):
    now = datetime.now(UTC)
    return Ticket(
        id=uuid4(),
        ticket_id="TK-24092601",
        student_id=student_id,
        created_by=student_id,
        ticket_type=TicketType.TECHNICAL,
        priority=priority,
        description="The upload page times out.",
        payment=payment,
        ticket_status=TICKET.new_section(),
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def client_as(mock_db):
    """Build an HTTP client authenticated as the given user."""
    def build(user):
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_db] = lambda: mock_db
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        return client

    yield build
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def no_rate_limit():
    with patch("app.modules.tickets.router.enforce_rate_limit", new_callable=AsyncMock):
        yield


class TestCreateTicketEndpoint:
    @pytest.mark.asyncio
    async def test_student_creates_ticket(self, client_as, student_user):
        ticket = _ticket(student_user.id)

        with patch(
            "app.modules.tickets.service.create_ticket",
            new_callable=AsyncMock,
            return_value=ticket,
        ):
            async with client_as(student_user) as client:
                response = await client.post(
                    "/api/v1/tickets",
                    json={
                        "ticket_type": "Technical",
                        "priority": "Urgent",
                        "description": "The upload page times out.",
                    },
                )

        assert response.status_code == 201
        body = response.json()
        assert body["ticket_id"] == "TK-24092601"
        assert body["payment"] == 12
        assert body["ticket_status"]["status"] == "under review"

    @pytest.mark.asyncio
    async def test_agent_cannot_create_ticket(self, client_as, agent_user):
        async with client_as(agent_user) as client:
            response = await client.post(
                "/api/v1/tickets",
                json={"ticket_type": "General", "description": "Agents cannot do this."},
            )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_profile_maps_to_404(self, client_as, student_user):
        with patch(
            "app.modules.tickets.service.create_ticket",
            new_callable=AsyncMock,
            side_effect=StudentInformationNotFoundError(),
        ):
            async with client_as(student_user) as client:
                response = await client.post(
                    "/api/v1/tickets",
                    json={"ticket_type": "General", "description": "Where is my profile?"},
                )

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "STUDENT_INFORMATION_NOT_FOUND"


class TestAdminStatusEndpoint:
    @pytest.mark.asyncio
    async def test_admin_moves_ticket(self, client_as, admin_user, mock_db):
        ticket = _ticket(uuid4())
        mock_db.get.return_value = ticket

        with patch("app.modules.tickets.admin_router.enforce_rate_limit", new_callable=AsyncMock):
            async with client_as(admin_user) as client:
                response = await client.patch(
                    f"/api/v1/admin/tickets/{ticket.id}/status",
                    json={"status": "reject", "message": "Duplicate of TK-24092511"},
                )

        assert response.status_code == 200
        section = response.json()["ticket_status"]
        assert section["status"] == "reject"
        assert section["message"] == "Duplicate of TK-24092511"

    @pytest.mark.asyncio
    async def test_invalid_status_maps_to_422(self, client_as, admin_user, mock_db):
        ticket = _ticket(uuid4())
        mock_db.get.return_value = ticket

        with patch("app.modules.tickets.admin_router.enforce_rate_limit", new_callable=AsyncMock):
            async with client_as(admin_user) as client:
                response = await client.patch(
                    f"/api/v1/admin/tickets/{ticket.id}/status",
                    json={"status": "closed"},
                )

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "INVALID_STATUS"
        assert ticket.ticket_status["status"] == "under review"

    @pytest.mark.asyncio
    async def test_student_cannot_use_admin_endpoint(self, client_as, student_user):
        async with client_as(student_user) as client:
            response = await client.patch(
                f"/api/v1/admin/tickets/{uuid4()}/status",
                json={"status": "approved"},
            )

        assert response.status_code == 403
