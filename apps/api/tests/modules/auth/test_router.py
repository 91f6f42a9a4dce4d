"""
HTTP tests for registration, login and token refresh.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError

from app.core.database import get_db
from app.core.security import create_access_token, create_refresh_token, hash_password
from app.main import app
from app.modules.users.models import User, UserRole


def _user(role=UserRole.STUDENT, password="correct-horse", is_active=True):
    now = datetime.now(UTC)
    return User(
        id=uuid4(),
        email="asha@test.com",
        password_hash=hash_password(password),
        first_name="Asha",
        last_name="Rao",
        role=role,
        is_active=is_active,
        is_verified=False,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def client(mock_db):
    app.dependency_overrides[get_db] = lambda: mock_db
    yield AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def allow_logins():
    with patch(
        "app.modules.auth.router.check_rate_limit", new_callable=AsyncMock, return_value=True
    ):
        yield


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_agent(self, client):
        created = _user(role=UserRole.AGENT)

        with patch("app.modules.auth.router.UserRepository") as mock_users:
            mock_users.email_exists = AsyncMock(return_value=False)
            mock_users.create = AsyncMock(return_value=created)

            async with client:
                response = await client.post(
                    "/api/v1/auth/register",
                    json={
                        "email": "asha@test.com",
                        "password": "correct-horse",
                        "first_name": "Asha",
                        "last_name": "Rao",
                        "role": "agent",
                    },
                )

        assert response.status_code == 201
        assert response.json()["role"] == "agent"
        kwargs = mock_users.create.await_args.kwargs
        assert kwargs["role"] == UserRole.AGENT
        assert kwargs["password_hash"] != "correct-horse"

    @pytest.mark.asyncio
    async def test_admin_cannot_self_register(self, client):
        async with client:
            response = await client.post(
                "/api/v1/auth/register",
                json={
                    "email": "boss@test.com",
                    "password": "correct-horse",
                    "first_name": "B",
                    "last_name": "Oss",
                    "role": "admin",
                },
            )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client):
        with patch("app.modules.auth.router.UserRepository") as mock_users:
            mock_users.email_exists = AsyncMock(return_value=True)

            async with client:
                response = await client.post(
                    "/api/v1/auth/register",
                    json={
                        "email": "asha@test.com",
                        "password": "correct-horse",
                        "first_name": "Asha",
                        "last_name": "Rao",
                        "role": "student",
                    },
                )

        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "EMAIL_EXISTS"

    @pytest.mark.asyncio
    async def test_email_taken_between_check_and_insert(self, client, mock_db):
        duplicate = IntegrityError(
            "INSERT INTO users ...",
            {},
            Exception('duplicate key value violates unique constraint "ix_users_email"'),
        )

        with patch("app.modules.auth.router.UserRepository") as mock_users:
            mock_users.email_exists = AsyncMock(return_value=False)
            mock_users.create = AsyncMock(side_effect=duplicate)

            async with client:
                response = await client.post(
                    "/api/v1/auth/register",
                    json={
                        "email": "asha@test.com",
                        "password": "correct-horse",
                        "first_name": "Asha",
                        "last_name": "Rao",
                        "role": "student",
                    },
                )

        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "EMAIL_EXISTS"
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(self, client, mock_db):
        violation = IntegrityError(
            "INSERT INTO users ...", {}, Exception('violates check constraint "ck_other"')
        )

        with patch("app.modules.auth.router.UserRepository") as mock_users:
            mock_users.email_exists = AsyncMock(return_value=False)
            mock_users.create = AsyncMock(side_effect=violation)

            with pytest.raises(IntegrityError):
                async with client:
                    await client.post(
                        "/api/v1/auth/register",
                        json={
                            "email": "asha@test.com",
                            "password": "correct-horse",
                            "first_name": "Asha",
                            "last_name": "Rao",
                            "role": "student",
                        },
                    )

        mock_db.rollback.assert_awaited_once()


class TestLogin:
    @pytest.mark.asyncio
    async def test_valid_credentials_issue_tokens(self, client):
        user = _user()

        with patch("app.modules.auth.router.UserRepository") as mock_users:
            mock_users.get_by_email = AsyncMock(return_value=user)

            async with client:
                response = await client.post(
                    "/api/v1/auth/login",
                    json={"email": "asha@test.com", "password": "correct-horse"},
                )

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert body["refresh_token"]
        assert body["user"]["email"] == "asha@test.com"

    @pytest.mark.asyncio
    async def test_wrong_password(self, client):
        with patch("app.modules.auth.router.UserRepository") as mock_users:
            mock_users.get_by_email = AsyncMock(return_value=_user())

            async with client:
                response = await client.post(
                    "/api/v1/auth/login",
                    json={"email": "asha@test.com", "password": "wrong-password"},
                )

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "INVALID_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_inactive_account(self, client):
        with patch("app.modules.auth.router.UserRepository") as mock_users:
            mock_users.get_by_email = AsyncMock(return_value=_user(is_active=False))

            async with client:
                response = await client.post(
                    "/api/v1/auth/login",
                    json={"email": "asha@test.com", "password": "correct-horse"},
                )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_rate_limited(self, client):
        with patch(
            "app.modules.auth.router.check_rate_limit", new_callable=AsyncMock, return_value=False
        ):
            async with client:
                response = await client.post(
                    "/api/v1/auth/login",
                    json={"email": "asha@test.com", "password": "correct-horse"},
                )

        assert response.status_code == 429


class TestRefreshAndMe:
    @pytest.mark.asyncio
    async def test_refresh_issues_new_pair(self, client):
        user = _user()

        with patch("app.modules.auth.router.UserRepository") as mock_users:
            mock_users.get_by_id = AsyncMock(return_value=user)

            async with client:
                response = await client.post(
                    "/api/v1/auth/refresh",
                    json={"refresh_token": create_refresh_token(str(user.id))},
                )

        assert response.status_code == 200
        mock_users.get_by_id.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_access_token_cannot_refresh(self, client):
        async with client:
            response = await client.post(
                "/api/v1/auth/refresh",
                json={"refresh_token": create_access_token(str(uuid4()))},
            )

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "INVALID_REFRESH_TOKEN"

    @pytest.mark.asyncio
    async def test_me(self, client):
        user = _user(role=UserRole.AGENT)
        token = create_access_token(
            str(user.id),
            additional_claims={"email": user.email, "role": "agent", "name": user.full_name},
        )

        with patch("app.modules.auth.router.UserRepository") as mock_users:
            mock_users.get_by_id = AsyncMock(return_value=user)

            async with client:
                response = await client.get(
                    "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
                )

        assert response.status_code == 200
        assert response.json()["id"] == str(user.id)
