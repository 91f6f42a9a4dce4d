"""
Shared fixtures: a mocked database session and one user per portal role.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.auth import CurrentUser
from app.modules.users.models import UserRole


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def student_user():
    return CurrentUser(id=uuid4(), email="student@test.com", role=UserRole.STUDENT, name="Asha Rao")


@pytest.fixture
def agent_user():
    return CurrentUser(id=uuid4(), email="agent@test.com", role=UserRole.AGENT, name="Vikram Shah")


@pytest.fixture
def admin_user():
    return CurrentUser(id=uuid4(), email="admin@test.com", role=UserRole.ADMIN, name="Portal Admin")
