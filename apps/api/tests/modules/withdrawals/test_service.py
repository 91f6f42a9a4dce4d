"""
Unit tests for the withdrawal service layer.

These tests cover:
- First save creating the record
- Later saves overwriting it
- A concurrent first save falling back to an overwrite
- Reading the caller's details
"""

from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from app.modules.withdrawals.schemas import WithdrawalSave
from app.modules.withdrawals.service import (
    WithdrawalNotFoundError,
    get_my_withdrawal,
    save_withdrawal,
)


def _duplicate_user():
    return IntegrityError(
        "INSERT INTO withdrawals ...",
        {},
        Exception('duplicate key value violates unique constraint "uq_withdrawals_user_id"'),
    )


class TestSaveWithdrawal:
    """Tests for save_withdrawal()."""

    @pytest.mark.asyncio
    async def test_first_save_creates(
        self, mock_db, agent_user, withdrawal_save, stored_withdrawal
    ):
        with patch("app.modules.withdrawals.service.repository") as mock_repo:
            mock_repo.get_by_user_id = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(return_value=stored_withdrawal)
            mock_repo.update = AsyncMock()

            withdrawal, created = await save_withdrawal(mock_db, agent_user, withdrawal_save)

        assert created is True
        assert withdrawal is stored_withdrawal
        kwargs = mock_repo.create.await_args.kwargs
        assert kwargs["user_id"] == agent_user.id
        assert kwargs["bank_details"]["swift_bic_code"] == "SBININBB"
        assert kwargs["bank_details"]["iban"] is None
        assert kwargs["document_upload"]["pan_card"] == {"filename": "pan.pdf"}
        mock_repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_later_save_overwrites(
        self, mock_db, agent_user, withdrawal_payload, stored_withdrawal
    ):
        withdrawal_payload["bank_details"]["iban"] = "GB33BUKB20201555555555"
        data = WithdrawalSave(**withdrawal_payload)

        with patch("app.modules.withdrawals.service.repository") as mock_repo:
            mock_repo.get_by_user_id = AsyncMock(return_value=stored_withdrawal)
            mock_repo.create = AsyncMock()
            mock_repo.update = AsyncMock(return_value=stored_withdrawal)

            withdrawal, created = await save_withdrawal(mock_db, agent_user, data)

        assert created is False
        assert withdrawal is stored_withdrawal
        mock_repo.create.assert_not_awaited()
        args = mock_repo.update.await_args
        assert args.args[1] is stored_withdrawal
        assert args.kwargs["bank_details"]["iban"] == "GB33BUKB20201555555555"

    @pytest.mark.asyncio
    async def test_concurrent_first_save_overwrites(
        self, mock_db, student_user, withdrawal_save, stored_withdrawal
    ):
        with patch("app.modules.withdrawals.service.repository") as mock_repo:
            mock_repo.get_by_user_id = AsyncMock(side_effect=[None, stored_withdrawal])
            mock_repo.create = AsyncMock(side_effect=_duplicate_user())
            mock_repo.update = AsyncMock(return_value=stored_withdrawal)

            withdrawal, created = await save_withdrawal(mock_db, student_user, withdrawal_save)

        assert created is False
        assert withdrawal is stored_withdrawal
        mock_db.rollback.assert_awaited_once()
        mock_repo.update.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(self, mock_db, student_user, withdrawal_save):
        violation = IntegrityError(
            "INSERT INTO withdrawals ...", {}, Exception("violates foreign key constraint")
        )

        with patch("app.modules.withdrawals.service.repository") as mock_repo:
            mock_repo.get_by_user_id = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(side_effect=violation)

            with pytest.raises(IntegrityError):
                await save_withdrawal(mock_db, student_user, withdrawal_save)

        mock_db.rollback.assert_awaited_once()


class TestWithdrawalSchema:
    def test_bank_fields_are_required(self, withdrawal_payload):
        del withdrawal_payload["bank_details"]["swift_bic_code"]

        with pytest.raises(ValidationError):
            WithdrawalSave(**withdrawal_payload)

    def test_both_identity_documents_are_required(self, withdrawal_payload):
        del withdrawal_payload["document_upload"]["pan_card"]

        with pytest.raises(ValidationError):
            WithdrawalSave(**withdrawal_payload)

    def test_empty_filename_is_rejected(self, withdrawal_payload):
        withdrawal_payload["document_upload"]["aadhar_card"]["filename"] = ""

        with pytest.raises(ValidationError):
            WithdrawalSave(**withdrawal_payload)


class TestGetMyWithdrawal:
    """Tests for get_my_withdrawal()."""

    @pytest.mark.asyncio
    async def test_returns_callers_details(self, mock_db, agent_user, stored_withdrawal):
        with patch("app.modules.withdrawals.service.repository") as mock_repo:
            mock_repo.get_by_user_id = AsyncMock(return_value=stored_withdrawal)

            result = await get_my_withdrawal(mock_db, agent_user)

        assert result is stored_withdrawal
        mock_repo.get_by_user_id.assert_awaited_once_with(mock_db, agent_user.id)

    @pytest.mark.asyncio
    async def test_nothing_saved(self, mock_db, agent_user):
        with patch("app.modules.withdrawals.service.repository") as mock_repo:
            mock_repo.get_by_user_id = AsyncMock(return_value=None)

            with pytest.raises(WithdrawalNotFoundError) as exc_info:
                await get_my_withdrawal(mock_db, agent_user)

        assert exc_info.value.status_code == 404
