"""
Fixtures for withdrawal tests.
"""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from app.modules.withdrawals.models import Withdrawal
from app.modules.withdrawals.schemas import WithdrawalSave


@pytest.fixture
def withdrawal_payload():
    return {
        "bank_details": {
            "bank_name": "State Bank of India",
            "branch_name": "Andheri West",
            "country": "India",
            "province": "Maharashtra",
            "address": "12 Link Road",
            "city": "Mumbai",
            "postal_code": "400053",
            "bank_account_name": "Vikram Shah",
            "bank_account_number": "00112233445566",
            "swift_bic_code": "SBININBB",
        },
        "document_upload": {
            "aadhar_card": {"filename": "aadhar.pdf"},
            "pan_card": {"filename": "pan.pdf"},
        },
    }


@pytest.fixture
def withdrawal_save(withdrawal_payload):
    return WithdrawalSave(**withdrawal_payload)


@pytest.fixture
def stored_withdrawal(agent_user, withdrawal_payload):
    now = datetime.now(UTC)
    return Withdrawal(
        id=uuid4(),
        user_id=agent_user.id,
        bank_details={**withdrawal_payload["bank_details"], "iban": None},
        document_upload=withdrawal_payload["document_upload"],
        created_at=now,
        updated_at=now,
    )
