"""
Withdrawal Schemas
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class WithdrawalBankDetails(BaseModel):
    bank_name: str = Field(..., min_length=1, max_length=200)
    branch_name: str = Field(..., min_length=1, max_length=200)
    country: str = Field(..., min_length=1, max_length=100)
    province: str = Field(..., min_length=1, max_length=100)
    address: str = Field(..., min_length=1, max_length=300)
    city: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    bank_account_name: str = Field(..., min_length=1, max_length=200)
    bank_account_number: str = Field(..., min_length=1, max_length=34)
    swift_bic_code: str = Field(..., min_length=1, max_length=11)
    iban: str | None = Field(None, max_length=34)


class UploadedFile(BaseModel):
    filename: str = Field(..., min_length=1, max_length=255)


class WithdrawalDocuments(BaseModel):
    """Identity documents backing the bank account."""

    aadhar_card: UploadedFile
    pan_card: UploadedFile


class WithdrawalSave(BaseModel):
    """
    Request body for POST /withdrawals.

    Both parts are required; a save replaces whatever is on file.
    """

    bank_details: WithdrawalBankDetails
    document_upload: WithdrawalDocuments


class WithdrawalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    bank_details: WithdrawalBankDetails
    document_upload: WithdrawalDocuments
    created_at: datetime
    updated_at: datetime
