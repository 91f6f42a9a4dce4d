"""
Agent Company Service Layer

Business logic for agent company registration:

1. Profile pages are saved as the agent works through the form; the first
   save creates the company and moves pageStatus from ``registering`` to
   ``inProgress``.
2. Submission stores the references, assigns an AG- identifier the first
   time, marks every page complete and sets pageStatus to ``pending``.
   The primary contact is emailed a confirmation (non-critical).
3. Admins list companies and move pageStatus through the workflow tracker.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.core.email import send_agent_registration_complete
from app.modules.agents import repository
from app.modules.agents.models import AG_ID_CONSTRAINT, REGISTRATION_PAGE_COUNT, Company
from app.modules.agents.schemas import CompanySave, CompanySubmit
from app.modules.identifiers import IdentifierCategory, persist_with_identifier
from app.modules.shared.errors import NotFoundError, ServiceError
from app.modules.workflow import PAGE_STATUS, PageStatus, RecordKind, transition

logger = logging.getLogger(__name__)


class CompanyNotFoundError(NotFoundError):
    """Raised when an agent has no company yet."""

    def __init__(self, company_id: UUID | None = None):
        message = f"Company {company_id} not found" if company_id else "Company not found"
        super().__init__(message=message, error_code="COMPANY_NOT_FOUND")


class RegistrationLockedError(ServiceError):
    """Raised when an approved registration is edited or resubmitted."""

    def __init__(self):
        super().__init__(
            message="This registration has already been approved and can no longer be changed.",
            error_code="REGISTRATION_LOCKED",
            status_code=409,
        )


def _with_status(page_status: dict, status: PageStatus) -> dict:
    return {**page_status, "status": status.value}


def _ensure_editable(company: Company) -> None:
    if company.page_status.get("status") == PageStatus.COMPLETED.value:
        raise RegistrationLockedError()


async def get_my_company(db: AsyncSession, user: CurrentUser) -> Company:
    """Get the calling agent's company."""
    company = await repository.get_by_agent_id(db, user.id)
    if company is None:
        raise CompanyNotFoundError()
    return company


async def save_company(db: AsyncSession, user: CurrentUser, data: CompanySave) -> Company:
    """
    Save registration pages, creating the company on first use.

    Raises:
        RegistrationLockedError: If the registration was already approved
    """
    company = await repository.get_by_agent_id(db, user.id)
    if company is None:
        company = await repository.create(
            db, agent_id=user.id, page_status=PAGE_STATUS.new_section()
        )
        logger.info(f"Company {company.id} created for agent {user.id}")

    _ensure_editable(company)

    fields = {
        name: value.model_dump(mode="json")
        for name, value in (
            ("company_details", data.company_details),
            ("primary_contact", data.primary_contact),
            ("bank_details", data.bank_details),
            ("company_operations", data.company_operations),
        )
        if value is not None
    }
    if data.page_count is not None:
        fields["page_count"] = max(company.page_count, data.page_count)

    if company.page_status.get("status") == PageStatus.REGISTERING.value:
        fields["page_status"] = _with_status(company.page_status, PageStatus.IN_PROGRESS)

    if not fields:
        return company

    company = await repository.update(db, company, **fields)
    logger.info(f"Company {company.id} saved ({', '.join(fields)}) by agent {user.id}")
    return company


async def _send_registration_email(company: Company, user: CurrentUser) -> None:
    contact = company.primary_contact or {}
    to_email = contact.get("email") or user.email
    first_name = contact.get("first_name") or user.name or "there"

    try:
        sent = await send_agent_registration_complete(
            to_email=to_email,
            first_name=first_name,
            ag_id=company.ag_id,
        )
        if not sent:
            logger.warning(f"Notification delivery failed: registration email for {company.ag_id}")
    except Exception as e:
        logger.error(
            f"Failed to send registration email for company {company.id}: {e}",
            exc_info=True,
        )
        # Don't fail the request - email is non-critical


async def submit_company(db: AsyncSession, user: CurrentUser, data: CompanySubmit) -> Company:
    """
    Submit the registration for admin review.

    The AG- identifier is allocated on the first submission only; a
    resubmission after rejection keeps it.

    Raises:
        CompanyNotFoundError: If no pages were saved yet
        RegistrationLockedError: If the registration was already approved
    """
    company = await get_my_company(db, user)
    _ensure_editable(company)

    company_id = company.id
    existing_ag_id = company.ag_id
    page_status = _with_status(company.page_status, PageStatus.PENDING)
    references = [reference.model_dump(mode="json") for reference in data.references]

    async def _submit(ag_id: str) -> Company:
        # Re-load: a rolled back attempt expires the instance
        current = await repository.get_by_id(db, company_id)
        return await repository.update(
            db,
            current,
            ag_id=ag_id,
            references=references,
            page_count=REGISTRATION_PAGE_COUNT,
            page_status=page_status,
        )

    if existing_ag_id is None:
        company = await persist_with_identifier(
            db, IdentifierCategory.AGENT, _submit, constraint=AG_ID_CONSTRAINT
        )
    else:
        company = await _submit(existing_ag_id)

    logger.info(f"Company {company.id} submitted for review as {company.ag_id}")

    await _send_registration_email(company, user)
    return company


# ============================================
# Admin operations
# ============================================


async def admin_list_companies(
    db: AsyncSession,
    *,
    page_status: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> dict:
    """List agent companies for the admin dashboard."""
    logger.info(
        f"Admin listing companies: page_status={page_status}, search={search}, "
        f"skip={skip}, limit={limit}"
    )

    limit = min(max(1, limit), 100)
    skip = max(0, skip)

    companies, total = await repository.list_companies(
        db, page_status=page_status, search=search, skip=skip, limit=limit
    )
    return {"companies": companies, "total": total, "skip": skip, "limit": limit}


async def admin_transition_page_status(
    db: AsyncSession,
    admin: CurrentUser,
    company_id: UUID,
    status: str,
    message: str | None = None,
) -> Company:
    """Approve, reject or otherwise move a company's pageStatus."""
    company = await transition(
        db, RecordKind.COMPANY, company_id, PAGE_STATUS.name, status, message
    )
    logger.info(
        f"AUDIT: Admin {admin.id} set pageStatus of company {company.ag_id or company_id} "
        f"to '{status}'"
    )
    return company
