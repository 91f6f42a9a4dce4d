"""
Identifier Allocator

Produces the next human-readable identifier in a category's daily sequence:
``{prefix}-{YYMMDD}{sequence:02d}``, e.g. ``AP-24092601``.

Sequences are drawn from an atomic per-(category, day) counter. On the first
allocation of a day the counter is seeded from the greatest identifier
already stored under that day's prefix, so pre-existing records are never
re-issued. The two-digit field is never widened: the 100th allocation of a
day is rejected with ExhaustedSequenceError.
"""

import logging
import re
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, tzinfo
from typing import TypeVar
from zoneinfo import ZoneInfo

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.modules.identifiers import repository
from app.modules.identifiers.models import IDENTIFIER_PREFIXES, IdentifierCategory
from app.modules.shared.errors import ServiceError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEQUENCE_WIDTH = 2
MAX_SEQUENCE = 10**SEQUENCE_WIDTH - 1
IDENTIFIER_PATTERN = re.compile(r"^(AP|AG|TK)-\d{6}\d{2}$")


class UnknownCategoryError(ValidationError):
    """Raised when an identifier category is not recognised."""

    def __init__(self, category: object):
        valid = ", ".join(c.value for c in IdentifierCategory)
        super().__init__(
            message=f"Unknown identifier category '{category}'. Valid categories: {valid}",
            error_code="UNKNOWN_CATEGORY",
        )


class ExhaustedSequenceError(ServiceError):
    """Raised when a category has used every sequence number for the day."""

    def __init__(self, category: IdentifierCategory, date_stamp: str):
        self.category = category
        self.date_stamp = date_stamp
        super().__init__(
            message=(
                f"All {MAX_SEQUENCE} {category.value} identifiers for {date_stamp} "
                "have been issued. Please try again tomorrow."
            ),
            error_code="SEQUENCE_EXHAUSTED",
            status_code=409,
        )


class DuplicateIdentifierError(ServiceError):
    """Raised when every retry collided with an identifier already stored."""

    def __init__(self, category: IdentifierCategory, attempts: int):
        self.category = category
        self.attempts = attempts
        super().__init__(
            message=(
                f"Could not assign a unique {category.value} identifier "
                f"after {attempts} attempts. Please retry."
            ),
            error_code="DUPLICATE_IDENTIFIER",
            status_code=409,
        )


def resolve_category(category: IdentifierCategory | str) -> IdentifierCategory:
    """Coerce a category value, rejecting anything outside the closed set."""
    try:
        return IdentifierCategory(category)
    except ValueError as e:
        raise UnknownCategoryError(category) from e


def _identifier_timezone() -> tzinfo:
    if settings.identifier_timezone.upper() == "UTC":
        return UTC
    return ZoneInfo(settings.identifier_timezone)


def date_stamp(now: datetime) -> str:
    """
    Format ``now`` as YYMMDD in the identifier time zone.

    Naive datetimes are taken to be UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(_identifier_timezone()).strftime("%y%m%d")


def base_identifier(category: IdentifierCategory | str, now: datetime) -> str:
    """Return the ``{prefix}-{YYMMDD}`` part shared by one day's identifiers."""
    category = resolve_category(category)
    return f"{IDENTIFIER_PREFIXES[category]}-{date_stamp(now)}"


def format_identifier(category: IdentifierCategory, stamp: str, sequence: int) -> str:
    """
    Build the full identifier.

    Raises:
        ExhaustedSequenceError: If sequence does not fit in two digits
    """
    if sequence > MAX_SEQUENCE:
        raise ExhaustedSequenceError(category, stamp)
    return f"{IDENTIFIER_PREFIXES[category]}-{stamp}{sequence:0{SEQUENCE_WIDTH}d}"


def parse_sequence(identifier: str) -> int:
    """Return the trailing sequence number of an identifier."""
    return int(identifier[-SEQUENCE_WIDTH:])


def is_valid_identifier(value: str) -> bool:
    """Check a value against the fixed-width identifier format."""
    return IDENTIFIER_PATTERN.fullmatch(value) is not None


async def allocate(
    db: AsyncSession,
    category: IdentifierCategory | str,
    now: datetime | None = None,
) -> str:
    """
    Allocate the next identifier for a category.

    Args:
        db: Database session
        category: application, agent or ticket
        now: Allocation time (defaults to the current time)

    Returns:
        Identifier such as ``TK-24092603``

    Raises:
        UnknownCategoryError: If category is not recognised
        ExhaustedSequenceError: If the day's sequence is used up
    """
    category = resolve_category(category)
    stamp = date_stamp(now or datetime.now(UTC))

    sequence = await repository.increment_counter(db, category, stamp)

    if sequence is None:
        # First allocation of the day for this category
        prefix = f"{IDENTIFIER_PREFIXES[category]}-{stamp}"
        latest = await repository.find_latest_by_prefix(db, category, prefix)
        seed = parse_sequence(latest) + 1 if latest else 1
        sequence = await repository.seed_or_increment_counter(db, category, stamp, seed)

    identifier = format_identifier(category, stamp, sequence)
    logger.info(f"Allocated {category.value} identifier {identifier}")
    return identifier


async def persist_with_identifier(
    db: AsyncSession,
    category: IdentifierCategory | str,
    create: Callable[[str], Awaitable[T]],
    *,
    constraint: str,
    now: datetime | None = None,
    max_attempts: int | None = None,
) -> T:
    """
    Allocate an identifier and persist a record with it, retrying on collision.

    ``create`` receives the identifier and must insert and commit the record.
    If the commit violates ``constraint`` (the identifier's unique constraint)
    the session is rolled back and a fresh identifier is allocated.

    Args:
        db: Database session
        category: Identifier category
        create: Coroutine function persisting the record
        constraint: Name of the unique constraint on the identifier column
        now: Allocation time (defaults to the current time)
        max_attempts: Override for settings.identifier_max_attempts

    Returns:
        Whatever ``create`` returns

    Raises:
        DuplicateIdentifierError: If every attempt collided
        IntegrityError: If the insert failed on any other constraint
    """
    category = resolve_category(category)
    attempts = max_attempts or settings.identifier_max_attempts
    last_error: IntegrityError | None = None

    for attempt in range(1, attempts + 1):
        identifier = await allocate(db, category, now)
        try:
            return await create(identifier)
        except IntegrityError as e:
            await db.rollback()
            if constraint not in str(e.orig):
                raise
            last_error = e
            logger.warning(
                f"Identifier {identifier} already stored "
                f"(attempt {attempt}/{attempts}), re-allocating"
            )

    logger.error(f"Giving up on {category.value} identifier after {attempts} attempts")
    raise DuplicateIdentifierError(category, attempts) from last_error
