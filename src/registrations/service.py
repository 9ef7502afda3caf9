"""Registration service — intake, dedup and admin updates."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import structlog

from src.registrations.errors import (
    DuplicateSubmission,
    InvalidStatus,
    NotFound,
    ValidationFailed,
)
from src.registrations.validator import validate_registration
from src.repositories.base import RegistrationStore
from src.schemas.registration import (
    InquiryType,
    NewRegistration,
    Pagination,
    RegistrationCreate,
    RegistrationPage,
    RegistrationRecord,
    RegistrationStatus,
)

logger = structlog.get_logger()

DEFAULT_DEDUP_WINDOW = timedelta(hours=24)
DEFAULT_PAGE_SIZE = 20

REQUIRED_FIELDS = ("name", "phone", "email", "state", "city")
VALID_STATUSES = {s.value for s in RegistrationStatus}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RegistrationService:
    """Orchestrates validation, duplicate checks and persistence."""

    def __init__(
        self,
        store: RegistrationStore,
        clock: Optional[Callable[[], datetime]] = None,
        dedup_window: timedelta = DEFAULT_DEDUP_WINDOW,
    ):
        self.store = store
        self.clock = clock or utcnow
        self.dedup_window = dedup_window

    async def submit(self, candidate: RegistrationCreate) -> RegistrationRecord:
        """Validate and store a new registration.

        The duplicate check is a plain read before the write; two identical
        submissions arriving together can both be stored.

        Raises:
            ValidationFailed: missing or malformed fields
            DuplicateSubmission: same phone or email seen inside the window
        """
        if not all(getattr(candidate, f) for f in REQUIRED_FIELDS):
            raise ValidationFailed("All fields are required")

        errors = validate_registration(candidate)
        if errors:
            raise ValidationFailed(", ".join(errors))

        phone = candidate.phone.strip()
        email = candidate.email.strip().lower()

        now = self.clock()
        window_start = now - self.dedup_window

        phone_taken = await self.store.exists_since("phone", phone, window_start)
        email_taken = await self.store.exists_since("email", email, window_start)
        if phone_taken or email_taken:
            logger.info(
                "registration_duplicate_rejected",
                phone_match=phone_taken,
                email_match=email_taken,
            )
            raise DuplicateSubmission()

        record = await self.store.create(
            NewRegistration(
                name=candidate.name.strip(),
                phone=phone,
                email=email,
                state=candidate.state.strip(),
                city=candidate.city.strip(),
                inquiry_type=candidate.inquiry_type or InquiryType.REGISTER,
                created_at=now,
            )
        )

        logger.info(
            "registration_created",
            registration_id=record.id,
            inquiry_type=record.inquiry_type.value,
            name=record.name,
            email=record.email,
        )
        return record

    async def list(
        self,
        status: Optional[str] = None,
        inquiry_type: Optional[str] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> RegistrationPage:
        """Return one page of registrations, newest first."""
        page = max(page, 1)
        page_size = max(page_size, 1)

        items, total = await self.store.list(
            status=status,
            inquiry_type=inquiry_type,
            offset=(page - 1) * page_size,
            limit=page_size,
        )

        return RegistrationPage(
            items=items,
            pagination=Pagination(
                page=page,
                limit=page_size,
                total=total,
                pages=math.ceil(total / page_size),
            ),
        )

    async def update_status(
        self,
        registration_id: str,
        status: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> RegistrationRecord:
        """Change status and/or notes; omitted (None) fields stay as they are.

        Raises:
            InvalidStatus: status is not one of the known values
            NotFound: no registration with this id
        """
        if status and status not in VALID_STATUSES:
            raise InvalidStatus()

        if await self.store.get(registration_id) is None:
            raise NotFound()

        changes = {}
        if status:
            changes["status"] = status
        if notes is not None:
            changes["notes"] = notes

        record = await self.store.update(registration_id, changes)
        if record is None:
            raise NotFound()

        logger.info(
            "registration_updated",
            registration_id=registration_id,
            fields=sorted(changes),
            status=record.status.value,
        )
        return record
