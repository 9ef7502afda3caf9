"""Store interface shared by the registration backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from src.schemas.registration import NewRegistration, RegistrationRecord

DEDUP_FIELDS = ("phone", "email")


class RegistrationStore(ABC):
    """Persistence for registrations.

    Implementations own their client connection: ``open()`` is called once
    at startup before any other method, ``close()`` on shutdown.
    Connection failures must be raised as ``StoreUnavailable``.
    """

    name: str = "base"

    async def open(self) -> None:
        """Acquire the underlying client."""

    async def close(self) -> None:
        """Release the underlying client."""

    @abstractmethod
    async def create(self, registration: NewRegistration) -> RegistrationRecord:
        """Persist a registration and return it with its generated id."""

    @abstractmethod
    async def exists_since(self, field: str, value: str, since: datetime) -> bool:
        """Whether any registration has ``field == value`` and was created at or after ``since``."""

    @abstractmethod
    async def get(self, registration_id: str) -> Optional[RegistrationRecord]:
        """Fetch one registration, or None if the id is unknown."""

    @abstractmethod
    async def update(
        self, registration_id: str, changes: dict[str, Any]
    ) -> Optional[RegistrationRecord]:
        """Apply a partial update and return the new state, or None if the id is unknown."""

    @abstractmethod
    async def list(
        self,
        status: Optional[str] = None,
        inquiry_type: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[RegistrationRecord], int]:
        """Return one page of registrations, newest first, and the filtered total."""


def check_dedup_field(field: str) -> None:
    if field not in DEDUP_FIELDS:
        raise ValueError(f"Unsupported dedup field: {field}")
