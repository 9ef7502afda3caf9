"""SQL registration store — SQLAlchemy async ORM."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.models.base import Base
from src.models.registration import Registration
from src.registrations.errors import StoreUnavailable
from src.repositories.base import RegistrationStore, check_dedup_field
from src.schemas.registration import NewRegistration, RegistrationRecord

logger = structlog.get_logger()


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error("store_unavailable", backend="sql", operation=operation, error=str(e))
        raise StoreUnavailable() from e


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is written in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_record(row: Registration) -> RegistrationRecord:
    return RegistrationRecord(
        id=row.id,
        name=row.name,
        phone=row.phone,
        email=row.email,
        state=row.state,
        city=row.city,
        inquiry_type=row.inquiry_type,
        created_at=_as_utc(row.created_at),
        status=row.status,
        notes=row.notes or "",
    )


class SqlRegistrationStore(RegistrationStore):
    """Stores registrations in a relational database."""

    name = "sql"

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._sessions: Optional[async_sessionmaker[AsyncSession]] = None

    async def open(self) -> None:
        self._engine = create_async_engine(self.database_url, echo=self.echo)
        self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)

        with _translate_errors("open"):
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        logger.info("store_opened", backend=self.name)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessions = None
        logger.info("store_closed", backend=self.name)

    def _session(self) -> AsyncSession:
        if self._sessions is None:
            raise RuntimeError("SqlRegistrationStore used before open()")
        return self._sessions()

    async def create(self, registration: NewRegistration) -> RegistrationRecord:
        row = Registration(
            name=registration.name,
            phone=registration.phone,
            email=registration.email,
            state=registration.state,
            city=registration.city,
            inquiry_type=registration.inquiry_type.value,
            created_at=registration.created_at,
            status=registration.status.value,
            notes=registration.notes,
        )
        with _translate_errors("create"):
            async with self._session() as db:
                db.add(row)
                await db.commit()
        return _to_record(row)

    async def exists_since(self, field: str, value: str, since: datetime) -> bool:
        check_dedup_field(field)
        stmt = (
            select(Registration.id)
            .where(getattr(Registration, field) == value)
            .where(Registration.created_at >= since)
            .limit(1)
        )
        with _translate_errors("exists_since"):
            async with self._session() as db:
                result = await db.execute(stmt)
                return result.first() is not None

    async def get(self, registration_id: str) -> Optional[RegistrationRecord]:
        with _translate_errors("get"):
            async with self._session() as db:
                row = await db.get(Registration, registration_id)
        return _to_record(row) if row else None

    async def update(
        self, registration_id: str, changes: dict[str, Any]
    ) -> Optional[RegistrationRecord]:
        with _translate_errors("update"):
            async with self._session() as db:
                row = await db.get(Registration, registration_id)
                if row is None:
                    return None
                for key, value in changes.items():
                    setattr(row, key, value)
                await db.commit()
        return _to_record(row)

    async def list(
        self,
        status: Optional[str] = None,
        inquiry_type: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[RegistrationRecord], int]:
        stmt = select(Registration)
        if status:
            stmt = stmt.where(Registration.status == status)
        if inquiry_type:
            stmt = stmt.where(Registration.inquiry_type == inquiry_type)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        page_stmt = (
            stmt.order_by(Registration.created_at.desc()).offset(offset).limit(limit)
        )

        with _translate_errors("list"):
            async with self._session() as db:
                total = (await db.execute(count_stmt)).scalar_one()
                rows = (await db.execute(page_stmt)).scalars().all()

        return [_to_record(row) for row in rows], total
