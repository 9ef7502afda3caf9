"""Firestore registration store — managed NoSQL document database."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Optional

import structlog
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from src.config import Settings
from src.firebase import load_credentials
from src.registrations.errors import StoreUnavailable
from src.repositories.base import RegistrationStore, check_dedup_field
from src.schemas.registration import NewRegistration, RegistrationRecord

logger = structlog.get_logger()

_CONNECTIVITY_ERRORS = (
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
    google_exceptions.RetryError,
)


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except _CONNECTIVITY_ERRORS as e:
        logger.error(
            "store_unavailable", backend="firestore", operation=operation, error=str(e)
        )
        raise StoreUnavailable() from e


def snapshot_to_record(snapshot: Any) -> RegistrationRecord:
    """Convert a document snapshot; documents use camelCase keys."""
    data = snapshot.to_dict() or {}
    return RegistrationRecord.model_validate({**data, "id": snapshot.id})


class FirestoreRegistrationStore(RegistrationStore):
    """Stores registrations as documents in a Firestore collection."""

    name = "firestore"

    def __init__(
        self,
        settings: Settings,
        client: Optional[firestore.AsyncClient] = None,
    ):
        self.settings = settings
        self.collection_name = settings.registrations_collection
        self._client = client

    async def open(self) -> None:
        if self._client is None:
            credentials, project_id = load_credentials(self.settings)
            self._client = firestore.AsyncClient(
                project=project_id, credentials=credentials
            )
        logger.info(
            "store_opened", backend=self.name, collection=self.collection_name
        )

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
        logger.info("store_closed", backend=self.name)

    @property
    def _collection(self):
        if self._client is None:
            raise RuntimeError("FirestoreRegistrationStore used before open()")
        return self._client.collection(self.collection_name)

    def _document(self, registration_id: str):
        # Empty ids or ids containing "/" are not valid document paths
        if not registration_id or "/" in registration_id:
            return None
        return self._collection.document(registration_id)

    async def create(self, registration: NewRegistration) -> RegistrationRecord:
        data = registration.model_dump(mode="python", by_alias=True)
        data["inquiryType"] = registration.inquiry_type.value
        data["status"] = registration.status.value

        with _translate_errors("create"):
            _, doc_ref = await self._collection.add(data)

        return RegistrationRecord(id=doc_ref.id, **registration.model_dump())

    async def exists_since(self, field: str, value: str, since: datetime) -> bool:
        check_dedup_field(field)
        query = (
            self._collection.where(filter=FieldFilter(field, "==", value))
            .where(filter=FieldFilter("createdAt", ">=", since))
            .limit(1)
        )
        with _translate_errors("exists_since"):
            docs = await query.get()
        return len(docs) > 0

    async def get(self, registration_id: str) -> Optional[RegistrationRecord]:
        doc_ref = self._document(registration_id)
        if doc_ref is None:
            return None
        with _translate_errors("get"):
            snapshot = await doc_ref.get()
        if not snapshot.exists:
            return None
        return snapshot_to_record(snapshot)

    async def update(
        self, registration_id: str, changes: dict[str, Any]
    ) -> Optional[RegistrationRecord]:
        doc_ref = self._document(registration_id)
        if doc_ref is None:
            return None
        with _translate_errors("update"):
            snapshot = await doc_ref.get()
            if not snapshot.exists:
                return None
            if changes:
                await doc_ref.update(changes)
                snapshot = await doc_ref.get()
        return snapshot_to_record(snapshot)

    async def list(
        self,
        status: Optional[str] = None,
        inquiry_type: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[RegistrationRecord], int]:
        query = self._collection
        if status:
            query = query.where(filter=FieldFilter("status", "==", status))
        if inquiry_type:
            query = query.where(filter=FieldFilter("inquiryType", "==", inquiry_type))

        page_query = (
            query.order_by("createdAt", direction=firestore.Query.DESCENDING)
            .offset(offset)
            .limit(limit)
        )

        with _translate_errors("list"):
            count_result = await query.count(alias="total").get()
            docs = await page_query.get()

        total = int(count_result[0][0].value) if count_result else 0
        return [snapshot_to_record(doc) for doc in docs], total
