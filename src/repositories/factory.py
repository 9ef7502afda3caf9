"""Select the registration store backend from settings."""

from src.config import Settings
from src.repositories.base import RegistrationStore


def build_store(settings: Settings) -> RegistrationStore:
    """Create (but do not open) the configured store."""
    backend = settings.store_backend.lower()

    if backend == "firestore":
        from src.repositories.firestore import FirestoreRegistrationStore

        return FirestoreRegistrationStore(settings)

    if backend == "sql":
        from src.repositories.sql import SqlRegistrationStore

        return SqlRegistrationStore(settings.database_url)

    raise ValueError(f"Unknown store backend: {settings.store_backend!r}")
