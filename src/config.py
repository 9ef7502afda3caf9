"""Application configuration via environment variables."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Store
    store_backend: str = "firestore"  # firestore | sql
    database_url: str = "sqlite+aiosqlite:///./meduhub.db"
    registrations_collection: str = "registrations"

    # Firebase credentials, checked in this order
    firebase_service_account: Optional[str] = None  # inline JSON document
    firebase_project_id: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_private_key: Optional[str] = None
    firebase_credentials_file: str = "serviceAccountKey.json"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: list[str] = ["*"]

    # App
    log_level: str = "INFO"
    environment: str = "development"

    # Registrations
    dedup_window_hours: int = 24

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


settings = Settings()
