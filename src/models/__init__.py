"""SQLAlchemy ORM models."""

from src.models.base import Base
from src.models.registration import Registration

__all__ = [
    "Base",
    "Registration",
]
