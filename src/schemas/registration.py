"""Registration schemas for the store and API."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RegistrationStatus(str, Enum):
    """Admin-managed lifecycle of a registration."""

    NEW = "new"
    CONTACTED = "contacted"
    ENROLLED = "enrolled"
    CLOSED = "closed"


class InquiryType(str, Enum):
    REGISTER = "register"
    INQUIRY = "inquiry"


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegistrationCreate(CamelModel):
    """Candidate submitted from the lead form.

    Every field is optional here so that missing values reach the
    service's own checks instead of failing request parsing.
    """

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    inquiry_type: Optional[str] = None


class RegistrationUpdate(CamelModel):
    status: Optional[str] = None
    notes: Optional[str] = None


class NewRegistration(CamelModel):
    """Normalized registration ready to be persisted."""

    name: str
    phone: str
    email: str
    state: str
    city: str
    inquiry_type: InquiryType = InquiryType.REGISTER
    created_at: datetime
    status: RegistrationStatus = RegistrationStatus.NEW
    notes: str = ""


class RegistrationRecord(NewRegistration):
    """Stored registration with its store-assigned id."""

    id: str


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class RegistrationPage(BaseModel):
    items: list[RegistrationRecord]
    pagination: Pagination
