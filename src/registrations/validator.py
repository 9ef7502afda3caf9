"""Field validation for lead form submissions."""

import re
from typing import Optional

from src.schemas.registration import InquiryType, RegistrationCreate

PHONE_RE = re.compile(r"[6-9]\d{9}", re.ASCII)
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

INQUIRY_TYPES = [t.value for t in InquiryType]


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def validate_registration(data: RegistrationCreate) -> list[str]:
    """Check a candidate and return human-readable errors.

    Every check runs, so the caller gets all problems at once.
    An empty list means the candidate is valid.
    """
    errors: list[str] = []

    if len(_clean(data.name)) < 2:
        errors.append("Name must be at least 2 characters")

    if not PHONE_RE.fullmatch(_clean(data.phone)):
        errors.append("Please enter a valid 10-digit Indian mobile number")

    if not EMAIL_RE.fullmatch(_clean(data.email)):
        errors.append("Please enter a valid email address")

    if not _clean(data.state):
        errors.append("State is required")

    if not _clean(data.city):
        errors.append("City is required")

    if data.inquiry_type and data.inquiry_type not in INQUIRY_TYPES:
        errors.append(f"Inquiry type must be one of: {', '.join(INQUIRY_TYPES)}")

    return errors
