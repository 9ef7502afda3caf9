"""Registration domain errors, each mapped to an HTTP status code."""

from typing import Optional


class RegistrationError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Something went wrong. Please try again later."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(RegistrationError):
    status_code = 400
    default_message = "All fields are required"


class DuplicateSubmission(RegistrationError):
    status_code = 409
    default_message = (
        "You have already submitted a registration recently. "
        "Our team will contact you soon!"
    )


class InvalidStatus(RegistrationError):
    status_code = 400
    default_message = "Invalid status value"


class NotFound(RegistrationError):
    status_code = 404
    default_message = "Registration not found"


class StoreUnavailable(RegistrationError):
    status_code = 503
    default_message = "Service temporarily unavailable. Please try again later."


class Unexpected(RegistrationError):
    """Wraps an unhandled failure; the cause is only shown in development."""

    status_code = 500
