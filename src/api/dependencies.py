"""FastAPI dependencies for the registration routes."""

from fastapi import Request

from src.registrations.service import RegistrationService


async def get_registration_service(request: Request) -> RegistrationService:
    """Service bound to the store opened in the app lifespan."""
    return request.app.state.registrations
