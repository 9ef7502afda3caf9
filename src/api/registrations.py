"""Registrations API — public lead form and admin listing/updates."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_registration_service
from src.registrations.errors import RegistrationError, Unexpected
from src.registrations.service import DEFAULT_PAGE_SIZE, RegistrationService
from src.schemas.registration import RegistrationCreate, RegistrationUpdate

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["registrations"])


@router.post("/register", status_code=201)
async def register(
    data: RegistrationCreate,
    service: RegistrationService = Depends(get_registration_service),
) -> dict:
    """Submit a registration or inquiry from the lead form.

    Returns:
        {"success": true, "message": str, "data": {"id", "name", "email"}}
    """
    try:
        record = await service.submit(data)
    except RegistrationError:
        raise
    except Exception as e:
        logger.exception("registration_failed", error=str(e))
        raise Unexpected("Something went wrong. Please try again later.") from e

    return {
        "success": True,
        "message": "Registration submitted successfully!",
        "data": {
            "id": record.id,
            "name": record.name,
            "email": record.email,
        },
    }


@router.get("/registrations")
async def list_registrations(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    status: Optional[str] = Query(None, description="Filter by status"),
    inquiry_type: Optional[str] = Query(None, alias="inquiryType"),
    service: RegistrationService = Depends(get_registration_service),
) -> dict:
    """List registrations, newest first.

    Args:
        page: 1-based page number
        limit: Page size
        status: Optional status filter (new, contacted, enrolled, closed)
        inquiry_type: Optional inquiry type filter (register, inquiry)
        service: Registration service

    Returns:
        {"success": true, "data": [...], "pagination": {page, limit, total, pages}}
    """
    try:
        result = await service.list(
            status=status, inquiry_type=inquiry_type, page=page, page_size=limit
        )
    except RegistrationError:
        raise
    except Exception as e:
        logger.exception("registrations_fetch_failed", error=str(e))
        raise Unexpected("Failed to fetch registrations") from e

    return {
        "success": True,
        "data": [r.model_dump(mode="json", by_alias=True) for r in result.items],
        "pagination": result.pagination.model_dump(),
    }


@router.patch("/registrations/{registration_id}")
async def update_registration(
    registration_id: str,
    data: Optional[RegistrationUpdate] = None,
    service: RegistrationService = Depends(get_registration_service),
) -> dict:
    """Update status and/or notes of a registration."""
    data = data or RegistrationUpdate()
    try:
        record = await service.update_status(
            registration_id, status=data.status, notes=data.notes
        )
    except RegistrationError:
        raise
    except Exception as e:
        logger.exception(
            "registration_update_failed", registration_id=registration_id, error=str(e)
        )
        raise Unexpected("Failed to update registration") from e

    return {"success": True, "data": record.model_dump(mode="json", by_alias=True)}
