"""Map errors to the JSON failure body ``{"success": false, "message": ...}``."""

from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.config import settings
from src.registrations.errors import RegistrationError, Unexpected

logger = structlog.get_logger()


def error_response(
    status_code: int, message: str, error: Optional[str] = None
) -> JSONResponse:
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=body)


async def registration_error_handler(
    request: Request, exc: RegistrationError
) -> JSONResponse:
    error = None
    if isinstance(exc, Unexpected) and settings.is_development and exc.__cause__:
        error = str(exc.__cause__)
    return error_response(exc.status_code, exc.message, error)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))

    logger.info("request_rejected", path=request.url.path, errors=problems)
    return error_response(400, ", ".join(problems) or "Invalid request")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, error=str(exc))
    return error_response(
        500,
        Unexpected.default_message,
        str(exc) if settings.is_development else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RegistrationError, registration_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
