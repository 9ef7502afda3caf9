"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Callable, Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import register_exception_handlers
from src.api.health import router as health_router
from src.api.registrations import router as registrations_router
from src.config import settings
from src.registrations.service import RegistrationService
from src.repositories.base import RegistrationStore
from src.repositories.factory import build_store

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        *(
            [structlog.dev.ConsoleRenderer()] if settings.environment == "development"
            else [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        ),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


def create_app(
    store: Optional[RegistrationStore] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """Build the API.

    Args:
        store: Registration store to use; defaults to the configured backend
        clock: Time source for the service (tests pass a fake one)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the store before serving, close it on shutdown."""
        registration_store = store or build_store(settings)
        logger.info(
            "app_starting",
            environment=settings.environment,
            store_backend=registration_store.name,
        )
        # Missing credentials or an unreachable store abort startup
        await registration_store.open()

        app.state.store = registration_store
        app.state.registrations = RegistrationService(
            registration_store,
            clock=clock,
            dedup_window=timedelta(hours=settings.dedup_window_hours),
        )
        yield
        logger.info("app_shutting_down")
        await registration_store.close()

    app = FastAPI(
        title="Meduhub API",
        description="Lead registration intake and admin listing",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(registrations_router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("src.main:app", host=settings.host, port=settings.port)
