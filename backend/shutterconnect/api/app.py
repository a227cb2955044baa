"""
ShutterConnect API application.

`create_app()` wires middleware, exception handlers and routers; the
module-level `app` is what uvicorn serves:

    uvicorn shutterconnect.api.app:app
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from shutterconnect.api.middleware.error_handler import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from shutterconnect.api.middleware.request_logging import CorrelationIdMiddleware
from shutterconnect.api.routes import (
    auth,
    bookings,
    newsletter,
    notifications,
    photographer,
    photographers,
    users,
)
from shutterconnect.jobs import token_cleanup
from shutterconnect.jobs.scheduler import get_scheduler
from shutterconnect.lib.db import init_db
from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.settings import settings

logger = get_logger(__name__)

ROUTERS = (
    auth.router,
    users.router,
    photographers.router,
    photographer.router,
    bookings.router,
    notifications.router,
    newsletter.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create tables and start background jobs when enabled; stop jobs on shutdown."""
    logger.info(f"{settings.app_name} starting up", extra={"scheduler": settings.scheduler_enabled})

    if settings.create_tables_on_startup:
        init_db()

    scheduler = None
    if settings.scheduler_enabled:
        scheduler = get_scheduler()
        token_cleanup.register(scheduler)
        scheduler.start()

    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)
        logger.info(f"{settings.app_name} shutting down")


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        description=(
            "Photography marketplace APIs: accounts, photographer listings, "
            "packages, availability and bookings"
        ),
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(CorrelationIdMiddleware)

    application.add_exception_handler(AppException, app_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)

    for router in ROUTERS:
        application.include_router(router)

    @application.get("/health", tags=["health"])
    def health_check():
        return {"status": "ok"}

    return application


app = create_app()
