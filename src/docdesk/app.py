"""
FastAPI application factory and main app configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .adapters.db.mongo.client import MongoConnection, connect
from .api.errors import APIError
from .api.routers import dashboard, doctors, health, specialties
from .api.utils.responses import fail
from .application.ports.collection_store import StoreHandle
from .application.services.count_reconciler import CountReconciler
from .application.services.doctor_repository import DoctorRepository
from .application.services.roster_stats import RosterStats
from .application.services.specialty_directory import SpecialtyDirectory
from .core.config import Settings, get_settings
from .core.exceptions import DatabaseError, StoreUnavailableError
from .core.structured_logger import configure_logging
from .domain.errors import (
    DoctorNotFoundError,
    DomainError,
    InvalidDoctorDataError,
    SpecialtyNotFoundError,
)
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware

logger = logging.getLogger(__name__)


def wire_services(app: FastAPI, store: StoreHandle) -> None:
    """Build the service graph over one store handle and expose it on ``app.state``."""
    specialty_directory = SpecialtyDirectory(store)
    doctor_repository = DoctorRepository(store, specialty_directory)
    app.state.store = store
    app.state.specialties = specialty_directory
    app.state.doctors = doctor_repository
    app.state.stats = RosterStats(doctor_repository, specialty_directory)
    app.state.reconciler = CountReconciler(doctor_repository, specialty_directory)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Debug mode: {settings.debug}")

    connection: Optional[MongoConnection] = None
    if getattr(app.state, "store", None) is None:
        connection = connect(settings.database)
        app.state.connection = connection
        wire_services(app, connection.store)
        if app.state.specialties.is_available:
            logger.info("Database client ready")
        else:
            logger.warning("Running without a document store: reads return empty lists, writes fail")

    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.app_name}")
        if connection is not None:
            connection.close()


def _error_response(request: Request, status_code: int, error: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=fail(request, error, message, details).model_dump())


def create_app(settings: Optional[Settings] = None, store: Optional[StoreHandle] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    When ``store`` is given the services are wired to it immediately and the
    lifespan does not open a MongoDB connection.
    """
    settings = settings or get_settings()
    configure_logging(settings.logging)

    app = FastAPI(
        title=settings.app_name,
        description="Admin backend for a doctor roster and its medical specialties",
        version=settings.app_version,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        lifespan=lifespan,
    )

    if store is not None:
        wire_services(app, store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(PerformanceMiddleware)
    # Added last so it runs first and the id is set for everything below
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(doctors.router)
    app.include_router(specialties.router)
    app.include_router(dashboard.router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        if isinstance(exc, (DoctorNotFoundError, SpecialtyNotFoundError)):
            status_code = 404
        elif isinstance(exc, InvalidDoctorDataError):
            status_code = 422
        else:
            status_code = 400
        logger.warning(f"DomainError: {exc.error_code} {exc.message}")
        return _error_response(
            request, status_code, exc.error_code or "DOMAIN_ERROR", exc.message, exc.details
        )

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        logger.error(f"StoreUnavailableError: {exc.message}")
        return _error_response(request, 503, exc.error_code, exc.message, exc.details)

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError):
        logger.error(f"DatabaseError on {request.method} {request.url.path}: {exc.message}")
        return _error_response(request, 500, exc.error_code, exc.message, exc.details)

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"APIError: {exc.code} ({exc.http_status}) {exc.message} | request_id={req_id}")
        return _error_response(request, exc.http_status, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def pydantic_error_handler(request: Request, exc: RequestValidationError):
        error_details = exc.errors()
        logger.error(f"ValidationError on {request.method} {request.url.path}: {error_details}")

        error_messages = []
        for error in error_details:
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            msg = error.get("msg", "Validation error")
            error_messages.append(f"{loc}: {msg}")

        return _error_response(
            request,
            422,
            "INVALID_INPUT",
            f"Input validation failed: {'; '.join(error_messages)}",
            {"errors": [{"loc": list(e.get("loc", [])), "msg": e.get("msg")} for e in error_details]},
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        req_id = getattr(request.state, "request_id", None)
        logger.exception(f"Unhandled error: {type(exc).__name__} | request_id={req_id}")
        return _error_response(
            request,
            500,
            "INTERNAL_ERROR",
            "An unexpected error has occurred. Please try again later.",
        )

    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
            "docs": app.docs_url,
        }

    return app


# Create the app instance
app = create_app()
