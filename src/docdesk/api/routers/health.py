"""
Health check endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ... import __version__
from ...adapters.db.mongo.client import ping
from ...core.config import get_settings
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("/", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        service=get_settings().app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Reports whether the document store is configured and reachable.
    """
    checks = {}
    connection = getattr(request.app.state, "connection", None)
    specialties = getattr(request.app.state, "specialties", None)

    if specialties is None or not specialties.is_available:
        checks["database"] = "not configured"
    elif connection is None:
        # Store injected directly (no motor client to ping)
        checks["database"] = "ok"
    elif await ping(connection):
        checks["database"] = "ok"
    else:
        checks["database"] = "unreachable"

    all_ok = all(v == "ok" for v in checks.values())
    body = ok(request, data={"ready": all_ok, "checks": checks}, message="READY" if all_ok else "NOT_READY")
    if not all_ok:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
