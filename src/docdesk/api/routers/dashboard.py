"""
Dashboard statistics endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Request

from ...application.services.roster_stats import RosterStats
from ...core.constants import DASHBOARD_REGISTRATION_MONTHS, DASHBOARD_TOP_SPECIALTIES
from ..deps import get_roster_stats
from ..schemas.common import ApiResponse
from ..schemas.dashboard import (
    MonthlyRegistrationsResponse,
    SummaryResponse,
    TopSpecialtyResponse,
)
from ..utils.responses import ok

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=ApiResponse[SummaryResponse])
async def dashboard_summary(request: Request, stats: RosterStats = Depends(get_roster_stats)):
    summary = await stats.summary()
    return ok(
        request,
        data=SummaryResponse(
            total_doctors=summary.total_doctors,
            active_doctors=summary.active_doctors,
            specialties=summary.specialties,
            average_rating=summary.average_rating,
        ),
        message="Dashboard summary",
    )


@router.get("/registrations", response_model=ApiResponse[List[MonthlyRegistrationsResponse]])
async def dashboard_registrations(
    request: Request,
    months: int = Query(DASHBOARD_REGISTRATION_MONTHS, ge=1, le=24),
    stats: RosterStats = Depends(get_roster_stats),
):
    buckets = await stats.registrations_by_month(months=months)
    return ok(
        request,
        data=[
            MonthlyRegistrationsResponse(month_key=b.month_key, label=b.label, count=b.count)
            for b in buckets
        ],
        message="Registrations by month",
    )


@router.get("/top-specialties", response_model=ApiResponse[List[TopSpecialtyResponse]])
async def dashboard_top_specialties(
    request: Request,
    limit: int = Query(DASHBOARD_TOP_SPECIALTIES, ge=1, le=50),
    stats: RosterStats = Depends(get_roster_stats),
):
    top = await stats.top_specialties(limit=limit)
    return ok(
        request,
        data=[TopSpecialtyResponse(id=s.id, name=s.name, doctor_count=s.doctor_count) for s in top],
        message="Top specialties",
    )
