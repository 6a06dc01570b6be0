"""
Specialty administration endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Request, status

from ...application.services.count_reconciler import CountReconciler
from ...application.services.roster_stats import filter_specialties
from ...application.services.specialty_directory import SpecialtyDirectory
from ..deps import get_count_reconciler, get_specialty_directory
from ..errors import ValidationError
from ..schemas.common import ApiResponse, CreatedResponse
from ..schemas.specialty import (
    CountCorrectionResponse,
    CreateSpecialtyRequest,
    ReconcileReportResponse,
    SpecialtyResponse,
    UpdateSpecialtyRequest,
)
from ..utils.responses import ok

router = APIRouter(prefix="/specialties", tags=["specialties"])


@router.get(
    "",
    response_model=ApiResponse[List[SpecialtyResponse]],
    summary="List specialties",
    description="`search` matches name or description (case-insensitive substring).",
)
async def list_specialties(
    request: Request,
    search: str = Query("", description="Case-insensitive substring"),
    specialties: SpecialtyDirectory = Depends(get_specialty_directory),
):
    records = filter_specialties(await specialties.list_all(), search=search)
    return ok(
        request,
        data=[SpecialtyResponse.from_entity(s) for s in records],
        message=f"{len(records)} specialties",
    )


@router.post(
    "",
    response_model=ApiResponse[CreatedResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a specialty",
    description="The new specialty always starts with a doctor count of 0.",
)
async def create_specialty(
    request: Request,
    payload: CreateSpecialtyRequest,
    specialties: SpecialtyDirectory = Depends(get_specialty_directory),
):
    specialty_id = await specialties.add(payload.model_dump())
    return ok(request, data=CreatedResponse(id=specialty_id), message="Specialty created")


@router.post(
    "/reconcile",
    response_model=ApiResponse[ReconcileReportResponse],
    summary="Recount doctors per specialty",
    description=(
        "Recomputes each specialty's doctor count from the doctor records and "
        "writes corrections. With `dry_run=true` nothing is written."
    ),
)
async def reconcile_counts(
    request: Request,
    dry_run: bool = Query(False, description="Report drift without writing"),
    reconciler: CountReconciler = Depends(get_count_reconciler),
):
    report = await reconciler.reconcile(dry_run=dry_run)
    data = ReconcileReportResponse(
        checked=report.checked,
        dry_run=report.dry_run,
        corrections=[
            CountCorrectionResponse(
                specialty_id=c.specialty_id,
                name=c.name,
                stored_count=c.stored_count,
                actual_count=c.actual_count,
            )
            for c in report.corrections
        ],
        orphaned_names=report.orphaned_names,
        duplicate_names=report.duplicate_names,
    )
    return ok(request, data=data, message=f"{len(report.corrections)} corrections")


@router.patch("/{specialty_id}", response_model=ApiResponse[SpecialtyResponse])
async def update_specialty(
    request: Request,
    specialty_id: str,
    payload: UpdateSpecialtyRequest,
    specialties: SpecialtyDirectory = Depends(get_specialty_directory),
):
    fields = payload.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No fields to update", {"specialty_id": specialty_id})
    await specialties.update(specialty_id, fields)
    specialty = await specialties.get(specialty_id)
    return ok(request, data=SpecialtyResponse.from_entity(specialty), message="Specialty updated")


@router.delete("/{specialty_id}", response_model=ApiResponse[dict])
async def delete_specialty(
    request: Request,
    specialty_id: str,
    specialties: SpecialtyDirectory = Depends(get_specialty_directory),
):
    await specialties.remove(specialty_id)
    return ok(request, data={"id": specialty_id}, message="Specialty deleted")
