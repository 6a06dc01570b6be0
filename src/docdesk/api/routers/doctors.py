"""
Doctor roster endpoints.

Every write goes through ``DoctorRepository`` so the owning specialty's
``doctor_count`` moves with the doctor record.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ...application.services.doctor_repository import DoctorRepository
from ...application.services.roster_stats import ALL, filter_doctors
from ..deps import get_doctor_repository
from ..errors import ValidationError
from ..schemas.common import ApiResponse, CreatedResponse
from ..schemas.doctor import CreateDoctorRequest, DoctorResponse, UpdateDoctorRequest
from ..utils.responses import ok

router = APIRouter(prefix="/doctors", tags=["doctors"])


@router.get(
    "",
    response_model=ApiResponse[List[DoctorResponse]],
    summary="List doctors",
    description=(
        "Returns every doctor record. `search` matches name, email or specialty "
        "(case-insensitive substring); `specialty` and `status` are exact filters "
        "where `all` disables the filter."
    ),
)
async def list_doctors(
    request: Request,
    search: str = Query("", description="Case-insensitive substring"),
    specialty: Optional[str] = Query(ALL, description="Exact specialty name or 'all'"),
    status_filter: Optional[str] = Query(ALL, alias="status", description="'active', 'suspended' or 'all'"),
    doctors: DoctorRepository = Depends(get_doctor_repository),
):
    records = await doctors.list_all()
    matched = filter_doctors(records, search=search, specialty=specialty, status=status_filter)
    return ok(
        request,
        data=[DoctorResponse.from_entity(d) for d in matched],
        message=f"{len(matched)} doctors",
    )


@router.get("/{doctor_id}", response_model=ApiResponse[DoctorResponse])
async def get_doctor(
    request: Request,
    doctor_id: str,
    doctors: DoctorRepository = Depends(get_doctor_repository),
):
    doctor = await doctors.get(doctor_id)
    return ok(request, data=DoctorResponse.from_entity(doctor), message="Doctor loaded")


@router.post(
    "",
    response_model=ApiResponse[CreatedResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a doctor",
    description="Creates the doctor record, then increments (or creates) its specialty.",
)
async def create_doctor(
    request: Request,
    payload: CreateDoctorRequest,
    doctors: DoctorRepository = Depends(get_doctor_repository),
):
    doctor_id = await doctors.add(payload.model_dump(exclude_none=True))
    return ok(request, data=CreatedResponse(id=doctor_id), message="Doctor created")


@router.patch(
    "/{doctor_id}",
    response_model=ApiResponse[DoctorResponse],
    summary="Update a doctor",
    description=(
        "Applies only the supplied fields. Changing `specialty` decrements the old "
        "specialty and increments the new one before the doctor record is written."
    ),
)
async def update_doctor(
    request: Request,
    doctor_id: str,
    payload: UpdateDoctorRequest,
    doctors: DoctorRepository = Depends(get_doctor_repository),
):
    fields = payload.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No fields to update", {"doctor_id": doctor_id})
    await doctors.update(doctor_id, fields)
    doctor = await doctors.get(doctor_id)
    return ok(request, data=DoctorResponse.from_entity(doctor), message="Doctor updated")


@router.delete("/{doctor_id}", response_model=ApiResponse[dict])
async def delete_doctor(
    request: Request,
    doctor_id: str,
    doctors: DoctorRepository = Depends(get_doctor_repository),
):
    await doctors.delete(doctor_id)
    return ok(request, data={"id": doctor_id}, message="Doctor deleted")
