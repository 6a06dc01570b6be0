from typing import List, Optional

from pydantic import BaseModel, Field

from ...domain.entities.specialty import Specialty


class CreateSpecialtyRequest(BaseModel):
    # doctor_count is not accepted here; new specialties always start at 0
    name: str = Field("", max_length=120, description="Specialty name")
    description: str = Field("", max_length=1000, description="Free-text description")


class UpdateSpecialtyRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=120)
    description: Optional[str] = Field(None, max_length=1000)
    doctor_count: Optional[int] = Field(None, ge=0, description="Manual count correction")


class SpecialtyResponse(BaseModel):
    id: str
    name: str
    description: str
    doctor_count: int

    @classmethod
    def from_entity(cls, specialty: Specialty) -> "SpecialtyResponse":
        return cls(
            id=specialty.id,
            name=specialty.name,
            description=specialty.description,
            doctor_count=specialty.doctor_count,
        )


class CountCorrectionResponse(BaseModel):
    specialty_id: str
    name: str
    stored_count: int
    actual_count: int


class ReconcileReportResponse(BaseModel):
    checked: int
    dry_run: bool
    corrections: List[CountCorrectionResponse] = Field(default_factory=list)
    orphaned_names: List[str] = Field(default_factory=list)
    duplicate_names: List[str] = Field(default_factory=list)
