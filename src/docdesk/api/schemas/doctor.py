"""
Doctor request/response schemas.
"""

from dataclasses import asdict
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from ...domain.entities.doctor import Doctor, DoctorStatus


class CoordinatesSchema(BaseModel):
    lat: Optional[float] = Field(None, ge=-90, le=90, description="Latitude")
    lng: Optional[float] = Field(None, ge=-180, le=180, description="Longitude")


class LocationSchema(BaseModel):
    address: Optional[str] = Field(None, max_length=300, description="Street address or city")
    coordinates: Optional[CoordinatesSchema] = None


class CreateDoctorRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120, description="Doctor display name")
    email: str = Field("", max_length=254, description="Doctor email address")
    phone: str = Field("", max_length=32, description="Contact phone number")
    specialty: str = Field("", max_length=120, description="Specialty name")
    status: DoctorStatus = Field(DoctorStatus.ACTIVE, description="Roster status")
    image: str = Field("", description="Profile image reference")
    location: Optional[LocationSchema] = None

    @field_validator("name", "specialty")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class UpdateDoctorRequest(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[str] = Field(None, max_length=254)
    phone: Optional[str] = Field(None, max_length=32)
    specialty: Optional[str] = Field(None, max_length=120)
    status: Optional[DoctorStatus] = None
    image: Optional[str] = None
    location: Optional[LocationSchema] = None

    @field_validator("specialty")
    @classmethod
    def strip_specialty(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    # null clears specialty; every other field must carry a value
    @field_validator("name", "email", "phone", "image", "status", "location")
    @classmethod
    def not_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class CoordinatesResponse(BaseModel):
    lat: float
    lng: float


class LocationResponse(BaseModel):
    address: str
    coordinates: CoordinatesResponse


class DoctorResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    specialty: str
    status: DoctorStatus
    rating: float
    image: str
    joined_date: datetime
    location: LocationResponse

    @classmethod
    def from_entity(cls, doctor: Doctor) -> "DoctorResponse":
        return cls.model_validate(asdict(doctor))
