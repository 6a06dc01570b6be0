from pydantic import BaseModel, Field


class SummaryResponse(BaseModel):
    total_doctors: int = Field(..., description="Number of doctor records")
    active_doctors: int = Field(..., description="Doctors with status 'active'")
    specialties: int = Field(..., description="Number of specialty documents")
    average_rating: float = Field(..., description="Mean rating, one decimal place")


class MonthlyRegistrationsResponse(BaseModel):
    month_key: str = Field(..., description="Calendar month as YYYY-MM")
    label: str = Field(..., description="Short month name")
    count: int


class TopSpecialtyResponse(BaseModel):
    id: str
    name: str
    doctor_count: int
