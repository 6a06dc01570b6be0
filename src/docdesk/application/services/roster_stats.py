"""
Dashboard statistics and list filters over the doctor roster.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ...core.constants import DASHBOARD_REGISTRATION_MONTHS, DASHBOARD_TOP_SPECIALTIES
from ...domain.entities.doctor import Doctor
from ...domain.entities.specialty import Specialty
from .doctor_repository import DoctorRepository
from .specialty_directory import SpecialtyDirectory

ALL = "all"


@dataclass
class RosterSummary:
    total_doctors: int
    active_doctors: int
    specialties: int
    average_rating: float


@dataclass
class MonthlyRegistrations:
    month_key: str  # YYYY-MM
    label: str  # short month name
    count: int


def _month_back(year: int, month: int, offset: int):
    index = year * 12 + (month - 1) - offset
    return index // 12, index % 12 + 1


def filter_doctors(
    doctors: Iterable[Doctor],
    search: str = "",
    specialty: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Doctor]:
    """Substring search over name, email and specialty; exact specialty/status filters."""
    term = (search or "").lower()
    result = []
    for doctor in doctors:
        matches_search = (
            term in doctor.name.lower()
            or term in doctor.email.lower()
            or term in doctor.specialty.lower()
        )
        matches_specialty = specialty in (None, ALL) or doctor.specialty == specialty
        matches_status = status in (None, ALL) or doctor.status.value == status
        if matches_search and matches_specialty and matches_status:
            result.append(doctor)
    return result


def filter_specialties(specialties: Iterable[Specialty], search: str = "") -> List[Specialty]:
    term = (search or "").lower()
    return [
        s for s in specialties
        if term in s.name.lower() or term in s.description.lower()
    ]


class RosterStats:
    """Aggregates what the dashboard shows; counts come straight from the specialty documents."""

    def __init__(self, doctors: DoctorRepository, specialties: SpecialtyDirectory):
        self._doctors = doctors
        self._specialties = specialties

    async def summary(self) -> RosterSummary:
        doctors = await self._doctors.list_all()
        specialties = await self._specialties.list_all()
        active = sum(1 for d in doctors if d.is_active)
        average = sum(d.rating for d in doctors) / len(doctors) if doctors else 0
        return RosterSummary(
            total_doctors=len(doctors),
            active_doctors=active,
            specialties=len(specialties),
            average_rating=round(average, 1),
        )

    async def registrations_by_month(
        self, months: int = DASHBOARD_REGISTRATION_MONTHS, now: Optional[datetime] = None
    ) -> List[MonthlyRegistrations]:
        """Doctors joined per calendar month for the last ``months`` months, oldest first."""
        now = now or datetime.now(timezone.utc)
        doctors = await self._doctors.list_all()
        joined = Counter(d.joined_date.strftime("%Y-%m") for d in doctors)

        result = []
        for offset in reversed(range(months)):
            year, month = _month_back(now.year, now.month, offset)
            first_day = datetime(year, month, 1)
            key = first_day.strftime("%Y-%m")
            result.append(
                MonthlyRegistrations(month_key=key, label=first_day.strftime("%b"), count=joined[key])
            )
        return result

    async def top_specialties(self, limit: int = DASHBOARD_TOP_SPECIALTIES) -> List[Specialty]:
        specialties = await self._specialties.list_all()
        return sorted(specialties, key=lambda s: s.doctor_count, reverse=True)[:limit]
