"""Doctor domain entity and its location value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class DoctorStatus(str, Enum):
    """Roster status of a doctor."""

    ACTIVE = "active"
    SUSPENDED = "suspended"


def coerce_number(value: Any, fallback: float = 0) -> float:
    """Return value when it is a real number, otherwise the fallback."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    return value


@dataclass
class Coordinates:
    lat: float = 0
    lng: float = 0

    @classmethod
    def from_raw(cls, raw: Any) -> "Coordinates":
        raw = raw if isinstance(raw, dict) else {}
        return cls(lat=coerce_number(raw.get("lat")), lng=coerce_number(raw.get("lng")))

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass
class Location:
    address: str = ""
    coordinates: Coordinates = field(default_factory=Coordinates)

    @classmethod
    def from_raw(cls, raw: Any) -> "Location":
        """Build a location from a stored (possibly partial) mapping."""
        raw = raw if isinstance(raw, dict) else {}
        return cls(
            address=raw.get("address") or "",
            coordinates=Coordinates.from_raw(raw.get("coordinates")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"address": self.address, "coordinates": self.coordinates.to_dict()}


@dataclass
class Doctor:
    """Doctor domain entity.

    ``specialty`` is the specialty *name*, not a reference by id; count
    bookkeeping on the specialty side matches it case-insensitively.
    """

    id: str
    name: str
    email: str = ""
    phone: str = ""
    specialty: str = ""
    status: DoctorStatus = DoctorStatus.ACTIVE
    rating: float = 0
    image: str = ""
    joined_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    location: Location = field(default_factory=Location)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == DoctorStatus.ACTIVE
