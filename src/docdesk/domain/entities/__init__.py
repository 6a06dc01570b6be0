"""
Domain entities package.
"""

from .doctor import Coordinates, Doctor, DoctorStatus, Location
from .specialty import Specialty

__all__ = [
    "Doctor",
    "DoctorStatus",
    "Location",
    "Coordinates",
    "Specialty",
]
