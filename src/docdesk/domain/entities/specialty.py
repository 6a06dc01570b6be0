"""Specialty domain entity."""

from __future__ import annotations

from dataclasses import dataclass

UNKNOWN_SPECIALTY_NAME = "Unknown Specialty"


@dataclass
class Specialty:
    """Specialty domain entity.

    ``doctor_count`` is denormalized: it tracks how many doctors currently
    name this specialty and is only moved by the specialty directory.
    """

    id: str
    name: str
    description: str = ""
    doctor_count: int = 0
