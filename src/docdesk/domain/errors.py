"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class DoctorNotFoundError(DomainError):
    """Doctor not found."""

    def __init__(self, doctor_id: str) -> None:
        message = f"Doctor with ID '{doctor_id}' not found"
        super().__init__(message, "DOCTOR_NOT_FOUND", {"doctor_id": doctor_id})


class SpecialtyNotFoundError(DomainError):
    """Specialty not found."""

    def __init__(self, specialty_id: str) -> None:
        message = f"Specialty with ID '{specialty_id}' not found"
        super().__init__(message, "SPECIALTY_NOT_FOUND", {"specialty_id": specialty_id})


class InvalidDoctorDataError(DomainError):
    """Invalid doctor data."""

    def __init__(self, field: str, value: Any) -> None:
        message = f"Invalid doctor data. Field: {field}, Value: {value}"
        super().__init__(
            message, "INVALID_DOCTOR_DATA", {"field": field, "value": value}
        )
