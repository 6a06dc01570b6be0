"""
Store collection names and shared defaults.
"""

# Collection names are part of the stored data contract; "specialty" is
# singular in existing deployments and must stay that way.
DOCTORS_COLLECTION = "doctors"
SPECIALTY_COLLECTION = "specialty"

DEFAULT_SPECIALTY_NAME = "New Specialty"
UNKNOWN_DOCTOR_NAME = "Unknown"

DASHBOARD_REGISTRATION_MONTHS = 6
DASHBOARD_TOP_SPECIALTIES = 7
