"""
FastAPI dependencies.

Services are built once per application (see ``docdesk.app``) and kept on
``app.state``; these providers hand them to the routers.
"""

from fastapi import Request

from ..application.services.count_reconciler import CountReconciler
from ..application.services.doctor_repository import DoctorRepository
from ..application.services.roster_stats import RosterStats
from ..application.services.specialty_directory import SpecialtyDirectory


def get_specialty_directory(request: Request) -> SpecialtyDirectory:
    return request.app.state.specialties


def get_doctor_repository(request: Request) -> DoctorRepository:
    return request.app.state.doctors


def get_roster_stats(request: Request) -> RosterStats:
    return request.app.state.stats


def get_count_reconciler(request: Request) -> CountReconciler:
    return request.app.state.reconciler
