"""
Dashboard statistics and list filter tests.
"""

from datetime import datetime, timezone

import pytest

from docdesk.application.services.roster_stats import filter_doctors, filter_specialties
from docdesk.core.constants import DOCTORS_COLLECTION, SPECIALTY_COLLECTION
from docdesk.domain.entities.doctor import Doctor, DoctorStatus
from docdesk.domain.entities.specialty import Specialty


@pytest.fixture
def roster():
    return [
        Doctor(id="1", name="Ann Lee", email="ann@clinic.org", specialty="Cardiology"),
        Doctor(id="2", name="Bob Stone", email="bob@clinic.org", specialty="Neurology",
               status=DoctorStatus.SUSPENDED),
        Doctor(id="3", name="Cara Diaz", email="cara@heart.org", specialty="Cardiology"),
    ]


def test_filter_doctors_search_matches_name_email_and_specialty(roster):
    assert [d.id for d in filter_doctors(roster, search="STONE")] == ["2"]
    assert [d.id for d in filter_doctors(roster, search="heart")] == ["3"]
    assert [d.id for d in filter_doctors(roster, search="neuro")] == ["2"]


def test_filter_doctors_all_disables_filters(roster):
    assert len(filter_doctors(roster, specialty="all", status="all")) == 3


def test_filter_doctors_specialty_and_status_are_exact(roster):
    assert [d.id for d in filter_doctors(roster, specialty="Cardiology")] == ["1", "3"]
    assert filter_doctors(roster, specialty="cardiology") == []
    assert [d.id for d in filter_doctors(roster, status="suspended")] == ["2"]


def test_filter_specialties_searches_name_and_description():
    items = [
        Specialty(id="a", name="Cardiology", description="Heart care"),
        Specialty(id="b", name="Dermatology", description="Skin"),
    ]
    assert [s.id for s in filter_specialties(items, "HEART")] == ["a"]
    assert [s.id for s in filter_specialties(items, "derm")] == ["b"]
    assert len(filter_specialties(items, "")) == 2


@pytest.mark.asyncio
async def test_summary_counts_and_rounded_average(store, stats):
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "A", "rating": 4.26, "status": "active"})
    store.seed(DOCTORS_COLLECTION, "d2", {"name": "B", "rating": 3.0, "status": "suspended"})
    store.seed(DOCTORS_COLLECTION, "d3", {"name": "C", "rating": 5, "status": "active"})
    store.seed(SPECIALTY_COLLECTION, "s1", {"name": "Cardiology", "doctor_count": 3})

    summary = await stats.summary()

    assert summary.total_doctors == 3
    assert summary.active_doctors == 2
    assert summary.specialties == 1
    assert summary.average_rating == 4.1


@pytest.mark.asyncio
async def test_summary_with_no_doctors(stats):
    summary = await stats.summary()
    assert summary.total_doctors == 0
    assert summary.average_rating == 0


@pytest.mark.asyncio
async def test_registrations_by_month_spans_year_boundary(store, stats):
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "A", "joined_date": datetime(2023, 11, 3, tzinfo=timezone.utc)})
    store.seed(DOCTORS_COLLECTION, "d2", {"name": "B", "joined_date": "2024-02-10T08:00:00Z"})
    store.seed(DOCTORS_COLLECTION, "d3", {"name": "C", "joined_date": "2024-02-28T08:00:00+00:00"})
    store.seed(DOCTORS_COLLECTION, "d4", {"name": "D", "joined_date": "2023-01-01T00:00:00Z"})

    buckets = await stats.registrations_by_month(now=datetime(2024, 3, 15, tzinfo=timezone.utc))

    assert [b.month_key for b in buckets] == [
        "2023-10", "2023-11", "2023-12", "2024-01", "2024-02", "2024-03",
    ]
    assert [b.count for b in buckets] == [0, 1, 0, 0, 2, 0]
    assert buckets[0].label == "Oct"


@pytest.mark.asyncio
async def test_top_specialties_sorted_and_limited(store, stats):
    for i in range(9):
        store.seed(SPECIALTY_COLLECTION, f"s{i}", {"name": f"S{i}", "doctor_count": i})

    top = await stats.top_specialties()

    assert len(top) == 7
    assert [s.doctor_count for s in top] == [8, 7, 6, 5, 4, 3, 2]
