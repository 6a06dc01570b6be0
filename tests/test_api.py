"""
HTTP API tests over the in-memory store.
"""

from fastapi.testclient import TestClient

from docdesk.app import create_app
from docdesk.application.ports.collection_store import StoreUnavailable
from docdesk.core.constants import DOCTORS_COLLECTION, SPECIALTY_COLLECTION


def _specialty_counts(client):
    body = client.get("/specialties").json()
    return {s["name"]: s["doctor_count"] for s in body["data"]}


def test_create_doctor_counts_specialty(client):
    response = client.post("/doctors", json={
        "name": "Ann Lee",
        "email": "ann@clinic.org",
        "specialty": "Oncology",
        "location": {"address": "Main St", "coordinates": {"lat": 1.5, "lng": 2.5}},
    })

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    doctor_id = body["data"]["id"]
    assert _specialty_counts(client) == {"Oncology": 1}

    doctor = client.get(f"/doctors/{doctor_id}").json()["data"]
    assert doctor["rating"] == 0
    assert doctor["status"] == "active"
    assert doctor["location"]["coordinates"] == {"lat": 1.5, "lng": 2.5}


def test_create_doctor_requires_name(client):
    response = client.post("/doctors", json={"name": "   "})
    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"


def test_create_doctor_rejects_unknown_status(client):
    response = client.post("/doctors", json={"name": "Ann", "status": "retired"})
    assert response.status_code == 422


def test_patch_doctor_moves_specialty(client, store):
    store.seed(SPECIALTY_COLLECTION, "a", {"name": "Cardiology", "doctor_count": 1})
    store.seed(SPECIALTY_COLLECTION, "b", {"name": "Neurology", "doctor_count": 3})
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "Ann", "specialty": "Cardiology"})

    response = client.patch("/doctors/d1", json={"specialty": "Neurology"})

    assert response.status_code == 200
    assert response.json()["data"]["specialty"] == "Neurology"
    assert _specialty_counts(client) == {"Neurology": 4}


def test_patch_missing_doctor_is_404(client):
    response = client.patch("/doctors/ghost", json={"name": "X"})
    assert response.status_code == 404
    assert response.json()["error"] == "DOCTOR_NOT_FOUND"


def test_get_missing_doctor_is_404(client):
    response = client.get("/doctors/ghost")
    assert response.status_code == 404


def test_delete_doctor_releases_specialty(client, store):
    store.seed(SPECIALTY_COLLECTION, "a", {"name": "Cardiology", "doctor_count": 1})
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "Ann", "specialty": "Cardiology"})

    response = client.delete("/doctors/d1")

    assert response.status_code == 200
    assert _specialty_counts(client) == {}


def test_delete_missing_doctor_succeeds(client):
    assert client.delete("/doctors/ghost").status_code == 200


def test_list_doctors_filters(client, store):
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "Ann", "specialty": "Cardiology", "status": "active"})
    store.seed(DOCTORS_COLLECTION, "d2", {"name": "Bob", "specialty": "Cardiology", "status": "suspended"})
    store.seed(DOCTORS_COLLECTION, "d3", {"name": "Cat", "specialty": "Neurology", "status": "active"})

    def ids(response):
        return sorted(d["id"] for d in response.json()["data"])

    assert ids(client.get("/doctors")) == ["d1", "d2", "d3"]
    assert ids(client.get("/doctors", params={"specialty": "Cardiology", "status": "active"})) == ["d1"]
    assert ids(client.get("/doctors", params={"search": "CAT", "status": "all"})) == ["d3"]


def test_create_specialty_starts_at_zero(client, store):
    response = client.post("/specialties", json={"name": "Dermatology", "description": "Skin"})

    assert response.status_code == 201
    specialty_id = response.json()["data"]["id"]
    assert store.raw(SPECIALTY_COLLECTION, specialty_id)["doctor_count"] == 0


def test_create_specialty_ignores_supplied_count(client, store):
    response = client.post("/specialties", json={"name": "Dermatology", "doctor_count": 12})
    specialty_id = response.json()["data"]["id"]
    assert store.raw(SPECIALTY_COLLECTION, specialty_id)["doctor_count"] == 0


def test_patch_specialty_manual_correction(client, store):
    store.seed(SPECIALTY_COLLECTION, "a", {"name": "Cardiology", "doctor_count": 9})

    response = client.patch("/specialties/a", json={"doctor_count": 2})

    assert response.status_code == 200
    assert response.json()["data"]["doctor_count"] == 2


def test_patch_missing_specialty_is_404(client):
    response = client.patch("/specialties/ghost", json={"name": "X"})
    assert response.status_code == 404
    assert response.json()["error"] == "SPECIALTY_NOT_FOUND"


def test_delete_specialty(client, store):
    store.seed(SPECIALTY_COLLECTION, "a", {"name": "Cardiology", "doctor_count": 0})

    assert client.delete("/specialties/a").status_code == 200
    assert store.raw(SPECIALTY_COLLECTION, "a") is None
    assert client.delete("/specialties/a").status_code == 200


def test_reconcile_endpoint(client, store):
    store.seed(SPECIALTY_COLLECTION, "a", {"name": "Cardiology", "doctor_count": 7})
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "Ann", "specialty": "Cardiology"})

    dry = client.post("/specialties/reconcile", params={"dry_run": "true"}).json()["data"]
    assert dry["corrections"][0]["actual_count"] == 1
    assert store.raw(SPECIALTY_COLLECTION, "a")["doctor_count"] == 7

    client.post("/specialties/reconcile")
    assert store.raw(SPECIALTY_COLLECTION, "a")["doctor_count"] == 1


def test_dashboard_endpoints(client, store):
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "Ann", "rating": 4, "specialty": "Cardiology"})
    store.seed(DOCTORS_COLLECTION, "d2", {"name": "Bob", "rating": 5, "status": "suspended"})
    store.seed(SPECIALTY_COLLECTION, "a", {"name": "Cardiology", "doctor_count": 1})

    summary = client.get("/dashboard/summary").json()["data"]
    assert summary == {
        "total_doctors": 2,
        "active_doctors": 1,
        "specialties": 1,
        "average_rating": 4.5,
    }

    registrations = client.get("/dashboard/registrations").json()["data"]
    assert len(registrations) == 6

    top = client.get("/dashboard/top-specialties").json()["data"]
    assert top == [{"id": "a", "name": "Cardiology", "doctor_count": 1}]


def test_partial_failure_surfaces_as_500(client, store):
    store.seed(SPECIALTY_COLLECTION, "a", {"name": "Cardiology", "doctor_count": 2})
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "Ann", "specialty": "Cardiology"})
    store.fail_on("create", SPECIALTY_COLLECTION)

    response = client.patch("/doctors/d1", json={"specialty": "Oncology"})

    assert response.status_code == 500
    assert response.json()["error"] == "INTERNAL_ERROR"
    assert store.raw(SPECIALTY_COLLECTION, "a")["doctor_count"] == 1


def test_unavailable_store_reads_empty_and_writes_503():
    client = TestClient(create_app(store=StoreUnavailable("MONGO_URI is not set")))

    listed = client.get("/doctors")
    assert listed.status_code == 200
    assert listed.json()["data"] == []

    response = client.post("/doctors", json={"name": "Ann"})
    assert response.status_code == 503
    assert response.json()["error"] == "STORE_UNAVAILABLE"


def test_patch_with_no_fields_is_rejected(client, store):
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "Ann"})

    response = client.patch("/doctors/d1", json={})

    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"
    assert store.writes() == []


def test_patch_rejects_null_for_non_clearable_fields(client, store):
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "Ann", "email": "ann@clinic.org"})

    response = client.patch("/doctors/d1", json={"name": None, "email": None})

    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"
    assert store.raw(DOCTORS_COLLECTION, "d1") == {"name": "Ann", "email": "ann@clinic.org"}


def test_patch_null_specialty_clears_it(client, store):
    store.seed(SPECIALTY_COLLECTION, "a", {"name": "Cardiology", "doctor_count": 2})
    store.seed(DOCTORS_COLLECTION, "d1", {"name": "Ann", "specialty": "Cardiology"})

    response = client.patch("/doctors/d1", json={"specialty": None})

    assert response.status_code == 200
    assert response.json()["data"]["specialty"] == ""
    assert store.raw(SPECIALTY_COLLECTION, "a")["doctor_count"] == 1
