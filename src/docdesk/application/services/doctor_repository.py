"""
Doctor repository: CRUD over doctor records with specialty count bookkeeping.

Any mutation that changes which specialty a doctor belongs to is followed by
targeted count updates through the specialty directory. The two collections
are written one after another with no transaction: a reassignment runs
"decrement old" then "increment new", and a failure in the second step is
raised to the caller without undoing the first.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from ...core.constants import DOCTORS_COLLECTION, UNKNOWN_DOCTOR_NAME
from ...core.structured_logger import log_with_data
from ...domain.entities.doctor import (
    Coordinates,
    Doctor,
    DoctorStatus,
    Location,
    coerce_number,
)
from ...domain.errors import DoctorNotFoundError, InvalidDoctorDataError
from ..ports.collection_store import StoreDocument, StoreHandle, StoreUnavailable
from .base import StoreBackedService
from .specialty_directory import SpecialtyDirectory

logger = logging.getLogger(__name__)

# Fields owned by the repository itself; never taken from caller input.
_PROTECTED_FIELDS = ("id", "rating", "joined_date", "created_at", "updated_at")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any) -> datetime:
    """Stored timestamps may be datetimes or ISO strings; anything else means now."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return _utcnow()
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return _utcnow()


def _optional_datetime(value: Any) -> Optional[datetime]:
    return _parse_datetime(value) if value is not None else None


def _status_value(value: Any) -> str:
    try:
        return DoctorStatus(value).value
    except ValueError:
        raise InvalidDoctorDataError("status", value)


def _doctor_from_document(doc: StoreDocument) -> Doctor:
    data = doc.data
    try:
        status = DoctorStatus(data.get("status") or DoctorStatus.ACTIVE)
    except ValueError:
        status = DoctorStatus.ACTIVE
    rating = data.get("rating")
    return Doctor(
        id=doc.id,
        name=data.get("name") or UNKNOWN_DOCTOR_NAME,
        email=data.get("email") or "",
        phone=data.get("phone") or "",
        specialty=data.get("specialty") or "",
        status=status,
        rating=coerce_number(rating),
        image=data.get("image") or "",
        joined_date=_parse_datetime(data.get("joined_date")),
        location=Location.from_raw(data.get("location")),
        created_at=_optional_datetime(data.get("created_at")),
        updated_at=_optional_datetime(data.get("updated_at")),
    )


def _new_location(raw: Any) -> Dict[str, Any]:
    raw = raw if isinstance(raw, Mapping) else {}
    coordinates = raw.get("coordinates") if isinstance(raw.get("coordinates"), Mapping) else {}
    return Location(
        address=raw.get("address") or "",
        coordinates=Coordinates(
            lat=coerce_number(coordinates.get("lat")),
            lng=coerce_number(coordinates.get("lng")),
        ),
    ).to_dict()


def _merged_location(current: Any, update: Mapping[str, Any]) -> Dict[str, Any]:
    """Shallow merge: fields not named in the update keep their stored values."""
    current = current if isinstance(current, Mapping) else {}
    current_coords = current.get("coordinates") if isinstance(current.get("coordinates"), Mapping) else {}

    merged = {**current, **update}
    coordinates = dict(current_coords)
    update_coords = update.get("coordinates")
    if isinstance(update_coords, Mapping):
        coordinates["lat"] = coerce_number(
            update_coords.get("lat"), coerce_number(current_coords.get("lat"))
        )
        coordinates["lng"] = coerce_number(
            update_coords.get("lng"), coerce_number(current_coords.get("lng"))
        )
    merged["coordinates"] = coordinates
    return merged


class DoctorRepository(StoreBackedService):
    """Doctor CRUD that keeps specialty doctor counts in step."""

    def __init__(self, store: StoreHandle, specialties: SpecialtyDirectory):
        super().__init__(store)
        self._specialties = specialties

    async def list_all(self, strict: bool = False) -> List[Doctor]:
        """Every doctor with all optional fields defaulted.

        Read failures degrade to an empty list unless ``strict`` is set.
        """
        if strict:
            store = self._require_store("fetch doctors")
            return [_doctor_from_document(doc) for doc in await store.list_all(DOCTORS_COLLECTION)]
        if isinstance(self._store, StoreUnavailable):
            logger.error("Document store not initialized. Cannot fetch doctors.")
            return []
        try:
            docs = await self._store.list_all(DOCTORS_COLLECTION)
        except Exception as e:
            logger.error(f"Error fetching doctors: {e}")
            return []
        return [_doctor_from_document(doc) for doc in docs]

    async def get(self, doctor_id: str) -> Doctor:
        store = self._require_store("fetch doctor")
        doc = await store.get_one(DOCTORS_COLLECTION, doctor_id)
        if doc is None:
            raise DoctorNotFoundError(doctor_id)
        return _doctor_from_document(doc)

    async def add(self, data: Mapping[str, Any]) -> str:
        """Persist a new doctor, then count it against its specialty."""
        store = self._require_store("add doctor")
        now = _utcnow()
        doc_data: Dict[str, Any] = {
            k: v for k, v in data.items() if k not in _PROTECTED_FIELDS
        }
        doc_data.update(
            specialty=data.get("specialty") or "",
            location=_new_location(data.get("location")),
            status=_status_value(data.get("status") or DoctorStatus.ACTIVE),
            rating=0,
            joined_date=now,
            created_at=now,
        )

        doctor_id = await store.create(DOCTORS_COLLECTION, doc_data)
        logger.info(f"Added new doctor with ID: {doctor_id}")

        specialty = data.get("specialty")
        if specialty:
            await self._specialties.increment(specialty)

        return doctor_id

    async def update(self, doctor_id: str, fields: Mapping[str, Any]) -> None:
        """Merge fields into a doctor record.

        A changed ``specialty`` (exact string comparison) moves the doctor:
        the old specialty is decremented first, then the new one incremented.
        """
        store = self._require_store("update doctor")
        current = await store.get_one(DOCTORS_COLLECTION, doctor_id)
        if current is None:
            logger.error(f"Doctor with ID {doctor_id} not found for update.")
            raise DoctorNotFoundError(doctor_id)

        to_update: Dict[str, Any] = {
            k: v for k, v in fields.items() if k not in _PROTECTED_FIELDS
        }
        if "status" in to_update:
            to_update["status"] = _status_value(to_update["status"])

        if "specialty" in to_update:
            new_specialty = to_update["specialty"] or ""
            old_specialty = current.data.get("specialty") or ""
            to_update["specialty"] = new_specialty
            if new_specialty != old_specialty:
                if old_specialty:
                    await self._specialties.decrement(old_specialty)
                if new_specialty:
                    await self._specialties.increment(new_specialty)
                log_with_data(
                    logger,
                    logging.INFO,
                    f"Specialty changed from {old_specialty!r} to {new_specialty!r} for doctor {doctor_id}",
                    doctor_id=doctor_id,
                    old_specialty=old_specialty,
                    new_specialty=new_specialty,
                )

        if isinstance(to_update.get("location"), Mapping):
            to_update["location"] = _merged_location(
                current.data.get("location"), to_update["location"]
            )
        else:
            to_update.pop("location", None)

        to_update["updated_at"] = _utcnow()
        await store.update_fields(DOCTORS_COLLECTION, doctor_id, to_update)
        logger.info(f"Updated doctor with ID: {doctor_id}")

    async def delete(self, doctor_id: str) -> None:
        """Delete a doctor, then release its specialty. Unknown ids are a logged no-op."""
        store = self._require_store("delete doctor")
        current = await store.get_one(DOCTORS_COLLECTION, doctor_id)
        if current is None:
            logger.warning(f"Attempted to delete non-existent doctor with ID: {doctor_id}")
            return

        await store.delete(DOCTORS_COLLECTION, doctor_id)
        logger.info(f"Deleted doctor with ID: {doctor_id}")

        specialty = current.data.get("specialty")
        if specialty:
            await self._specialties.decrement(specialty)
