"""
Administrative recount of specialty doctor counts.

Increment/decrement bookkeeping can drift after a partial failure. This
recomputes each specialty's count from the doctor records and writes the
true value back as a manual correction.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List

from ...core.exceptions import StoreUnavailableError
from .doctor_repository import DoctorRepository
from .specialty_directory import SpecialtyDirectory

logger = logging.getLogger(__name__)


@dataclass
class CountCorrection:
    specialty_id: str
    name: str
    stored_count: int
    actual_count: int


@dataclass
class ReconcileReport:
    checked: int = 0
    corrections: List[CountCorrection] = field(default_factory=list)
    # Names doctors use that have no specialty document at all
    orphaned_names: List[str] = field(default_factory=list)
    # Names held by more than one specialty document (case-insensitive);
    # each such document is set to the full count
    duplicate_names: List[str] = field(default_factory=list)
    dry_run: bool = False


class CountReconciler:
    def __init__(self, doctors: DoctorRepository, specialties: SpecialtyDirectory):
        self._doctors = doctors
        self._specialties = specialties

    async def reconcile(self, dry_run: bool = False) -> ReconcileReport:
        """Rewrite every drifted ``doctor_count``; never creates or deletes specialties."""
        # Writes below need the store; fail before reading anything
        if not self._specialties.is_available:
            raise StoreUnavailableError("reconcile specialty counts")

        # Strict reads: an empty list from a failed read would zero every count
        doctors = await self._doctors.list_all(strict=True)
        specialties = await self._specialties.list_all(strict=True)

        actual = Counter(d.specialty.lower() for d in doctors if d.specialty)
        display_names = {d.specialty.lower(): d.specialty for d in doctors if d.specialty}

        report = ReconcileReport(checked=len(specialties), dry_run=dry_run)
        known = set()
        duplicates = set()
        for specialty in specialties:
            key = specialty.name.lower()
            if key in known:
                duplicates.add(key)
            known.add(key)
            true_count = actual.get(key, 0)
            if specialty.doctor_count == true_count:
                continue
            report.corrections.append(
                CountCorrection(
                    specialty_id=specialty.id,
                    name=specialty.name,
                    stored_count=specialty.doctor_count,
                    actual_count=true_count,
                )
            )
            if not dry_run:
                await self._specialties.update(specialty.id, {"doctor_count": true_count})

        report.orphaned_names = sorted(
            display_names[key] for key in actual if key not in known
        )
        report.duplicate_names = sorted(duplicates)
        if duplicates:
            logger.warning(f"Specialty names stored on more than one document: {report.duplicate_names}")
        logger.info(
            f"Reconciled {report.checked} specialties: {len(report.corrections)} corrections, "
            f"{len(report.orphaned_names)} orphaned names (dry_run={dry_run})"
        )
        return report
