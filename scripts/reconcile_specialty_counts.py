"""Recount doctors per specialty and correct drifted ``doctor_count`` values.

Usage (from backend root, with venv active):

    python scripts/reconcile_specialty_counts.py [--dry-run]

This will:
1. Read every doctor and every specialty from MongoDB.
2. Compare each specialty's stored doctor_count with the number of doctors naming it.
3. Write the true count back (skipped with --dry-run).
4. List specialty names used by doctors that have no specialty document.
"""

import argparse
import asyncio
import sys

from docdesk.adapters.db.mongo.client import connect
from docdesk.application.services.count_reconciler import CountReconciler
from docdesk.application.services.doctor_repository import DoctorRepository
from docdesk.application.services.specialty_directory import SpecialtyDirectory
from docdesk.core.config import get_settings
from docdesk.core.exceptions import StoreUnavailableError
from docdesk.core.structured_logger import configure_logging


async def reconcile(dry_run: bool) -> int:
    settings = get_settings()
    configure_logging(settings.logging)
    connection = connect(settings.database)
    try:
        specialties = SpecialtyDirectory(connection.store)
        doctors = DoctorRepository(connection.store, specialties)
        try:
            report = await CountReconciler(doctors, specialties).reconcile(dry_run=dry_run)
        except StoreUnavailableError as e:
            print(f"Cannot reconcile: {e.message}")
            return 1
    finally:
        connection.close()

    print(f"Checked {report.checked} specialties")
    for c in report.corrections:
        action = "would set" if dry_run else "set"
        print(f"  {c.name} ({c.specialty_id}): {action} {c.stored_count} -> {c.actual_count}")
    if not report.corrections:
        print("All counts match.")
    for name in report.orphaned_names:
        print(f"  Doctors reference missing specialty: {name}")
    for name in report.duplicate_names:
        print(f"  Several specialty documents share the name: {name}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--dry-run", action="store_true", help="report drift without writing")
    args = parser.parse_args()
    sys.exit(asyncio.run(reconcile(args.dry_run)))


if __name__ == "__main__":
    main()
