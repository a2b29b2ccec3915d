"""
Idempotent data migrations that move denormalized legacy fields into
relational models.

Registered migrations:
    labels      card label strings → team-scoped Label rows
    milestones  project JSON milestones → ordered Milestone rows

Entry points: ``scripts/migrate_labels.py``, ``scripts/migrate_milestones.py``
and the ``flask migrate-labels`` / ``flask migrate-milestones`` commands.
"""

from __future__ import annotations

import logging
import os

from teamboard.services.migrations.labels import LabelMigration
from teamboard.services.migrations.milestones import MilestoneMigration
from teamboard.services.migrations.runner import run_migration

logger = logging.getLogger(__name__)

MIGRATIONS = {
    LabelMigration.name: LabelMigration,
    MilestoneMigration.name: MilestoneMigration,
}


def get_migration(name: str):
    try:
        return MIGRATIONS[name]()
    except KeyError:
        raise ValueError(f"Unknown data migration: {name!r} (known: {', '.join(sorted(MIGRATIONS))})") from None


def run_standalone(name: str, *, app=None, dry_run: bool = False) -> int:
    """Run a migration as a process: acquire the store, run, release.

    Returns the process exit code: 0 on success (including the
    already-migrated no-op), 1 when anything escapes the run.
    """
    from teamboard import create_app
    from teamboard.services.store import open_store

    if app is None:
        app = create_app(os.getenv("APP_ENV", "development"))

    try:
        migration = get_migration(name)
        with open_store(app) as store:
            report = run_migration(migration, store, dry_run=dry_run)
    except Exception:
        logger.exception("Data migration %r failed", name, extra={"migration": name})
        return 1

    if report.has_failures:
        logger.warning("Data migration %r finished with %d failed item(s)", name, report.failed,
                       extra={"migration": name})
    else:
        logger.info("Data migration %r completed (%s)", name, report.status, extra={"migration": name})
    return 0


__all__ = [
    "MIGRATIONS",
    "LabelMigration",
    "MilestoneMigration",
    "get_migration",
    "run_migration",
    "run_standalone",
]
