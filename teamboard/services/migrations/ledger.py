"""Explicit record of finished data migrations (``data_migration_runs``)."""

from __future__ import annotations

import logging

from teamboard.models.data_migration import DataMigrationRun

logger = logging.getLogger(__name__)


def has_applied_run(store, name: str) -> bool:
    return store.exists(DataMigrationRun, name=name, status="applied")


def record_run(store, report, *, started_at=None) -> DataMigrationRun:
    """Write one ledger row for a finished run.

    A run with per-child failures is stored as ``failed`` so that the next
    run is not blocked by the ledger and can retry the missing children.
    """
    status = "failed" if report.has_failures else "applied"
    run = store.create(
        DataMigrationRun,
        name=report.migration,
        status=status,
        created=report.created,
        reused=report.reused,
        failed_count=report.failed,
        skipped_parents=report.skipped_parents,
        started_at=started_at,
    )
    logger.info("Ledger: recorded %s run id=%s status=%s", report.migration, run.id, status,
                extra={"migration": report.migration})
    return run


def latest_runs(store, name: str | None = None, limit: int = 20) -> list[DataMigrationRun]:
    filters = {"name": name} if name else {}
    return store.find_many(DataMigrationRun, order_by=DataMigrationRun.id.desc(), limit=limit, **filters)
