"""
Migration runner: detector → templates → per-parent applier → report → ledger.

Usage:
    from teamboard.services.migrations import run_migration, LabelMigration

    report = run_migration(LabelMigration(), store)               # apply
    report = run_migration(LabelMigration(), store, dry_run=True) # preview, rolls back

Idempotency:
    A run exits without writing when the migration's evidence check or the
    ledger says it already ran. Inside a run, a failed child never stops its
    siblings, and a failed parent never stops the parents after it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import current_app

from teamboard.core.exceptions import AlreadyMigrated
from teamboard.services.migrations.applier import ApplyResult, apply_to_parent
from teamboard.services.migrations.ledger import has_applied_run, record_run
from teamboard.services.migrations.reporter import (
    STATUS_ALREADY_MIGRATED,
    STATUS_APPLIED,
    STATUS_DRY_RUN,
    MigrationReport,
    summarize,
)

logger = logging.getLogger(__name__)


def _ledger_enabled() -> bool:
    return bool(current_app.config.get("MIGRATION_LEDGER_ENABLED", True))


def ensure_not_migrated(migration, store, *, use_ledger: bool = True) -> None:
    """Raise ``AlreadyMigrated`` if the ledger or the evidence check says so."""
    if use_ledger and has_applied_run(store, migration.name):
        raise AlreadyMigrated(migration.name, "ledger has an applied run")
    if migration.has_already_migrated(store):
        raise AlreadyMigrated(migration.name, f"existing {migration.child_noun} found")


def run_migration(migration, store, *, dry_run: bool = False, now: datetime | None = None,
                  use_ledger: bool | None = None) -> MigrationReport:
    """Run one migration against ``store`` and return its report.

    Args:
        migration: A ``DataMigration`` instance.
        store: ``Store`` handle; the caller owns its lifetime.
        dry_run: Create inside the transaction, then roll everything back.
        now: Reference clock for date-relative template fields.
        use_ledger: Consult and write ``data_migration_runs``. Defaults to
                    the ``MIGRATION_LEDGER_ENABLED`` config value.

    Errors outside the per-parent loop (listing parents, the evidence
    query, the final commit) propagate to the caller.
    """
    if use_ledger is None:
        use_ledger = _ledger_enabled()
    extra = {"migration": migration.name}
    started_at = datetime.now(timezone.utc)
    mode = "dry-run" if dry_run else "apply"

    logger.info("Starting %s migration mode=%s", migration.name, mode, extra=extra)

    try:
        ensure_not_migrated(migration, store, use_ledger=use_ledger)
    except AlreadyMigrated as exc:
        logger.info("%s; nothing to do", exc, extra=extra)
        return summarize(migration.name, [], status=STATUS_ALREADY_MIGRATED, message=exc.reason)

    templates = migration.build_templates(now=now)
    parents = migration.list_parents(store)
    logger.info("Found %d %s; %d default %s each",
                len(parents), migration.parent_model.__tablename__, len(templates),
                migration.child_noun, extra=extra)

    results = []
    for parent in parents:
        parent_id = parent.id
        parent_name = migration.parent_label(parent)
        try:
            result = apply_to_parent(store, migration, parent, templates)
            if not dry_run:
                store.commit()
        except Exception as exc:
            store.rollback()
            logger.exception("[ERROR] %s (id=%s) aborted: %s", parent_name, parent_id, exc, extra=extra)
            result = ApplyResult(parent_id=parent_id, parent_name=parent_name)
            result.failed.append((parent_name, str(exc)))
        results.append(result)

    status = STATUS_DRY_RUN if dry_run else STATUS_APPLIED
    report = summarize(migration.name, results, status=status)

    if dry_run:
        store.rollback()
    elif use_ledger:
        record_run(store, report, started_at=started_at)
        store.commit()

    for line in report.render():
        logger.info(line, extra=extra)
    return report
