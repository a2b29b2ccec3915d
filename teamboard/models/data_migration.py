"""Ledger of data-migration runs (one row per non-dry run)."""

from datetime import datetime, timezone

from teamboard.models import db


class DataMigrationRun(db.Model):
    """
    Record of a finished data migration.

    An ``applied`` row marks the migration as done; later runs detect it and
    exit without writing. ``failed`` rows are kept for audit only and do not
    block a retry.
    """

    __tablename__ = "data_migration_runs"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default="applied", comment="applied | failed")
    created = db.Column(db.Integer, nullable=False, default=0)
    reused = db.Column(db.Integer, nullable=False, default=0)
    failed_count = db.Column(db.Integer, nullable=False, default=0)
    skipped_parents = db.Column(db.Integer, nullable=False, default=0)
    started_at = db.Column(db.DateTime(timezone=True), nullable=True)
    finished_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "created": self.created,
            "reused": self.reused,
            "failed": self.failed_count,
            "skipped_parents": self.skipped_parents,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }

    def __repr__(self):
        return f"<DataMigrationRun {self.id}: {self.name} {self.status}>"
