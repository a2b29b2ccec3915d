"""
Data-migration exception hierarchy.

The store layer translates SQLAlchemy errors into these types so the
migration code never depends on driver-specific exceptions.

Usage:
    from teamboard.core.exceptions import UniqueConstraintViolation, StoreError

    raise UniqueConstraintViolation(resource="Label", fields={"team_id": 1, "name": "Bug"})
"""


class MigrationError(Exception):
    """Base class for errors raised by the data-migration layer."""


class AlreadyMigrated(MigrationError):
    """Raised when migration evidence is found; the run exits without writing.

    Informational, not a failure: callers log it at INFO and exit 0.

    Args:
        migration: Name of the migration that was detected as applied.
        reason: Short description of the evidence found.
    """

    def __init__(self, migration: str, reason: str) -> None:
        self.migration = migration
        self.reason = reason
        super().__init__(f"{migration} already applied: {reason}")


class StoreError(MigrationError):
    """Raised when a store primitive fails for a reason other than a duplicate.

    Inside a per-child loop this is a recoverable per-child failure; outside
    any loop it is fatal for the run.

    Args:
        operation: Store primitive that failed (``create``, ``count``, ...).
        resource: Model name.
        cause: Underlying exception, kept for logging.
    """

    def __init__(self, operation: str, resource: str, cause: Exception | None = None) -> None:
        self.operation = operation
        self.resource = resource
        self.cause = cause
        msg = f"{operation} {resource} failed"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class UniqueConstraintViolation(StoreError):
    """Raised when a create would duplicate a unique key.

    Expected during re-runs: the applier looks up and reuses the existing row.

    Args:
        resource: Model name.
        fields: The attempted field values (the unique key is among them).
        cause: Underlying ``IntegrityError``.
    """

    def __init__(self, resource: str, fields: dict | None = None, cause: Exception | None = None) -> None:
        self.fields = fields or {}
        super().__init__("create", resource, cause)
