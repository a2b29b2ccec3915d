"""Aggregates per-parent results into a run report."""

from __future__ import annotations

from dataclasses import dataclass, field

STATUS_APPLIED = "applied"
STATUS_DRY_RUN = "dry_run"
STATUS_ALREADY_MIGRATED = "already_migrated"


@dataclass
class MigrationReport:
    """Summary of one migration run, grouped by parent."""
    migration: str
    status: str
    results: list = field(default_factory=list)
    message: str = ""

    @property
    def parents_processed(self) -> int:
        return len(self.results)

    @property
    def created(self) -> int:
        return sum(len(r.created) for r in self.results)

    @property
    def reused(self) -> int:
        return sum(len(r.reused) for r in self.results)

    @property
    def failed(self) -> int:
        return sum(len(r.failed) for r in self.results)

    @property
    def skipped_parents(self) -> int:
        return sum(1 for r in self.results if r.parent_skipped)

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    def to_dict(self) -> dict:
        return {
            "migration": self.migration,
            "status": self.status,
            "message": self.message,
            "parents_processed": self.parents_processed,
            "created": self.created,
            "reused": self.reused,
            "failed": self.failed,
            "skipped_parents": self.skipped_parents,
            "parents": [r.to_dict() for r in self.results],
        }

    def render(self) -> list[str]:
        """Human-readable breakdown; same input always renders the same lines."""
        lines = []
        if self.status == STATUS_ALREADY_MIGRATED:
            lines.append(f"[SUMMARY] migration={self.migration} status={self.status} {self.message}".rstrip())
            return lines

        for r in self.results:
            if r.parent_skipped:
                lines.append(f"  {r.parent_name} (id={r.parent_id}): skipped, {r.skip_reason}")
                continue
            line = (
                f"  {r.parent_name} (id={r.parent_id}): "
                f"created={len(r.created)} reused={len(r.reused)} failed={len(r.failed)}"
            )
            lines.append(line)
            for key, reason in r.failed:
                lines.append(f"    failed {key}: {reason}")

        lines.append(
            "[SUMMARY] "
            f"migration={self.migration} "
            f"status={self.status} "
            f"parents={self.parents_processed} "
            f"created={self.created} "
            f"reused={self.reused} "
            f"failed={self.failed} "
            f"skipped_parents={self.skipped_parents}"
        )
        return lines


def summarize(migration: str, results, *, status: str = STATUS_APPLIED, message: str = "") -> MigrationReport:
    """Build a report with parents ordered by id."""
    ordered = sorted(results, key=lambda r: r.parent_id)
    return MigrationReport(migration=migration, status=status, results=ordered, message=message)
