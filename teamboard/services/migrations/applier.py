"""Per-parent applier: materialises templates into child rows for one parent."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from teamboard.core.exceptions import StoreError, UniqueConstraintViolation
from teamboard.services.migrations.base import SCOPE_PARENT

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    """Outcome of applying the templates to one parent."""
    parent_id: int
    parent_name: str
    created: list = field(default_factory=list)
    reused: list = field(default_factory=list)
    #: Template keys not inserted because a matching child already existed.
    skipped: list[str] = field(default_factory=list)
    #: (template key or parent, reason)
    failed: list[tuple[str, str]] = field(default_factory=list)
    parent_skipped: bool = False
    skip_reason: str = ""

    def to_dict(self) -> dict:
        return {
            "parent_id": self.parent_id,
            "parent_name": self.parent_name,
            "created": len(self.created),
            "reused": len(self.reused),
            "skipped": list(self.skipped),
            "failed": [{"key": key, "reason": reason} for key, reason in self.failed],
            "parent_skipped": self.parent_skipped,
            "skip_reason": self.skip_reason,
        }


def apply_to_parent(store, migration, parent, templates) -> ApplyResult:
    """
    Create one child per template under ``parent``.

    - Parent-scoped migrations skip a parent that already has children.
    - A duplicate (parent, key) is looked up and registered as reused.
    - Any other store error is recorded for that template and the loop goes on.

    Errors outside the per-template loop (e.g. the count query) propagate to
    the runner, which isolates them per parent.
    """
    result = ApplyResult(parent_id=parent.id, parent_name=migration.parent_label(parent))
    extra = {"migration": migration.name, "parent_id": parent.id}

    if migration.scope == SCOPE_PARENT:
        existing = store.count(migration.child_model, **{migration.parent_fk: parent.id})
        if existing > 0:
            result.parent_skipped = True
            result.skip_reason = f"already has {existing} {migration.child_noun}"
            result.skipped = [getattr(t, migration.child_key) for t in templates]
            logger.info("[SKIP] %s reason=%s", result.parent_name, result.skip_reason, extra=extra)
            return result

    for order, template in enumerate(templates, start=1):
        key = getattr(template, migration.child_key)

        try:
            fields = migration.child_fields(template, order)
            fields[migration.parent_fk] = parent.id
            child = store.create(migration.child_model, **fields)
        except UniqueConstraintViolation:
            try:
                existing = store.find_unique(
                    migration.child_model,
                    **{migration.parent_fk: parent.id, migration.child_key: key},
                )
            except StoreError as exc:
                result.failed.append((key, str(exc)))
                logger.warning("[ERROR] %s %s=%r lookup failed: %s",
                               result.parent_name, migration.child_key, key, exc, extra=extra)
                continue
            if existing is None:
                result.failed.append((key, "duplicate reported but no existing row found"))
                logger.warning("[ERROR] %s %s=%r duplicate without existing row",
                               result.parent_name, migration.child_key, key, extra=extra)
                continue
            result.reused.append(existing)
            result.skipped.append(key)
            logger.info("[REUSE] %s %s=%r id=%s", result.parent_name, migration.child_key, key,
                        existing.id, extra=extra)
            continue
        except StoreError as exc:
            reason = str(exc.cause) if exc.cause is not None else str(exc)
            result.failed.append((key, reason))
            logger.warning("[ERROR] %s %s=%r error=%s", result.parent_name, migration.child_key, key,
                           reason, extra=extra)
            continue
        except Exception as exc:
            result.failed.append((key, str(exc)))
            logger.exception("[ERROR] %s %s=%r unexpected error=%s", result.parent_name,
                             migration.child_key, key, exc, extra=extra)
            continue

        result.created.append(child)
        logger.info("[CREATE] %s %s=%r id=%s", result.parent_name, migration.child_key, key,
                    child.id, extra=extra)

    return result
