"""
Base class for idempotent parent → child seed migrations.

A concrete migration declares which parent rows it walks, which child model
it creates, how a template becomes child fields, and what counts as evidence
that it already ran. The shared runner (``runner.run_migration``) does the
rest.

Existence strategies:
    SCOPE_NAME    create every template; a duplicate (parent, key) is reused
    SCOPE_PARENT  skip a parent that already owns any child
"""

from __future__ import annotations

from datetime import datetime

SCOPE_NAME = "name"
SCOPE_PARENT = "parent"


class DataMigration:
    """Declarative description of one seed migration."""

    #: Ledger / CLI name, e.g. "labels".
    name: str = ""
    parent_model = None
    child_model = None
    #: FK column on the child pointing at the parent.
    parent_fk: str = ""
    #: Child attribute that is unique within a parent ("name", "title").
    child_key: str = ""
    scope: str = SCOPE_NAME
    #: Plural noun used in log lines ("labels", "milestones").
    child_noun: str = "children"

    def has_already_migrated(self, store) -> bool:
        """Heuristic evidence check. One read, no side effects."""
        raise NotImplementedError

    def build_templates(self, now: datetime | None = None) -> tuple:
        """Return the ordered, immutable default templates."""
        raise NotImplementedError

    def child_fields(self, template, order: int) -> dict:
        """Map a template (and its 1-based position) to child column values."""
        raise NotImplementedError

    def list_parents(self, store) -> list:
        return store.find_many(self.parent_model)

    def parent_label(self, parent) -> str:
        return getattr(parent, "name", None) or f"{self.parent_model.__name__} {parent.id}"

    def __repr__(self):
        return f"<{type(self).__name__} name={self.name} scope={self.scope}>"
