"""
Label migration: string-array card labels → team-scoped ``Label`` rows.

The legacy ``labels`` column on cards is gone by the time this runs, so the
migration seeds every team with the default label set. Any card ↔ label link
means labels are already relational and the run is a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass

from teamboard.models.card import card_labels
from teamboard.models.team import Label, Team
from teamboard.services.migrations.base import SCOPE_NAME, DataMigration


# ═══════════════════════════════════════════════════════════════
# DEFAULT LABELS: (name, color), in display order
# ═══════════════════════════════════════════════════════════════
DEFAULT_LABELS = [
    ("Frontend", "#8B5CF6"),       # purple
    ("Backend", "#3B82F6"),        # blue
    ("UI/UX", "#F59E0B"),          # amber
    ("Bug", "#EF4444"),            # red
    ("Feature", "#10B981"),        # green
    ("Documentation", "#6B7280"),  # gray
    ("Testing", "#F97316"),        # orange
    ("Urgent", "#DC2626"),         # dark red
    ("Review", "#06B6D4"),         # cyan
    ("In Progress", "#8B5CF6"),    # purple
    ("Blocked", "#991B1B"),        # dark red
]


@dataclass(frozen=True)
class LabelTemplate:
    name: str
    color: str


class LabelMigration(DataMigration):
    name = "labels"
    parent_model = Team
    child_model = Label
    parent_fk = "team_id"
    child_key = "name"
    scope = SCOPE_NAME
    child_noun = "labels"

    def has_already_migrated(self, store) -> bool:
        return store.exists(card_labels)

    def build_templates(self, now=None) -> tuple[LabelTemplate, ...]:
        return tuple(LabelTemplate(name=name, color=color) for name, color in DEFAULT_LABELS)

    def child_fields(self, template: LabelTemplate, order: int) -> dict:
        return {"name": template.name, "color": template.color}
