"""
Milestone migration: JSON ``projects.milestones`` blob → ``Milestone`` rows.

The JSON column was dropped with the schema change, so every project that
has no milestones yet receives the default four-step plan. Projects that
already own milestones are left untouched (no partial top-up).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from teamboard.models.project import Milestone, Project
from teamboard.services.migrations.base import SCOPE_PARENT, DataMigration


# ═══════════════════════════════════════════════════════════════
# DEFAULT MILESTONE PLAN: order in this list becomes Milestone.order
# ═══════════════════════════════════════════════════════════════
DEFAULT_MILESTONES = [
    {
        "title": "Project Setup",
        "description": "Initial project setup and configuration",
        "notes": "Budget: $5,000 - Setup development environment, configure CI/CD pipeline",
        "offset_days": 7,
        "status": "INCOMPLETE",
    },
    {
        "title": "Core Features Development",
        "description": "Develop the main features of the project",
        "notes": "Budget: $15,000 - Implement user authentication, main functionality",
        "offset_days": 30,
        "status": "INCOMPLETE",
    },
    {
        "title": "Testing & Quality Assurance",
        "description": "Comprehensive testing and bug fixes",
        "notes": "Budget: $8,000 - Unit tests, integration tests, user acceptance testing",
        "offset_days": 45,
        "status": "INCOMPLETE",
    },
    {
        "title": "Project Delivery",
        "description": "Final delivery and deployment",
        "notes": "Budget: $3,000 - Deploy to production, handover documentation",
        "offset_days": 60,
        "status": "INCOMPLETE",
    },
]


@dataclass(frozen=True)
class MilestoneTemplate:
    title: str
    description: str
    notes: str
    offset_days: int
    status: str
    target_date: datetime


class MilestoneMigration(DataMigration):
    name = "milestones"
    parent_model = Project
    child_model = Milestone
    parent_fk = "project_id"
    child_key = "title"
    scope = SCOPE_PARENT
    child_noun = "milestones"

    def has_already_migrated(self, store) -> bool:
        """True when projects exist and none of them is missing milestones.

        A mix of projects with and without milestones is not evidence; the
        per-project count in the applier handles that case.
        """
        if not store.exists(Project):
            return False
        return store.count(Project, ~Project.milestones.any()) == 0

    def build_templates(self, now=None) -> tuple[MilestoneTemplate, ...]:
        now = now or datetime.now(timezone.utc)
        return tuple(
            MilestoneTemplate(target_date=now + timedelta(days=entry["offset_days"]), **entry)
            for entry in DEFAULT_MILESTONES
        )

    def child_fields(self, template: MilestoneTemplate, order: int) -> dict:
        return {
            "title": template.title,
            "description": template.description,
            "notes": template.notes,
            "status": template.status,
            "target_date": template.target_date,
            "order": order,
        }
