"""
Teamboard Data Migrations
Project domain model.

Models:
    - Project: team project with an ordered milestone plan
    - Milestone: project milestone (replaces the old JSON ``milestones`` column)
"""

from datetime import datetime, timezone

from teamboard.models import db


class Project(db.Model):
    """Project owned by a team. Milestones are sequenced by ``Milestone.order``."""

    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(
        db.Integer,
        db.ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=True)
    summary = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    milestones = db.relationship(
        "Milestone", backref="project", lazy="dynamic",
        cascade="all, delete-orphan", order_by="Milestone.order",
    )

    @property
    def name(self):
        """Display name; projects are titled rather than named."""
        return self.title

    def __repr__(self):
        return f"<Project {self.id}: {self.title}>"


class Milestone(db.Model):
    """
    Project milestone.

    ``order`` is 1-based within the project; ``completed_at`` is set when the
    status flips to COMPLETE.
    """

    __tablename__ = "milestones"
    __table_args__ = (
        db.UniqueConstraint("project_id", "title", name="uq_milestones_project_title"),
    )

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, default="")
    notes = db.Column(db.Text, default="", comment="Budget, tasks or other free-form details")
    status = db.Column(db.String(20), nullable=False, default="INCOMPLETE", comment="INCOMPLETE | COMPLETE")
    target_date = db.Column(db.DateTime(timezone=True), nullable=True)
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    order = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<Milestone {self.id}: {self.title[:40]} order={self.order}>"
