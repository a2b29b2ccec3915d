"""
Teamboard Data Migrations
Team domain model.

Models:
    - Team: owning workspace group for boards, cards and labels
    - Label: team-scoped card label (replaces the old string-array column)
"""

from datetime import datetime, timezone

from teamboard.models import db


class Team(db.Model):
    """Collaboration team. Owns labels, cards and projects."""

    __tablename__ = "teams"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    labels = db.relationship(
        "Label", backref="team", lazy="dynamic",
        cascade="all, delete-orphan", order_by="Label.id",
    )

    def __repr__(self):
        return f"<Team {self.id}: {self.name}>"


class Label(db.Model):
    """
    Card label owned by a team.

    A label name is unique within its team; cards reference labels through
    the ``card_labels`` association table.
    """

    __tablename__ = "labels"
    __table_args__ = (
        db.UniqueConstraint("team_id", "name", name="uq_labels_team_name"),
    )

    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(
        db.Integer,
        db.ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(100), nullable=False)
    color = db.Column(db.String(7), nullable=False, default="#6B7280", comment="Hex color, e.g. #8B5CF6")

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
        return f"<Label {self.id}: {self.name} team={self.team_id}>"
