"""Card model and its many-to-many link to team labels."""

from datetime import datetime, timezone

from teamboard.models import db

# Presence of any row here means card labels have been moved to the relational model.
card_labels = db.Table(
    "card_labels",
    db.Column("card_id", db.Integer, db.ForeignKey("cards.id", ondelete="CASCADE"), primary_key=True),
    db.Column("label_id", db.Integer, db.ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True),
)


class Card(db.Model):
    """Board card. Labels are attached through ``card_labels``."""

    __tablename__ = "cards"

    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(
        db.Integer,
        db.ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(300), nullable=False)
    slug = db.Column(db.String(300), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    labels = db.relationship("Label", secondary=card_labels, lazy="selectin", backref="cards")

    def __repr__(self):
        return f"<Card {self.id}: {self.title[:40]}>"
