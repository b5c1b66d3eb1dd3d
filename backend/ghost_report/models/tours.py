from __future__ import annotations

from ..extensions import db


class Tour(db.Model):
    """
    Guided walk past sighting locations.

    The schema itself rejects a tour whose start does not precede its end.
    """
    __tablename__ = "Tour"
    __table_args__ = (
        db.CheckConstraint("startTime < endTime", name="checkTime"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    startTime = db.Column(db.DateTime, nullable=False)
    endTime = db.Column(db.DateTime, nullable=False)
    guide = db.Column(db.String(32), nullable=False)
    # Free text route, e.g. "Old Town Square -> Haunted Manor"
    path = db.Column(db.Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Tour {self.id} by {self.guide}>"


class TourIncludes(db.Model):
    __tablename__ = "Tour_Includes"

    tourID = db.Column(db.Integer, db.ForeignKey("Tour.id"), primary_key=True, autoincrement=False)
    ghostID = db.Column(db.Integer, db.ForeignKey("Ghost.id"), primary_key=True, autoincrement=False)


class TourSignUp(db.Model):
    """Presence of a row means the user is signed up for the tour."""
    __tablename__ = "Tour_Sign_Up"

    userID = db.Column(db.Integer, db.ForeignKey("User.id"), primary_key=True, autoincrement=False)
    tourID = db.Column(db.Integer, db.ForeignKey("Tour.id"), primary_key=True, autoincrement=False)
