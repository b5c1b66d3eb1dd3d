from __future__ import annotations

from ..extensions import db


class Sighting(db.Model):
    """
    A single report by one user. Ghosts are attached through
    Sighting_Reports_Ghost, normally exactly one but possibly several.
    """
    __tablename__ = "Sighting"
    __table_args__ = (
        db.CheckConstraint("visibility BETWEEN 0 AND 10", name="checkSightingVisibility"),
        db.Index("ix_sighting_time", "time"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    visibility = db.Column(db.Integer, nullable=False, default=5)
    time = db.Column(db.DateTime, nullable=False)
    userReportID = db.Column(db.Integer, db.ForeignKey("User.id"), nullable=False, index=True)
    latitude = db.Column(db.Numeric(11, 8), nullable=True)
    longitude = db.Column(db.Numeric(11, 8), nullable=True)
    description = db.Column(db.Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Sighting {self.id} by {self.userReportID}>"


class SightingReportsGhost(db.Model):
    __tablename__ = "Sighting_Reports_Ghost"

    sightingID = db.Column(db.Integer, db.ForeignKey("Sighting.id"), primary_key=True, autoincrement=False)
    ghostID = db.Column(db.Integer, db.ForeignKey("Ghost.id"), primary_key=True, autoincrement=False)


class SightingComment(db.Model):
    """One comment per (user, sighting); posting again rewrites it."""
    __tablename__ = "Sighting_Comment"

    userID = db.Column(db.Integer, db.ForeignKey("User.id"), primary_key=True, autoincrement=False)
    sightingID = db.Column(db.Integer, db.ForeignKey("Sighting.id"), primary_key=True, autoincrement=False)
    reportTime = db.Column(db.DateTime, nullable=False)
    description = db.Column(db.String(512), nullable=False)
