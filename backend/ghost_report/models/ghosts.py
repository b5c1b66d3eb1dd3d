from __future__ import annotations

from ..extensions import db


class Ghost(db.Model):
    """
    Canonical paranormal entity.

    A row named "Unknown" is created lazily the first time a sighting is
    reported without a ghost, and shared by every such sighting afterwards.
    """
    __tablename__ = "Ghost"
    __table_args__ = (
        db.CheckConstraint("visibility BETWEEN 0 AND 10", name="checkGhostVisibility"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(32), nullable=True)
    name = db.Column(db.String(32), nullable=False)
    description = db.Column(db.String(512), nullable=True)
    visibility = db.Column(db.Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<Ghost {self.id} {self.name}>"


class GhostComment(db.Model):
    """One comment per (user, ghost); posting again rewrites it."""
    __tablename__ = "Ghost_Comment"

    userID = db.Column(db.Integer, db.ForeignKey("User.id"), primary_key=True, autoincrement=False)
    ghostID = db.Column(db.Integer, db.ForeignKey("Ghost.id"), primary_key=True, autoincrement=False)
    reportTime = db.Column(db.DateTime, nullable=False)
    description = db.Column(db.String(512), nullable=False)
