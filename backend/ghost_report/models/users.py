from __future__ import annotations

from ..extensions import db


class User(db.Model):
    """
    Accounts that report sightings, comment, and sign up for tours.

    Username and email are unique across all users.
    """
    __tablename__ = "User"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_user_username"),
        db.UniqueConstraint("email", name="uq_user_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(32), nullable=False)
    # Bcrypt hashed password
    password = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(128), nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.id} {self.username}>"


class GhostBuster(db.Model):
    """
    Optional role record. A user without a row here is not a ghost buster.
    """
    __tablename__ = "Ghost_Buster"

    userID = db.Column(db.Integer, db.ForeignKey("User.id"), primary_key=True, autoincrement=False)
    ghosts_busted = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    alias = db.Column(db.String(32), nullable=True)

    def __repr__(self) -> str:
        return f"<GhostBuster {self.userID} busted={self.ghosts_busted}>"


class GhostBusterFightsGhost(db.Model):
    """In-progress fight between a ghost buster and a ghost."""
    __tablename__ = "Ghost_Buster_Fights_Ghost"

    userID = db.Column(db.Integer, db.ForeignKey("Ghost_Buster.userID"), primary_key=True, autoincrement=False)
    ghostID = db.Column(db.Integer, db.ForeignKey("Ghost.id"), primary_key=True, autoincrement=False)
