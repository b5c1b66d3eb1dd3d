"""Initial ghost report schema

Revision ID: 20261018_initial
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261018_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "User",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(32), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("email", sa.String(128), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_user_username"),
        sa.UniqueConstraint("email", name="uq_user_email"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "Ghost",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(32), nullable=True),
        sa.Column("name", sa.String(32), nullable=False),
        sa.Column("description", sa.String(512), nullable=True),
        sa.Column("visibility", sa.Integer(), nullable=True),
        sa.CheckConstraint("visibility BETWEEN 0 AND 10", name="checkGhostVisibility"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "Tour",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("startTime", sa.DateTime(), nullable=False),
        sa.Column("endTime", sa.DateTime(), nullable=False),
        sa.Column("guide", sa.String(32), nullable=False),
        sa.Column("path", sa.Text(), nullable=False),
        sa.CheckConstraint("startTime < endTime", name="checkTime"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "Ghost_Buster",
        sa.Column("userID", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("ghosts_busted", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("alias", sa.String(32), nullable=True),
        sa.ForeignKeyConstraint(["userID"], ["User.id"]),
        sa.PrimaryKeyConstraint("userID"),
    )

    op.create_table(
        "Sighting",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("visibility", sa.Integer(), nullable=False),
        sa.Column("time", sa.DateTime(), nullable=False),
        sa.Column("userReportID", sa.Integer(), nullable=False),
        sa.Column("latitude", sa.Numeric(11, 8), nullable=True),
        sa.Column("longitude", sa.Numeric(11, 8), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.CheckConstraint("visibility BETWEEN 0 AND 10", name="checkSightingVisibility"),
        sa.ForeignKeyConstraint(["userReportID"], ["User.id"]),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    with op.batch_alter_table("Sighting", schema=None) as batch_op:
        batch_op.create_index("ix_sighting_time", ["time"], unique=False)
        batch_op.create_index("ix_Sighting_userReportID", ["userReportID"], unique=False)

    op.create_table(
        "Ghost_Comment",
        sa.Column("userID", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("ghostID", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("reportTime", sa.DateTime(), nullable=False),
        sa.Column("description", sa.String(512), nullable=False),
        sa.ForeignKeyConstraint(["userID"], ["User.id"]),
        sa.ForeignKeyConstraint(["ghostID"], ["Ghost.id"]),
        sa.PrimaryKeyConstraint("userID", "ghostID"),
    )

    op.create_table(
        "Ghost_Buster_Fights_Ghost",
        sa.Column("userID", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("ghostID", sa.Integer(), autoincrement=False, nullable=False),
        sa.ForeignKeyConstraint(["userID"], ["Ghost_Buster.userID"]),
        sa.ForeignKeyConstraint(["ghostID"], ["Ghost.id"]),
        sa.PrimaryKeyConstraint("userID", "ghostID"),
    )

    op.create_table(
        "Sighting_Reports_Ghost",
        sa.Column("sightingID", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("ghostID", sa.Integer(), autoincrement=False, nullable=False),
        sa.ForeignKeyConstraint(["sightingID"], ["Sighting.id"]),
        sa.ForeignKeyConstraint(["ghostID"], ["Ghost.id"]),
        sa.PrimaryKeyConstraint("sightingID", "ghostID"),
    )

    op.create_table(
        "Sighting_Comment",
        sa.Column("userID", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("sightingID", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("reportTime", sa.DateTime(), nullable=False),
        sa.Column("description", sa.String(512), nullable=False),
        sa.ForeignKeyConstraint(["userID"], ["User.id"]),
        sa.ForeignKeyConstraint(["sightingID"], ["Sighting.id"]),
        sa.PrimaryKeyConstraint("userID", "sightingID"),
    )

    op.create_table(
        "Tour_Includes",
        sa.Column("tourID", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("ghostID", sa.Integer(), autoincrement=False, nullable=False),
        sa.ForeignKeyConstraint(["tourID"], ["Tour.id"]),
        sa.ForeignKeyConstraint(["ghostID"], ["Ghost.id"]),
        sa.PrimaryKeyConstraint("tourID", "ghostID"),
    )

    op.create_table(
        "Tour_Sign_Up",
        sa.Column("userID", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("tourID", sa.Integer(), autoincrement=False, nullable=False),
        sa.ForeignKeyConstraint(["userID"], ["User.id"]),
        sa.ForeignKeyConstraint(["tourID"], ["Tour.id"]),
        sa.PrimaryKeyConstraint("userID", "tourID"),
    )


def downgrade():
    op.drop_table("Tour_Sign_Up")
    op.drop_table("Tour_Includes")
    op.drop_table("Sighting_Comment")
    op.drop_table("Sighting_Reports_Ghost")
    op.drop_table("Ghost_Buster_Fights_Ghost")
    op.drop_table("Ghost_Comment")

    with op.batch_alter_table("Sighting", schema=None) as batch_op:
        batch_op.drop_index("ix_Sighting_userReportID")
        batch_op.drop_index("ix_sighting_time")

    op.drop_table("Sighting")
    op.drop_table("Ghost_Buster")
    op.drop_table("Tour")
    op.drop_table("Ghost")
    op.drop_table("User")
