"""baseline schema

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0a1b2c3d4e5f"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    cols = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        )
    ]
    if with_updated:
        cols.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            )
        )
    return cols


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("external_id", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_external_id"), "users", ["external_id"], unique=True)

    op.create_table(
        "home_clubs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("holes_count", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_home_clubs_user_id"), "home_clubs", ["user_id"], unique=True)

    op.create_table(
        "home_club_holes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("home_club_id", sa.Integer(), nullable=False),
        sa.Column("hole_number", sa.Integer(), nullable=False),
        sa.Column("par", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["home_club_id"], ["home_clubs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("home_club_id", "hole_number", name="uq_home_club_hole_number"),
    )
    op.create_index(
        op.f("ix_home_club_holes_home_club_id"), "home_club_holes", ["home_club_id"], unique=False
    )

    op.create_table(
        "user_courses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("course_name", sa.String(length=200), nullable=False),
        sa.Column("club_name", sa.String(length=200), nullable=True),
        sa.Column("holes_count", sa.Integer(), nullable=False),
        sa.Column("is_default", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_courses_id"), "user_courses", ["id"], unique=False)
    op.create_index(op.f("ix_user_courses_user_id"), "user_courses", ["user_id"], unique=False)

    op.create_table(
        "user_course_holes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_course_id", sa.Integer(), nullable=False),
        sa.Column("hole_number", sa.Integer(), nullable=False),
        sa.Column("par", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["user_course_id"], ["user_courses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_course_id", "hole_number", name="uq_user_course_hole_number"),
    )
    op.create_index(
        op.f("ix_user_course_holes_user_course_id"),
        "user_course_holes",
        ["user_course_id"],
        unique=False,
    )

    for table in ("bag_clubs", "mental_elements"):
        extra = [sa.Column("bsm", sa.String(length=200), nullable=True)] if table == "bag_clubs" else []
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=False),
            sa.Column("label", sa.String(length=40), nullable=False),
            sa.Column("sort_order", sa.Integer(), nullable=False),
            *extra,
            *_timestamps(),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f(f"ix_{table}_user_id"), table, ["user_id"], unique=False)

    op.create_table(
        "rounds",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("home_club_id", sa.Integer(), nullable=True),
        sa.Column("user_course_id", sa.Integer(), nullable=True),
        sa.Column("holes_count", sa.Integer(), nullable=False),
        sa.Column("current_hole_number", sa.Integer(), server_default="1", nullable=False),
        sa.Column("status", sa.String(length=16), server_default="active", nullable=False),
        sa.Column(
            "started_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reflection", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["home_club_id"], ["home_clubs.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["user_course_id"], ["user_courses.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_rounds_user_id"), "rounds", ["user_id"], unique=False)
    op.create_index(op.f("ix_rounds_home_club_id"), "rounds", ["home_club_id"], unique=False)
    op.create_index(op.f("ix_rounds_user_course_id"), "rounds", ["user_course_id"], unique=False)

    op.create_table(
        "round_holes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("round_id", sa.Integer(), nullable=False),
        sa.Column("hole_number", sa.Integer(), nullable=False),
        sa.Column("par", sa.Integer(), nullable=False),
        sa.Column("is_committed", sa.Boolean(), server_default="0", nullable=False),
        sa.ForeignKeyConstraint(["round_id"], ["rounds.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("round_id", "hole_number", name="uq_round_hole_number"),
    )
    op.create_index(op.f("ix_round_holes_round_id"), "round_holes", ["round_id"], unique=False)

    op.create_table(
        "strokes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("round_id", sa.Integer(), nullable=False),
        sa.Column("hole_number", sa.Integer(), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("stroke_type", sa.String(length=16), nullable=False),
        sa.Column("mental_ok", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("club_id", sa.Integer(), nullable=True),
        sa.Column("is_counted", sa.Boolean(), server_default="0", nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["round_id"], ["rounds.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["club_id"], ["bag_clubs.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("round_id", "hole_number", "seq", name="uq_stroke_round_hole_seq"),
    )
    op.create_index(op.f("ix_strokes_round_id"), "strokes", ["round_id"], unique=False)
    op.create_index(op.f("ix_strokes_club_id"), "strokes", ["club_id"], unique=False)
    op.create_index("ix_strokes_round_hole", "strokes", ["round_id", "hole_number"], unique=False)

    op.create_table(
        "contact_messages",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        *_timestamps(with_updated=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "interest_signups",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("tier", sa.String(length=16), nullable=False),
        *_timestamps(with_updated=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_interest_signups_email"), "interest_signups", ["email"], unique=False
    )


def downgrade() -> None:
    for table in (
        "interest_signups",
        "contact_messages",
        "strokes",
        "round_holes",
        "rounds",
        "mental_elements",
        "bag_clubs",
        "user_course_holes",
        "user_courses",
        "home_club_holes",
        "home_clubs",
        "users",
    ):
        op.drop_table(table)
