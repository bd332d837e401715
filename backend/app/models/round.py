from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

ROUND_ACTIVE = "active"
ROUND_COMPLETE = "complete"


class Round(Base):
    __tablename__ = "rounds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    home_club_id: Mapped[int | None] = mapped_column(
        ForeignKey("home_clubs.id", ondelete="SET NULL"), index=True
    )
    # Set when the round was started from a user course (per-hole commit gating).
    user_course_id: Mapped[int | None] = mapped_column(
        ForeignKey("user_courses.id", ondelete="SET NULL"), index=True
    )
    holes_count: Mapped[int] = mapped_column(Integer, nullable=False)
    current_hole_number: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    # active/complete
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default=ROUND_ACTIVE)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    reflection: Mapped[str | None] = mapped_column(Text)

    home_club = relationship("HomeClub")
    course = relationship("UserCourse")
    holes: Mapped[list["RoundHole"]] = relationship(
        back_populates="round",
        cascade="all, delete-orphan",
        order_by="RoundHole.hole_number",
    )
    strokes: Mapped[list["Stroke"]] = relationship(
        back_populates="round",
        cascade="all, delete-orphan",
        order_by="Stroke.id",
    )

    @property
    def is_active(self) -> bool:
        return self.status == ROUND_ACTIVE

    @property
    def uses_course_gating(self) -> bool:
        # Only rounds started from a user course hold strokes back until the hole is committed.
        return self.user_course_id is not None


class RoundHole(Base):
    __tablename__ = "round_holes"
    __table_args__ = (
        UniqueConstraint("round_id", "hole_number", name="uq_round_hole_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    round_id: Mapped[int] = mapped_column(
        ForeignKey("rounds.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hole_number: Mapped[int] = mapped_column(Integer, nullable=False)
    # Snapshot taken at round start.
    par: Mapped[int] = mapped_column(Integer, nullable=False)
    is_committed: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="0")

    round: Mapped["Round"] = relationship(back_populates="holes")


class Stroke(Base):
    __tablename__ = "strokes"
    __table_args__ = (
        Index("ix_strokes_round_hole", "round_id", "hole_number"),
        UniqueConstraint("round_id", "hole_number", "seq", name="uq_stroke_round_hole_seq"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    round_id: Mapped[int] = mapped_column(
        ForeignKey("rounds.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hole_number: Mapped[int] = mapped_column(Integer, nullable=False)
    seq: Mapped[int] = mapped_column(Integer, nullable=False)
    stroke_type: Mapped[str] = mapped_column(String(16), nullable=False)
    mental_ok: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="0")
    club_id: Mapped[int | None] = mapped_column(
        ForeignKey("bag_clubs.id", ondelete="SET NULL"), index=True
    )
    is_counted: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    round: Mapped["Round"] = relationship(back_populates="strokes")
