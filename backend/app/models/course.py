from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class UserCourse(Base):
    __tablename__ = "user_courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_name: Mapped[str] = mapped_column(String(200), nullable=False)
    club_name: Mapped[str | None] = mapped_column(String(200))
    holes_count: Mapped[int] = mapped_column(Integer, nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="0")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    holes: Mapped[list["UserCourseHole"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="UserCourseHole.hole_number",
    )


class UserCourseHole(Base):
    __tablename__ = "user_course_holes"
    __table_args__ = (
        UniqueConstraint("user_course_id", "hole_number", name="uq_user_course_hole_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_course_id: Mapped[int] = mapped_column(
        ForeignKey("user_courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hole_number: Mapped[int] = mapped_column(Integer, nullable=False)
    par: Mapped[int] = mapped_column(Integer, nullable=False)

    course: Mapped["UserCourse"] = relationship(back_populates="holes")
