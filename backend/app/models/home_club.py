from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class HomeClub(Base):
    __tablename__ = "home_clubs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # One home club per user.
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    holes_count: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    holes: Mapped[list["HomeClubHole"]] = relationship(
        back_populates="home_club",
        cascade="all, delete-orphan",
        order_by="HomeClubHole.hole_number",
    )


class HomeClubHole(Base):
    __tablename__ = "home_club_holes"
    __table_args__ = (
        UniqueConstraint("home_club_id", "hole_number", name="uq_home_club_hole_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    home_club_id: Mapped[int] = mapped_column(
        ForeignKey("home_clubs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hole_number: Mapped[int] = mapped_column(Integer, nullable=False)
    par: Mapped[int] = mapped_column(Integer, nullable=False)

    home_club: Mapped["HomeClub"] = relationship(back_populates="holes")
