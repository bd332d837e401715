"""Home club: the user's default course, used when a round is started without a course."""

from collections.abc import Sequence
import logging

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.core.context import UserContext
from app.core.errors import NotFoundError, ValidationFailed
from app.db.transaction import atomic
from app.models.home_club import HomeClub, HomeClubHole

logger = logging.getLogger(__name__)

DEFAULT_PAR = 4
PAR_MIN = 3
PAR_MAX = 6
MAX_HOLES = 36


def clamp_par(value: int | None) -> int:
    if value is None:
        return DEFAULT_PAR
    return max(PAR_MIN, min(PAR_MAX, int(value)))


def find_home_club(ctx: UserContext) -> HomeClub | None:
    return ctx.db.execute(
        select(HomeClub)
        .options(selectinload(HomeClub.holes))
        .where(HomeClub.user_id == ctx.user_id)
    ).scalars().one_or_none()


def get_home_club(ctx: UserContext) -> HomeClub:
    club = find_home_club(ctx)
    if not club:
        raise NotFoundError("Home club not set")
    return club


def home_club_pars(club: HomeClub) -> list[int]:
    """Par per hole 1..holes_count; all par 4 when the stored holes don't line up."""
    pars = [h.par for h in sorted(club.holes, key=lambda h: h.hole_number)]
    if len(pars) != club.holes_count:
        return [DEFAULT_PAR] * club.holes_count
    return pars


def save_home_club(ctx: UserContext, name: str, pars: Sequence[int]) -> HomeClub:
    """Create or replace the user's home club.

    Holes are numbered 1..N from the order of ``pars``; removing an entry from
    the list removes that hole and renumbers the ones after it.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationFailed("Please enter a club name.")
    if not 1 <= len(pars) <= MAX_HOLES:
        raise ValidationFailed(f"A home club needs between 1 and {MAX_HOLES} holes.")

    clean_pars = [clamp_par(p) for p in pars]
    club = find_home_club(ctx)

    with atomic(ctx.db, "save home club"):
        if club is None:
            club = HomeClub(user_id=ctx.user_id, name=name, holes_count=len(clean_pars))
            ctx.db.add(club)
        else:
            club.name = name
            club.holes_count = len(clean_pars)
            # Drop the old rows before inserting so (home_club_id, hole_number) stays unique.
            club.holes.clear()
            ctx.db.flush()

        club.holes.extend(
            HomeClubHole(hole_number=i, par=p) for i, p in enumerate(clean_pars, start=1)
        )

    logger.info("home club saved user_id=%s holes=%s", ctx.user_id, len(clean_pars))
    return get_home_club(ctx)
