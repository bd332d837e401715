"""Bag clubs: the user's clubs in bag order, each with an optional swing cue."""

from collections.abc import Sequence
import logging

from sqlalchemy import select

from app.core.context import UserContext
from app.core.errors import NotFoundError, ValidationFailed
from app.db.transaction import atomic
from app.models.bag_club import BagClub
from app.services.ordering import apply_order, next_sort_order, repack_sort_order

logger = logging.getLogger(__name__)

LABEL_MIN = 1
LABEL_MAX = 40
BSM_MAX = 200


def list_bag_clubs(ctx: UserContext) -> list[BagClub]:
    return list(
        ctx.db.execute(
            select(BagClub)
            .where(BagClub.user_id == ctx.user_id)
            .order_by(BagClub.sort_order, BagClub.id)
        ).scalars()
    )


def get_bag_club(ctx: UserContext, club_id: int) -> BagClub:
    club = ctx.db.execute(
        select(BagClub).where(BagClub.id == club_id, BagClub.user_id == ctx.user_id)
    ).scalars().one_or_none()
    if not club:
        raise NotFoundError("Club not found")
    return club


def create_bag_club(ctx: UserContext, label: str) -> BagClub:
    label = (label or "").strip()
    if not LABEL_MIN <= len(label) <= LABEL_MAX:
        raise ValidationFailed(f"Club name must be between {LABEL_MIN} and {LABEL_MAX} characters.")

    with atomic(ctx.db, "create bag club"):
        club = BagClub(
            user_id=ctx.user_id,
            label=label,
            sort_order=next_sort_order(ctx.db, BagClub, ctx.user_id),
            bsm=None,
        )
        ctx.db.add(club)

    ctx.db.refresh(club)
    return club


def update_bag_club_bsm(ctx: UserContext, club_id: int, bsm: str | None) -> BagClub:
    club = get_bag_club(ctx, club_id)
    value = (bsm or "").strip()
    if len(value) > BSM_MAX:
        raise ValidationFailed(f"Swing cue must be at most {BSM_MAX} characters.")

    with atomic(ctx.db, "update bag club cue"):
        club.bsm = value or None

    ctx.db.refresh(club)
    return club


def delete_bag_club(ctx: UserContext, club_id: int) -> None:
    """Delete a club and repack the remaining clubs to 1..N.

    Strokes that used the club keep existing with ``club_id`` cleared (FK SET NULL).
    """
    club = get_bag_club(ctx, club_id)

    with atomic(ctx.db, "delete bag club"):
        ctx.db.delete(club)
        ctx.db.flush()
        repack_sort_order(list_bag_clubs(ctx))

    logger.info("bag club deleted user_id=%s club_id=%s", ctx.user_id, club_id)


def reorder_bag_clubs(ctx: UserContext, ordered_ids: Sequence[int]) -> list[BagClub]:
    clubs = list_bag_clubs(ctx)
    with atomic(ctx.db, "reorder bag clubs"):
        apply_order(clubs, ordered_ids)
    return list_bag_clubs(ctx)
