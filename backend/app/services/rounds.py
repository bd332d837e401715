"""Round and stroke tracking.

A round is started from a user course or from the home club. Every hole is
seeded with placeholder strokes from its par, and the golfer then adds,
deletes and ticks strokes as they play. Strokes on a user-course round only
count towards statistics once their hole is committed, which happens when the
golfer moves past it or closes the round.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
import logging

from sqlalchemy import select, update

from app.core.context import UserContext
from app.core.errors import ConflictError, NotFoundError, ValidationFailed
from app.db.transaction import atomic
from app.models.round import ROUND_ACTIVE, ROUND_COMPLETE, Round, RoundHole, Stroke
from app.models.stroke_type import StrokeType, rank_of
from app.services.bag import get_bag_club
from app.services.courses import get_course
from app.services.home_club import DEFAULT_PAR, find_home_club, home_club_pars
from app.services.stats import round_pct

logger = logging.getLogger(__name__)

SEEDABLE_PARS = (3, 4, 5)

_PAR_PATTERNS: dict[int, list[StrokeType]] = {
    3: [StrokeType.TEE_SHOT, StrokeType.PUTT, StrokeType.PUTT],
    5: [
        StrokeType.TEE_SHOT,
        StrokeType.LAY_UP,
        StrokeType.APPROACH,
        StrokeType.PUTT,
        StrokeType.PUTT,
    ],
}
_DEFAULT_PATTERN = [StrokeType.TEE_SHOT, StrokeType.APPROACH, StrokeType.PUTT, StrokeType.PUTT]


def pattern_for_par(par: int) -> list[StrokeType]:
    """Placeholder strokes for a hole; anything but par 3 or 5 plays as a par 4."""
    return list(_PAR_PATTERNS.get(par, _DEFAULT_PATTERN))


def insert_position(existing: Sequence[Stroke], stroke_type: str) -> int:
    """The ``seq`` a new stroke of ``stroke_type`` takes in a hole.

    It goes in front of the first stroke (in ``seq`` order) of a later
    canonical type, or after the last stroke when there is none.
    """
    ordered = sorted(existing, key=lambda s: s.seq)
    new_rank = rank_of(stroke_type)
    for s in ordered:
        if rank_of(s.stroke_type) > new_rank:
            return s.seq
    return (ordered[-1].seq if ordered else 0) + 1


def _parse_stroke_type(value: str | StrokeType) -> StrokeType:
    try:
        return StrokeType(value)
    except ValueError:
        raise ValidationFailed(f"Unknown stroke type: {value}")


def get_active_round(ctx: UserContext) -> Round | None:
    return ctx.db.execute(
        select(Round)
        .where(Round.user_id == ctx.user_id, Round.status == ROUND_ACTIVE)
        .order_by(Round.started_at.desc(), Round.id.desc())
        .limit(1)
    ).scalars().first()


def get_round(ctx: UserContext, round_id: int) -> Round:
    rnd = ctx.db.execute(
        select(Round).where(Round.id == round_id, Round.user_id == ctx.user_id)
    ).scalars().one_or_none()
    if not rnd:
        raise NotFoundError("Round not found")
    return rnd


def _get_open_round(ctx: UserContext, round_id: int) -> Round:
    rnd = get_round(ctx, round_id)
    if not rnd.is_active:
        raise ConflictError("Round already completed")
    return rnd


def _get_round_hole(ctx: UserContext, rnd: Round, hole_number: int) -> RoundHole:
    hole = ctx.db.execute(
        select(RoundHole).where(
            RoundHole.round_id == rnd.id, RoundHole.hole_number == hole_number
        )
    ).scalars().one_or_none()
    if not hole:
        raise ValidationFailed("Invalid hole_number for round")
    return hole


def get_stroke(ctx: UserContext, stroke_id: int) -> tuple[Stroke, Round]:
    row = ctx.db.execute(
        select(Stroke, Round)
        .join(Round, Round.id == Stroke.round_id)
        .where(Stroke.id == stroke_id, Round.user_id == ctx.user_id)
    ).first()
    if not row:
        raise NotFoundError("Stroke not found")
    return row[0], row[1]


def list_strokes_for_hole(ctx: UserContext, round_id: int, hole_number: int) -> list[Stroke]:
    return list(
        ctx.db.execute(
            select(Stroke)
            .where(Stroke.round_id == round_id, Stroke.hole_number == hole_number)
            .order_by(Stroke.seq, Stroke.id)
        ).scalars()
    )


def counted_mental_pct(ctx: UserContext, round_id: int) -> int | None:
    rows = ctx.db.execute(
        select(Stroke.mental_ok).where(Stroke.round_id == round_id, Stroke.is_counted.is_(True))
    ).scalars().all()
    return round_pct(sum(1 for ok in rows if ok), len(rows))


def start_round(ctx: UserContext, user_course_id: int | None = None) -> Round:
    """Start a round and seed every hole with the placeholder strokes for its par."""
    if get_active_round(ctx) is not None:
        raise ConflictError("You already have an active round")

    home_club = find_home_club(ctx)
    if home_club is None:
        raise ValidationFailed("Please set your Home Club in Account before starting a round.")

    if user_course_id is not None:
        course = get_course(ctx, user_course_id)
        par_by_hole = {h.hole_number: h.par for h in course.holes}
        pars = [
            par_by_hole[n] if par_by_hole.get(n) in SEEDABLE_PARS else DEFAULT_PAR
            for n in range(1, course.holes_count + 1)
        ]
        # Course rounds hold strokes back from the stats until each hole is committed.
        committed = False
    else:
        pars = home_club_pars(home_club)
        committed = True

    with atomic(ctx.db, "start round"):
        rnd = Round(
            user_id=ctx.user_id,
            home_club_id=home_club.id,
            user_course_id=user_course_id,
            holes_count=len(pars),
            current_hole_number=1,
            status=ROUND_ACTIVE,
        )
        ctx.db.add(rnd)
        ctx.db.flush()

        for hole_number, par in enumerate(pars, start=1):
            ctx.db.add(
                RoundHole(round_id=rnd.id, hole_number=hole_number, par=par, is_committed=committed)
            )
            for seq, stroke_type in enumerate(pattern_for_par(par), start=1):
                ctx.db.add(
                    Stroke(
                        round_id=rnd.id,
                        hole_number=hole_number,
                        seq=seq,
                        stroke_type=stroke_type.value,
                        mental_ok=False,
                        club_id=None,
                        is_counted=committed,
                    )
                )

    logger.info(
        "round started user_id=%s round_id=%s holes=%s user_course_id=%s",
        ctx.user_id,
        rnd.id,
        len(pars),
        user_course_id,
    )
    return rnd


@dataclass
class HoleView:
    round: Round
    hole_number: int
    par: int
    is_committed: bool
    strokes: list[Stroke]
    mental_pct: int | None


def hole_view(ctx: UserContext, round_id: int, hole_number: int) -> HoleView:
    rnd = get_round(ctx, round_id)
    hole = _get_round_hole(ctx, rnd, hole_number)
    return HoleView(
        round=rnd,
        hole_number=hole.hole_number,
        par=hole.par,
        is_committed=hole.is_committed,
        strokes=list_strokes_for_hole(ctx, rnd.id, hole.hole_number),
        mental_pct=counted_mental_pct(ctx, rnd.id),
    )


def add_stroke(
    ctx: UserContext,
    round_id: int,
    hole_number: int,
    stroke_type: str | StrokeType,
    club_id: int | None = None,
) -> Stroke:
    """Insert a stroke at its canonical position, shifting later strokes down one ``seq``."""
    st = _parse_stroke_type(stroke_type)
    rnd = _get_open_round(ctx, round_id)
    hole = _get_round_hole(ctx, rnd, hole_number)
    if club_id is not None:
        get_bag_club(ctx, club_id)

    counted = hole.is_committed if rnd.uses_course_gating else True

    with atomic(ctx.db, "add stroke"):
        existing = list_strokes_for_hole(ctx, rnd.id, hole_number)
        target = insert_position(existing, st.value)

        # Highest seq first, one row per flush: uq_stroke_round_hole_seq is checked per statement.
        for s in sorted(existing, key=lambda s: s.seq, reverse=True):
            if s.seq >= target:
                s.seq += 1
                ctx.db.flush()

        stroke = Stroke(
            round_id=rnd.id,
            hole_number=hole_number,
            seq=target,
            stroke_type=st.value,
            mental_ok=False,
            club_id=club_id,
            is_counted=counted,
        )
        ctx.db.add(stroke)

    logger.info(
        "stroke added round_id=%s hole=%s seq=%s type=%s", rnd.id, hole_number, target, st.value
    )
    return stroke


def set_mental_ok(ctx: UserContext, stroke_id: int, mental_ok: bool) -> Stroke:
    return update_stroke(ctx, stroke_id, mental_ok=bool(mental_ok))


def toggle_mental(ctx: UserContext, stroke_id: int) -> Stroke:
    stroke, _ = get_stroke(ctx, stroke_id)
    return set_mental_ok(ctx, stroke_id, not stroke.mental_ok)


def set_stroke_club(ctx: UserContext, stroke_id: int, club_id: int | None) -> Stroke:
    return update_stroke(ctx, stroke_id, club_id=club_id, set_club=True)


def update_stroke(
    ctx: UserContext,
    stroke_id: int,
    mental_ok: bool | None = None,
    club_id: int | None = None,
    set_club: bool = False,
) -> Stroke:
    """Apply a stroke edit as one unit.

    ``mental_ok`` is left alone when ``None``. The club is only touched when
    ``set_club`` is true, so ``club_id=None`` with ``set_club`` clears it.
    Everything is checked before any field changes.
    """
    stroke, rnd = get_stroke(ctx, stroke_id)
    if not rnd.is_active:
        raise ConflictError("Round already completed")
    if set_club and club_id is not None:
        get_bag_club(ctx, club_id)

    with atomic(ctx.db, "update stroke"):
        if mental_ok is not None:
            stroke.mental_ok = bool(mental_ok)
        if set_club:
            stroke.club_id = club_id
    return stroke


def delete_stroke(ctx: UserContext, stroke_id: int) -> None:
    """Remove a stroke. The remaining ``seq`` values keep their gaps."""
    stroke, rnd = get_stroke(ctx, stroke_id)
    if not rnd.is_active:
        raise ConflictError("Round already completed")

    with atomic(ctx.db, "delete stroke"):
        ctx.db.delete(stroke)

    logger.info("stroke deleted round_id=%s stroke_id=%s", rnd.id, stroke_id)


def _commit_hole(ctx: UserContext, hole: RoundHole) -> None:
    hole.is_committed = True
    ctx.db.execute(
        update(Stroke)
        .where(Stroke.round_id == hole.round_id, Stroke.hole_number == hole.hole_number)
        .values(is_counted=True)
    )


def commit_hole(ctx: UserContext, round_id: int, hole_number: int) -> RoundHole:
    """Make a hole's strokes count. One-way: a committed hole stays committed."""
    rnd = _get_open_round(ctx, round_id)
    hole = _get_round_hole(ctx, rnd, hole_number)

    with atomic(ctx.db, "commit hole"):
        _commit_hole(ctx, hole)

    logger.info("hole committed round_id=%s hole=%s", rnd.id, hole_number)
    return hole


def go_to_hole(ctx: UserContext, round_id: int, hole_number: int) -> Round:
    """Move the round to another hole, committing the current one when moving forward."""
    rnd = _get_open_round(ctx, round_id)
    if not 1 <= hole_number <= rnd.holes_count:
        raise ValidationFailed("Invalid hole_number for round")

    current = _get_round_hole(ctx, rnd, rnd.current_hole_number)

    with atomic(ctx.db, "change hole"):
        if rnd.uses_course_gating and not current.is_committed and hole_number > rnd.current_hole_number:
            _commit_hole(ctx, current)
            logger.info("hole committed round_id=%s hole=%s", rnd.id, current.hole_number)
        rnd.current_hole_number = hole_number

    return rnd


def complete_round(ctx: UserContext, round_id: int) -> Round:
    rnd = _get_open_round(ctx, round_id)
    current = _get_round_hole(ctx, rnd, rnd.current_hole_number)

    with atomic(ctx.db, "complete round"):
        if rnd.uses_course_gating and not current.is_committed:
            _commit_hole(ctx, current)
        rnd.status = ROUND_COMPLETE
        rnd.completed_at = datetime.now(timezone.utc)

    logger.info("round completed user_id=%s round_id=%s", ctx.user_id, rnd.id)
    return rnd


def delete_round(ctx: UserContext, round_id: int) -> None:
    rnd = get_round(ctx, round_id)
    if rnd.status == ROUND_ACTIVE:
        raise ConflictError("Can't delete an active round. Close it first.")

    with atomic(ctx.db, "delete round"):
        ctx.db.delete(rnd)

    logger.info("round deleted user_id=%s round_id=%s", ctx.user_id, round_id)


def save_reflection(ctx: UserContext, round_id: int, reflection: str | None) -> Round:
    rnd = get_round(ctx, round_id)
    with atomic(ctx.db, "save reflection"):
        rnd.reflection = (reflection or "").strip() or None
    return rnd
