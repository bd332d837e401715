"""Dashboard, history and round-detail read models.

Loads counted strokes for the rounds involved and runs them through
``app.services.stats``.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from app.core.context import UserContext
from app.core.errors import ValidationFailed
from app.models.round import ROUND_COMPLETE, Round, Stroke
from app.services import stats
from app.services.rounds import get_active_round, get_round

HISTORY_LIMIT = 250
HISTORY_RANGES = {"30": 30, "90": 90, "all": None}
SUMMARY_ROUNDS = 5


def course_name_of(rnd: Round) -> str:
    if rnd.course is not None:
        return rnd.course.course_name
    if rnd.home_club is not None:
        return rnd.home_club.name
    return "Course"


def counted_strokes_by_round(ctx: UserContext, round_ids: Iterable[int]) -> dict[int, list[Stroke]]:
    ids = list(round_ids)
    out: dict[int, list[Stroke]] = {rid: [] for rid in ids}
    if not ids:
        return out

    strokes = ctx.db.execute(
        select(Stroke)
        .where(Stroke.round_id.in_(ids), Stroke.is_counted.is_(True))
        .order_by(Stroke.round_id, Stroke.hole_number, Stroke.seq)
    ).scalars()
    for s in strokes:
        out[s.round_id].append(s)
    return out


def _completed_rounds(ctx: UserContext):
    return (
        select(Round)
        .options(joinedload(Round.course), joinedload(Round.home_club))
        .where(Round.user_id == ctx.user_id, Round.status == ROUND_COMPLETE)
    )


@dataclass
class RoundStat:
    round: Round
    course_name: str
    pct: int | None
    counted_total: int


@dataclass
class DashboardSummary:
    rounds: list[RoundStat]
    mental_trend: str
    stroke_trend: str


@dataclass
class Dashboard:
    active_round: Round | None
    active_course_name: str | None
    latest: RoundStat | None
    prior: list[RoundStat]
    prior_avg: int | None
    delta: int | None
    trend: str | None
    trend_label: str
    spark: list[int]
    breakdown: list[stats.BreakdownRow]
    late_round: stats.LateRoundCallout | None
    summary: DashboardSummary


def _round_stat(rnd: Round, strokes: list[Stroke]) -> RoundStat:
    t = stats.tally(strokes)
    return RoundStat(round=rnd, course_name=course_name_of(rnd), pct=t.pct, counted_total=t.total)


def summary(ctx: UserContext) -> DashboardSummary:
    """Last five completed rounds, newest first, with improving/flat/declining trends."""
    rounds = ctx.db.execute(
        _completed_rounds(ctx)
        .where(Round.completed_at.isnot(None))
        .order_by(Round.completed_at.desc(), Round.id.desc())
        .limit(SUMMARY_ROUNDS)
    ).scalars().unique().all()

    by_round = counted_strokes_by_round(ctx, [r.id for r in rounds])
    computed = [_round_stat(r, by_round[r.id]) for r in rounds]

    mental_series = [r.pct for r in computed if r.pct is not None]
    stroke_series = [r.counted_total for r in computed]
    return DashboardSummary(
        rounds=computed,
        mental_trend=stats.summary_trend(mental_series, higher_is_better=True),
        # Fewer strokes is better.
        stroke_trend=stats.summary_trend(stroke_series, higher_is_better=False),
    )


def dashboard(ctx: UserContext) -> Dashboard:
    active = get_active_round(ctx)

    window = ctx.db.execute(
        _completed_rounds(ctx)
        .order_by(Round.started_at.desc(), Round.id.desc())
        .limit(1 + stats.PRIOR_ROUNDS)
    ).scalars().unique().all()

    by_round = counted_strokes_by_round(ctx, [r.id for r in window])
    computed = [_round_stat(r, by_round[r.id]) for r in window]

    latest = computed[0] if computed else None
    prior = computed[1:]

    prior_avg = stats.prior_average(r.pct for r in prior)
    delta = stats.delta_vs_prior(latest.pct, prior_avg) if latest else None

    if latest:
        latest_strokes = by_round[latest.round.id]
        breakdown = stats.stroke_type_breakdown(
            latest_strokes, [by_round[r.round.id] for r in prior]
        )
        late_round = stats.late_round_slip(latest_strokes)
        spark = stats.spark_heights([r.pct for r in reversed(computed)])
    else:
        breakdown, late_round, spark = [], None, []

    return Dashboard(
        active_round=active,
        active_course_name=course_name_of(active) if active else None,
        latest=latest,
        prior=prior,
        prior_avg=prior_avg,
        delta=delta,
        trend=stats.classify_delta(delta, stats.ROUND_TREND_DEADBAND),
        trend_label=stats.trend_label(delta),
        spark=spark,
        breakdown=breakdown,
        late_round=late_round,
        summary=summary(ctx),
    )


@dataclass
class HistoryEntry:
    round: Round
    course_name: str
    pct: int | None
    highlights: list[str] = field(default_factory=list)


def history(ctx: UserContext, range_key: str = "30", course: str = "all") -> list[HistoryEntry]:
    """Completed rounds, newest first.

    ``range_key`` is ``30``, ``90`` or ``all`` days; ``course`` is ``all``,
    ``home`` (rounds played on the home club) or a user course id.
    """
    if range_key not in HISTORY_RANGES:
        raise ValidationFailed("range must be one of 30, 90, all")

    stmt = _completed_rounds(ctx).where(Round.completed_at.isnot(None))

    days = HISTORY_RANGES[range_key]
    if days is not None:
        stmt = stmt.where(Round.completed_at >= datetime.now(timezone.utc) - timedelta(days=days))

    if course == "home":
        stmt = stmt.where(Round.user_course_id.is_(None))
    elif course != "all":
        try:
            course_id = int(course)
        except ValueError:
            raise ValidationFailed("course must be all, home or a course id")
        stmt = stmt.where(Round.user_course_id == course_id)

    rounds = ctx.db.execute(
        stmt.order_by(Round.completed_at.desc(), Round.id.desc()).limit(HISTORY_LIMIT)
    ).scalars().unique().all()

    by_round = counted_strokes_by_round(ctx, [r.id for r in rounds])
    return [
        HistoryEntry(
            round=r,
            course_name=course_name_of(r),
            pct=stats.tally(by_round[r.id]).pct,
            highlights=stats.round_highlights(by_round[r.id]),
        )
        for r in rounds
    ]


@dataclass
class HoleSummary:
    hole_number: int
    total: int
    ok: int
    pct: int | None
    strokes: list[Stroke]


@dataclass
class RoundDetail:
    round: Round
    course_name: str
    pct: int | None
    counted_total: int
    prior_avg: int | None
    delta: int | None
    trend: str | None
    trend_label: str
    spark: list[int]
    holes: list[HoleSummary]


def round_detail(ctx: UserContext, round_id: int) -> RoundDetail:
    rnd = get_round(ctx, round_id)
    strokes = counted_strokes_by_round(ctx, [rnd.id])[rnd.id]
    t = stats.tally(strokes)

    # The five rounds completed before this one (all completed rounds while it is still open).
    prev_stmt = _completed_rounds(ctx).where(Round.id != rnd.id, Round.completed_at.isnot(None))
    if rnd.completed_at is not None:
        prev_stmt = prev_stmt.where(Round.completed_at < rnd.completed_at)
    prev = ctx.db.execute(
        prev_stmt.order_by(Round.completed_at.desc(), Round.id.desc()).limit(stats.PRIOR_ROUNDS)
    ).scalars().unique().all()

    prev_strokes = counted_strokes_by_round(ctx, [r.id for r in prev])
    prev_pcts_newest_first = [stats.tally(prev_strokes[r.id]).pct for r in prev]

    prior_avg = stats.prior_average(prev_pcts_newest_first)
    delta = stats.delta_vs_prior(t.pct, prior_avg)

    holes: list[HoleSummary] = []
    for n in range(1, rnd.holes_count + 1):
        on_hole = [s for s in strokes if s.hole_number == n]
        ht = stats.tally(on_hole)
        holes.append(HoleSummary(hole_number=n, total=ht.total, ok=ht.ok, pct=ht.pct, strokes=on_hole))

    return RoundDetail(
        round=rnd,
        course_name=course_name_of(rnd),
        pct=t.pct,
        counted_total=t.total,
        prior_avg=prior_avg,
        delta=delta,
        trend=stats.classify_delta(delta, stats.ROUND_TREND_DEADBAND),
        trend_label=stats.trend_label(delta),
        spark=stats.spark_heights(list(reversed(prev_pcts_newest_first)) + [t.pct]),
        holes=holes,
    )
