from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.api.deps import get_user_context
from app.api.v1.rounds import RoundOut, round_to_out
from app.core.context import UserContext
from app.services import insights

router = APIRouter()


class RoundStatOut(BaseModel):
    round: RoundOut
    pct: int | None
    counted_total: int


class BreakdownRowOut(BaseModel):
    stroke_type: str
    label: str
    pct: int | None
    prev_avg: int | None
    delta: int | None
    trend: str | None
    spark: list[int]
    total: int

    class Config:
        from_attributes = True


class LateRoundOut(BaseModel):
    title: str
    pct: int | None
    text: str
    kind: str

    class Config:
        from_attributes = True


class SummaryOut(BaseModel):
    rounds: list[RoundStatOut]
    mental_trend: str
    stroke_trend: str


class DashboardOut(BaseModel):
    active_round: RoundOut | None
    latest: RoundStatOut | None
    prior: list[RoundStatOut]
    prior_avg: int | None
    delta: int | None
    trend: str | None
    trend_label: str
    spark: list[int]
    breakdown: list[BreakdownRowOut]
    late_round: LateRoundOut | None
    summary: SummaryOut


class HistoryEntryOut(BaseModel):
    round: RoundOut
    pct: int | None
    highlights: list[str]


def _stat_out(stat: insights.RoundStat) -> RoundStatOut:
    return RoundStatOut(
        round=round_to_out(stat.round), pct=stat.pct, counted_total=stat.counted_total
    )


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(ctx: UserContext = Depends(get_user_context)):
    d = insights.dashboard(ctx)
    return DashboardOut(
        active_round=round_to_out(d.active_round) if d.active_round else None,
        latest=_stat_out(d.latest) if d.latest else None,
        prior=[_stat_out(s) for s in d.prior],
        prior_avg=d.prior_avg,
        delta=d.delta,
        trend=d.trend,
        trend_label=d.trend_label,
        spark=d.spark,
        breakdown=[BreakdownRowOut.model_validate(row) for row in d.breakdown],
        late_round=LateRoundOut.model_validate(d.late_round) if d.late_round else None,
        summary=SummaryOut(
            rounds=[_stat_out(s) for s in d.summary.rounds],
            mental_trend=d.summary.mental_trend,
            stroke_trend=d.summary.stroke_trend,
        ),
    )


@router.get("/history", response_model=list[HistoryEntryOut])
def history(
    range_key: str = Query(default="30", alias="range"),
    course: str = Query(default="all"),
    ctx: UserContext = Depends(get_user_context),
):
    return [
        HistoryEntryOut(round=round_to_out(e.round), pct=e.pct, highlights=e.highlights)
        for e in insights.history(ctx, range_key=range_key, course=course)
    ]
