from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.api.deps import get_user_context
from app.core.context import UserContext
from app.models.round import Round
from app.models.stroke_type import StrokeType
from app.services import insights, rounds as engine

router = APIRouter()


class RoundCreate(BaseModel):
    # Omit to play the home club.
    user_course_id: int | None = None


class StrokeCreate(BaseModel):
    stroke_type: StrokeType
    club_id: int | None = None


class StrokeUpdate(BaseModel):
    mental_ok: bool | None = None
    club_id: int | None = None


class CurrentHoleIn(BaseModel):
    hole_number: int = Field(ge=1)


class ReflectionIn(BaseModel):
    reflection: str | None = Field(default=None, max_length=5000)


class RoundOut(BaseModel):
    id: int
    home_club_id: int | None
    user_course_id: int | None
    course_name: str
    holes_count: int
    current_hole_number: int
    status: str
    uses_course_gating: bool
    started_at: datetime
    completed_at: datetime | None
    reflection: str | None


class StrokeOut(BaseModel):
    id: int
    round_id: int
    hole_number: int
    seq: int
    stroke_type: str
    mental_ok: bool
    club_id: int | None
    is_counted: bool

    class Config:
        from_attributes = True


class HoleOut(BaseModel):
    round: RoundOut
    hole_number: int
    par: int
    is_committed: bool
    mental_pct: int | None
    strokes: list[StrokeOut]


class HoleCommitOut(BaseModel):
    hole_number: int
    is_committed: bool


class HoleSummaryOut(BaseModel):
    hole_number: int
    total: int
    ok: int
    pct: int | None
    strokes: list[StrokeOut]


class RoundDetailOut(BaseModel):
    round: RoundOut
    pct: int | None
    counted_total: int
    prior_avg: int | None
    delta: int | None
    trend: str | None
    trend_label: str
    spark: list[int]
    holes: list[HoleSummaryOut]


def round_to_out(rnd: Round) -> RoundOut:
    return RoundOut(
        id=rnd.id,
        home_club_id=rnd.home_club_id,
        user_course_id=rnd.user_course_id,
        course_name=insights.course_name_of(rnd),
        holes_count=rnd.holes_count,
        current_hole_number=rnd.current_hole_number,
        status=rnd.status,
        uses_course_gating=rnd.uses_course_gating,
        started_at=rnd.started_at,
        completed_at=rnd.completed_at,
        reflection=rnd.reflection,
    )


@router.get("/rounds/active", response_model=RoundOut | None)
def get_active_round(ctx: UserContext = Depends(get_user_context)):
    rnd = engine.get_active_round(ctx)
    return round_to_out(rnd) if rnd else None


@router.post("/rounds", response_model=RoundOut, status_code=201)
def start_round(payload: RoundCreate, ctx: UserContext = Depends(get_user_context)):
    rnd = engine.start_round(ctx, user_course_id=payload.user_course_id)
    return round_to_out(rnd)


@router.get("/rounds/{round_id}", response_model=RoundDetailOut)
def get_round(round_id: int, ctx: UserContext = Depends(get_user_context)):
    d = insights.round_detail(ctx, round_id)
    return RoundDetailOut(
        round=round_to_out(d.round),
        pct=d.pct,
        counted_total=d.counted_total,
        prior_avg=d.prior_avg,
        delta=d.delta,
        trend=d.trend,
        trend_label=d.trend_label,
        spark=d.spark,
        holes=[
            HoleSummaryOut(
                hole_number=h.hole_number,
                total=h.total,
                ok=h.ok,
                pct=h.pct,
                strokes=[StrokeOut.model_validate(s) for s in h.strokes],
            )
            for h in d.holes
        ],
    )


@router.delete("/rounds/{round_id}")
def delete_round(round_id: int, ctx: UserContext = Depends(get_user_context)):
    engine.delete_round(ctx, round_id)
    return {"ok": True}


@router.get("/rounds/{round_id}/holes/{hole_number}", response_model=HoleOut)
def get_hole(round_id: int, hole_number: int, ctx: UserContext = Depends(get_user_context)):
    view = engine.hole_view(ctx, round_id, hole_number)
    return HoleOut(
        round=round_to_out(view.round),
        hole_number=view.hole_number,
        par=view.par,
        is_committed=view.is_committed,
        mental_pct=view.mental_pct,
        strokes=[StrokeOut.model_validate(s) for s in view.strokes],
    )


@router.post(
    "/rounds/{round_id}/holes/{hole_number}/strokes", response_model=StrokeOut, status_code=201
)
def add_stroke(
    round_id: int,
    hole_number: int,
    payload: StrokeCreate,
    ctx: UserContext = Depends(get_user_context),
):
    return engine.add_stroke(
        ctx, round_id, hole_number, payload.stroke_type, club_id=payload.club_id
    )


@router.post("/rounds/{round_id}/holes/{hole_number}/commit", response_model=HoleCommitOut)
def commit_hole(round_id: int, hole_number: int, ctx: UserContext = Depends(get_user_context)):
    hole = engine.commit_hole(ctx, round_id, hole_number)
    return HoleCommitOut(hole_number=hole.hole_number, is_committed=hole.is_committed)


@router.post("/rounds/{round_id}/current-hole", response_model=RoundOut)
def go_to_hole(
    round_id: int,
    payload: CurrentHoleIn,
    ctx: UserContext = Depends(get_user_context),
):
    return round_to_out(engine.go_to_hole(ctx, round_id, payload.hole_number))


@router.post("/rounds/{round_id}/complete", response_model=RoundOut)
def complete_round(round_id: int, ctx: UserContext = Depends(get_user_context)):
    return round_to_out(engine.complete_round(ctx, round_id))


@router.put("/rounds/{round_id}/reflection", response_model=RoundOut)
def save_reflection(
    round_id: int,
    payload: ReflectionIn,
    ctx: UserContext = Depends(get_user_context),
):
    return round_to_out(engine.save_reflection(ctx, round_id, payload.reflection))


@router.patch("/strokes/{stroke_id}", response_model=StrokeOut)
def update_stroke(
    stroke_id: int,
    payload: StrokeUpdate,
    ctx: UserContext = Depends(get_user_context),
):
    # An explicit null clears the club.
    return engine.update_stroke(
        ctx,
        stroke_id,
        mental_ok=payload.mental_ok,
        club_id=payload.club_id,
        set_club="club_id" in payload.model_fields_set,
    )


@router.post("/strokes/{stroke_id}/toggle-mental", response_model=StrokeOut)
def toggle_mental(stroke_id: int, ctx: UserContext = Depends(get_user_context)):
    return engine.toggle_mental(ctx, stroke_id)


@router.delete("/strokes/{stroke_id}")
def delete_stroke(stroke_id: int, ctx: UserContext = Depends(get_user_context)):
    engine.delete_stroke(ctx, stroke_id)
    return {"ok": True}
