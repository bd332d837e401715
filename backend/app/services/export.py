import csv
import io

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from app.core.context import UserContext
from app.models.round import Round, Stroke
from app.services.insights import course_name_of
from app.services.rounds import get_round

CSV_HEADER = [
    "round_id",
    "completed_at",
    "course",
    "holes_count",
    "hole_number",
    "seq",
    "stroke_type",
    "mental_ok",
    "club_id",
]


def _blank(value) -> str:
    return "" if value is None else str(value)


def strokes_csv(ctx: UserContext, round_id: int | None = None) -> str:
    """Counted strokes of the user's rounds, one row each, header first.

    Lines end with ``\\n`` and there is no trailing newline.
    """
    stmt = (
        select(Stroke, Round)
        .join(Round, Round.id == Stroke.round_id)
        .options(joinedload(Round.course), joinedload(Round.home_club))
        .where(Round.user_id == ctx.user_id, Stroke.is_counted.is_(True))
        .order_by(Round.id, Stroke.hole_number, Stroke.seq, Stroke.id)
    )
    if round_id is not None:
        get_round(ctx, round_id)
        stmt = stmt.where(Round.id == round_id)

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for stroke, rnd in ctx.db.execute(stmt).unique().all():
        writer.writerow(
            [
                rnd.id,
                rnd.completed_at.isoformat() if rnd.completed_at else "",
                course_name_of(rnd),
                _blank(rnd.holes_count),
                _blank(stroke.hole_number),
                _blank(stroke.seq),
                _blank(stroke.stroke_type),
                "true" if stroke.mental_ok else "false",
                _blank(stroke.club_id),
            ]
        )

    return buf.getvalue().rstrip("\n")
