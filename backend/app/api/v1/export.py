from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.api.deps import get_user_context
from app.core.context import UserContext
from app.services.export import strokes_csv

router = APIRouter()


@router.get("/export/strokes.csv")
def export_strokes(round_id: int | None = None, ctx: UserContext = Depends(get_user_context)):
    return Response(
        content=strokes_csv(ctx, round_id=round_id),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="golf-brain-strokes.csv"'},
    )
