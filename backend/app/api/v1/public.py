from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_db
from app.core.errors import GolfBrainError
from app.services import public as public_service

router = APIRouter()


async def _json_object(request: Request) -> dict | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


@router.post("/contact")
async def contact(request: Request, db: Session = Depends(get_db)):
    body = await _json_object(request)
    if body is None:
        return PlainTextResponse("Invalid JSON", status_code=400)

    try:
        await run_in_threadpool(
            public_service.submit_contact,
            db,
            body.get("name"),
            body.get("email"),
            body.get("message"),
        )
    except GolfBrainError as exc:
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    return {"ok": True}


@router.post("/interest")
async def interest(request: Request, db: Session = Depends(get_db)):
    body = await _json_object(request)
    if body is None:
        return PlainTextResponse("Invalid JSON", status_code=400)

    try:
        await run_in_threadpool(
            public_service.register_interest, db, body.get("email"), body.get("tier")
        )
    except GolfBrainError as exc:
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    return {"ok": True}
