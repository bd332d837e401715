from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.deps import get_user_context
from app.core.context import UserContext

router = APIRouter()


class MeOut(BaseModel):
    id: int
    external_id: str
    email: str | None

    class Config:
        from_attributes = True


@router.get("/me", response_model=MeOut)
def me(ctx: UserContext = Depends(get_user_context)):
    return ctx.user
