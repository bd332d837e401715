from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.api.deps import get_user_context
from app.core.context import UserContext
from app.models.home_club import HomeClub
from app.services import home_club as home_club_service

router = APIRouter()


class HomeClubIn(BaseModel):
    name: str = Field(max_length=200)
    # Par per hole, hole 1 first.
    pars: list[int]


class HomeClubOut(BaseModel):
    id: int
    name: str
    holes_count: int
    pars: list[int]


def _to_out(club: HomeClub) -> HomeClubOut:
    return HomeClubOut(
        id=club.id,
        name=club.name,
        holes_count=club.holes_count,
        pars=home_club_service.home_club_pars(club),
    )


@router.get("/home-club", response_model=HomeClubOut)
def get_home_club(ctx: UserContext = Depends(get_user_context)):
    return _to_out(home_club_service.get_home_club(ctx))


@router.put("/home-club", response_model=HomeClubOut)
def save_home_club(payload: HomeClubIn, ctx: UserContext = Depends(get_user_context)):
    return _to_out(home_club_service.save_home_club(ctx, payload.name, payload.pars))
