from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.deps import get_user_context
from app.core.context import UserContext
from app.services import bag as bag_service

router = APIRouter()


class BagClubCreate(BaseModel):
    label: str


class BagClubUpdate(BaseModel):
    # Best swing move cue; empty clears it.
    bsm: str | None = None


class OrderIn(BaseModel):
    ids: list[int]


class BagClubOut(BaseModel):
    id: int
    label: str
    sort_order: int
    bsm: str | None

    class Config:
        from_attributes = True


@router.get("/bag-clubs", response_model=list[BagClubOut])
def list_bag_clubs(ctx: UserContext = Depends(get_user_context)):
    return bag_service.list_bag_clubs(ctx)


@router.post("/bag-clubs", response_model=BagClubOut, status_code=201)
def create_bag_club(payload: BagClubCreate, ctx: UserContext = Depends(get_user_context)):
    return bag_service.create_bag_club(ctx, payload.label)


@router.put("/bag-clubs/order", response_model=list[BagClubOut])
def reorder_bag_clubs(payload: OrderIn, ctx: UserContext = Depends(get_user_context)):
    return bag_service.reorder_bag_clubs(ctx, payload.ids)


@router.patch("/bag-clubs/{club_id}", response_model=BagClubOut)
def update_bag_club(
    club_id: int,
    payload: BagClubUpdate,
    ctx: UserContext = Depends(get_user_context),
):
    return bag_service.update_bag_club_bsm(ctx, club_id, payload.bsm)


@router.delete("/bag-clubs/{club_id}")
def delete_bag_club(club_id: int, ctx: UserContext = Depends(get_user_context)):
    bag_service.delete_bag_club(ctx, club_id)
    return {"ok": True}
