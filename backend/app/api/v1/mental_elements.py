from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.deps import get_user_context
from app.api.v1.bag import OrderIn
from app.core.context import UserContext
from app.services import mental_elements as element_service

router = APIRouter()


class MentalElementCreate(BaseModel):
    label: str


class MentalElementOut(BaseModel):
    id: int
    label: str
    sort_order: int

    class Config:
        from_attributes = True


@router.get("/mental-elements", response_model=list[MentalElementOut])
def list_mental_elements(ctx: UserContext = Depends(get_user_context)):
    return element_service.list_mental_elements(ctx)


@router.post("/mental-elements", response_model=MentalElementOut, status_code=201)
def create_mental_element(
    payload: MentalElementCreate,
    ctx: UserContext = Depends(get_user_context),
):
    return element_service.create_mental_element(ctx, payload.label)


@router.put("/mental-elements/order", response_model=list[MentalElementOut])
def reorder_mental_elements(payload: OrderIn, ctx: UserContext = Depends(get_user_context)):
    return element_service.reorder_mental_elements(ctx, payload.ids)


@router.delete("/mental-elements/{element_id}")
def delete_mental_element(element_id: int, ctx: UserContext = Depends(get_user_context)):
    element_service.delete_mental_element(ctx, element_id)
    return {"ok": True}
