from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.api.deps import get_user_context
from app.core.context import UserContext
from app.services import courses as course_service

router = APIRouter()


class CourseCreate(BaseModel):
    course_name: str = Field(min_length=1, max_length=200)
    club_name: str | None = Field(default=None, max_length=200)
    pars: list[int] = Field(min_length=1, max_length=course_service.MAX_HOLES)
    is_default: bool = False


class CourseHoleOut(BaseModel):
    hole_number: int
    par: int

    class Config:
        from_attributes = True


class CourseOut(BaseModel):
    id: int
    course_name: str
    club_name: str | None
    holes_count: int
    is_default: bool
    sort_order: int
    created_at: datetime
    holes: list[CourseHoleOut]

    class Config:
        from_attributes = True


@router.post("/courses", response_model=CourseOut, status_code=201)
def create_course(payload: CourseCreate, ctx: UserContext = Depends(get_user_context)):
    return course_service.create_course(
        ctx,
        payload.course_name,
        payload.pars,
        club_name=payload.club_name,
        is_default=payload.is_default,
    )


@router.get("/courses", response_model=list[CourseOut])
def list_courses(ctx: UserContext = Depends(get_user_context)):
    return course_service.list_courses(ctx)


@router.get("/courses/{course_id}", response_model=CourseOut)
def get_course(course_id: int, ctx: UserContext = Depends(get_user_context)):
    return course_service.get_course(ctx, course_id)


@router.delete("/courses/{course_id}")
def delete_course(course_id: int, ctx: UserContext = Depends(get_user_context)):
    course_service.delete_course(ctx, course_id)
    return {"ok": True}
