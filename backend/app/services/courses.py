"""User courses: named courses with their own par list, selectable when starting a round."""

from collections.abc import Sequence
from datetime import datetime, timezone
import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import selectinload

from app.core.context import UserContext
from app.core.errors import ConflictError, NotFoundError, ValidationFailed
from app.db.transaction import atomic
from app.models.course import UserCourse, UserCourseHole
from app.models.round import ROUND_ACTIVE, Round
from app.services.home_club import clamp_par
from app.services.ordering import repack_sort_order

logger = logging.getLogger(__name__)

MAX_HOLES = 18


def list_courses(ctx: UserContext) -> list[UserCourse]:
    """Live courses, default first, then in display order."""
    return list(
        ctx.db.execute(
            select(UserCourse)
            .options(selectinload(UserCourse.holes))
            .where(UserCourse.user_id == ctx.user_id, UserCourse.archived_at.is_(None))
            .order_by(UserCourse.is_default.desc(), UserCourse.sort_order, UserCourse.id)
        ).scalars()
    )


def get_course(ctx: UserContext, course_id: int) -> UserCourse:
    course = ctx.db.execute(
        select(UserCourse)
        .options(selectinload(UserCourse.holes))
        .where(
            UserCourse.id == course_id,
            UserCourse.user_id == ctx.user_id,
            UserCourse.archived_at.is_(None),
        )
    ).scalars().one_or_none()
    if not course:
        raise NotFoundError("Course not found")
    return course


def _live_in_order(ctx: UserContext) -> list[UserCourse]:
    return list(
        ctx.db.execute(
            select(UserCourse)
            .where(UserCourse.user_id == ctx.user_id, UserCourse.archived_at.is_(None))
            .order_by(UserCourse.sort_order, UserCourse.id)
        ).scalars()
    )


def create_course(
    ctx: UserContext,
    course_name: str,
    pars: Sequence[int],
    club_name: str | None = None,
    is_default: bool = False,
) -> UserCourse:
    course_name = (course_name or "").strip()
    if not 1 <= len(course_name) <= 200:
        raise ValidationFailed("Course name must be between 1 and 200 characters.")
    if not 1 <= len(pars) <= MAX_HOLES:
        raise ValidationFailed(f"A course needs between 1 and {MAX_HOLES} holes.")

    with atomic(ctx.db, "create course"):
        if is_default:
            ctx.db.execute(
                update(UserCourse)
                .where(UserCourse.user_id == ctx.user_id, UserCourse.is_default.is_(True))
                .values(is_default=False)
            )

        current_max = ctx.db.execute(
            select(func.max(UserCourse.sort_order)).where(
                UserCourse.user_id == ctx.user_id, UserCourse.archived_at.is_(None)
            )
        ).scalar_one_or_none()

        course = UserCourse(
            user_id=ctx.user_id,
            course_name=course_name,
            club_name=(club_name or "").strip() or None,
            holes_count=len(pars),
            is_default=bool(is_default),
            sort_order=int(current_max or 0) + 1,
        )
        course.holes = [
            UserCourseHole(hole_number=i, par=clamp_par(p)) for i, p in enumerate(pars, start=1)
        ]
        ctx.db.add(course)

    logger.info("course created user_id=%s course_id=%s", ctx.user_id, course.id)
    return get_course(ctx, course.id)


def delete_course(ctx: UserContext, course_id: int) -> None:
    """Archive a course and repack the live ones to 1..N.

    Finished rounds keep their link so history can still name the course.
    """
    course = get_course(ctx, course_id)

    active = ctx.db.execute(
        select(Round.id)
        .where(Round.user_course_id == course.id, Round.status == ROUND_ACTIVE)
        .limit(1)
    ).first()
    if active:
        raise ConflictError("Course has an active round")

    with atomic(ctx.db, "delete course"):
        course.archived_at = datetime.now(timezone.utc)
        course.is_default = False
        ctx.db.flush()
        repack_sort_order(_live_in_order(ctx))

    logger.info("course archived user_id=%s course_id=%s", ctx.user_id, course_id)
