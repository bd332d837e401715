"""Mental elements: the cues a golfer plays with, shown on the scorecard."""

from collections.abc import Sequence
import logging

from sqlalchemy import select

from app.core.context import UserContext
from app.core.errors import NotFoundError, ValidationFailed
from app.db.transaction import atomic
from app.models.mental_element import MentalElement
from app.services.ordering import apply_order, next_sort_order, repack_sort_order

logger = logging.getLogger(__name__)

LABEL_MIN = 2
LABEL_MAX = 40


def list_mental_elements(ctx: UserContext) -> list[MentalElement]:
    return list(
        ctx.db.execute(
            select(MentalElement)
            .where(MentalElement.user_id == ctx.user_id)
            .order_by(MentalElement.sort_order, MentalElement.id)
        ).scalars()
    )


def create_mental_element(ctx: UserContext, label: str) -> MentalElement:
    label = (label or "").strip()
    if not LABEL_MIN <= len(label) <= LABEL_MAX:
        raise ValidationFailed(f"Label must be between {LABEL_MIN} and {LABEL_MAX} characters.")

    with atomic(ctx.db, "create mental element"):
        element = MentalElement(
            user_id=ctx.user_id,
            label=label,
            sort_order=next_sort_order(ctx.db, MentalElement, ctx.user_id),
        )
        ctx.db.add(element)

    ctx.db.refresh(element)
    return element


def delete_mental_element(ctx: UserContext, element_id: int) -> None:
    """Delete an element, then repack the remaining ones to 1..N (gap-free)."""
    element = ctx.db.execute(
        select(MentalElement).where(
            MentalElement.id == element_id, MentalElement.user_id == ctx.user_id
        )
    ).scalars().one_or_none()
    if not element:
        raise NotFoundError("Mental element not found")

    with atomic(ctx.db, "delete mental element"):
        ctx.db.delete(element)
        ctx.db.flush()
        repack_sort_order(list_mental_elements(ctx))

    logger.info("mental element deleted user_id=%s element_id=%s", ctx.user_id, element_id)


def reorder_mental_elements(ctx: UserContext, ordered_ids: Sequence[int]) -> list[MentalElement]:
    elements = list_mental_elements(ctx)
    with atomic(ctx.db, "reorder mental elements"):
        apply_order(elements, ordered_ids)
    return list_mental_elements(ctx)
