from collections.abc import Sequence
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.errors import ValidationFailed


class Ordered(Protocol):
    id: int
    sort_order: int


def next_sort_order(db: Session, model, user_id: int) -> int:
    """Append-to-bottom position for a new row of ``model`` owned by ``user_id``."""
    current = db.execute(
        select(func.max(model.sort_order)).where(model.user_id == user_id)
    ).scalar_one_or_none()
    return int(current or 0) + 1


def repack_sort_order(items: Sequence[Ordered]) -> int:
    """Renumber ``items`` (already in display order) to 1..N.

    Only rows whose value changes are touched. Returns the number of rows updated.
    """
    changed = 0
    for expected, item in enumerate(items, start=1):
        if item.sort_order == expected:
            continue
        item.sort_order = expected
        changed += 1
    return changed


def apply_order(items: Sequence[Ordered], ordered_ids: Sequence[int]) -> None:
    """Persist an explicit order; ``ordered_ids`` must name every item exactly once."""
    by_id = {item.id: item for item in items}
    if len(ordered_ids) != len(set(ordered_ids)) or set(ordered_ids) != set(by_id):
        raise ValidationFailed("Order must list every item exactly once")

    for position, item_id in enumerate(ordered_ids, start=1):
        by_id[item_id].sort_order = position
