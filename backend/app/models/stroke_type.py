from enum import Enum


class StrokeType(str, Enum):
    """Stroke types in canonical order (the order strokes are laid out in a hole)."""

    TEE_SHOT = "TeeShot"
    RECOVERY = "Recovery"
    LAY_UP = "LayUp"
    FAIRWAY_BUNKER = "F-Bunker"
    APPROACH = "Approach"
    CHIP_PITCH = "ChipPitch"
    GREENSIDE_BUNKER = "G-Bunker"
    PENALTY = "Penalty"
    OTHER = "Other"
    PUTT = "Putt"


CANONICAL_ORDER: list[StrokeType] = list(StrokeType)

_RANK = {t.value: i for i, t in enumerate(CANONICAL_ORDER, start=1)}

# Rows written by older clients may carry types we don't know; they sort last.
UNKNOWN_RANK = 999

LABELS: dict[str, str] = {
    StrokeType.TEE_SHOT.value: "Tee Shots",
    StrokeType.RECOVERY.value: "Recovery",
    StrokeType.LAY_UP.value: "Lay-ups",
    StrokeType.FAIRWAY_BUNKER.value: "Bunker (F)",
    StrokeType.APPROACH.value: "Approaches",
    StrokeType.CHIP_PITCH.value: "Pitch/Chip",
    StrokeType.GREENSIDE_BUNKER.value: "Bunker (G)",
    StrokeType.PENALTY.value: "Penalties",
    StrokeType.OTHER.value: "Other",
    StrokeType.PUTT.value: "Putts",
}


def rank_of(stroke_type: str) -> int:
    return _RANK.get(str(stroke_type), UNKNOWN_RANK)
