"""Mental-focus statistics.

Pure functions over counted strokes. Anything with ``mental_ok``,
``stroke_type`` and ``hole_number`` attributes works as a stroke, so the ORM
rows can be passed straight in.

Percentages are whole numbers rounded half up; a percentage over zero strokes
is ``None`` and is shown as a placeholder by the client.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
import math
from typing import Protocol

from app.models.stroke_type import CANONICAL_ORDER, LABELS, StrokeType

# Round detail, dashboard headline and per-stroke-type rows.
ROUND_TREND_DEADBAND = 3
# Dashboard "last five rounds" improving/flat/declining labels.
SUMMARY_TREND_DEADBAND = 2

PRIOR_ROUNDS = 5

LATE_HOLES = (13, 16)
LATE_SLIP_POINTS = 10
LATE_TITLE = "Late Round (Holes 13–16)"
LATE_SLIP_COPY = "Focus is lower here relative to your round average."
LATE_STEADY_COPY = "No strong late-round drop detected."

NO_PATTERN_HIGHLIGHT = "No strong patterns detected yet."


class StrokeLike(Protocol):
    hole_number: int
    stroke_type: str
    mental_ok: bool


def round_half_up(value: float) -> int:
    # Matches the browser's Math.round, which the stored history was built with.
    return int(math.floor(value + 0.5))


def round_pct(ok: int, total: int) -> int | None:
    if not total:
        return None
    return round_half_up(ok / total * 100)


@dataclass
class Tally:
    ok: int = 0
    total: int = 0

    def add(self, mental_ok: bool) -> None:
        self.total += 1
        if mental_ok:
            self.ok += 1

    @property
    def pct(self) -> int | None:
        return round_pct(self.ok, self.total)


def tally(strokes: Iterable[StrokeLike]) -> Tally:
    t = Tally()
    for s in strokes:
        t.add(bool(s.mental_ok))
    return t


def tally_by_type(strokes: Iterable[StrokeLike]) -> dict[str, Tally]:
    out: dict[str, Tally] = {}
    for s in strokes:
        out.setdefault(str(s.stroke_type), Tally()).add(bool(s.mental_ok))
    return out


def tally_holes(strokes: Iterable[StrokeLike], first: int, last: int) -> Tally:
    return tally(s for s in strokes if first <= int(s.hole_number) <= last)


def prior_average(values: Iterable[int | None]) -> int | None:
    """Rounded mean of the values that exist (rounds with no counted strokes are skipped)."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round_half_up(sum(present) / len(present))


def delta_vs_prior(current: int | None, prior: int | None) -> int | None:
    if current is None or prior is None:
        return None
    return current - prior


def classify_delta(delta: float | None, deadband: int = ROUND_TREND_DEADBAND) -> str | None:
    """``up``/``down`` once the delta reaches the deadband, ``stable`` inside it."""
    if delta is None:
        return None
    if delta >= deadband:
        return "up"
    if delta <= -deadband:
        return "down"
    return "stable"


def trend_label(delta: float | None) -> str:
    direction = classify_delta(delta)
    if direction is None:
        return "—"
    if direction == "up":
        return f"↑ +{round_half_up(delta)}%"
    if direction == "down":
        return f"↓ {round_half_up(delta)}%"
    return "Stable"


def summary_trend(values_newest_first: Sequence[float], higher_is_better: bool) -> str:
    """Compare the newest value against the oldest one in the window."""
    if len(values_newest_first) < 2:
        return "flat"

    delta = values_newest_first[0] - values_newest_first[-1]
    if not higher_is_better:
        delta = -delta

    direction = classify_delta(delta, SUMMARY_TREND_DEADBAND)
    if direction == "up":
        return "improving"
    if direction == "down":
        return "declining"
    return "flat"


def spark_heights(values: Sequence[float | None]) -> list[int]:
    """Bar heights 0..100; missing values become 0-height bars."""
    clean = [v if isinstance(v, (int, float)) and math.isfinite(v) else 0 for v in values]
    peak = max([1, *clean])
    return [round_half_up(v / peak * 100) for v in clean]


@dataclass
class BreakdownRow:
    stroke_type: str
    label: str
    pct: int | None
    prev_avg: int | None
    delta: int | None
    trend: str | None
    spark: list[int] = field(default_factory=list)
    total: int = 0


def stroke_type_breakdown(
    latest: Sequence[StrokeLike],
    prior_rounds_newest_first: Sequence[Sequence[StrokeLike]],
) -> list[BreakdownRow]:
    """Per stroke type: latest round vs. the average of up to five prior rounds.

    Rows come back in canonical order; types never attempted in the window are left out.
    """
    latest_by_type = tally_by_type(latest)
    prior_by_type = [tally_by_type(r) for r in prior_rounds_newest_first[:PRIOR_ROUNDS]]

    rows: list[BreakdownRow] = []
    for st in CANONICAL_ORDER:
        key = st.value
        la = latest_by_type.get(key, Tally())
        prior = [by_type.get(key, Tally()) for by_type in prior_by_type]

        total = la.total + sum(t.total for t in prior)
        if total == 0:
            continue

        prev_avg = prior_average(t.pct for t in prior)
        delta = delta_vs_prior(la.pct, prev_avg)
        # Oldest prior round first, latest round last.
        spark = spark_heights([t.pct for t in reversed(prior)] + [la.pct])

        rows.append(
            BreakdownRow(
                stroke_type=key,
                label=LABELS[key],
                pct=la.pct,
                prev_avg=prev_avg,
                delta=delta,
                trend=classify_delta(delta, ROUND_TREND_DEADBAND),
                spark=spark,
                total=total,
            )
        )
    return rows


@dataclass
class LateRoundCallout:
    title: str
    pct: int | None
    text: str
    kind: str  # "focus" when focus slipped, "highlight" otherwise


def late_round_slip(strokes: Sequence[StrokeLike]) -> LateRoundCallout:
    late = tally_holes(strokes, *LATE_HOLES)
    whole = tally(strokes)

    if (
        late.total > 0
        and late.pct is not None
        and whole.pct is not None
        and late.pct - whole.pct <= -LATE_SLIP_POINTS
    ):
        return LateRoundCallout(title=LATE_TITLE, pct=late.pct, text=LATE_SLIP_COPY, kind="focus")
    return LateRoundCallout(title=LATE_TITLE, pct=late.pct, text=LATE_STEADY_COPY, kind="highlight")


def round_highlights(strokes: Sequence[StrokeLike]) -> list[str]:
    """Short factual statements for the history list."""
    focus = tally(strokes).pct
    by_type = tally_by_type(strokes)
    highlights: list[str] = []

    tee = by_type.get(StrokeType.TEE_SHOT.value)
    if tee and tee.total >= 3 and focus is not None and tee.pct >= focus + 8:
        highlights.append("Strong Tee focus")

    putt = by_type.get(StrokeType.PUTT.value)
    if putt and putt.total >= 3 and focus is not None and putt.pct <= focus - 8:
        highlights.append("Putting focus struggled")

    early = tally_holes(strokes, 1, 6)
    late = tally_holes(strokes, *LATE_HOLES)
    if early.total >= 6 and late.total >= 6 and late.pct <= early.pct - 10:
        highlights.append("Focus dip on 13–16")

    return highlights or [NO_PATTERN_HIGHLIGHT]
