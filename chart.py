# chart.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from config import COARSE_TICK_RANGE, HEADROOM_CHECKPOINT_LP
from ladder import DIVISION_SPAN, TIER_BAND, Division, RankCutoffs, Tier, base_master
from series import SeriesPoint
from snapshots import NormalizedPoint


@dataclass(frozen=True)
class ChartDomain:
    min_score: int
    max_score: int
    max_match_index: int


# --------------------
# Headroom
# --------------------

def headroom_target(point: NormalizedPoint) -> int | None:
    """
    Score the player is heading toward next:
      - below Master: floor of the next division (Diamond I -> Master floor)
      - Master and up: the next 50 LP checkpoint
      - unranked: nothing
    """
    if point.tier is None:
        return None

    lp = max(0, point.league_points or 0)
    if point.tier.is_apex:
        return point.score + (HEADROOM_CHECKPOINT_LP - lp % HEADROOM_CHECKPOINT_LP)

    div = point.division.value if point.division is not None else 0
    next_floor = point.tier.value * TIER_BAND + (div + 1) * DIVISION_SPAN
    return max(point.score, next_floor)


def compute_domain(series: Mapping[str, Sequence[SeriesPoint]]) -> ChartDomain | None:
    """
    Axis bounds for the rendered series. The top is padded to each player's
    next promotion target so nobody about to rank up gets clipped.
    """
    min_score = max_score = None
    max_index = 0

    for points in series.values():
        if not points:
            continue

        scores = [sp.score for sp in points]
        lo = min(min(scores), points[0].score)
        hi = max(scores)

        target = headroom_target(points[-1].point)
        if target is not None:
            hi = max(hi, target)

        min_score = lo if min_score is None else min(min_score, lo)
        max_score = hi if max_score is None else max(max_score, hi)
        max_index = max(max_index, max(sp.match_index for sp in points))

    if min_score is None:
        return None
    return ChartDomain(min_score=min_score, max_score=max_score, max_match_index=max_index)


# --------------------
# Axis ticks
# --------------------

def _apex_ticks(cutoffs: RankCutoffs) -> List[Tuple[int, str]]:
    base = base_master()
    return [
        (base, Tier.MASTER.name),
        (base + cutoffs.grandmaster, Tier.GRANDMASTER.name),
        (base + cutoffs.challenger, Tier.CHALLENGER.name),
    ]


def _dedupe(ticks) -> List[Tuple[int, str]]:
    unique: Dict[int, str] = {}
    for value, label in ticks:
        unique.setdefault(value, label)
    return sorted(unique.items())


def ladder_ticks(min_score, max_score, cutoffs: RankCutoffs) -> List[Tuple[int, str]]:
    """
    (score, label) ticks inside [min_score, max_score].
    Wide ranges get one tick per tier, narrow ones one per division.
    """
    coarse = (max_score - min_score) > COARSE_TICK_RANGE
    ticks = []

    for tier in Tier:
        if tier.is_apex:
            continue
        if coarse:
            ticks.append((tier.value * TIER_BAND, tier.name))
            continue
        for div in Division:
            ticks.append((tier.value * TIER_BAND + div.value * DIVISION_SPAN, f"{tier.name} {div.name}"))

    ticks.extend(_apex_ticks(cutoffs))
    return _dedupe(t for t in ticks if min_score <= t[0] <= max_score)
