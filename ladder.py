# ladder.py

import logging
from dataclasses import dataclass
from enum import Enum

from config import (
    DEFAULT_CHALLENGER_CUTOFF,
    DEFAULT_GRANDMASTER_CUTOFF,
    SOLO_QUEUE_TYPE,
)

logger = logging.getLogger(__name__)


# --------------------
# Tiers and divisions
# --------------------

class Tier(Enum):
    IRON = 0
    BRONZE = 1
    SILVER = 2
    GOLD = 3
    PLATINUM = 4
    EMERALD = 5
    DIAMOND = 6
    MASTER = 7
    GRANDMASTER = 8
    CHALLENGER = 9

    @property
    def is_apex(self) -> bool:
        return self.value >= Tier.MASTER.value


class Division(Enum):
    IV = 0
    III = 1
    II = 2
    I = 3


TIER_BAND = 400
DIVISION_SPAN = 100


def parse_tier(value) -> Tier | None:
    """
    Normalizes a raw tier value to a Tier.
    Unknown or empty values are treated as unranked (None).
    """
    if value is None or isinstance(value, Tier):
        return value

    key = str(value).strip().upper()
    if not key:
        return None

    try:
        return Tier[key]
    except KeyError:
        logger.debug("unrecognized tier %r treated as unranked", value)
        return None


def parse_division(value) -> Division | None:
    if value is None or isinstance(value, Division):
        return value

    key = str(value).strip().upper()
    return Division.__members__.get(key)


# --------------------
# Cutoffs
# --------------------

@dataclass(frozen=True)
class RankCutoffs:
    """LP thresholds at which Grandmaster and Challenger begin for one queue."""

    grandmaster: int
    challenger: int


DEFAULT_CUTOFFS = RankCutoffs(
    grandmaster=DEFAULT_GRANDMASTER_CUTOFF,
    challenger=DEFAULT_CHALLENGER_CUTOFF,
)


def _min_league_points(entries):
    values = [int(e.get("leaguePoints", 0) or 0) for e in (entries or [])]
    return min(values) if values else None


def cutoffs_from_league_lists(challenger_entries, grandmaster_entries, default=DEFAULT_CUTOFFS) -> RankCutoffs:
    """
    Derives cutoffs from the `entries` of the challenger and grandmaster league
    lists: the lowest LP currently holding each tier is its cutoff.
    Either side falls back to `default` when its list is empty.
    """
    challenger = _min_league_points(challenger_entries)
    grandmaster = _min_league_points(grandmaster_entries)

    return RankCutoffs(
        grandmaster=grandmaster if grandmaster is not None else default.grandmaster,
        challenger=challenger if challenger is not None else default.challenger,
    )


def resolve_cutoffs(rows, queue_type=SOLO_QUEUE_TYPE, default=DEFAULT_CUTOFFS) -> RankCutoffs:
    """
    Picks the cutoffs for one queue out of stored rows shaped like
    {"queue_type": ..., "tier": "GRANDMASTER" | "CHALLENGER", "cutoff_lp": ...}.
    """
    by_tier = {}
    for row in rows or []:
        if row.get("queue_type") != queue_type:
            continue
        tier = parse_tier(row.get("tier"))
        lp = row.get("cutoff_lp")
        if tier is None or lp is None:
            continue
        by_tier[tier] = max(0, int(lp))

    return RankCutoffs(
        grandmaster=by_tier.get(Tier.GRANDMASTER, default.grandmaster),
        challenger=by_tier.get(Tier.CHALLENGER, default.challenger),
    )


# --------------------
# Ladder score
# --------------------

def base_master() -> int:
    # Diamond I at 100 LP is the Master floor
    return Tier.DIAMOND.value * TIER_BAND + Division.I.value * DIVISION_SPAN + DIVISION_SPAN


def score_rank(tier, division, league_points, cutoffs: RankCutoffs) -> int:
    """
    Maps a rank onto one continuous ladder:
      - Iron..Diamond: 400 per tier, 100 per division, plus LP
      - Master: base_master() + LP (uncapped)
      - Grandmaster / Challenger: base_master() + live cutoff + LP
      - Unranked: LP alone
    """
    tier = parse_tier(tier)
    lp = max(0, int(league_points or 0))

    if tier is None:
        return lp

    if not tier.is_apex:
        division = parse_division(division)
        offset = division.value * DIVISION_SPAN if division is not None else 0
        return tier.value * TIER_BAND + offset + lp

    if tier is Tier.GRANDMASTER:
        return base_master() + cutoffs.grandmaster + lp
    if tier is Tier.CHALLENGER:
        return base_master() + cutoffs.challenger + lp
    return base_master() + lp


def ladder_score(snapshot, cutoffs: RankCutoffs) -> int:
    return score_rank(snapshot.tier, snapshot.division, snapshot.league_points, cutoffs)


# --------------------
# Leaderboard ordering
# --------------------

def rank_sort_key(snapshot):
    """
    Returns (tier weight, division weight, LP); unranked is (0, 0, LP).
    Apex tiers carry no division weight.
    """
    if snapshot is None:
        return (0, 0, 0)

    lp = max(0, int(snapshot.league_points or 0))
    tier = parse_tier(snapshot.tier)
    if tier is None:
        return (0, 0, lp)

    division = parse_division(snapshot.division)
    div_weight = 0 if tier.is_apex or division is None else division.value + 1
    return (tier.value + 1, div_weight, lp)


def compare_ranks(a, b) -> int:
    """Comparator for sorting best rank first."""
    ka = rank_sort_key(a)
    kb = rank_sort_key(b)
    if ka == kb:
        return 0
    return -1 if ka > kb else 1
