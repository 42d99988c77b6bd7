# series.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from config import SAMPLE_MAX_STEP, SAMPLE_MIN_GAMES, SAMPLE_STEPS
from ladder import RankCutoffs
from snapshots import NormalizedPoint, rescore

WIN = "Win"
LOSS = "Loss"


@dataclass(frozen=True)
class SeriesPoint:
    point: NormalizedPoint
    match_index: int
    delta: int | None
    result: str | None

    @property
    def score(self) -> int:
        return self.point.score

    @property
    def ts(self) -> int:
        return self.point.ts


# --------------------
# Game detection
# --------------------

def _increased(current, previous) -> bool:
    if current is None:
        return False
    return current > (previous or 0)


def is_game_point(point: NormalizedPoint, reference: NormalizedPoint | None) -> bool:
    """
    A sample stands for a played game if it carries a match id or an LP delta,
    or if its wins/losses went up since `reference`.
    """
    snap = point.snapshot
    if snap.match_id is not None or snap.league_point_delta is not None:
        return True
    if reference is None:
        return False
    return _increased(snap.wins, reference.wins) or _increased(snap.losses, reference.losses)


def infer_result(point: NormalizedPoint, reference: NormalizedPoint | None) -> str | None:
    snap = point.snapshot
    if snap.win is not None:
        return WIN if snap.win else LOSS
    if reference is None:
        return None
    if _increased(snap.wins, reference.wins):
        return WIN
    if _increased(snap.losses, reference.losses):
        return LOSS
    return None


# --------------------
# Series builder
# --------------------

def group_by_player(points: Iterable[NormalizedPoint]) -> Dict[str, List[NormalizedPoint]]:
    """Groups by player (first-seen order) and sorts each group by time."""
    groups: Dict[str, List[NormalizedPoint]] = {}
    for p in points:
        groups.setdefault(p.player_id, []).append(p)
    return {pid: sorted(group, key=lambda p: p.ts) for pid, group in groups.items()}


def _player_series(group: List[NormalizedPoint]) -> List[SeriesPoint]:
    out: List[SeriesPoint] = []
    last_included: NormalizedPoint | None = None
    previous: NormalizedPoint | None = None

    for p in group:
        # until something is included, counters are compared to the prior sample
        reference = last_included if last_included is not None else previous
        previous = p

        if not is_game_point(p, reference):
            continue

        delta = p.score - last_included.score if last_included is not None else None
        out.append(SeriesPoint(
            point=p,
            match_index=len(out) + 1,
            delta=delta,
            result=infer_result(p, reference),
        ))
        last_included = p

    return out


def build_series(points: Iterable[NormalizedPoint], cutoffs: RankCutoffs | None = None) -> Dict[str, List[SeriesPoint]]:
    """
    Per-player chronological series of game-bearing points.
    Passive re-snapshots are skipped without breaking delta continuity.
    Players with fewer than two games in range are left out.
    If cutoffs are given, scores are recomputed with them.
    """
    if cutoffs is not None:
        points = [rescore(p, cutoffs) for p in points]

    out: Dict[str, List[SeriesPoint]] = {}
    for pid, group in group_by_player(points).items():
        series = _player_series(group)
        if len(series) >= 2:
            out[pid] = series
    return out


# --------------------
# Sampling for long histories
# --------------------

def _sample_step(games: int) -> int:
    for limit, step in SAMPLE_STEPS:
        if games <= limit:
            return step
    return SAMPLE_MAX_STEP


def sample_by_games(series: List[SeriesPoint]) -> List[SeriesPoint]:
    """
    Thins a long series for display. Keeps the first and last points, every
    Nth game, every tier/division change, and score moves without a new game.
    """
    n = len(series)
    if n <= 2:
        return list(series)

    last_games = series[-1].point.total_games
    if last_games < SAMPLE_MIN_GAMES:
        return list(series)

    step = _sample_step(last_games)
    keep = {0, n - 1}

    for i in range(1, n):
        prev = series[i - 1].point
        cur = series[i].point

        if cur.total_games % step == 0:
            keep.add(i)
        if (prev.tier, prev.division) != (cur.tier, cur.division):
            keep.add(i)
        if cur.total_games == prev.total_games and cur.score != prev.score:
            keep.add(i)

    return [series[i] for i in sorted(keep)]
