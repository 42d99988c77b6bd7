# movers.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from ladder import RankCutoffs
from series import group_by_player
from snapshots import NormalizedPoint, rescore
from windows import WindowOption, filter_by_window


@dataclass(frozen=True)
class Mover:
    player_id: str
    delta: int
    start: NormalizedPoint
    end: NormalizedPoint


@dataclass(frozen=True)
class RangeSummary:
    best_gain: Mover | None
    best_loss: Mover | None
    window_id: str | None = None


def player_movements(
    points: Iterable[NormalizedPoint],
    window_ms: int | None,
    now: int,
    cutoffs: RankCutoffs | None = None,
) -> Dict[str, Mover]:
    """
    Start-vs-end movement per player inside the window, using every raw point
    (passive re-snapshots included). Players with fewer than 2 points are skipped.
    """
    in_window = filter_by_window(points, window_ms, now)
    if cutoffs is not None:
        in_window = [rescore(p, cutoffs) for p in in_window]

    out: Dict[str, Mover] = {}
    for pid, group in group_by_player(in_window).items():
        if len(group) < 2:
            continue
        start, end = group[0], group[-1]
        out[pid] = Mover(player_id=pid, delta=end.score - start.score, start=start, end=end)
    return out


def summarize_range(
    points: Iterable[NormalizedPoint],
    window_ms: int | None,
    now: int,
    cutoffs: RankCutoffs | None = None,
) -> RangeSummary:
    """
    Biggest gain and biggest loss over one window.
    Ties go to the lowest player id.
    """
    movements = player_movements(points, window_ms, now, cutoffs)

    best_gain = best_loss = None
    for pid in sorted(movements):
        m = movements[pid]
        if best_gain is None or m.delta > best_gain.delta:
            best_gain = m
        if best_loss is None or m.delta < best_loss.delta:
            best_loss = m

    return RangeSummary(best_gain=best_gain, best_loss=best_loss)


def summarize_ranges(
    points: Sequence[NormalizedPoint],
    window_options: Iterable[WindowOption],
    now: int,
    cutoffs: RankCutoffs | None = None,
) -> List[RangeSummary]:
    out: List[RangeSummary] = []
    for option in window_options:
        s = summarize_range(points, option.duration_ms, now, cutoffs)
        out.append(RangeSummary(best_gain=s.best_gain, best_loss=s.best_loss, window_id=option.id))
    return out
