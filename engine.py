# engine.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from chart import ChartDomain, compute_domain
from ladder import RankCutoffs
from movers import RangeSummary, summarize_ranges
from series import SeriesPoint, build_series, sample_by_games
from snapshots import RankSnapshot, normalize
from windows import SUMMARY_WINDOWS, WINDOW_OPTIONS, WindowOption, apply_zoom, availability, filter_by_window


@dataclass(frozen=True)
class LeaderboardView:
    series_by_player: Dict[str, List[SeriesPoint]]
    availability_by_window: Dict[str, bool]
    range_summaries: List[RangeSummary]
    chart_domain: ChartDomain | None


def compute_view(
    snapshots: Iterable[RankSnapshot],
    cutoffs: RankCutoffs,
    window: WindowOption,
    zoom_factor: float,
    now: int,
    window_options: Sequence[WindowOption] = WINDOW_OPTIONS,
    summary_windows: Sequence[WindowOption] = SUMMARY_WINDOWS,
    sample_long_series: bool = False,
) -> LeaderboardView:
    """
    One full pass: snapshots -> points -> window/zoom -> series -> domain.
    Availability and movers look at every normalized point, not the zoomed set.
    """
    points = normalize(snapshots, cutoffs)

    visible = apply_zoom(filter_by_window(points, window.duration_ms, now), zoom_factor)
    series = build_series(visible)
    if sample_long_series:
        series = {pid: sample_by_games(s) for pid, s in series.items()}

    return LeaderboardView(
        series_by_player=series,
        availability_by_window=availability(points, window_options, now),
        range_summaries=summarize_ranges(points, summary_windows, now),
        chart_domain=compute_domain(series),
    )
