# windows.py

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Sequence

from config import DAILY_RESET_HOUR, SUMMARY_WINDOW_IDS, WINDOW_CHOICES
from snapshots import NormalizedPoint, to_epoch_ms


@dataclass(frozen=True)
class WindowOption:
    id: str
    label: str
    duration_ms: int | None  # None = no lower bound


WINDOW_OPTIONS = [WindowOption(*choice) for choice in WINDOW_CHOICES]
SUMMARY_WINDOWS = [w for w in WINDOW_OPTIONS if w.id in SUMMARY_WINDOW_IDS]


def window_by_id(window_id: str, options: Sequence[WindowOption] = WINDOW_OPTIONS) -> WindowOption | None:
    return next((w for w in options if w.id == window_id), None)


# --------------------
# Look-back window
# --------------------

def filter_by_window(points: Iterable[NormalizedPoint], window_ms: int | None, now: int) -> List[NormalizedPoint]:
    """Keeps points with ts >= now - window_ms. Input order is preserved."""
    if window_ms is None:
        return list(points)

    start = now - window_ms
    return [p for p in points if p.ts >= start]


def apply_zoom(points: Sequence[NormalizedPoint], zoom_factor: float) -> List[NormalizedPoint]:
    """
    Narrows an already-windowed list toward its most recent point.
    The visible span is span / zoom_factor, anchored at the latest timestamp,
    so the result is always a subset of the input.
    """
    points = list(points)
    if zoom_factor is None or zoom_factor <= 1 or not points:
        return points

    latest = max(p.ts for p in points)
    earliest = min(p.ts for p in points)
    start = latest - (latest - earliest) / zoom_factor

    return [p for p in points if p.ts >= start]


def availability(points: Sequence[NormalizedPoint], window_options: Iterable[WindowOption], now: int) -> Dict[str, bool]:
    """
    For each window: does at least one player have 2+ raw points in it?
    Passive re-snapshots count here (series building is stricter).
    """
    out: Dict[str, bool] = {}
    for option in window_options:
        counts = Counter(p.player_id for p in filter_by_window(points, option.duration_ms, now))
        out[option.id] = any(n >= 2 for n in counts.values())
    return out


# --------------------
# Local daily reset
# --------------------

def duration_since_local_reset(now: int, tz, reset_hour: int = DAILY_RESET_HOUR) -> int:
    """
    Length in ms of the current local "day" that resets at reset_hour.

    Example (reset_hour=3):
      - 1:15 AM Jan 23 local: day started Jan 22 3:00 AM
      - 5:00 AM Jan 23 local: day started Jan 23 3:00 AM
    """
    now_local = datetime.fromtimestamp(now / 1000, tz=tz)
    today_reset = now_local.replace(hour=reset_hour, minute=0, second=0, microsecond=0)

    if now_local >= today_reset:
        start = today_reset
    else:
        start = today_reset - timedelta(days=1)

    return now - to_epoch_ms(start)
