from datetime import datetime, timedelta, timezone

from ladder import RankCutoffs, ladder_score
from snapshots import NormalizedPoint, RankSnapshot, to_epoch_ms

BASE_TIME = datetime(2026, 1, 20, 12, 0, tzinfo=timezone.utc)
NOW = to_epoch_ms(BASE_TIME + timedelta(days=10))
HOUR_MS = 60 * 60 * 1000
CUTOFFS = RankCutoffs(grandmaster=200, challenger=500)


def iso_at(hours: float) -> str:
    """ISO timestamp ``hours`` after BASE_TIME."""
    return (BASE_TIME + timedelta(hours=hours)).isoformat()


def ts_at(hours: float) -> int:
    return to_epoch_ms(BASE_TIME + timedelta(hours=hours))


def make_snapshot(
    player_id: str = "p1",
    hours: float = 0.0,
    tier: str | None = "GOLD",
    division: str | None = "II",
    lp: int = 0,
    **kwargs,
) -> RankSnapshot:
    return RankSnapshot(
        player_id=player_id,
        observed_at=iso_at(hours),
        tier=tier,
        division=division,
        league_points=lp,
        **kwargs,
    )


def make_point(
    player_id: str = "p1",
    hours: float = 0.0,
    tier: str | None = "GOLD",
    division: str | None = "II",
    lp: int = 0,
    cutoffs: RankCutoffs = CUTOFFS,
    **kwargs,
) -> NormalizedPoint:
    """Seed a normalized point; scored with ``cutoffs`` and stamped ``hours`` after BASE_TIME."""
    snap = make_snapshot(player_id, hours, tier, division, lp, **kwargs)
    return NormalizedPoint(snapshot=snap, score=ladder_score(snap, cutoffs), ts=ts_at(hours))
