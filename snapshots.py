# snapshots.py

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Iterable, List, Mapping

import pytz

from ladder import Division, RankCutoffs, Tier, ladder_score, parse_division, parse_tier

logger = logging.getLogger(__name__)


# --------------------
# Records
# --------------------

@dataclass(frozen=True)
class Player:
    id: str
    display_name: str
    icon_url: str | None = None


@dataclass(frozen=True)
class RankSnapshot:
    player_id: str
    observed_at: Any
    tier: Tier | None = None
    division: Division | None = None
    league_points: int = 0
    wins: int | None = None
    losses: int | None = None
    match_id: str | None = None
    champion_id: int | None = None
    kills: int | None = None
    deaths: int | None = None
    assists: int | None = None
    win: bool | None = None
    league_point_delta: int | None = None
    global_rank: int | None = None

    def __post_init__(self):
        # tiers and divisions are always enums past this point
        tier = parse_tier(self.tier)
        division = None if tier is None or tier.is_apex else parse_division(self.division)
        object.__setattr__(self, "tier", tier)
        object.__setattr__(self, "division", division)

    @property
    def total_games(self) -> int:
        return (self.wins or 0) + (self.losses or 0)


@dataclass(frozen=True)
class NormalizedPoint:
    snapshot: RankSnapshot
    score: int
    ts: int

    @property
    def player_id(self) -> str:
        return self.snapshot.player_id

    @property
    def tier(self) -> Tier | None:
        return self.snapshot.tier

    @property
    def division(self) -> Division | None:
        return self.snapshot.division

    @property
    def league_points(self) -> int:
        return self.snapshot.league_points

    @property
    def wins(self) -> int | None:
        return self.snapshot.wins

    @property
    def losses(self) -> int | None:
        return self.snapshot.losses

    @property
    def total_games(self) -> int:
        return self.snapshot.total_games


# --------------------
# Ingestion helpers
# --------------------

def _first(row: Mapping[str, Any], *keys: str):
    for k in keys:
        v = row.get(k)
        if v is not None:
            return v
    return None


def _int_or_none(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _bool_or_none(value) -> bool | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "win", "yes")
    return bool(value)


def snapshot_from_row(row: Mapping[str, Any]) -> RankSnapshot:
    """
    Builds a RankSnapshot from a loosely typed row.
    Accepts stored-row names (puuid, rank, lp, fetched_at, lp_delta) as well as
    the field names. Tier and division go through the enum parsers; apex tiers
    never carry a division.
    """
    player_id = _first(row, "player_id", "puuid", "playerId")
    if not player_id:
        raise ValueError("player id is required for a rank snapshot")

    match_id = _first(row, "match_id", "matchId")

    return RankSnapshot(
        player_id=str(player_id),
        observed_at=_first(row, "observed_at", "fetched_at", "recorded_at", "observedAt"),
        tier=_first(row, "tier"),
        division=_first(row, "division", "rank"),
        league_points=max(0, _int_or_none(_first(row, "league_points", "lp", "leaguePoints")) or 0),
        wins=_int_or_none(row.get("wins")),
        losses=_int_or_none(row.get("losses")),
        match_id=str(match_id) if match_id is not None else None,
        champion_id=_int_or_none(_first(row, "champion_id", "championId")),
        kills=_int_or_none(row.get("kills")),
        deaths=_int_or_none(row.get("deaths")),
        assists=_int_or_none(row.get("assists")),
        win=_bool_or_none(row.get("win")),
        league_point_delta=_int_or_none(_first(row, "league_point_delta", "lp_delta", "leaguePointDelta")),
        global_rank=_int_or_none(_first(row, "global_rank", "globalRank")),
    )


def load_snapshots(rows: Iterable[Mapping[str, Any]]) -> List[RankSnapshot]:
    out: List[RankSnapshot] = []
    for row in rows or []:
        try:
            out.append(snapshot_from_row(row))
        except ValueError as e:
            logger.warning("skipping snapshot row: %s", e)
    return out


def players_from_rows(rows: Iterable[Mapping[str, Any]]) -> List[Player]:
    out: List[Player] = []
    for row in rows or []:
        pid = _first(row, "id", "player_id", "puuid")
        if not pid:
            logger.warning("skipping player row without id: %r", row)
            continue
        name = _first(row, "display_name", "displayName", "game_name") or str(pid)
        out.append(Player(id=str(pid), display_name=str(name), icon_url=_first(row, "icon_url", "iconUrl")))
    return out


# --------------------
# Timestamps
# --------------------

_ISO_PARTS = re.compile(
    r"^(?P<main>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2})?)"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>[+-]\d{2}(?::?\d{2})?)?$"
)


def to_epoch_ms(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=pytz.UTC)
    return int(round(dt.timestamp() * 1000))


def parse_timestamp(value) -> int | None:
    """
    Parses an observed-at value to epoch milliseconds.
    Naive values are UTC. Returns None when the value can't be parsed.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return to_epoch_ms(value)

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    # database text output: any number of fraction digits, "+00" offsets
    m = _ISO_PARTS.match(text)
    if m:
        text = m.group("main")
        if m.group("frac"):
            text += "." + m.group("frac")[:6].ljust(6, "0")
        tz = m.group("tz")
        if tz:
            digits = tz[1:].replace(":", "")
            text += f"{tz[0]}{digits[:2]}:{digits[2:4] or '00'}"

    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None

    return to_epoch_ms(dt)


# --------------------
# Normalizer
# --------------------

def normalize(snapshots: Iterable[RankSnapshot], cutoffs: RankCutoffs) -> List[NormalizedPoint]:
    """
    Attaches epoch-ms timestamps and ladder scores, in input order.
    Snapshots whose timestamp doesn't parse are dropped.
    """
    out: List[NormalizedPoint] = []
    dropped = 0

    for snap in snapshots:
        ts = parse_timestamp(snap.observed_at)
        if ts is None:
            dropped += 1
            continue
        out.append(NormalizedPoint(snapshot=snap, score=ladder_score(snap, cutoffs), ts=ts))

    if dropped:
        logger.debug("dropped %d snapshot(s) with unparsable timestamps", dropped)
    return out


def rescore(point: NormalizedPoint, cutoffs: RankCutoffs) -> NormalizedPoint:
    return replace(point, score=ladder_score(point.snapshot, cutoffs))
