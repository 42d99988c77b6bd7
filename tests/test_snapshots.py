from datetime import datetime, timezone

import pytest

from ladder import Division, RankCutoffs, Tier
from snapshots import (
    NormalizedPoint,
    Player,
    RankSnapshot,
    load_snapshots,
    normalize,
    parse_timestamp,
    players_from_rows,
    rescore,
    snapshot_from_row,
)
from tests.helpers import make_snapshot

EPOCH_2026 = 1767225600000  # 2026-01-01T00:00:00Z


class TestParseTimestamp:
    def test_iso_with_offset(self) -> None:
        assert parse_timestamp("2026-01-01T00:00:00+00:00") == EPOCH_2026

    def test_trailing_z(self) -> None:
        assert parse_timestamp("2026-01-01T00:00:00Z") == EPOCH_2026

    def test_naive_is_utc(self) -> None:
        assert parse_timestamp("2026-01-01T00:00:00") == EPOCH_2026
        assert parse_timestamp(datetime(2026, 1, 1)) == EPOCH_2026

    def test_other_offset(self) -> None:
        assert parse_timestamp("2026-01-01T01:00:00+01:00") == EPOCH_2026

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2026-01-01T00:00:00.12345+00:00", EPOCH_2026 + 123),
            ("2026-01-01T00:00:00.1Z", EPOCH_2026 + 100),
            ("2026-01-01T00:00:00.1234567+00:00", EPOCH_2026 + 123),
            ("2026-01-01 00:00:00+00", EPOCH_2026),
            ("2026-01-01 01:00:00+01", EPOCH_2026),
            ("2026-01-01T00:00:00+0000", EPOCH_2026),
            ("2026-01-01 00:00:00.5-05", EPOCH_2026 + 5 * 3600 * 1000 + 500),
        ],
    )
    def test_database_text_forms(self, value, expected) -> None:
        assert parse_timestamp(value) == expected

    def test_aware_datetime(self) -> None:
        assert parse_timestamp(datetime(2026, 1, 1, tzinfo=timezone.utc)) == EPOCH_2026

    @pytest.mark.parametrize("value", [None, "", "not a date", "2026-13-40T00:00:00", 12345, object()])
    def test_unparsable_is_none(self, value) -> None:
        assert parse_timestamp(value) is None


class TestSnapshotFromRow:
    def test_stored_row_shape(self) -> None:
        snap = snapshot_from_row({
            "puuid": "abc",
            "tier": "gold",
            "rank": "ii",
            "lp": "57",
            "wins": 10,
            "losses": "8",
            "fetched_at": "2026-01-01T00:00:00Z",
        })
        assert snap == RankSnapshot(
            player_id="abc",
            observed_at="2026-01-01T00:00:00Z",
            tier=Tier.GOLD,
            division=Division.II,
            league_points=57,
            wins=10,
            losses=8,
        )

    def test_match_context(self) -> None:
        snap = snapshot_from_row({
            "player_id": 7,
            "observed_at": "2026-01-01T00:00:00Z",
            "tier": "EMERALD",
            "division": "IV",
            "matchId": 123456,
            "championId": "99",
            "kills": 3,
            "deaths": 4,
            "assists": 11,
            "win": "true",
            "lp_delta": -18,
        })
        assert snap.player_id == "7"
        assert snap.match_id == "123456"
        assert snap.champion_id == 99
        assert (snap.kills, snap.deaths, snap.assists) == (3, 4, 11)
        assert snap.win is True
        assert snap.league_point_delta == -18

    def test_apex_tier_drops_division(self) -> None:
        snap = snapshot_from_row({"puuid": "x", "tier": "MASTER", "rank": "I", "lp": 40})
        assert snap.tier is Tier.MASTER
        assert snap.division is None

    def test_direct_construction_parses_strings(self) -> None:
        snap = RankSnapshot(player_id="x", observed_at="2026-01-01T00:00:00Z", tier="GOLD", division="II")
        assert snap.tier is Tier.GOLD
        assert snap.division is Division.II

        apex = RankSnapshot(player_id="x", observed_at="2026-01-01T00:00:00Z", tier="grandmaster", division="I")
        assert apex.tier is Tier.GRANDMASTER
        assert apex.division is None

    def test_unknown_tier_is_unranked(self) -> None:
        snap = snapshot_from_row({"puuid": "x", "tier": "WOOD", "rank": "I", "lp": 40})
        assert snap.tier is None
        assert snap.division is None

    def test_negative_lp_clamped(self) -> None:
        assert snapshot_from_row({"puuid": "x", "lp": -5}).league_points == 0

    def test_missing_player_id_raises(self) -> None:
        with pytest.raises(ValueError, match="player id"):
            snapshot_from_row({"tier": "GOLD"})

    def test_load_skips_bad_rows(self) -> None:
        rows = [{"puuid": "a", "tier": "GOLD"}, {"tier": "SILVER"}, {"puuid": "b"}]
        assert [s.player_id for s in load_snapshots(rows)] == ["a", "b"]

    def test_total_games(self) -> None:
        assert make_snapshot(wins=3, losses=4).total_games == 7
        assert make_snapshot().total_games == 0


class TestPlayersFromRows:
    def test_builds_players(self) -> None:
        rows = [
            {"id": "p1", "displayName": "Faker", "iconUrl": "https://x/1.png"},
            {"puuid": "p2", "game_name": "Caps"},
            {"displayName": "nobody"},
        ]
        assert players_from_rows(rows) == [
            Player(id="p1", display_name="Faker", icon_url="https://x/1.png"),
            Player(id="p2", display_name="Caps"),
        ]


class TestNormalize:
    def test_attaches_score_and_ts(self, cutoffs: RankCutoffs) -> None:
        snap = make_snapshot(tier="GOLD", division="II", lp=50)
        [point] = normalize([snap], cutoffs)
        assert point.snapshot is snap
        assert point.score == 1450
        assert point.ts == parse_timestamp(snap.observed_at)

    def test_drops_bad_timestamps_and_keeps_order(self, cutoffs: RankCutoffs) -> None:
        snaps = [
            make_snapshot("b", hours=5),
            RankSnapshot(player_id="x", observed_at="garbage"),
            make_snapshot("a", hours=1),
        ]
        assert [p.player_id for p in normalize(snaps, cutoffs)] == ["b", "a"]

    def test_idempotent(self, cutoffs: RankCutoffs) -> None:
        snaps = [make_snapshot("a", hours=h, lp=h * 10) for h in range(5)]
        assert normalize(snaps, cutoffs) == normalize(snaps, cutoffs)

    def test_rescore_with_new_cutoffs(self, cutoffs: RankCutoffs) -> None:
        [point] = normalize([make_snapshot(tier="GRANDMASTER", lp=10)], cutoffs)
        moved = rescore(point, RankCutoffs(grandmaster=400, challenger=900))
        assert isinstance(moved, NormalizedPoint)
        assert moved.score == point.score + 200
        assert moved.ts == point.ts
