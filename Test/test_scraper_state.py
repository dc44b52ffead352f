import json
import os
from datetime import datetime, timedelta

import pytest

from Utils.scraper_state import (
    CacheEntry,
    PlayerCache,
    latest_snapshot_file,
    load_player_cache,
    normalize_player_name,
    player_name_from_url,
)
from roster_scraping.models import PlayerRecord

NOW = datetime(2026, 10, 19, 12, 0, 0)


def make_cache(age_hours, team="Los Angeles Lakers"):
    record = PlayerRecord(name="LeBron James", team=team, overall_attribute=96)
    entry = CacheEntry(record, NOW - timedelta(hours=age_hours))
    return PlayerCache({normalize_player_name(record.name): entry})


class TestNames:

    def test_normalize(self):
        assert normalize_player_name("  LeBron   James ") == "lebron james"
        assert normalize_player_name("shai-gilgeous-alexander") == "shai gilgeous alexander"

    def test_name_from_url(self):
        assert player_name_from_url("https://ratings.example/lebron-james") == "lebron james"
        assert player_name_from_url("https://ratings.example/lebron-james/") == "lebron james"


class TestIsStale:

    def test_unknown_player_is_stale(self):
        assert make_cache(1).is_stale("anthony davis", "Los Angeles Lakers", now=NOW) is True

    def test_fresh_player_same_team_is_not_stale(self):
        assert make_cache(23).is_stale("lebron james", "Los Angeles Lakers", now=NOW) is False

    def test_old_entry_is_stale(self):
        assert make_cache(25).is_stale("lebron james", "Los Angeles Lakers", now=NOW) is True

    def test_team_change_is_stale(self):
        assert make_cache(1).is_stale("lebron james", "Cleveland Cavaliers", now=NOW) is True


class TestLoadPlayerCache:

    def _write(self, path, players, mtime=None):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(players, f)
        if mtime is not None:
            os.utime(path, (mtime, mtime))

    def test_latest_file_by_modification_time(self, tmp_path):
        older = tmp_path / "2kroster_team_a.json"
        newer = tmp_path / "2kroster_team_b.json"
        league = tmp_path / "2kroster_league_c.json"
        self._write(newer, [], mtime=2_000_000_000)
        self._write(older, [], mtime=1_000_000_000)
        self._write(league, [], mtime=2_100_000_000)

        assert latest_snapshot_file(str(tmp_path), "2kroster_team_") == str(newer)

    def test_no_directory_or_file(self, tmp_path):
        assert latest_snapshot_file(str(tmp_path / "missing"), "2kroster_team_") is None
        assert len(load_player_cache(None)) == 0

    def test_entries_need_identity_and_rating(self, tmp_path):
        path = tmp_path / "2kroster_team_x.json"
        self._write(path, [
            {"name": "LeBron James", "team": "Los Angeles Lakers", "overallAttribute": 96, "shotIQ": 90},
            {"name": "No Rating", "team": "Los Angeles Lakers", "overallAttribute": None},
            {"name": "", "team": "Utah Jazz", "overallAttribute": 70},
        ])

        cache = load_player_cache(str(path))

        assert len(cache) == 1
        entry = cache.get("lebron-james")
        assert entry.record.shot_iq == 90
        assert entry.last_updated == datetime.fromtimestamp(os.path.getmtime(path))

    def test_corrupt_file_gives_empty_cache(self, tmp_path):
        path = tmp_path / "2kroster_team_x.json"
        path.write_text("{not json", encoding="utf-8")

        assert len(load_player_cache(str(path))) == 0


class TestNameMatching:

    @pytest.mark.parametrize("heading,url", [
        ("Luka Dončić", "https://ratings.example/luka-doncic"),
        ("Jaren Jackson Jr.", "https://ratings.example/jaren-jackson-jr"),
        ("De'Aaron Fox", "https://ratings.example/deaaron-fox"),
        ("Shai Gilgeous-Alexander", "https://ratings.example/shai-gilgeous-alexander"),
        ("Nikola Jokić", "https://ratings.example/nikola-jokic"),
    ])
    def test_heading_and_slug_share_a_key(self, heading, url):
        assert normalize_player_name(heading) == normalize_player_name(player_name_from_url(url))

    def test_cached_accented_player_is_fresh(self):
        record = PlayerRecord(name="Luka Dončić", team="Dallas Mavericks", overall_attribute=95)
        cache = PlayerCache({normalize_player_name(record.name): CacheEntry(record, NOW)})

        name = player_name_from_url("https://ratings.example/luka-doncic")
        assert cache.is_stale(name, "Dallas Mavericks", now=NOW) is False
        assert cache.get(name).record is record


class TestMalformedSnapshot:

    def test_non_object_entries_are_skipped(self, tmp_path):
        path = tmp_path / "2kroster_team_x.json"
        path.write_text(json.dumps([
            None,
            42,
            "LeBron James",
            ["nested"],
            {"name": "LeBron James", "team": "Los Angeles Lakers", "overallAttribute": 96},
        ]), encoding="utf-8")

        cache = load_player_cache(str(path))

        assert len(cache) == 1
        assert cache.get("lebron james").record.overall_attribute == 96

    def test_top_level_object_gives_empty_cache(self, tmp_path):
        path = tmp_path / "2kroster_team_x.json"
        path.write_text(json.dumps({"players": []}), encoding="utf-8")

        assert len(load_player_cache(str(path))) == 0
