"""
Freshness cache built from the most recent team snapshot.

Decides which players need their detail page fetched again. Loaded once at
start-up; records fetched during the run are never added to it.
"""

import json
import os
import re
import unicodedata
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from pydantic import ValidationError

from Utils.logging_config import get_logger
from roster_scraping.models import PlayerRecord

logger = get_logger("scraper_state")

DEFAULT_MAX_AGE = timedelta(hours=24)


def normalize_player_name(name: str) -> str:
    """
    Cache key for a player, equal for the page heading and the URL slug.

    `Luka Dončić` and `luka-doncic` -> `luka doncic`;
    `Jaren Jackson Jr.` -> `jaren jackson jr`; `De'Aaron Fox` -> `deaaron fox`
    """
    folded = unicodedata.normalize("NFKD", name)
    folded = "".join(c for c in folded if not unicodedata.combining(c))
    folded = folded.lower().replace("-", " ")
    folded = re.sub(r"[^a-z0-9\s]", "", folded)
    return re.sub(r"\s+", " ", folded).strip()


def player_name_from_url(player_url: str) -> str:
    """`https://site/lebron-james` -> `lebron james`"""
    slug = player_url.rstrip("/").split("/")[-1]
    return slug.replace("-", " ")


@dataclass(frozen=True)
class CacheEntry:
    record: PlayerRecord
    last_updated: datetime


class PlayerCache:
    """Read-only index of previously captured players keyed by normalized name."""

    def __init__(self, entries: Dict[str, CacheEntry] = None, max_age: timedelta = DEFAULT_MAX_AGE):
        self._entries = dict(entries or {})
        self.max_age = max_age

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> Optional[CacheEntry]:
        return self._entries.get(normalize_player_name(name))

    def is_stale(self, name: str, team: str, now: datetime = None) -> bool:
        """
        True when the player's detail page must be fetched:
        no entry, entry older than max_age, or the player changed team.
        """
        entry = self.get(name)

        if entry is None:
            return True

        now = now or datetime.now()
        if now - entry.last_updated > self.max_age:
            return True

        if entry.record.team != team:
            return True

        return False


def latest_snapshot_file(data_dir: str, prefix: str) -> Optional[str]:
    """
    Get the most recently modified `<prefix>*.json` file in data_dir.
    
    Returns:
        Path to the file, or None if there is none
    """
    if not os.path.isdir(data_dir):
        return None

    candidates = [
        os.path.join(data_dir, name)
        for name in os.listdir(data_dir)
        if name.startswith(prefix) and name.endswith(".json")
    ]

    if not candidates:
        return None

    return max(candidates, key=os.path.getmtime)


def load_player_cache(path: Optional[str], max_age: timedelta = DEFAULT_MAX_AGE) -> PlayerCache:
    """
    Load the freshness cache from a snapshot file.

    Every entry's age is the file's modification time. Entries without a
    name, team or overall rating are ignored. A missing or unreadable file
    gives an empty cache, which means a full fetch.
    """
    if not path or not os.path.exists(path):
        logger.info("No previous snapshot found. Starting with an empty cache.")
        return PlayerCache(max_age=max_age)

    try:
        with open(path, "r", encoding="utf-8") as f:
            players_data = json.load(f)
        last_updated = datetime.fromtimestamp(os.path.getmtime(path))
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load existing players from {path}: {e}. Starting fresh.")
        return PlayerCache(max_age=max_age)

    if not isinstance(players_data, list):
        logger.warning(f"Unexpected snapshot format in {path}. Starting fresh.")
        return PlayerCache(max_age=max_age)

    entries = {}
    for player in players_data:
        if not isinstance(player, dict):
            logger.warning(f"Skipping non-object entry in {path}: {player!r}")
            continue

        if not (player.get("name") and player.get("team") and player.get("overallAttribute")):
            continue

        try:
            record = PlayerRecord.from_snapshot(player)
        except ValidationError as e:
            logger.warning(f"Skipping unreadable cached player {player.get('name')!r}: {e}")
            continue

        entries[normalize_player_name(record.name)] = CacheEntry(record, last_updated)

    logger.info(f"Loaded {len(entries)} cached players from {path}")
    return PlayerCache(entries, max_age=max_age)
