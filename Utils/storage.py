"""
Storage utilities for writing roster snapshots to disk.
"""

import json
import os
import tempfile
from datetime import datetime, timezone
from typing import Iterable, List, Tuple

import pandas as pd

from Exceptions.scraper_errors import PersistenceError
from Utils.logging_config import get_logger
from roster_scraping.config import LEAGUE_SNAPSHOT_PREFIX, TEAM_SNAPSHOT_PREFIX
from roster_scraping.models import SNAPSHOT_FIELDS, PlayerRecord

logger = get_logger("storage")

TEXT_FIELDS = ("name", "team", "position", "height")


def run_timestamp(now: datetime = None) -> str:
    """
    Filesystem-safe ISO-8601 UTC timestamp for one run.

    2026-10-19T05:27:03.512Z -> 2026-10-19T05-27-03-512Z
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)

    iso = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def snapshot_paths(data_dir: str, timestamp: str) -> Tuple[str, str]:
    """Team-grouped and league-wide snapshot paths for one run."""
    return (
        os.path.join(data_dir, f"{TEAM_SNAPSHOT_PREFIX}{timestamp}.json"),
        os.path.join(data_dir, f"{LEAGUE_SNAPSHOT_PREFIX}{timestamp}.json"),
    )


def _overall_desc(record: PlayerRecord):
    # Missing ratings sort after every rated player
    overall = record.overall_attribute
    return (overall is None, -(overall or 0))


def sort_by_team(records: Iterable[PlayerRecord]) -> List[PlayerRecord]:
    """Group by team (ascending), highest overall first within a team."""
    return sorted(records, key=lambda r: (r.team, _overall_desc(r)))


def sort_by_league(records: Iterable[PlayerRecord]) -> List[PlayerRecord]:
    """Whole league, highest overall first."""
    return sorted(records, key=_overall_desc)


def write_snapshot(records: Iterable[PlayerRecord], path: str) -> str:
    """
    Write records as a JSON array using the fixed snapshot projection.

    The file is replaced atomically, so a crash mid-write leaves the
    previous snapshot intact.

    Raises:
        PersistenceError: the file could not be written
    """
    payload = [record.to_snapshot() for record in records]
    directory = os.path.dirname(path) or "."

    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, separators=(",", ":"))
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
    except OSError as e:
        raise PersistenceError(path, str(e)) from e

    return path


def read_snapshot(path: str) -> List[PlayerRecord]:
    with open(path, "r", encoding="utf-8") as f:
        return [PlayerRecord.from_snapshot(item) for item in json.load(f)]


class SnapshotWriter:
    """
    Checkpoints the run's results to the same two files after every addition.
    """

    def __init__(self, data_dir: str, timestamp: str = None):
        self.data_dir = data_dir
        self.timestamp = timestamp or run_timestamp()
        self.team_path, self.league_path = snapshot_paths(data_dir, self.timestamp)

    def persist(self, records: List[PlayerRecord]) -> bool:
        """
        Write both sorted views. Failures are logged, never raised.

        Returns:
            True if both files were written
        """
        ok = True
        for sort, path in (
            (sort_by_team, self.team_path),
            (sort_by_league, self.league_path),
        ):
            try:
                write_snapshot(sort(records), path)
                logger.debug(f"Saved {len(records)} players to {path}")
            except PersistenceError as e:
                logger.error(f"{e}. Continuing with the last snapshot on disk.")
                ok = False

        return ok


def export_csv(snapshot_path: str, csv_path: str = None) -> str:
    """
    Flatten a snapshot file to CSV, columns in snapshot field order.

    Args:
        snapshot_path: JSON snapshot to convert
        csv_path: Destination (defaults to the snapshot path with .csv)

    Returns:
        Path to the written CSV
    """
    csv_path = csv_path or os.path.splitext(snapshot_path)[0] + ".csv"

    records = read_snapshot(snapshot_path)
    df = pd.DataFrame(
        [record.to_snapshot() for record in records],
        columns=list(SNAPSHOT_FIELDS)
    )
    # Keep ratings as integers when some are missing
    numeric = [c for c in SNAPSHOT_FIELDS if c not in TEXT_FIELDS]
    df[numeric] = df[numeric].astype("Int64")

    try:
        df.to_csv(csv_path, index=False, encoding="utf-8")
        logger.info(f"✓ Saved {len(df)} rows to {csv_path}")
        return csv_path

    except Exception as e:
        logger.error(f"Failed to export {snapshot_path} to CSV: {e}")
        raise
