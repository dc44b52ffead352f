"""
Main orchestrator for the 2K roster scraping pipeline.

Stage 1 fetches every team's roster page concurrently; stage 2 walks the
player detail pages one at a time, skipping players whose cached data is
still fresh and checkpointing both snapshot files after every addition.
"""

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from Utils.logging_config import get_logger
from Utils.scraper_state import PlayerCache, latest_snapshot_file, load_player_cache, player_name_from_url
from Utils.storage import SnapshotWriter, export_csv
from roster_scraping.config import CURRENT_TEAMS, TEAM_SNAPSHOT_PREFIX, Settings, get_settings, team_name_prettier
from roster_scraping.driver_factory import chromedriver_path
from roster_scraping.models import PlayerRecord
from roster_scraping.scrapers import scrape_player_detail, scrape_team_player_urls

logger = get_logger("main")


class PlayerStatus(str, Enum):
    PENDING = "pending"
    SKIPPED = "skipped"
    FETCHING = "fetching"
    FETCHED = "fetched"
    FAILED = "failed"


@dataclass
class CrawlState:
    """Run-wide mutable state, owned by the crawler."""

    roster: Dict[str, List[str]] = field(default_factory=dict)
    results: List[PlayerRecord] = field(default_factory=list)
    statuses: Dict[str, PlayerStatus] = field(default_factory=dict)
    failed_teams: Dict[str, str] = field(default_factory=dict)

    def add(self, record: PlayerRecord) -> None:
        self.results.append(record)

    @property
    def records(self) -> tuple:
        """Read-only view of the results so far."""
        return tuple(self.results)

    def count(self, status: PlayerStatus) -> int:
        return sum(1 for s in self.statuses.values() if s == status)


class RosterCrawler:
    """Two-stage crawl: team rosters, then player details."""

    def __init__(
        self,
        teams: Sequence[str],
        settings: Settings,
        cache: PlayerCache,
        writer: SnapshotWriter,
        fetch_roster: Callable[..., List[str]] = scrape_team_player_urls,
        fetch_detail: Callable[..., PlayerRecord] = scrape_player_detail,
        fetch_kwargs: Optional[dict] = None,
    ):
        self.teams = list(teams)
        self.settings = settings
        self.cache = cache
        self.writer = writer
        self.fetch_roster = fetch_roster
        self.fetch_detail = fetch_detail
        self.fetch_kwargs = fetch_kwargs or {}
        self.state = CrawlState()

    def fetch_rosters(self) -> Dict[str, List[str]]:
        """
        Fetch all roster pages concurrently, one browser session per team.

        A team whose roster cannot be fetched is logged and left out;
        the other teams are unaffected.
        """
        workers = self.settings.ROSTER_WORKERS or len(self.teams) or 1
        collected = {}

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_map = {
                executor.submit(self.fetch_roster, team, settings=self.settings, **self.fetch_kwargs): team
                for team in self.teams
            }
            for future in as_completed(future_map):
                team = future_map[future]
                try:
                    collected[team] = future.result()
                except Exception as e:
                    logger.error(f"Failed to get player URLs for team {team}: {e}")
                    self.state.failed_teams[team] = str(e)

        # Keep crawl order independent of completion order
        self.state.roster = {team: collected[team] for team in self.teams if team in collected}
        return self.state.roster

    def crawl_players(self) -> List[PlayerRecord]:
        """Visit every player of every fetched team, strictly one at a time."""
        for team, player_urls in self.state.roster.items():
            pretty_team = team_name_prettier(team)
            logger.info(f"---------- {pretty_team} ----------")

            for player_url in player_urls:
                self._process_player(pretty_team, player_url)

        return self.state.results

    def _process_player(self, team: str, player_url: str) -> PlayerStatus:
        player_name = player_name_from_url(player_url)
        self.state.statuses[player_url] = PlayerStatus.PENDING

        if not self.cache.is_stale(player_name, team):
            logger.info(f"Skipping {player_name} - data already exists and is up to date")
            self._add(self.cache.get(player_name).record)
            return self._mark(player_url, PlayerStatus.SKIPPED)

        self._mark(player_url, PlayerStatus.FETCHING)
        try:
            record = self.fetch_detail(team, player_url, settings=self.settings, **self.fetch_kwargs)
        except Exception as e:
            logger.error(f"Failed to fetch player from {player_url}: {e}")
            return self._mark(player_url, PlayerStatus.FAILED)

        self._add(record)
        logger.info(f"Successfully fetched {record.name}'s detail.")
        return self._mark(player_url, PlayerStatus.FETCHED)

    def _add(self, record: PlayerRecord) -> None:
        self.state.add(record)
        self.writer.persist(self.state.records)

    def _mark(self, player_url: str, status: PlayerStatus) -> PlayerStatus:
        self.state.statuses[player_url] = status
        return status

    def run(self) -> CrawlState:
        logger.info("################ Fetching player urls ... ################")
        self.fetch_rosters()

        logger.info("################ Fetching player details ... ################")
        self.crawl_players()

        logger.info("################ Data collection completed ################")
        logger.info(f"Fetched: {self.state.count(PlayerStatus.FETCHED)}")
        logger.info(f"Skipped: {self.state.count(PlayerStatus.SKIPPED)}")
        logger.info(f"Failed: {self.state.count(PlayerStatus.FAILED)}")
        if self.state.failed_teams:
            logger.warning(f"Teams without a roster: {', '.join(self.state.failed_teams)}")
        logger.info(f"Team data saved to: {self.writer.team_path}")
        logger.info(f"League data saved to: {self.writer.league_path}")

        return self.state


def main(
    teams: Optional[Sequence[str]] = None,
    data_dir: Optional[str] = None,
    headless: Optional[bool] = None,
    force: bool = False,
    csv: bool = False,
) -> Optional[CrawlState]:
    """
    Main entry point for the scraping pipeline.
    
    Args:
        teams: Team slugs to crawl (defaults to every current team)
        data_dir: Snapshot directory (defaults to settings.DATA_DIR)
        headless: Override settings.HEADLESS
        force: Ignore the freshness cache and fetch every player
        csv: Also export both snapshots to CSV at the end
    """
    settings = get_settings()
    teams = list(teams or CURRENT_TEAMS)
    data_dir = data_dir or settings.DATA_DIR
    os.makedirs(data_dir, exist_ok=True)

    logger.info("=" * 80)
    logger.info(f"2K Roster Scraper - Starting ({len(teams)} teams)")
    logger.info("=" * 80)

    if force:
        logger.info("Force mode: ignoring cached players")
        cache = PlayerCache()
    else:
        cache = load_player_cache(
            latest_snapshot_file(data_dir, TEAM_SNAPSHOT_PREFIX),
            max_age=timedelta(hours=settings.STALE_AFTER_HOURS)
        )

    writer = SnapshotWriter(data_dir)
    fetch_kwargs = {} if headless is None else {"headless": headless}
    crawler = RosterCrawler(teams, settings, cache, writer, fetch_kwargs=fetch_kwargs)

    # Download the driver once, before the roster threads start
    chromedriver_path()

    try:
        state = crawler.run()
    except KeyboardInterrupt:
        logger.warning("\n\nScraping interrupted by user")
        logger.info(f"Progress so far is in {writer.team_path}; cached players are skipped next run.")
        return None

    if csv and state.results:
        for path in (writer.team_path, writer.league_path):
            export_csv(path)

    return state


def cli():
    import argparse
    
    parser = argparse.ArgumentParser(
        description="Scrape NBA 2K player ratings for every team roster"
    )
    parser.add_argument(
        '--teams',
        nargs='+',
        metavar='TEAM',
        help='Team slugs to crawl, e.g. los-angeles-lakers (default: all teams)'
    )
    parser.add_argument(
        '--data-dir',
        help='Directory for snapshot files (default: ROSTER_DATA_DIR or ./data)'
    )
    parser.add_argument(
        '--no-headless',
        action='store_true',
        help='Run browser in visible mode (not headless)'
    )
    parser.add_argument(
        '--force',
        action='store_true',
        help='Fetch every player even if cached data is fresh'
    )
    parser.add_argument(
        '--csv',
        action='store_true',
        help='Also write CSV copies of both snapshots'
    )
    
    args = parser.parse_args()
    
    try:
        main(
            teams=args.teams,
            data_dir=args.data_dir,
            headless=False if args.no_headless else None,
            force=args.force,
            csv=args.csv,
        )
    except Exception as e:
        logger.error(f"Scraper failed: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    cli()
