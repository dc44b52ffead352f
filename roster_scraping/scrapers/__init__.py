"""Page scrapers for 2K roster and player detail pages."""

from .roster_scraper import extract_roster_links, scrape_team_player_urls
from .player_scraper import extract_player_detail, scrape_player_detail

__all__ = [
    'extract_roster_links',
    'scrape_team_player_urls',
    'extract_player_detail',
    'scrape_player_detail',
]
