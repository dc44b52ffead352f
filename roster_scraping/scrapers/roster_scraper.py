"""Scraper for collecting player detail links from a team roster page."""

from typing import List

from bs4 import BeautifulSoup

from Exceptions.scraper_errors import StructuralExtractionError
from Utils.logging_config import get_logger
from roster_scraping.config import ROSTER_PAGE, Settings, get_settings, resolve_player_url, team_url
from roster_scraping.fetcher import fetch_document

logger = get_logger("roster_scraper")


def extract_roster_links(document: str, base_url: str = None) -> List[str]:
    """
    Extract player page URLs from a rendered roster page.
    
    Args:
        document: Rendered roster page HTML
        base_url: Site root used to resolve relative links
        
    Returns:
        Player URLs in page order
        
    Raises:
        StructuralExtractionError: table body missing or no player links,
            which usually means a bot-challenge shell page was served
    """
    soup = BeautifulSoup(document, "html.parser")
    
    tbody = soup.find("tbody")
    if tbody is None:
        raise StructuralExtractionError("Results table body not found", field="tbody")
    
    player_urls = []
    for entry in tbody.select(".entry-font"):
        link = entry.find("a")
        href = link.get("href") if link else None
        
        if not href:
            logger.warning(f"Roster entry without a player link: {entry.get_text(strip=True)!r}")
            continue
        
        player_urls.append(resolve_player_url(href, base_url))
    
    if not player_urls:
        raise StructuralExtractionError("Empty player URL list", field="entry-font")
    
    return player_urls


def scrape_team_player_urls(team: str, settings: Settings = None, **fetch_kwargs) -> List[str]:
    """
    Fetch one team's roster page and return its player URLs.
    
    An empty roster counts as a failed attempt and is retried.
    
    Raises:
        FetchExhausted: all roster attempts failed
    """
    settings = settings or get_settings()
    url = team_url(team, settings.BASE_URL)
    
    player_urls = fetch_document(
        url,
        ROSTER_PAGE,
        extract=lambda document: extract_roster_links(document, settings.BASE_URL),
        settings=settings,
        **fetch_kwargs
    )
    
    logger.info(f"Found {len(player_urls)} players for team {team}")
    return player_urls
