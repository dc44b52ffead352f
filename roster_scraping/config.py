"""
Configuration for the 2K roster scraper.

Runtime settings come from the environment (prefix ROSTER_) or a .env file;
team slugs and page profiles are static.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Optional
from urllib.parse import urljoin

from pydantic_settings import BaseSettings

from Utils.retry import RetryPolicy


class Settings(BaseSettings):
    """Scraper settings loaded from environment."""

    BASE_URL: str = "https://www.2kratings.com"
    DATA_DIR: str = "data"
    HEADLESS: bool = True

    # Freshness
    STALE_AFTER_HOURS: float = 24.0

    # Concurrency (roster phase only; None means one session per team)
    ROSTER_WORKERS: Optional[int] = None

    # Randomized pause before each navigation
    PRE_NAVIGATION_DELAY_MIN: float = 1.0
    PRE_NAVIGATION_DELAY_MAX: float = 4.0

    class Config:
        env_prefix = "ROSTER_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


# Output naming
TEAM_SNAPSHOT_PREFIX = "2kroster_team_"
LEAGUE_SNAPSHOT_PREFIX = "2kroster_league_"

# Team slugs, in crawl order
CURRENT_TEAMS: List[str] = [
    "atlanta-hawks",
    "boston-celtics",
    "brooklyn-nets",
    "charlotte-hornets",
    "chicago-bulls",
    "cleveland-cavaliers",
    "dallas-mavericks",
    "denver-nuggets",
    "detroit-pistons",
    "golden-state-warriors",
    "houston-rockets",
    "indiana-pacers",
    "los-angeles-clippers",
    "los-angeles-lakers",
    "memphis-grizzlies",
    "miami-heat",
    "milwaukee-bucks",
    "minnesota-timberwolves",
    "new-orleans-pelicans",
    "new-york-knicks",
    "oklahoma-city-thunder",
    "orlando-magic",
    "philadelphia-76ers",
    "phoenix-suns",
    "portland-trail-blazers",
    "sacramento-kings",
    "san-antonio-spurs",
    "toronto-raptors",
    "utah-jazz",
    "washington-wizards",
]


def team_name_prettier(team: str) -> str:
    """
    Turn a team slug into its display name.

    `philadelphia-76ers` -> `Philadelphia 76ers`
    """
    words = [w for w in team.strip().split("-") if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def team_url(team: str, base_url: str = None) -> str:
    base_url = base_url or get_settings().BASE_URL
    return f"{base_url.rstrip('/')}/teams/{team}"


def resolve_player_url(href: str, base_url: str = None) -> str:
    """Resolve a (possibly relative) player href against the site root."""
    base_url = base_url or get_settings().BASE_URL
    return urljoin(base_url.rstrip("/") + "/", href)


# Browser identity
WINDOWS_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
MAC_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate, br",
    "Connection": "keep-alive",
    "Cache-Control": "max-age=0",
    "Upgrade-Insecure-Requests": "1",
}


@dataclass(frozen=True)
class PageProfile:
    """Per page-role navigation settings."""

    name: str
    navigation_timeout: int
    ready_selector: str
    retry: RetryPolicy
    user_agent: str = WINDOWS_USER_AGENT
    extra_headers: Dict[str, str] = field(default_factory=dict)


ROSTER_PAGE = PageProfile(
    name="roster",
    navigation_timeout=30,
    ready_selector="tbody",
    retry=RetryPolicy(max_attempts=5, base_delay=5.0),
)

DETAIL_PAGE = PageProfile(
    name="detail",
    navigation_timeout=60,
    ready_selector=".content",
    retry=RetryPolicy(max_attempts=3, base_delay=5.0, jitter=5.0),
    user_agent=MAC_USER_AGENT,
    extra_headers=BROWSER_HEADERS,
)
