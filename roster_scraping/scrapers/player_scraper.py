"""
Scraper for a player's detail page.

Attribute and badge values on the page are unlabeled; they are bound to
field names by their position in two flat lists. The schemas below are the
single source of those positions.
"""

import re
from typing import Dict, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag

from Exceptions.scraper_errors import StructuralExtractionError
from Utils.logging_config import get_logger
from roster_scraping.config import DETAIL_PAGE, Settings, get_settings
from roster_scraping.fetcher import fetch_document
from roster_scraping.models import PlayerRecord

logger = get_logger("player_scraper")

ATTRIBUTE_SELECTOR = ".content .card .card-body .list-no-bullet li .attribute-box"
BADGE_COUNT_SELECTOR = ".badge-count"

# Page order of the attribute list
ATTRIBUTE_SCHEMA: Tuple[str, ...] = (
    # outside scoring
    "closeShot",
    "midRangeShot",
    "threePointShot",
    "freeThrow",
    "shotIQ",
    "offensiveConsistency",
    # athleticism
    "speed",
    "agility",
    "strength",
    "vertical",
    "stamina",
    "hustle",
    "overallDurability",
    # inside scoring
    "layup",
    "standingDunk",
    "drivingDunk",
    "postHook",
    "postFade",
    "postControl",
    "drawFoul",
    "hands",
    # playmaking
    "passAccuracy",
    "ballHandle",
    "speedWithBall",
    "passIQ",
    "passVision",
    # defense
    "interiorDefense",
    "perimeterDefense",
    "steal",
    "block",
    "helpDefenseIQ",
    "passPerception",
    "defensiveConsistency",
    # rebounding
    "offensiveRebound",
    "defensiveRebound",
)

# Page order of the badge tier counters
BADGE_TIER_SCHEMA: Tuple[str, ...] = (
    "legendaryBadgeCount",
    "purpleBadgeCount",
    "goldBadgeCount",
    "silverBadgeCount",
    "bronzeBadgeCount",
    "badgeCount",
)

# Badge category tab -> field; the count is the "(N)" in the tab label
BADGE_CATEGORY_TABS: Dict[str, str] = {
    "pills-outscoring-tab": "outsideScoringBadgeCount",
    "pills-inscoring-tab": "insideScoringBadgeCount",
    "pills-playmaking-tab": "playmakingBadgeCount",
    "pills-defense-tab": "defensiveBadgeCount",
    "pills-rebounding-tab": "reboundingBadgeCount",
    "pills-genoffense-tab": "generalOffenseBadgeCount",
    "pills-allaround-tab": "allAroundBadgeCount",
}

# Child-index paths into the header subtitle block
SUBTITLE_PATHS: Dict[str, Tuple[int, ...]] = {
    "position": (4, 1, 0),
    "height": (6, 1, 0),
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_TAB_COUNT = re.compile(r"\((\d+)\)")


def parse_int(text: Optional[str], field: str) -> Optional[int]:
    """
    Parse the leading integer of `text`.
    
    Non-numeric text is a data-quality defect, not an error: it is
    logged and the field is left empty.
    """
    if text is not None:
        match = _LEADING_INT.match(text)
        if match:
            return int(match.group(1))
    
    logger.warning(f"Non-numeric value for {field}: {text!r}")
    return None


def _first_text(element: Tag) -> Optional[str]:
    if not element.contents:
        return None
    
    first = element.contents[0]
    if isinstance(first, NavigableString):
        return str(first).strip()
    return None


def bind_positional(elements: Sequence[Tag], schema: Sequence[str], list_name: str) -> Dict[str, Optional[int]]:
    """
    Bind a flat list of value elements to field names by position.
    
    Raises:
        StructuralExtractionError: the list is shorter than the schema;
            names the first field with no element
    """
    if len(elements) < len(schema):
        missing = schema[len(elements)]
        raise StructuralExtractionError(
            f"{list_name} has {len(elements)} items, expected {len(schema)}; "
            f"missing '{missing}' (item {len(elements) + 1})",
            field=missing
        )
    
    if len(elements) > len(schema):
        logger.warning(
            f"{list_name} has {len(elements)} items, expected {len(schema)}; "
            f"binding the first {len(schema)}"
        )
    
    return {
        field: parse_int(_first_text(element), field)
        for field, element in zip(schema, elements)
    }


def _badge_category_count(soup: BeautifulSoup, tab_id: str) -> Optional[int]:
    tab = soup.find(id=tab_id)
    if tab is None:
        return None
    
    match = _TAB_COUNT.search(tab.get_text())
    return int(match.group(1)) if match else None


def _subtitle_value(subtitle: Tag, path: Tuple[int, ...], field: str) -> str:
    node = subtitle
    try:
        for index in path:
            node = node.contents[index]
    except (IndexError, AttributeError) as e:
        raise StructuralExtractionError(
            f"Header subtitle has no {field} at child path {path}",
            field=field
        ) from e
    
    return node.get_text() if isinstance(node, Tag) else str(node)


def extract_player_detail(document: str, team: str) -> PlayerRecord:
    """
    Extract a player record from a rendered detail page.
    
    Args:
        document: Rendered detail page HTML
        team: Display name of the team the player was found on
        
    Returns:
        PlayerRecord with every field the page provides
        
    Raises:
        StructuralExtractionError: an expected element or list item is missing
    """
    soup = BeautifulSoup(document, "html.parser")
    
    heading = soup.find("h1")
    name = heading.get_text().strip() if heading else ""
    if not name:
        raise StructuralExtractionError("Player name heading not found", field="name")
    
    values = {"name": name, "team": team}
    
    overall = soup.select_one(".attribute-box-player")
    values["overallAttribute"] = parse_int(
        overall.get_text().strip() if overall else None,
        "overallAttribute"
    )
    
    values.update(bind_positional(soup.select(ATTRIBUTE_SELECTOR), ATTRIBUTE_SCHEMA, "attribute list"))
    values.update(bind_positional(soup.select(BADGE_COUNT_SELECTOR), BADGE_TIER_SCHEMA, "badge count list"))
    
    for tab_id, field in BADGE_CATEGORY_TABS.items():
        values[field] = _badge_category_count(soup, tab_id)
    
    subtitle = soup.select_one(".header-subtitle")
    if subtitle is None:
        raise StructuralExtractionError("Header subtitle not found", field="position")
    
    for field, path in SUBTITLE_PATHS.items():
        values[field] = _subtitle_value(subtitle, path, field).strip()
    
    return PlayerRecord.model_validate(values)


def scrape_player_detail(team: str, player_url: str, settings: Settings = None, **fetch_kwargs) -> PlayerRecord:
    """
    Fetch a player's detail page and extract the record.
    
    Navigation failures are retried by the fetcher; a page that loads but
    does not match the expected layout raises immediately.
    
    Raises:
        FetchExhausted: all detail attempts failed
        StructuralExtractionError: the loaded page is missing expected elements
    """
    settings = settings or get_settings()
    document = fetch_document(player_url, DETAIL_PAGE, settings=settings, **fetch_kwargs)
    return extract_player_detail(document, team)
