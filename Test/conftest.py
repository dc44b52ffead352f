"""
Shared fixtures: fake WebDriver objects and page builders, so no test
needs a browser or network access.
"""

import json

import pytest

from roster_scraping.config import Settings
from roster_scraping.scrapers.player_scraper import ATTRIBUTE_SCHEMA, BADGE_TIER_SCHEMA


class FakeDriver:
    """Just enough of a Selenium WebDriver for the fetcher."""

    def __init__(self, page_source="", status=200, get_error=None):
        self.page_source = page_source
        self.status = status
        self.get_error = get_error
        self.visited = []
        self.closed = False

    def get(self, url):
        self.visited.append(url)
        if self.get_error is not None:
            raise self.get_error

    def get_log(self, log_type):
        if self.status is None:
            return []
        message = {
            "message": {
                "method": "Network.responseReceived",
                "params": {"type": "Document", "response": {"status": self.status}},
            }
        }
        return [{"message": json.dumps(message)}]

    def find_element(self, by, value):
        return object()

    def quit(self):
        self.closed = True


class DriverFactory:
    """Hands out a prepared driver per attempt and remembers them."""

    def __init__(self, *drivers):
        self._drivers = list(drivers)
        self.created = []

    def __call__(self, headless=True, profile=None):
        driver = self._drivers.pop(0) if len(self._drivers) > 1 else self._drivers[0]
        self.created.append(driver)
        return driver


@pytest.fixture
def settings(tmp_path):
    return Settings(
        BASE_URL="https://ratings.example",
        DATA_DIR=str(tmp_path),
        PRE_NAVIGATION_DELAY_MIN=0.0,
        PRE_NAVIGATION_DELAY_MAX=0.0,
    )


@pytest.fixture
def no_sleep():
    calls = []
    return calls.append, calls


def roster_page(hrefs):
    rows = "".join(
        f'<tr><td class="entry-font"><a href="{href}">{href}</a></td></tr>' for href in hrefs
    )
    return f"<html><body><table><tbody>{rows}</tbody></table></body></html>"


DEFAULT_TABS = {
    "pills-outscoring-tab": "Outside Scoring (5)",
    "pills-inscoring-tab": "Inside Scoring (8)",
    "pills-playmaking-tab": "Playmaking (6)",
    "pills-defense-tab": "Defense (3)",
    "pills-rebounding-tab": "Rebounding (2)",
    "pills-genoffense-tab": "General Offense (4)",
    "pills-allaround-tab": "All Around (1)",
}


def detail_page(
    name="LeBron James",
    overall="96",
    attributes=None,
    badges=None,
    tabs=None,
    position="SF / PF",
    height="6'9\" (206cm)",
):
    if attributes is None:
        attributes = [str(60 + i) for i in range(len(ATTRIBUTE_SCHEMA))]
    if badges is None:
        badges = [str(i) for i in range(1, len(BADGE_TIER_SCHEMA) + 1)]
    if tabs is None:
        tabs = DEFAULT_TABS

    items = "".join(
        f'<li><span class="attribute-box">{value}</span> Attribute {i}</li>'
        for i, value in enumerate(attributes)
    )
    badge_spans = "".join(f'<span class="badge-count">{value}</span>' for value in badges)
    tab_links = "".join(f'<a id="{tab_id}">{label}</a>' for tab_id, label in tabs.items())
    subtitle = (
        '<p class="header-subtitle">'
        "<span>#23</span><span>|</span><span>Lakers</span><span>|</span>"
        f"<span>Position: <a>{position}</a></span>"
        "<span>|</span>"
        f"<span>Height: <a>{height}</a></span>"
        "</p>"
    )

    return (
        "<html><body>"
        f"<h1>  {name}  </h1>"
        f"{subtitle}"
        f'<span class="attribute-box-player">{overall}</span>'
        '<div class="content"><div class="card"><div class="card-body">'
        f'<ul class="list-no-bullet">{items}</ul>'
        "</div></div></div>"
        f"{badge_spans}{tab_links}"
        "</body></html>"
    )
