class RosterScraperError(Exception):
    """Base class for roster scraper errors."""
    pass


class NavigationError(RosterScraperError):
    """Raised when navigation times out, fails on the network or returns a non-OK status."""
    pass


class StructuralExtractionError(RosterScraperError):
    """Raised when an expected element or list is missing from a page."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class FetchExhausted(RosterScraperError):
    """Raised when every fetch attempt for a URL has failed."""

    def __init__(self, url: str, attempts: int):
        super().__init__(f"Failed to fetch {url} after {attempts} attempts")
        self.url = url
        self.attempts = attempts


class PersistenceError(RosterScraperError):
    """Raised when a snapshot cannot be written to disk."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path
