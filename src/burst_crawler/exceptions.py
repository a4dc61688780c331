"""
Crawler Exceptions - Error taxonomy shared by all crawler components.

Only ConfigurationError is ever surfaced to callers. FetchFailure and
ParseFailure are raised inside helpers and recovered locally: a failed fetch
skips the URL, a failed parse leaves the affected fields unset.
"""


class CrawlerError(Exception):
    """Base class for all crawler errors."""
    pass


class ConfigurationError(CrawlerError):
    """Raised when configuration is invalid."""
    pass


class FetchFailure(CrawlerError):
    """Network or HTTP problem while fetching a URL."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ParseFailure(CrawlerError):
    """Malformed or missing structure in a fetched document."""
    pass
