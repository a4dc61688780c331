"""
Crawl Options - Per-run configuration shared by both crawl strategies.

CrawlOptions holds the limits and pacing of one crawl run. CrawlPolicy
selects between the behaviours that differed across historical crawler
implementations (tag collection, pacing placement, identity key) so that a
single engine can reproduce either of them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional

from .record import IdentityKey
from ..exceptions import ConfigurationError

UNBOUNDED = -1


class TagPolicy(Enum):
    """How meta anchors that are neither author nor license are treated."""
    IMPLICIT = "implicit"  # Every unmatched anchor is a tag
    EXPLICIT = "explicit"  # Only anchors under the tags path are tags


class PacingMode(Enum):
    """Where the paginated crawler inserts its delay."""
    PER_PAGE = "per_page"  # Between listing page fetches
    PER_RESOURCE = "per_resource"  # Before every detail page fetch


@dataclass(frozen=True)
class CrawlPolicy:
    """Strategy switches for extraction and pacing."""
    tag_policy: TagPolicy = TagPolicy.IMPLICIT
    pacing: PacingMode = PacingMode.PER_PAGE
    identity_key: IdentityKey = IdentityKey.SOURCE_URL
    dom_details: bool = True  # Read title/description from the DOM as well
    download_fallback: bool = False  # content_url = source_url + "/download"

    @classmethod
    def sitemap_variant(cls) -> "CrawlPolicy":
        """Behaviour of the sitemap-driven implementation."""
        return cls(tag_policy=TagPolicy.IMPLICIT,
                   pacing=PacingMode.PER_RESOURCE,
                   identity_key=IdentityKey.SOURCE_URL,
                   dom_details=False,
                   download_fallback=False)

    @classmethod
    def listing_variant(cls) -> "CrawlPolicy":
        """Behaviour of the listing-page implementation."""
        return cls(tag_policy=TagPolicy.EXPLICIT,
                   pacing=PacingMode.PER_PAGE,
                   identity_key=IdentityKey.SOURCE_URL,
                   dom_details=True,
                   download_fallback=True)


@dataclass(frozen=True)
class CrawlOptions:
    """
    Limits and pacing for one crawl run.

    Integer limits use -1 for "unbounded". Instances are immutable; the
    previously crawled keys are frozen at construction so concurrent runs
    may safely share one options object.
    """
    start_page: int = 1
    end_page: int = UNBOUNDED
    max_pages: int = UNBOUNDED
    max_images: int = UNBOUNDED

    # Pacing
    delay_between_pages_millis: int = 0
    delay_between_resources_millis: int = 0

    # Extraction
    populate_details: bool = True

    # De-duplication
    previously_crawled: FrozenSet[str] = field(default_factory=frozenset)
    suppress_duplicates: bool = True

    policy: CrawlPolicy = field(default_factory=CrawlPolicy)

    def __post_init__(self):
        """Freeze whatever iterable was given as previously crawled keys."""
        keys = self.previously_crawled
        if keys is None:
            keys = frozenset()
        elif not isinstance(keys, frozenset):
            keys = frozenset(self._as_keys(keys))
        object.__setattr__(self, 'previously_crawled', keys)

    @staticmethod
    def _as_keys(keys: Iterable[str]) -> Iterable[str]:
        if isinstance(keys, str):
            raise ConfigurationError("previously_crawled must be a collection of keys, not a string")
        return keys

    @property
    def page_delay_seconds(self) -> float:
        return max(self.delay_between_pages_millis, 0) / 1000.0

    @property
    def resource_delay_seconds(self) -> float:
        return max(self.delay_between_resources_millis, 0) / 1000.0

    def validate(self) -> "CrawlOptions":
        """
        Validate option values.

        Returns:
            The options themselves, to allow chaining

        Raises:
            ConfigurationError: If any value is out of range
        """
        if not isinstance(self.policy, CrawlPolicy):
            raise ConfigurationError("policy must be a CrawlPolicy")

        if self.start_page < 1:
            raise ConfigurationError("start_page must be at least 1")

        for name in ('end_page', 'max_pages', 'max_images'):
            value = getattr(self, name)
            if value != UNBOUNDED and value < 1:
                raise ConfigurationError(f"{name} must be -1 (unbounded) or positive, got {value}")

        if self.end_page != UNBOUNDED and self.end_page < self.start_page:
            raise ConfigurationError(
                f"end_page ({self.end_page}) cannot be before start_page ({self.start_page})")

        if self.delay_between_pages_millis < 0:
            raise ConfigurationError("delay_between_pages_millis cannot be negative")

        if self.delay_between_resources_millis < 0:
            raise ConfigurationError("delay_between_resources_millis cannot be negative")

        return self


def is_limit_reached(count: int, limit: int) -> bool:
    """True when a bounded limit has been hit exactly."""
    return limit != UNBOUNDED and count == limit


def ensure_options(options: Optional[CrawlOptions]) -> CrawlOptions:
    """Reject missing or invalid options with a ConfigurationError."""
    if options is None:
        raise ConfigurationError("CrawlOptions cannot be None")

    if not isinstance(options, CrawlOptions):
        raise ConfigurationError(f"Expected CrawlOptions, got {type(options).__name__}")

    return options.validate()
