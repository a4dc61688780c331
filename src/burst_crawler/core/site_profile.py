"""
Site Profile - URL layout and CSS selectors of the crawled site.

The target site's class names, paths and sitemap shape form a fixed,
versioned external contract. Everything site-specific lives here so that a
redesign of the site means editing one profile, not the crawl engine.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "https://burst.shopify.com"


@dataclass
class SiteProfile:
    """URLs and selectors for one target site."""
    base_url: str = DEFAULT_BASE_URL

    # Listing pages
    listing_path: str = "/photos"
    page_param: str = "page"

    # Sitemaps
    sitemap_path: str = "/sitemap.xml"
    sitemap_suffix: str = ".xml"

    # URL shapes (derived from base_url when left empty)
    resource_prefix: Optional[str] = None
    author_prefix: Optional[str] = None
    license_marker: str = "/licenses/"
    tags_marker: str = "/tags/"

    # Selectors
    main_selector: str = "main"
    meta_anchor_selector: str = ".photo__meta a"
    title_selector: str = "h1.heading--2"
    description_selector: str = "p.photo-info__description"
    tile_selector: str = "a.photo-tile__image-wrapper"
    last_page_selector: str = "span.last a"

    def __post_init__(self):
        self.base_url = self.base_url.rstrip('/')
        if not self.resource_prefix:
            self.resource_prefix = f"{self.base_url}{self.listing_path}/"
        if not self.author_prefix:
            self.author_prefix = f"{self.base_url}/@"

    @property
    def sitemap_url(self) -> str:
        return f"{self.base_url}{self.sitemap_path}"

    def listing_url(self, page: int) -> str:
        """URL of a listing page. Page 1 carries no page parameter."""
        url = f"{self.base_url}{self.listing_path}"
        if page > 1:
            url = f"{url}?{self.page_param}={page}"
        return url

    def is_resource_url(self, url: str) -> bool:
        return url.startswith(self.resource_prefix)

    def is_sitemap_url(self, url: str) -> bool:
        return url.endswith(self.sitemap_suffix)
