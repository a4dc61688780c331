"""
Burst Crawler - A streaming crawler for the Shopify Burst photo site.

Features:
- Two discovery strategies: listing pages and sitemap index
- Two-pass record extraction (DOM and linked data)
- Streaming delivery with early termination
- Two-phase crawls: discover cheaply, populate details later
- Page/image limits and fixed-delay pacing
- Configurable via YAML
"""

__version__ = "1.0.0"

from .config.crawler_config import ConfigLoader, CrawlerConfig, validate_config
from .core.base_crawler import CrawlState, CrawlSummary
from .core.consumer import CollectingConsumer, RecordConsumer
from .core.options import CrawlOptions, CrawlPolicy, PacingMode, TagPolicy
from .core.page_crawler import PageListCrawler
from .core.record import IdentityKey, Record
from .core.site_profile import SiteProfile
from .core.sitemap_crawler import SitemapCrawler
from .crawl import collect, crawl_paginated, crawl_sitemap, create_crawler, populate
from .exceptions import ConfigurationError

__all__ = [
    'ConfigLoader',
    'CrawlerConfig',
    'validate_config',
    'CrawlState',
    'CrawlSummary',
    'CollectingConsumer',
    'RecordConsumer',
    'CrawlOptions',
    'CrawlPolicy',
    'PacingMode',
    'TagPolicy',
    'PageListCrawler',
    'IdentityKey',
    'Record',
    'SiteProfile',
    'SitemapCrawler',
    'collect',
    'crawl_paginated',
    'crawl_sitemap',
    'create_crawler',
    'populate',
    'ConfigurationError',
]
