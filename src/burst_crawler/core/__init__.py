"""
Core Module - Crawl strategies and the records they produce.

Components:
-----------
- PageListCrawler: Walks the numbered listing pages
- SitemapCrawler: Walks the sitemap index
- CrawlOptions / CrawlPolicy: Limits, pacing and strategy switches
- Record: Normalized output entity
- RecordConsumer: Streaming delivery contract

Usage:
------
from burst_crawler.core import PageListCrawler, CrawlOptions

crawler = PageListCrawler(CrawlOptions(max_pages=2))

# Stream records; return False to stop
summary = crawler.crawl(lambda record: print(record.title))

# Or collect everything
records = crawler.crawl_all()

# Two phases: discover without details, fetch the details later
lister = PageListCrawler(CrawlOptions(populate_details=False))
records = lister.populate(lister.crawl_all())

# From another thread: wake any sleeping run and end it
crawler.stop()
"""

from .base_crawler import AbstractCrawler, CrawlState, CrawlSummary
from .consumer import CallbackConsumer, CollectingConsumer, RecordConsumer
from .options import CrawlOptions, CrawlPolicy, PacingMode, TagPolicy, UNBOUNDED
from .page_crawler import PageListCrawler
from .record import IdentityKey, Record
from .site_profile import SiteProfile
from .sitemap_crawler import SitemapCrawler

__all__ = [
    'AbstractCrawler',
    'CrawlState',
    'CrawlSummary',
    'CallbackConsumer',
    'CollectingConsumer',
    'RecordConsumer',
    'CrawlOptions',
    'CrawlPolicy',
    'PacingMode',
    'TagPolicy',
    'UNBOUNDED',
    'PageListCrawler',
    'IdentityKey',
    'Record',
    'SiteProfile',
    'SitemapCrawler',
]
