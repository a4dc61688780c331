"""
Crawl Entry Points - One-call wrappers around the two crawl strategies.
"""

from typing import List

from .core.base_crawler import AbstractCrawler, CrawlSummary
from .core.consumer import ConsumerLike
from .core.options import CrawlOptions
from .core.page_crawler import PageListCrawler
from .core.record import Record
from .core.site_profile import SiteProfile
from .core.sitemap_crawler import SitemapCrawler
from .exceptions import ConfigurationError
from .fetch.transport import Transport
from .parsing.html_parser import HTMLParser

STRATEGIES = {
    'pages': PageListCrawler,
    'sitemap': SitemapCrawler,
}


def create_crawler(strategy: str, options: CrawlOptions, transport: Transport = None,
                   site: SiteProfile = None, parser: HTMLParser = None) -> AbstractCrawler:
    """Build the crawler registered under strategy ('pages' or 'sitemap')."""
    try:
        crawler_cls = STRATEGIES[strategy]
    except KeyError:
        raise ConfigurationError(f"Unknown crawl strategy '{strategy}' "
                                 f"(expected one of: {', '.join(STRATEGIES)})")
    return crawler_cls(options, transport=transport, site=site, parser=parser)


def crawl_paginated(options: CrawlOptions, consumer: ConsumerLike,
                    transport: Transport = None, site: SiteProfile = None) -> CrawlSummary:
    """Stream records discovered through the listing pages to consumer."""
    return PageListCrawler(options, transport=transport, site=site).crawl(consumer)


def crawl_sitemap(options: CrawlOptions, consumer: ConsumerLike,
                  transport: Transport = None, site: SiteProfile = None) -> CrawlSummary:
    """Stream records discovered through the sitemap index to consumer."""
    return SitemapCrawler(options, transport=transport, site=site).crawl(consumer)


def collect(strategy: str, options: CrawlOptions, transport: Transport = None,
            site: SiteProfile = None) -> List[Record]:
    """Crawl to completion and return every record in discovery order."""
    return create_crawler(strategy, options, transport, site).crawl_all()


def populate(records: List[Record], options: CrawlOptions, transport: Transport = None,
             site: SiteProfile = None) -> List[Record]:
    """
    Second phase of a discovery-only crawl: fetch the details of records
    collected with populate_details off.

    Returns:
        The records that were populated; unreachable pages are skipped
    """
    return PageListCrawler(options, transport=transport, site=site).populate(records)
