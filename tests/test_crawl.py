import pytest

from burst_crawler import CrawlOptions, collect, crawl_paginated, crawl_sitemap, create_crawler, populate
from burst_crawler.core.pacing import Pacer
from burst_crawler.core.page_crawler import PageListCrawler
from burst_crawler.core.site_profile import SiteProfile
from burst_crawler.core.sitemap_crawler import SitemapCrawler
from burst_crawler.exceptions import ConfigurationError

from conftest import FakeTransport, listing_page, photo_page, photo_url, sitemap

SITE = SiteProfile()


@pytest.fixture
def transport():
    return FakeTransport({
        SITE.listing_url(1): listing_page(["a"], last_page=1),
        SITE.sitemap_url: sitemap("https://burst.shopify.com/sitemap_1.xml"),
        "https://burst.shopify.com/sitemap_1.xml": sitemap(photo_url("b")),
        photo_url("a"): photo_page("a"),
        photo_url("b"): photo_page("b"),
    })


def test_create_crawler_by_strategy(transport):
    assert isinstance(create_crawler("pages", CrawlOptions(), transport), PageListCrawler)
    assert isinstance(create_crawler("sitemap", CrawlOptions(), transport), SitemapCrawler)

    with pytest.raises(ConfigurationError, match="Unknown crawl strategy"):
        create_crawler("rss", CrawlOptions(), transport)


def test_collect_and_streaming_entry_points(transport):
    assert [r.title for r in collect("pages", CrawlOptions(), transport)] == ["a"]

    seen = []
    summary = crawl_sitemap(CrawlOptions(), seen.append, transport=transport)
    assert [r.title for r in seen] == ["b"]
    assert summary.sitemaps_visited == 2

    summary = crawl_paginated(CrawlOptions(max_images=1), lambda r: True, transport=transport)
    assert summary.delivered == 1


def discovery_site():
    return FakeTransport({
        SITE.listing_url(1): listing_page(["a", "b", "c"], last_page=1),
        photo_url("a"): photo_page("a"),
        photo_url("c"): photo_page("c"),
    })


def test_discover_then_populate_skips_failed_pages(monkeypatch):
    turns = []
    monkeypatch.setattr(Pacer, "wait_turn", lambda self: turns.append(self.interval_seconds) or True)
    transport = discovery_site()

    records = collect("pages", CrawlOptions(populate_details=False), transport)
    assert [r.title for r in records] == [None, None, None]
    assert transport.fetched == [SITE.listing_url(1)]

    populated = populate(records, CrawlOptions(delay_between_resources_millis=200), transport)

    assert [r.title for r in populated] == ["a", "c"]
    assert populated[0] is records[0]
    assert records[1].title is None
    assert records[2].content_url == "https://cdn.example/c.jpg"
    assert turns == [0.2, 0.2, 0.2]


def test_populate_stops_when_wait_is_interrupted(monkeypatch):
    answers = iter([True, False, True])
    monkeypatch.setattr(Pacer, "wait_turn", lambda self: next(answers))
    transport = discovery_site()
    records = collect("pages", CrawlOptions(populate_details=False), transport)

    populated = populate(records, CrawlOptions(), transport)

    assert [r.title for r in populated] == ["a"]
    assert photo_url("c") not in transport.fetched
