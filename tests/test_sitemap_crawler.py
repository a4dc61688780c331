from burst_crawler.core.base_crawler import CrawlState
from burst_crawler.core.options import CrawlOptions
from burst_crawler.core.pacing import Pacer
from burst_crawler.core.sitemap_crawler import SitemapCrawler

from conftest import BASE, FakeTransport, photo_page, photo_url, sitemap

ROOT = f"{BASE}/sitemap.xml"
CHILD_A = f"{BASE}/sitemap_photos_1.xml"
CHILD_B = f"{BASE}/sitemap_photos_2.xml"
SHARED = f"{BASE}/sitemap_shared.xml"


def serve(pages, slugs):
    served = dict(pages)
    for slug in slugs:
        served[photo_url(slug)] = photo_page(slug)
    return FakeTransport(served)


def test_walks_child_sitemaps_and_delivers_resources():
    transport = serve({
        ROOT: sitemap(CHILD_A, CHILD_B),
        CHILD_A: sitemap(photo_url("a"), f"{BASE}/@someone", photo_url("b")),
        CHILD_B: sitemap(photo_url("c")),
    }, ["a", "b", "c"])

    records = SitemapCrawler(CrawlOptions(), transport=transport).crawl_all()

    assert [r.title for r in records] == ["a", "b", "c"]
    assert f"{BASE}/@someone" not in transport.fetched


def test_structured_content_url_is_truncated():
    transport = serve({ROOT: sitemap(CHILD_A), CHILD_A: sitemap(photo_url("a"))}, [])
    transport.pages[photo_url("a")] = photo_page("a", content_url="https://example/img.jpg?sig=xyz")

    records = SitemapCrawler(CrawlOptions(), transport=transport).crawl_all()

    assert records[0].content_url == "https://example/img.jpg"


def test_shared_and_cyclic_sitemaps_are_fetched_once():
    transport = serve({
        ROOT: sitemap(CHILD_A, CHILD_B),
        CHILD_A: sitemap(SHARED, ROOT, CHILD_A),
        CHILD_B: sitemap(SHARED, CHILD_A),
        SHARED: sitemap(photo_url("a")),
    }, ["a"])

    summary = SitemapCrawler(CrawlOptions(), transport=transport).crawl(lambda r: True)

    for url in (ROOT, CHILD_A, CHILD_B, SHARED):
        assert transport.fetched.count(url) == 1
    assert summary.delivered == 1
    assert summary.sitemaps_visited == 4


def test_root_failure_yields_nothing_without_error():
    transport = FakeTransport()
    delivered = []

    summary = SitemapCrawler(CrawlOptions(), transport=transport).crawl(delivered.append)

    assert delivered == []
    assert summary.state is CrawlState.DONE_NORMAL
    assert transport.fetched == [ROOT]


def test_failed_child_sitemap_skips_only_its_subtree():
    transport = serve({
        ROOT: sitemap(CHILD_A, CHILD_B),
        CHILD_B: sitemap(photo_url("b")),
    }, ["b"])

    summary = SitemapCrawler(CrawlOptions(), transport=transport).crawl(lambda r: True)

    assert summary.delivered == 1
    assert summary.fetch_failures == 1


def test_consumer_stop_ends_whole_crawl():
    transport = serve({
        ROOT: sitemap(CHILD_A, CHILD_B),
        CHILD_A: sitemap(photo_url("a"), photo_url("b")),
        CHILD_B: sitemap(photo_url("c")),
    }, ["a", "b", "c"])

    summary = SitemapCrawler(CrawlOptions(), transport=transport).crawl(lambda r: False)

    assert summary.delivered == 1
    assert summary.state is CrawlState.DONE_STOPPED
    assert transport.fetched == [ROOT, CHILD_A, photo_url("a")]


def test_max_images_ends_whole_crawl():
    transport = serve({
        ROOT: sitemap(CHILD_A, CHILD_B),
        CHILD_A: sitemap(photo_url("a")),
        CHILD_B: sitemap(photo_url("b"), photo_url("c")),
    }, ["a", "b", "c"])

    summary = SitemapCrawler(CrawlOptions(max_images=2), transport=transport).crawl(lambda r: True)

    assert summary.delivered == 2
    assert summary.state is CrawlState.DONE_LIMIT_IMAGES
    assert transport.fetched[-1] == photo_url("b")


def test_page_limits_do_not_apply():
    transport = serve({
        ROOT: sitemap(CHILD_A, CHILD_B),
        CHILD_A: sitemap(photo_url("a")),
        CHILD_B: sitemap(photo_url("b")),
    }, ["a", "b"])

    records = SitemapCrawler(CrawlOptions(max_pages=1), transport=transport).crawl_all()
    assert len(records) == 2


def test_resource_in_two_sitemaps_is_delivered_once():
    transport = serve({
        ROOT: sitemap(CHILD_A, CHILD_B),
        CHILD_A: sitemap(photo_url("a")),
        CHILD_B: sitemap(photo_url("a"), photo_url("b")),
    }, ["a", "b"])

    records = SitemapCrawler(CrawlOptions(), transport=transport).crawl_all()

    assert [r.title for r in records] == ["a", "b"]
    assert transport.fetched.count(photo_url("a")) == 1


def test_every_resource_fetch_is_paced(monkeypatch):
    turns = []
    monkeypatch.setattr(Pacer, "wait_turn", lambda self: turns.append(self.interval_seconds) or True)
    transport = serve({ROOT: sitemap(CHILD_A), CHILD_A: sitemap(photo_url("a"), photo_url("b"))}, ["a", "b"])

    SitemapCrawler(CrawlOptions(delay_between_resources_millis=500), transport=transport).crawl_all()

    assert turns == [0.5, 0.5]


def test_interrupted_pacing_stops_crawl(monkeypatch):
    monkeypatch.setattr(Pacer, "wait_turn", lambda self: False)
    transport = serve({ROOT: sitemap(CHILD_A), CHILD_A: sitemap(photo_url("a"))}, ["a"])

    summary = SitemapCrawler(CrawlOptions(), transport=transport).crawl(lambda r: True)

    assert summary.state is CrawlState.DONE_STOPPED
    assert summary.delivered == 0
    assert photo_url("a") not in transport.fetched


def test_stop_ends_sitemap_walk():
    transport = serve({
        ROOT: sitemap(CHILD_A, CHILD_B),
        CHILD_A: sitemap(photo_url("a")),
        CHILD_B: sitemap(photo_url("b")),
    }, ["a", "b"])
    crawler = SitemapCrawler(CrawlOptions(), transport=transport)

    summary = crawler.crawl(lambda record: crawler.stop())

    assert summary.state is CrawlState.DONE_STOPPED
    assert summary.delivered == 1
    assert CHILD_B not in transport.fetched
